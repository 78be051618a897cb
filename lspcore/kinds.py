"""Enumerations of the protocol and their JSON conversions."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Collection

__all__ = [
    "SymbolKind",
    "CompletionItemKind",
    "InsertTextFormat",
    "MarkupKind",
    "OffsetEncoding",
    "TraceLevel",
    "FileChangeType",
    "MessageType",
    "TextDocumentSyncKind",
    "DiagnosticTag",
    "SymbolTag",
    "DocumentHighlightKind",
    "InlayHintKind",
    "CompletionTriggerKind",
    "TypeHierarchyDirection",
    "symbol_kind_from_json",
    "symbol_kinds_from_json",
    "completion_item_kind_from_json",
    "completion_item_kinds_from_json",
    "adjust_symbol_kind",
    "adjust_completion_item_kind",
    "trace_level_from_json",
    "markup_kind_from_json",
    "offset_encoding_from_json",
    "file_change_type_from_json",
    "type_hierarchy_direction_from_json",
    "inlay_hint_kind_to_json",
]


class SymbolKind(IntEnum):
    FILE = 1
    MODULE = 2
    NAMESPACE = 3
    PACKAGE = 4
    CLASS = 5
    METHOD = 6
    PROPERTY = 7
    FIELD = 8
    CONSTRUCTOR = 9
    ENUM = 10
    INTERFACE = 11
    FUNCTION = 12
    VARIABLE = 13
    CONSTANT = 14
    STRING = 15
    NUMBER = 16
    BOOLEAN = 17
    ARRAY = 18
    OBJECT = 19
    KEY = 20
    NULL = 21
    ENUM_MEMBER = 22
    STRUCT = 23
    EVENT = 24
    OPERATOR = 25
    TYPE_PARAMETER = 26


class CompletionItemKind(IntEnum):
    MISSING = 0
    TEXT = 1
    METHOD = 2
    FUNCTION = 3
    CONSTRUCTOR = 4
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    INTERFACE = 8
    MODULE = 9
    PROPERTY = 10
    UNIT = 11
    VALUE = 12
    ENUM = 13
    KEYWORD = 14
    SNIPPET = 15
    COLOR = 16
    FILE = 17
    REFERENCE = 18
    FOLDER = 19
    ENUM_MEMBER = 20
    CONSTANT = 21
    STRUCT = 22
    EVENT = 23
    OPERATOR = 24
    TYPE_PARAMETER = 25


class InsertTextFormat(IntEnum):
    MISSING = 0
    PLAIN_TEXT = 1
    SNIPPET = 2


class MarkupKind(Enum):
    PLAIN_TEXT = "plaintext"
    MARKDOWN = "markdown"

    def __str__(self) -> str:
        return self.value


class OffsetEncoding(Enum):
    UNSUPPORTED = "unknown"
    UTF8 = "utf-8"
    UTF16 = "utf-16"
    UTF32 = "utf-32"

    def __str__(self) -> str:
        return self.value

    def to_json(self) -> str:
        return self.value


class TraceLevel(IntEnum):
    OFF = 0
    MESSAGES = 1
    VERBOSE = 2


class FileChangeType(IntEnum):
    CREATED = 1
    CHANGED = 2
    DELETED = 3


class MessageType(IntEnum):
    ERROR = 1
    WARNING = 2
    INFO = 3
    LOG = 4


class TextDocumentSyncKind(IntEnum):
    NONE = 0
    FULL = 1
    INCREMENTAL = 2


class DiagnosticTag(IntEnum):
    UNNECESSARY = 1
    DEPRECATED = 2


class SymbolTag(IntEnum):
    DEPRECATED = 1


class DocumentHighlightKind(IntEnum):
    TEXT = 1
    READ = 2
    WRITE = 3


class InlayHintKind(IntEnum):
    TYPE = 1
    PARAMETER = 2
    DESIGNATOR = 3  # extension, never sent to the client

    def __str__(self) -> str:
        return self.name.lower()


class CompletionTriggerKind(IntEnum):
    INVOKED = 1
    TRIGGER_CHARACTER = 2
    TRIGGER_FOR_INCOMPLETE_COMPLETIONS = 3


class TypeHierarchyDirection(IntEnum):
    CHILDREN = 0
    PARENTS = 1
    BOTH = 2


def _as_integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _int_enum_from_json(enum_type, value: Any, low, high):
    number = _as_integer(value)
    if number is None:
        raise ValueError(f"expected integer for {enum_type.__name__}, got {value!r}")
    if not low <= number <= high:
        raise ValueError(f"{enum_type.__name__} out of range: {number}")
    return enum_type(number)


def symbol_kind_from_json(value: Any) -> SymbolKind:
    """Decode a symbol kind; raises ValueError if invalid."""
    return _int_enum_from_json(
        SymbolKind, value, SymbolKind.FILE, SymbolKind.TYPE_PARAMETER
    )


def symbol_kinds_from_json(value: Any) -> set[SymbolKind]:
    """Decode an array of symbol kinds, skipping entries that are not valid."""
    if not isinstance(value, list):
        raise ValueError("expected array of symbol kinds")
    kinds = set()
    for item in value:
        try:
            kinds.add(symbol_kind_from_json(item))
        except ValueError:
            continue
    return kinds


def completion_item_kind_from_json(value: Any) -> CompletionItemKind:
    """Decode a completion item kind; raises ValueError if invalid."""
    return _int_enum_from_json(
        CompletionItemKind,
        value,
        CompletionItemKind.TEXT,
        CompletionItemKind.TYPE_PARAMETER,
    )


def completion_item_kinds_from_json(value: Any) -> set[CompletionItemKind]:
    """Decode an array of completion item kinds, skipping invalid entries."""
    if not isinstance(value, list):
        raise ValueError("expected array of completion item kinds")
    kinds = set()
    for item in value:
        try:
            kinds.add(completion_item_kind_from_json(item))
        except ValueError:
            continue
    return kinds


def adjust_symbol_kind(
    kind: SymbolKind, supported: Collection[SymbolKind] | None
) -> SymbolKind:
    """Map a kind the client does not support to a close supported one."""
    if supported and kind in supported:
        return kind
    if kind is SymbolKind.STRUCT:
        return SymbolKind.CLASS
    if kind is SymbolKind.ENUM_MEMBER:
        return SymbolKind.ENUM
    return SymbolKind.STRING


def adjust_completion_item_kind(
    kind: CompletionItemKind, supported: Collection[CompletionItemKind] | None
) -> CompletionItemKind:
    """Map a kind the client does not support to a close supported one."""
    if kind is not CompletionItemKind.MISSING and supported and kind in supported:
        return kind
    fallbacks = {
        CompletionItemKind.FOLDER: CompletionItemKind.FILE,
        CompletionItemKind.ENUM_MEMBER: CompletionItemKind.ENUM,
        CompletionItemKind.STRUCT: CompletionItemKind.CLASS,
    }
    return fallbacks.get(kind, CompletionItemKind.TEXT)


_TRACE_LEVELS = {
    "off": TraceLevel.OFF,
    "messages": TraceLevel.MESSAGES,
    "verbose": TraceLevel.VERBOSE,
}


def trace_level_from_json(value: Any) -> TraceLevel:
    """Decode a trace setting string."""
    if isinstance(value, str) and value in _TRACE_LEVELS:
        return _TRACE_LEVELS[value]
    raise ValueError(f"invalid trace level: {value!r}")


def markup_kind_from_json(value: Any) -> MarkupKind:
    """Decode a markup kind string."""
    if not isinstance(value, str):
        raise ValueError("expected string")
    try:
        return MarkupKind(value)
    except ValueError:
        raise ValueError("unknown markup kind") from None


def offset_encoding_from_json(value: Any) -> OffsetEncoding:
    """Decode an offset encoding; unknown names map to UNSUPPORTED."""
    if not isinstance(value, str):
        raise ValueError("expected string")
    if value == OffsetEncoding.UNSUPPORTED.value:
        return OffsetEncoding.UNSUPPORTED
    try:
        return OffsetEncoding(value)
    except ValueError:
        return OffsetEncoding.UNSUPPORTED


def file_change_type_from_json(value: Any) -> FileChangeType:
    """Decode a file change type."""
    return _int_enum_from_json(
        FileChangeType, value, FileChangeType.CREATED, FileChangeType.DELETED
    )


def type_hierarchy_direction_from_json(value: Any) -> TypeHierarchyDirection:
    """Decode a type hierarchy direction."""
    return _int_enum_from_json(
        TypeHierarchyDirection,
        value,
        TypeHierarchyDirection.CHILDREN,
        TypeHierarchyDirection.BOTH,
    )


def inlay_hint_kind_to_json(kind: InlayHintKind) -> int | None:
    """Encode an inlay hint kind; the designator extension encodes as None."""
    if kind is InlayHintKind.DESIGNATOR:
        return None
    return int(kind)