"""Basic protocol structures: errors, positions, ranges, URIs and edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Iterable, TypeVar

from .logger import elog
from .uri import URI, URIError

__all__ = [
    "ErrorCode",
    "LSPError",
    "ProtocolDecodeError",
    "URIForFile",
    "TextDocumentIdentifier",
    "VersionedTextDocumentIdentifier",
    "Position",
    "Range",
    "Location",
    "ReferenceLocation",
    "TextDocumentItem",
    "TextEdit",
    "ChangeAnnotation",
    "TextDocumentEdit",
    "WorkspaceEdit",
    "Command",
    "TextDocumentContentChangeEvent",
]

T = TypeVar("T")


class ErrorCode(IntEnum):
    """JSON-RPC and LSP error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    SERVER_NOT_INITIALIZED = -32002
    UNKNOWN_ERROR_CODE = -32001
    REQUEST_CANCELLED = -32800
    CONTENT_MODIFIED = -32801


class LSPError(Exception):
    """An error carrying a protocol error code, reported back to the client."""

    def __init__(self, message: str, code: ErrorCode | int = ErrorCode.UNKNOWN_ERROR_CODE):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ProtocolDecodeError(ValueError):
    """Raised when a JSON value does not match the expected structure."""

    def __init__(self, message: str, path: Iterable[str | int] = ()):
        self.message = message
        self.path = tuple(path)
        super().__init__(f"{message} at {self.location}")

    @property
    def location(self) -> str:
        """The path to the offending value, e.g. ``range.start.line``."""
        text = ""
        for part in self.path:
            text += f"[{part}]" if isinstance(part, int) else ("." if text else "") + part
        return text or "(root)"

    def nested(self, key: str | int) -> ProtocolDecodeError:
        """Return the same error located one level deeper, under ``key``."""
        return ProtocolDecodeError(self.message, (key, *self.path))


def _expect_object(value: Any) -> dict:
    if not isinstance(value, dict):
        raise ProtocolDecodeError("expected object")
    return value


def _decode_at(key: str | int, decoder: Callable[[Any], T], raw: Any) -> T:
    try:
        return decoder(raw)
    except ProtocolDecodeError as err:
        raise err.nested(key) from None


def _required(obj: dict, key: str, decoder: Callable[[Any], T]) -> T:
    if key not in obj:
        raise ProtocolDecodeError("missing value", (key,))
    return _decode_at(key, decoder, obj[key])


def _optional(obj: dict, key: str, decoder: Callable[[Any], T], default: Any = None) -> Any:
    """Decode a field that may be missing or null."""
    raw = obj.get(key)
    if raw is None:
        return default
    return _decode_at(key, decoder, raw)


def _if_present(obj: dict, key: str, decoder: Callable[[Any], T], default: Any) -> Any:
    """Decode a field that may be missing but must be valid when present."""
    if key not in obj:
        return default
    return _decode_at(key, decoder, obj[key])


def _decode_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ProtocolDecodeError("expected integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ProtocolDecodeError("expected integer")


def _decode_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ProtocolDecodeError("expected string")
    return value


def _decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ProtocolDecodeError("expected boolean")
    return value


def _decode_any(value: Any) -> Any:
    return value


def _list_of(decoder: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def decode(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise ProtocolDecodeError("expected array")
        return [_decode_at(i, decoder, item) for i, item in enumerate(value)]

    return decode


def _dict_of(decoder: Callable[[Any], T]) -> Callable[[Any], dict[str, T]]:
    def decode(value: Any) -> dict[str, T]:
        obj = _expect_object(value)
        return {key: _decode_at(key, decoder, item) for key, item in obj.items()}

    return decode


def _escape(text: str) -> str:
    out = []
    for byte in text.encode("utf-8", "surrogateescape"):
        char = chr(byte)
        if char == "\\":
            out.append("\\\\")
        elif 0x20 <= byte < 0x7F and char != '"':
            out.append(char)
        else:
            out.append(f"\\{byte:02X}")
    return "".join(out)


@dataclass(frozen=True, order=True)
class URIForFile:
    """An absolute file path, exchanged with the client as a URI."""

    file: str = ""

    @property
    def uri(self) -> str:
        return str(URI.create_file(self.file))

    def __str__(self) -> str:
        return self.uri

    @classmethod
    def canonicalize(cls, abs_path: str, tu_path: str) -> URIForFile:
        """Canonicalize an absolute path, keeping it unchanged if that fails."""
        try:
            return cls(URI.resolve_path(abs_path, tu_path))
        except URIError as err:
            elog(
                "URIForFile: failed to resolve path {0} with TU path {1}: {2}.\n"
                "Using unresolved path.",
                abs_path,
                tu_path,
                err,
            )
            return cls(abs_path)

    @classmethod
    def from_uri(cls, uri: URI, hint_path: str = "") -> URIForFile:
        """Resolve a URI to a file; raises URIError if it cannot be resolved."""
        return cls(URI.resolve(uri, hint_path))

    @classmethod
    def from_json(cls, value: Any) -> URIForFile:
        if not isinstance(value, str):
            raise ProtocolDecodeError("expected string")
        try:
            parsed = URI.parse(value)
        except URIError:
            raise ProtocolDecodeError("failed to parse URI") from None
        if parsed.scheme not in ("file", "test"):
            raise ProtocolDecodeError(
                "only 'file' URI scheme is supported for workspace files"
            )
        try:
            return cls.from_uri(parsed, "")
        except URIError:
            raise ProtocolDecodeError("unresolvable URI") from None

    def to_json(self) -> str:
        return self.uri


@dataclass
class TextDocumentIdentifier:
    uri: URIForFile

    @classmethod
    def from_json(cls, value: Any) -> TextDocumentIdentifier:
        obj = _expect_object(value)
        return cls(_required(obj, "uri", URIForFile.from_json))

    def to_json(self) -> dict:
        return {"uri": self.uri.to_json()}


@dataclass
class VersionedTextDocumentIdentifier(TextDocumentIdentifier):
    version: int | None = None

    @classmethod
    def from_json(cls, value: Any) -> VersionedTextDocumentIdentifier:
        obj = _expect_object(value)
        return cls(
            _required(obj, "uri", URIForFile.from_json),
            _optional(obj, "version", _decode_int),
        )

    def to_json(self) -> dict:
        return {"uri": self.uri.to_json(), "version": self.version}


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based line and character offset (in UTF-16 code units)."""

    line: int = 0
    character: int = 0

    @classmethod
    def from_json(cls, value: Any) -> Position:
        obj = _expect_object(value)
        return cls(
            _required(obj, "line", _decode_int),
            _required(obj, "character", _decode_int),
        )

    def to_json(self) -> dict:
        return {"line": self.line, "character": self.character}

    def __str__(self) -> str:
        return f"{self.line}:{self.character}"


@dataclass(frozen=True, order=True)
class Range:
    """A half-open span between two positions."""

    start: Position = Position()
    end: Position = Position()

    @classmethod
    def from_json(cls, value: Any) -> Range:
        obj = _expect_object(value)
        return cls(
            _required(obj, "start", Position.from_json),
            _required(obj, "end", Position.from_json),
        )

    def to_json(self) -> dict:
        return {"start": self.start.to_json(), "end": self.end.to_json()}

    def contains(self, other: Range | Position) -> bool:
        """Whether a range lies within this one, or a position falls inside it."""
        if isinstance(other, Position):
            return self.start <= other < self.end
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass
class Location:
    uri: URIForFile
    range: Range

    def to_json(self) -> dict:
        return {"uri": self.uri.to_json(), "range": self.range.to_json()}

    def __str__(self) -> str:
        return f"{self.range}@{self.uri}"


@dataclass
class ReferenceLocation(Location):
    container_name: str | None = None

    def to_json(self) -> dict:
        result = super().to_json()
        if self.container_name is not None:
            result["containerName"] = self.container_name
        return result

    def __str__(self) -> str:
        return f"{self.range}@{self.uri} (container: {self.container_name or ''})"


@dataclass
class TextDocumentItem:
    uri: URIForFile
    language_id: str
    version: int | None
    text: str

    @classmethod
    def from_json(cls, value: Any) -> TextDocumentItem:
        obj = _expect_object(value)
        return cls(
            _required(obj, "uri", URIForFile.from_json),
            _required(obj, "languageId", _decode_str),
            _optional(obj, "version", _decode_int),
            _required(obj, "text", _decode_str),
        )


@dataclass
class TextEdit:
    range: Range
    new_text: str
    annotation_id: str = ""

    @classmethod
    def from_json(cls, value: Any) -> TextEdit:
        obj = _expect_object(value)
        return cls(
            _required(obj, "range", Range.from_json),
            _required(obj, "newText", _decode_str),
            _if_present(obj, "annotationId", _decode_str, ""),
        )

    def to_json(self) -> dict:
        result = {"range": self.range.to_json(), "newText": self.new_text}
        if self.annotation_id:
            result["annotationId"] = self.annotation_id
        return result

    def __str__(self) -> str:
        return f'{self.range} => "{_escape(self.new_text)}"'


@dataclass
class ChangeAnnotation:
    label: str
    needs_confirmation: bool | None = None
    description: str = ""

    @classmethod
    def from_json(cls, value: Any) -> ChangeAnnotation:
        obj = _expect_object(value)
        return cls(
            _required(obj, "label", _decode_str),
            _optional(obj, "needsConfirmation", _decode_bool),
            _if_present(obj, "description", _decode_str, ""),
        )

    def to_json(self) -> dict:
        result: dict[str, Any] = {"label": self.label}
        if self.needs_confirmation is not None:
            result["needsConfirmation"] = self.needs_confirmation
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class TextDocumentEdit:
    text_document: VersionedTextDocumentIdentifier
    edits: list[TextEdit] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> TextDocumentEdit:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", VersionedTextDocumentIdentifier.from_json),
            _required(obj, "edits", _list_of(TextEdit.from_json)),
        )

    def to_json(self) -> dict:
        return {
            "textDocument": self.text_document.to_json(),
            "edits": [edit.to_json() for edit in self.edits],
        }


@dataclass
class WorkspaceEdit:
    changes: dict[str, list[TextEdit]] | None = None
    document_changes: list[TextDocumentEdit] | None = None
    change_annotations: dict[str, ChangeAnnotation] = field(default_factory=dict)

    @classmethod
    def from_json(cls, value: Any) -> WorkspaceEdit:
        obj = _expect_object(value)
        return cls(
            _optional(obj, "changes", _dict_of(_list_of(TextEdit.from_json))),
            _optional(obj, "documentChanges", _list_of(TextDocumentEdit.from_json)),
            _if_present(
                obj, "changeAnnotations", _dict_of(ChangeAnnotation.from_json), {}
            ),
        )

    def to_json(self) -> dict:
        result: dict[str, Any] = {}
        if self.changes is not None:
            result["changes"] = {
                uri: [edit.to_json() for edit in edits]
                for uri, edits in sorted(self.changes.items())
            }
        if self.document_changes is not None:
            result["documentChanges"] = [c.to_json() for c in self.document_changes]
        if self.change_annotations:
            result["changeAnnotations"] = {
                key: annotation.to_json()
                for key, annotation in sorted(self.change_annotations.items())
            }
        return result


@dataclass
class Command:
    title: str
    command: str
    argument: Any = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"title": self.title, "command": self.command}
        if self.argument is not None:
            result["arguments"] = [self.argument]
        return result


@dataclass
class TextDocumentContentChangeEvent:
    text: str
    range: Range | None = None
    range_length: int | None = None

    @classmethod
    def from_json(cls, value: Any) -> TextDocumentContentChangeEvent:
        obj = _expect_object(value)
        range_ = _optional(obj, "range", Range.from_json)
        range_length = _optional(obj, "rangeLength", _decode_int)
        return cls(_required(obj, "text", _decode_str), range_, range_length)