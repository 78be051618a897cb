"""Protocol structures sent from the client to the server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .basic import (
    Position,
    ProtocolDecodeError,
    Range,
    TextDocumentContentChangeEvent,
    TextDocumentIdentifier,
    TextDocumentItem,
    URIForFile,
    VersionedTextDocumentIdentifier,
    _decode_at,
    _decode_bool,
    _decode_int,
    _decode_str,
    _dict_of,
    _expect_object,
    _if_present,
    _list_of,
    _optional,
    _required,
)
from .kinds import (
    CompletionTriggerKind,
    FileChangeType,
    MarkupKind,
    OffsetEncoding,
    TraceLevel,
    TypeHierarchyDirection,
    completion_item_kinds_from_json,
    file_change_type_from_json,
    markup_kind_from_json,
    offset_encoding_from_json,
    symbol_kinds_from_json,
    trace_level_from_json,
    type_hierarchy_direction_from_json,
)
from .results import Diagnostic, TypeHierarchyItem

__all__ = [
    "ClientCapabilities",
    "CompileCommand",
    "ConfigurationSettings",
    "InitializationOptions",
    "InitializeParams",
    "DidOpenTextDocumentParams",
    "DidCloseTextDocumentParams",
    "DidSaveTextDocumentParams",
    "DidChangeTextDocumentParams",
    "FileEvent",
    "DidChangeWatchedFilesParams",
    "DocumentRangeFormattingParams",
    "DocumentOnTypeFormattingParams",
    "DocumentFormattingParams",
    "DocumentSymbolParams",
    "CodeActionContext",
    "CodeActionParams",
    "ExecuteCommandParams",
    "WorkspaceSymbolParams",
    "TextDocumentPositionParams",
    "CompletionContext",
    "CompletionParams",
    "RenameParams",
    "SemanticTokensParams",
    "SemanticTokensDeltaParams",
    "DidChangeConfigurationParams",
    "TypeHierarchyPrepareParams",
    "ResolveTypeHierarchyItemParams",
    "ReferenceContext",
    "ReferenceParams",
    "CallHierarchyIncomingCallsParams",
    "CallHierarchyOutgoingCallsParams",
    "InlayHintsParams",
    "SelectionRangeParams",
    "DocumentLinkParams",
    "FoldingRangeParams",
    "ASTParams",
]

T = TypeVar("T")


def _checked(decoder: Callable[[Any], T]) -> Callable[[Any], T]:
    """Turn the plain errors of a decoder into protocol decode errors."""

    def decode(value: Any) -> T:
        try:
            return decoder(value)
        except ProtocolDecodeError:
            raise
        except (ValueError, TypeError) as err:
            raise ProtocolDecodeError(str(err)) from None

    return decode


_decode_symbol_kinds = _checked(symbol_kinds_from_json)
_decode_completion_item_kinds = _checked(completion_item_kinds_from_json)
_decode_trace = _checked(trace_level_from_json)
_decode_file_change_type = _checked(file_change_type_from_json)
_decode_direction = _checked(type_hierarchy_direction_from_json)
_decode_trigger_kind = _checked(CompletionTriggerKind)
_decode_str_list = _list_of(_decode_str)


def _decode_offset_encodings(value: Any) -> list[OffsetEncoding]:
    if not isinstance(value, list):
        raise ProtocolDecodeError("expected array")
    return [
        _decode_at(i, _checked(offset_encoding_from_json), item)
        for i, item in enumerate(value)
    ]


def _sub(obj: dict | None, key: str) -> dict | None:
    if obj is None:
        return None
    value = obj.get(key)
    return value if isinstance(value, dict) else None


def _flag(obj: dict | None, key: str) -> bool | None:
    if obj is None:
        return None
    value = obj.get(key)
    return value if isinstance(value, bool) else None


def _first_markup_kind(obj: dict | None, key: str, default: MarkupKind) -> MarkupKind:
    formats = obj.get(key) if obj is not None else None
    if not isinstance(formats, list):
        return default
    for item in formats:
        try:
            return markup_kind_from_json(item)
        except (ValueError, TypeError):
            continue
    return default


def _at_path(path: tuple[str, ...], decoder: Callable[[Any], T], raw: Any) -> T:
    try:
        return decoder(raw)
    except ProtocolDecodeError as err:
        for key in reversed(path):
            err = err.nested(key)
        raise err from None


@dataclass
class ClientCapabilities:
    """Features the client announces during initialization."""

    theia_semantic_highlighting: bool = False
    inactive_regions: bool = False
    semantic_tokens: bool = False
    diagnostic_category: bool = False
    diagnostic_fixes: bool = False
    diagnostic_related_information: bool = False
    reference_container: bool = False
    completion_snippets: bool = False
    completion_documentation_format: MarkupKind = MarkupKind.PLAIN_TEXT
    completion_item_kinds: Any = None
    completion_fixes: bool = False
    code_action_structure: bool = False
    hierarchical_document_symbol: bool = False
    hover_content_format: MarkupKind = MarkupKind.PLAIN_TEXT
    has_signature_help: bool = False
    offsets_in_signature_help: bool = False
    signature_help_documentation_format: MarkupKind = MarkupKind.PLAIN_TEXT
    line_folding_only: bool = False
    rename_prepare_support: bool = False
    workspace_symbol_kinds: Any = None
    workspace_configuration: bool = False
    semantic_token_refresh_support: bool = False
    document_changes: bool = False
    change_annotation: bool = False
    work_done_progress: bool = False
    implicit_progress_creation: bool = False
    cancels_stale_requests: bool = False
    offset_encoding: list[OffsetEncoding] | None = None

    @classmethod
    def from_json(cls, value: Any) -> ClientCapabilities:
        if not isinstance(value, dict):
            raise ProtocolDecodeError("expected object")
        caps = cls()

        def set_flag(attr: str, obj: dict | None, key: str) -> None:
            flag = _flag(obj, key)
            if flag is not None:
                setattr(caps, attr, flag)

        text_document = _sub(value, "textDocument")
        if text_document is not None:
            set_flag(
                "theia_semantic_highlighting",
                _sub(text_document, "semanticHighlightingCapabilities"),
                "semanticHighlighting",
            )
            set_flag(
                "inactive_regions",
                _sub(text_document, "inactiveRegionsCapabilities"),
                "inactiveRegions",
            )
            if _sub(text_document, "semanticTokens") is not None:
                caps.semantic_tokens = True
            diagnostics = _sub(text_document, "publishDiagnostics")
            set_flag("diagnostic_category", diagnostics, "categorySupport")
            set_flag("diagnostic_fixes", diagnostics, "codeActionsInline")
            set_flag("diagnostic_related_information", diagnostics, "relatedInformation")
            set_flag("reference_container", _sub(text_document, "references"), "container")

            completion = _sub(text_document, "completion")
            if completion is not None:
                item = _sub(completion, "completionItem")
                set_flag("completion_snippets", item, "snippetSupport")
                caps.completion_documentation_format = _first_markup_kind(
                    item, "documentationFormat", caps.completion_documentation_format
                )
                item_kind = _sub(completion, "completionItemKind")
                if item_kind is not None and "valueSet" in item_kind:
                    caps.completion_item_kinds = _at_path(
                        ("textDocument", "completion", "completionItemKind", "valueSet"),
                        _decode_completion_item_kinds,
                        item_kind["valueSet"],
                    )
                set_flag("completion_fixes", completion, "editsNearCursor")

            code_action = _sub(text_document, "codeAction")
            if _sub(code_action, "codeActionLiteralSupport") is not None:
                caps.code_action_structure = True
            set_flag(
                "hierarchical_document_symbol",
                _sub(text_document, "documentSymbol"),
                "hierarchicalDocumentSymbolSupport",
            )
            caps.hover_content_format = _first_markup_kind(
                _sub(text_document, "hover"), "contentFormat", caps.hover_content_format
            )
            help_ = _sub(text_document, "signatureHelp")
            if help_ is not None:
                caps.has_signature_help = True
                info = _sub(help_, "signatureInformation")
                set_flag(
                    "offsets_in_signature_help",
                    _sub(info, "parameterInformation"),
                    "labelOffsetSupport",
                )
                caps.signature_help_documentation_format = _first_markup_kind(
                    info,
                    "documentationFormat",
                    caps.signature_help_documentation_format,
                )
            set_flag("line_folding_only", _sub(text_document, "foldingRange"), "lineFoldingOnly")
            set_flag("rename_prepare_support", _sub(text_document, "rename"), "prepareSupport")

        workspace = _sub(value, "workspace")
        if workspace is not None:
            symbol_kind = _sub(_sub(workspace, "symbol"), "symbolKind")
            if symbol_kind is not None and "valueSet" in symbol_kind:
                caps.workspace_symbol_kinds = _at_path(
                    ("workspace", "symbol", "symbolKind", "valueSet"),
                    _decode_symbol_kinds,
                    symbol_kind["valueSet"],
                )
            set_flag("workspace_configuration", workspace, "configuration")
            set_flag(
                "semantic_token_refresh_support",
                _sub(workspace, "semanticTokens"),
                "refreshSupport",
            )
            workspace_edit = _sub(workspace, "workspaceEdit")
            set_flag("document_changes", workspace_edit, "documentChanges")
            if _sub(workspace_edit, "changeAnnotationSupport") is not None:
                caps.change_annotation = True

        window = _sub(value, "window")
        set_flag("work_done_progress", window, "workDoneProgress")
        set_flag("implicit_progress_creation", window, "implicitWorkDoneProgressCreate")
        set_flag(
            "cancels_stale_requests",
            _sub(_sub(value, "general"), "staleRequestSupport"),
            "cancel",
        )
        if "offsetEncoding" in value:
            caps.offset_encoding = _at_path(
                ("offsetEncoding",), _decode_offset_encodings, value["offsetEncoding"]
            )
        return caps


@dataclass
class CompileCommand:
    working_directory: str
    compilation_command: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> CompileCommand:
        obj = _expect_object(value)
        return cls(
            _required(obj, "workingDirectory", _decode_str),
            _required(obj, "compilationCommand", _decode_str_list),
        )


@dataclass
class ConfigurationSettings:
    compilation_database_changes: dict[str, CompileCommand] = field(default_factory=dict)

    @classmethod
    def from_json(cls, value: Any) -> ConfigurationSettings:
        """Decode settings; any non-object value gives the defaults."""
        if not isinstance(value, dict):
            return cls()
        return cls(
            _optional(
                value,
                "compilationDatabaseChanges",
                _dict_of(CompileCommand.from_json),
                {},
            )
        )


@dataclass
class InitializationOptions:
    config_settings: ConfigurationSettings = field(default_factory=ConfigurationSettings)
    compilation_database_path: str | None = None
    fallback_flags: list[str] = field(default_factory=list)
    file_status: bool = False

    @classmethod
    def from_json(cls, value: Any) -> InitializationOptions:
        """Decode options; any non-object value gives the defaults."""
        if not isinstance(value, dict):
            return cls()
        return cls(
            ConfigurationSettings.from_json(value),
            _optional(value, "compilationDatabasePath", _decode_str),
            _optional(value, "fallbackFlags", _decode_str_list, []),
            _optional(value, "clangdFileStatus", _decode_bool, False),
        )


def _lenient(obj: dict, key: str, decoder: Callable[[Any], T], default: Any) -> Any:
    try:
        return _optional(obj, key, decoder, default)
    except ProtocolDecodeError:
        return default


@dataclass
class InitializeParams:
    process_id: int | None = None
    root_uri: URIForFile | None = None
    root_path: str | None = None
    capabilities: ClientCapabilities = field(default_factory=ClientCapabilities)
    raw_capabilities: dict = field(default_factory=dict)
    trace: TraceLevel | None = None
    initialization_options: InitializationOptions = field(
        default_factory=InitializationOptions
    )

    @classmethod
    def from_json(cls, value: Any) -> InitializeParams:
        """Decode initialize parameters; malformed fields keep their defaults."""
        obj = _expect_object(value)
        raw = obj.get("capabilities")
        return cls(
            process_id=_lenient(obj, "processId", _decode_int, None),
            root_uri=_lenient(obj, "rootUri", URIForFile.from_json, None),
            root_path=_lenient(obj, "rootPath", _decode_str, None),
            capabilities=_lenient(
                obj, "capabilities", ClientCapabilities.from_json, ClientCapabilities()
            ),
            raw_capabilities=dict(raw) if isinstance(raw, dict) else {},
            trace=_lenient(obj, "trace", _decode_trace, None),
            initialization_options=_lenient(
                obj,
                "initializationOptions",
                InitializationOptions.from_json,
                InitializationOptions(),
            ),
        )


@dataclass
class DidOpenTextDocumentParams:
    text_document: TextDocumentItem

    @classmethod
    def from_json(cls, value: Any) -> DidOpenTextDocumentParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentItem.from_json))


@dataclass
class DidCloseTextDocumentParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> DidCloseTextDocumentParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class DidSaveTextDocumentParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> DidSaveTextDocumentParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class DidChangeTextDocumentParams:
    text_document: VersionedTextDocumentIdentifier
    content_changes: list[TextDocumentContentChangeEvent] = field(default_factory=list)
    want_diagnostics: bool | None = None
    force_rebuild: bool = False

    @classmethod
    def from_json(cls, value: Any) -> DidChangeTextDocumentParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", VersionedTextDocumentIdentifier.from_json),
            _required(
                obj, "contentChanges", _list_of(TextDocumentContentChangeEvent.from_json)
            ),
            _optional(obj, "wantDiagnostics", _decode_bool),
            _optional(obj, "forceRebuild", _decode_bool, False),
        )


@dataclass
class FileEvent:
    uri: URIForFile
    type: FileChangeType

    @classmethod
    def from_json(cls, value: Any) -> FileEvent:
        obj = _expect_object(value)
        return cls(
            _required(obj, "uri", URIForFile.from_json),
            _required(obj, "type", _decode_file_change_type),
        )


@dataclass
class DidChangeWatchedFilesParams:
    changes: list[FileEvent] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> DidChangeWatchedFilesParams:
        obj = _expect_object(value)
        return cls(_required(obj, "changes", _list_of(FileEvent.from_json)))


@dataclass
class DocumentRangeFormattingParams:
    text_document: TextDocumentIdentifier
    range: Range

    @classmethod
    def from_json(cls, value: Any) -> DocumentRangeFormattingParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "range", Range.from_json),
        )


@dataclass
class DocumentOnTypeFormattingParams:
    text_document: TextDocumentIdentifier
    position: Position
    ch: str

    @classmethod
    def from_json(cls, value: Any) -> DocumentOnTypeFormattingParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "position", Position.from_json),
            _required(obj, "ch", _decode_str),
        )


@dataclass
class DocumentFormattingParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> DocumentFormattingParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class DocumentSymbolParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> DocumentSymbolParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class CodeActionContext:
    diagnostics: list[Diagnostic] = field(default_factory=list)
    only: list[str] | None = None

    @classmethod
    def from_json(cls, value: Any) -> CodeActionContext:
        obj = _expect_object(value)
        diagnostics = _required(obj, "diagnostics", _list_of(Diagnostic.from_json))
        return cls(diagnostics, _lenient(obj, "only", _decode_str_list, None))


@dataclass
class CodeActionParams:
    text_document: TextDocumentIdentifier
    range: Range
    context: CodeActionContext

    @classmethod
    def from_json(cls, value: Any) -> CodeActionParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "range", Range.from_json),
            _required(obj, "context", CodeActionContext.from_json),
        )


@dataclass
class ExecuteCommandParams:
    command: str
    argument: Any = None

    @classmethod
    def from_json(cls, value: Any) -> ExecuteCommandParams:
        """Decode a command with at most one argument."""
        obj = _expect_object(value)
        command = _required(obj, "command", _decode_str)
        if "arguments" not in obj:
            return cls(command)
        args = obj["arguments"]
        if not isinstance(args, list):
            raise ProtocolDecodeError("expected array", ("arguments",))
        if len(args) > 1:
            raise ProtocolDecodeError(
                "Command should have 0 or 1 argument", ("arguments",)
            )
        return cls(command, args[0] if args else None)


@dataclass
class WorkspaceSymbolParams:
    query: str
    limit: int | None = None

    @classmethod
    def from_json(cls, value: Any) -> WorkspaceSymbolParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "query", _decode_str),
            _optional(obj, "limit", _decode_int),
        )


@dataclass
class TextDocumentPositionParams:
    text_document: TextDocumentIdentifier
    position: Position

    @classmethod
    def from_json(cls, value: Any) -> TextDocumentPositionParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "position", Position.from_json),
        )


@dataclass
class CompletionContext:
    trigger_kind: CompletionTriggerKind = field(
        default_factory=lambda: CompletionTriggerKind(1)
    )
    trigger_character: str = ""

    @classmethod
    def from_json(cls, value: Any) -> CompletionContext:
        obj = _expect_object(value)
        kind = _required(obj, "triggerKind", _decode_int)
        character = _optional(obj, "triggerCharacter", _decode_str, "")
        return cls(_decode_at("triggerKind", _decode_trigger_kind, kind), character)


@dataclass
class CompletionParams(TextDocumentPositionParams):
    context: CompletionContext = field(default_factory=CompletionContext)
    limit: int | None = None

    @classmethod
    def from_json(cls, value: Any) -> CompletionParams:
        base = TextDocumentPositionParams.from_json(value)
        return cls(
            base.text_document,
            base.position,
            _if_present(value, "context", CompletionContext.from_json, CompletionContext()),
            _optional(value, "limit", _decode_int),
        )


@dataclass
class RenameParams:
    text_document: TextDocumentIdentifier
    position: Position
    new_name: str

    @classmethod
    def from_json(cls, value: Any) -> RenameParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "position", Position.from_json),
            _required(obj, "newName", _decode_str),
        )


@dataclass
class SemanticTokensParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> SemanticTokensParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class SemanticTokensDeltaParams:
    text_document: TextDocumentIdentifier
    previous_result_id: str

    @classmethod
    def from_json(cls, value: Any) -> SemanticTokensDeltaParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "previousResultId", _decode_str),
        )


@dataclass
class DidChangeConfigurationParams:
    settings: ConfigurationSettings

    @classmethod
    def from_json(cls, value: Any) -> DidChangeConfigurationParams:
        obj = _expect_object(value)
        return cls(_required(obj, "settings", ConfigurationSettings.from_json))


@dataclass
class TypeHierarchyPrepareParams(TextDocumentPositionParams):
    resolve: int = 0
    direction: TypeHierarchyDirection = field(
        default_factory=lambda: TypeHierarchyDirection(1)
    )

    @classmethod
    def from_json(cls, value: Any) -> TypeHierarchyPrepareParams:
        base = TextDocumentPositionParams.from_json(value)
        params = cls(base.text_document, base.position)
        params.resolve = _optional(value, "resolve", _decode_int, params.resolve)
        params.direction = _optional(value, "direction", _decode_direction, params.direction)
        return params


@dataclass
class ResolveTypeHierarchyItemParams:
    item: TypeHierarchyItem
    resolve: int = 0
    direction: TypeHierarchyDirection | None = None

    @classmethod
    def from_json(cls, value: Any) -> ResolveTypeHierarchyItemParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "item", TypeHierarchyItem.from_json),
            _optional(obj, "resolve", _decode_int, 0),
            _optional(obj, "direction", _decode_direction),
        )


@dataclass
class ReferenceContext:
    include_declaration: bool = False

    @classmethod
    def from_json(cls, value: Any) -> ReferenceContext:
        obj = _expect_object(value)
        return cls(_if_present(obj, "includeDeclaration", _decode_bool, False))


@dataclass
class ReferenceParams(TextDocumentPositionParams):
    context: ReferenceContext = field(default_factory=ReferenceContext)

    @classmethod
    def from_json(cls, value: Any) -> ReferenceParams:
        base = TextDocumentPositionParams.from_json(value)
        return cls(
            base.text_document,
            base.position,
            _if_present(value, "context", ReferenceContext.from_json, ReferenceContext()),
        )


@dataclass
class CallHierarchyIncomingCallsParams:
    item: Any

    @classmethod
    def from_json(cls, value: Any) -> CallHierarchyIncomingCallsParams:
        from .results import CallHierarchyItem

        obj = _expect_object(value)
        return cls(_required(obj, "item", CallHierarchyItem.from_json))


@dataclass
class CallHierarchyOutgoingCallsParams:
    item: Any

    @classmethod
    def from_json(cls, value: Any) -> CallHierarchyOutgoingCallsParams:
        from .results import CallHierarchyItem

        obj = _expect_object(value)
        return cls(_required(obj, "item", CallHierarchyItem.from_json))


@dataclass
class InlayHintsParams:
    text_document: TextDocumentIdentifier
    range: Range

    @classmethod
    def from_json(cls, value: Any) -> InlayHintsParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "range", Range.from_json),
        )


@dataclass
class SelectionRangeParams:
    text_document: TextDocumentIdentifier
    positions: list[Position] = field(default_factory=list)

    @classmethod
    def from_json(cls, value: Any) -> SelectionRangeParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _required(obj, "positions", _list_of(Position.from_json)),
        )


@dataclass
class DocumentLinkParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> DocumentLinkParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class FoldingRangeParams:
    text_document: TextDocumentIdentifier

    @classmethod
    def from_json(cls, value: Any) -> FoldingRangeParams:
        obj = _expect_object(value)
        return cls(_required(obj, "textDocument", TextDocumentIdentifier.from_json))


@dataclass
class ASTParams:
    text_document: TextDocumentIdentifier
    range: Range | None = None

    @classmethod
    def from_json(cls, value: Any) -> ASTParams:
        obj = _expect_object(value)
        return cls(
            _required(obj, "textDocument", TextDocumentIdentifier.from_json),
            _optional(obj, "range", Range.from_json),
        )