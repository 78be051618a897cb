"""Protocol structures sent from the server to the client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .basic import (
    Command,
    Location,
    Position,
    ProtocolDecodeError,
    Range,
    TextDocumentIdentifier,
    TextEdit,
    URIForFile,
    WorkspaceEdit,
    _decode_bool,
    _decode_int,
    _decode_str,
    _expect_object,
    _list_of,
    _optional,
    _required,
)
from .kinds import (
    CompletionItemKind,
    DiagnosticTag,
    DocumentHighlightKind,
    InlayHintKind,
    InsertTextFormat,
    MarkupKind,
    MessageType,
    SymbolKind,
    SymbolTag,
    inlay_hint_kind_to_json,
    symbol_kind_from_json,
)

__all__ = [
    "DiagnosticRelatedInformation",
    "CodeDescription",
    "Diagnostic",
    "PublishDiagnosticsParams",
    "CodeAction",
    "SymbolInformation",
    "DocumentSymbol",
    "MarkupContent",
    "Hover",
    "CompletionItem",
    "CompletionList",
    "ParameterInformation",
    "SignatureInformation",
    "SignatureHelp",
    "DocumentHighlight",
    "FileStatus",
    "SemanticToken",
    "SemanticTokens",
    "SemanticTokensEdit",
    "SemanticTokensOrDelta",
    "encode_tokens",
    "InlayHint",
    "TypeHierarchyResolveParams",
    "TypeHierarchyItem",
    "CallHierarchyItem",
    "CallHierarchyIncomingCall",
    "CallHierarchyOutgoingCall",
    "SelectionRange",
    "DocumentLink",
    "FoldingRange",
    "ASTNode",
    "InactiveRegionsParams",
    "WorkDoneProgressCreateParams",
    "WorkDoneProgressBegin",
    "WorkDoneProgressReport",
    "WorkDoneProgressEnd",
    "ShowMessageParams",
    "ApplyWorkspaceEditParams",
    "ApplyWorkspaceEditResponse",
    "TweakArgs",
    "ConfigurationItem",
    "ConfigurationParams",
]

_SEMANTIC_TOKEN_ENCODING_SIZE = 5


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _decode_symbol_kind(value: Any) -> SymbolKind:
    try:
        return symbol_kind_from_json(value)
    except ValueError as err:
        raise ProtocolDecodeError(str(err)) from None


@dataclass
class DiagnosticRelatedInformation:
    location: Location
    message: str

    def to_json(self) -> dict:
        return {"location": self.location.to_json(), "message": self.message}


@dataclass
class CodeDescription:
    href: str

    def to_json(self) -> dict:
        return {"href": self.href}


_SEVERITY_NAMES = {1: "error", 2: "warning", 3: "note", 4: "remark"}


@dataclass
class Diagnostic:
    range: Range
    severity: int = 0
    code: str = ""
    code_description: CodeDescription | None = None
    source: str = ""
    message: str = ""
    tags: list[DiagnosticTag] = field(default_factory=list)
    related_information: list[DiagnosticRelatedInformation] | None = None
    category: str | None = None
    code_actions: list[CodeAction] | None = None
    data: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, value: Any) -> Diagnostic:
        obj = _expect_object(value)
        data = obj.get("data")
        return cls(
            range=_required(obj, "range", Range.from_json),
            message=_required(obj, "message", _decode_str),
            severity=_optional(obj, "severity", _decode_int, 0),
            category=_optional(obj, "category", _decode_str),
            code=_optional(obj, "code", _decode_str, ""),
            source=_optional(obj, "source", _decode_str, ""),
            data=dict(data) if isinstance(data, dict) else {},
        )

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "range": self.range.to_json(),
            "severity": self.severity,
            "message": self.message,
        }
        if self.category is not None:
            result["category"] = self.category
        if self.code_actions is not None:
            result["codeActions"] = [a.to_json() for a in self.code_actions]
        if self.code:
            result["code"] = self.code
        if self.code_description is not None:
            result["codeDescription"] = self.code_description.to_json()
        if self.source:
            result["source"] = self.source
        if self.related_information is not None:
            result["relatedInformation"] = [
                info.to_json() for info in self.related_information
            ]
        if self.data:
            result["data"] = dict(self.data)
        if self.tags:
            result["tags"] = [int(tag) for tag in self.tags]
        return result

    def __str__(self) -> str:
        name = _SEVERITY_NAMES.get(self.severity, "diagnostic")
        return f"{self.range} [{name}({self.severity}): {self.message}]"


@dataclass
class PublishDiagnosticsParams:
    uri: URIForFile
    diagnostics: list[Diagnostic] = field(default_factory=list)
    version: int | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "uri": self.uri.to_json(),
            "diagnostics": [d.to_json() for d in self.diagnostics],
        }
        if self.version is not None:
            result["version"] = self.version
        return result


@dataclass
class CodeAction:
    QUICKFIX_KIND: ClassVar[str] = "quickfix"
    REFACTOR_KIND: ClassVar[str] = "refactor"
    INFO_KIND: ClassVar[str] = "info"

    title: str
    kind: str | None = None
    diagnostics: list[Diagnostic] | None = None
    is_preferred: bool = False
    edit: WorkspaceEdit | None = None
    command: Command | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"title": self.title}
        if self.kind is not None:
            result["kind"] = self.kind
        if self.diagnostics is not None:
            result["diagnostics"] = [d.to_json() for d in self.diagnostics]
        if self.is_preferred:
            result["isPreferred"] = True
        if self.edit is not None:
            result["edit"] = self.edit.to_json()
        if self.command is not None:
            result["command"] = self.command.to_json()
        return result


@dataclass
class SymbolInformation:
    name: str
    kind: SymbolKind
    location: Location
    container_name: str = ""
    score: float | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "name": self.name,
            "kind": int(self.kind),
            "location": self.location.to_json(),
            "containerName": self.container_name,
        }
        if self.score is not None:
            result["score"] = self.score
        return result

    def __str__(self) -> str:
        return f"{self.container_name}::{self.name} - {_compact(self.to_json())}"


@dataclass
class DocumentSymbol:
    name: str
    kind: SymbolKind
    range: Range
    selection_range: Range
    detail: str = ""
    deprecated: bool = False
    children: list[DocumentSymbol] = field(default_factory=list)

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "name": self.name,
            "kind": int(self.kind),
            "range": self.range.to_json(),
            "selectionRange": self.selection_range.to_json(),
        }
        if self.detail:
            result["detail"] = self.detail
        if self.children:
            result["children"] = [child.to_json() for child in self.children]
        if self.deprecated:
            result["deprecated"] = True
        return result

    def __str__(self) -> str:
        return f"{self.name} - {_compact(self.to_json())}"


@dataclass
class MarkupContent:
    kind: MarkupKind = MarkupKind.PLAIN_TEXT
    value: str = ""

    def to_json(self) -> dict | None:
        """Encode the content; empty content encodes as None."""
        if not self.value:
            return None
        return {"kind": self.kind.value, "value": self.value}


@dataclass
class Hover:
    contents: MarkupContent
    range: Range | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"contents": self.contents.to_json()}
        if self.range is not None:
            result["range"] = self.range.to_json()
        return result


@dataclass
class CompletionItem:
    label: str
    kind: CompletionItemKind = CompletionItemKind.MISSING
    detail: str = ""
    documentation: MarkupContent | None = None
    sort_text: str = ""
    filter_text: str = ""
    insert_text: str = ""
    insert_text_format: InsertTextFormat = InsertTextFormat.MISSING
    text_edit: TextEdit | None = None
    additional_text_edits: list[TextEdit] = field(default_factory=list)
    deprecated: bool = False
    score: float = 0.0

    def to_json(self) -> dict:
        if not self.label:
            raise ValueError("completion item label is required")
        result: dict[str, Any] = {"label": self.label}
        if self.kind is not CompletionItemKind.MISSING:
            result["kind"] = int(self.kind)
        if self.detail:
            result["detail"] = self.detail
        if self.documentation is not None:
            result["documentation"] = self.documentation.to_json()
        if self.sort_text:
            result["sortText"] = self.sort_text
        if self.filter_text:
            result["filterText"] = self.filter_text
        if self.insert_text:
            result["insertText"] = self.insert_text
        if self.insert_text_format is not InsertTextFormat.MISSING:
            result["insertTextFormat"] = int(self.insert_text_format)
        if self.text_edit is not None:
            result["textEdit"] = self.text_edit.to_json()
        if self.additional_text_edits:
            result["additionalTextEdits"] = [
                edit.to_json() for edit in self.additional_text_edits
            ]
        if self.deprecated:
            result["deprecated"] = True
        result["score"] = self.score
        return result

    def sort_key(self) -> str:
        """The text items are ordered by: the sort text, else the label."""
        return self.sort_text or self.label

    def __lt__(self, other: CompletionItem) -> bool:
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{self.label} - {_compact(self.to_json())}"


@dataclass
class CompletionList:
    is_incomplete: bool = False
    items: list[CompletionItem] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "isIncomplete": self.is_incomplete,
            "items": [item.to_json() for item in self.items],
        }


@dataclass
class ParameterInformation:
    label_string: str = ""
    label_offsets: tuple[int, int] | None = None
    documentation: str = ""

    def to_json(self) -> dict:
        if self.label_offsets is None and not self.label_string:
            raise ValueError("parameter information label is required")
        result: dict[str, Any] = {}
        if self.label_offsets is not None:
            result["label"] = list(self.label_offsets)
        else:
            result["label"] = self.label_string
        if self.documentation:
            result["documentation"] = self.documentation
        return result


@dataclass
class SignatureInformation:
    label: str
    documentation: MarkupContent = field(default_factory=MarkupContent)
    parameters: list[ParameterInformation] = field(default_factory=list)

    def to_json(self) -> dict:
        if not self.label:
            raise ValueError("signature information label is required")
        result: dict[str, Any] = {
            "label": self.label,
            "parameters": [p.to_json() for p in self.parameters],
        }
        if self.documentation.value:
            result["documentation"] = self.documentation.to_json()
        return result

    def __str__(self) -> str:
        return f"{self.label} - {_compact(self.to_json())}"


@dataclass
class SignatureHelp:
    signatures: list[SignatureInformation] = field(default_factory=list)
    active_signature: int = 0
    active_parameter: int = 0

    def to_json(self) -> dict:
        if self.active_signature < 0:
            raise ValueError("negative active signature")
        if self.active_parameter < 0:
            raise ValueError("negative active parameter index")
        return {
            "activeSignature": self.active_signature,
            "activeParameter": self.active_parameter,
            "signatures": [s.to_json() for s in self.signatures],
        }


@dataclass
class DocumentHighlight:
    range: Range
    kind: DocumentHighlightKind = DocumentHighlightKind.TEXT

    def to_json(self) -> dict:
        return {"range": self.range.to_json(), "kind": int(self.kind)}

    def __str__(self) -> str:
        suffix = {
            DocumentHighlightKind.READ: "(r)",
            DocumentHighlightKind.WRITE: "(w)",
        }.get(self.kind, "")
        return f"{self.range}{suffix}"


@dataclass
class FileStatus:
    uri: URIForFile
    state: str

    def to_json(self) -> dict:
        return {"uri": self.uri.to_json(), "state": self.state}


@dataclass(frozen=True)
class SemanticToken:
    delta_line: int = 0
    delta_start: int = 0
    length: int = 0
    token_type: int = 0
    token_modifiers: int = 0


def encode_tokens(tokens: list[SemanticToken]) -> list[int]:
    """Flatten tokens into the five-integers-per-token wire encoding."""
    return [
        value
        for tok in tokens
        for value in (
            tok.delta_line,
            tok.delta_start,
            tok.length,
            tok.token_type,
            tok.token_modifiers,
        )
    ]


@dataclass
class SemanticTokens:
    result_id: str = ""
    tokens: list[SemanticToken] = field(default_factory=list)

    def to_json(self) -> dict:
        return {"resultId": self.result_id, "data": encode_tokens(self.tokens)}


@dataclass
class SemanticTokensEdit:
    start_token: int = 0
    delete_tokens: int = 0
    tokens: list[SemanticToken] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "start": _SEMANTIC_TOKEN_ENCODING_SIZE * self.start_token,
            "deleteCount": _SEMANTIC_TOKEN_ENCODING_SIZE * self.delete_tokens,
            "data": encode_tokens(self.tokens),
        }


@dataclass
class SemanticTokensOrDelta:
    result_id: str = ""
    edits: list[SemanticTokensEdit] | None = None
    tokens: list[SemanticToken] | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"resultId": self.result_id}
        if self.edits is not None:
            result["edits"] = [edit.to_json() for edit in self.edits]
        if self.tokens is not None:
            result["data"] = encode_tokens(self.tokens)
        return result


@dataclass(eq=False)
class InlayHint:
    position: Position
    label: str
    kind: InlayHintKind
    padding_left: bool = False
    padding_right: bool = False
    range: Range = Range()

    def _key(self) -> tuple:
        return (self.position, self.range, self.kind, self.label)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InlayHint):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: InlayHint) -> bool:
        return self._key() < other._key()

    __hash__ = None  # type: ignore[assignment]

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "position": self.position.to_json(),
            "label": self.label,
            "paddingLeft": self.padding_left,
            "paddingRight": self.padding_right,
        }
        kind = inlay_hint_kind_to_json(self.kind)
        if kind is not None:
            result["kind"] = kind
        return result


@dataclass
class TypeHierarchyResolveParams:
    parents: list[TypeHierarchyItem] | None = None

    @classmethod
    def from_json(cls, value: Any) -> TypeHierarchyResolveParams:
        obj = _expect_object(value)
        return cls(_optional(obj, "parents", _list_of(TypeHierarchyItem.from_json)))

    def to_json(self) -> dict:
        if self.parents is None:
            return {}
        return {"parents": [p.to_json() for p in self.parents]}


@dataclass
class TypeHierarchyItem:
    name: str
    kind: SymbolKind
    uri: URIForFile
    range: Range
    selection_range: Range
    detail: str | None = None
    deprecated: bool = False
    parents: list[TypeHierarchyItem] | None = None
    children: list[TypeHierarchyItem] | None = None
    data: TypeHierarchyResolveParams = field(default_factory=TypeHierarchyResolveParams)

    @classmethod
    def from_json(cls, value: Any) -> TypeHierarchyItem:
        obj = _expect_object(value)
        items = _list_of(cls.from_json)
        return cls(
            name=_required(obj, "name", _decode_str),
            kind=_required(obj, "kind", _decode_symbol_kind),
            uri=_required(obj, "uri", URIForFile.from_json),
            range=_required(obj, "range", Range.from_json),
            selection_range=_required(obj, "selectionRange", Range.from_json),
            detail=_optional(obj, "detail", _decode_str),
            deprecated=_optional(obj, "deprecated", _decode_bool, False),
            parents=_optional(obj, "parents", items),
            children=_optional(obj, "children", items),
            data=_optional(
                obj,
                "data",
                TypeHierarchyResolveParams.from_json,
                TypeHierarchyResolveParams(),
            ),
        )

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "name": self.name,
            "kind": int(self.kind),
            "range": self.range.to_json(),
            "selectionRange": self.selection_range.to_json(),
            "uri": self.uri.to_json(),
            "data": self.data.to_json(),
        }
        if self.detail is not None:
            result["detail"] = self.detail
        return result

    def __str__(self) -> str:
        return f"{self.name} - {_compact(self.to_json())}"


@dataclass
class CallHierarchyItem:
    name: str
    kind: SymbolKind
    uri: URIForFile
    range: Range
    selection_range: Range
    tags: list[SymbolTag] = field(default_factory=list)
    detail: str = ""
    data: str = ""

    @classmethod
    def from_json(cls, value: Any) -> CallHierarchyItem:
        obj = _expect_object(value)
        return cls(
            name=_required(obj, "name", _decode_str),
            kind=_required(obj, "kind", _decode_symbol_kind),
            uri=_required(obj, "uri", URIForFile.from_json),
            range=_required(obj, "range", Range.from_json),
            selection_range=_required(obj, "selectionRange", Range.from_json),
            data=_optional(obj, "data", _decode_str, ""),
        )

    def to_json(self) -> dict:
        result: dict[str, Any] = {
            "name": self.name,
            "kind": int(self.kind),
            "range": self.range.to_json(),
            "selectionRange": self.selection_range.to_json(),
            "uri": self.uri.to_json(),
        }
        if self.tags:
            result["tags"] = [int(tag) for tag in self.tags]
        if self.detail:
            result["detail"] = self.detail
        if self.data:
            result["data"] = self.data
        return result


@dataclass
class CallHierarchyIncomingCall:
    from_: CallHierarchyItem
    from_ranges: list[Range] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "from": self.from_.to_json(),
            "fromRanges": [r.to_json() for r in self.from_ranges],
        }


@dataclass
class CallHierarchyOutgoingCall:
    to: CallHierarchyItem
    from_ranges: list[Range] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "to": self.to.to_json(),
            "fromRanges": [r.to_json() for r in self.from_ranges],
        }


@dataclass
class SelectionRange:
    range: Range
    parent: SelectionRange | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"range": self.range.to_json()}
        if self.parent is not None:
            result["parent"] = self.parent.to_json()
        return result


@dataclass
class DocumentLink:
    range: Range
    target: URIForFile

    def to_json(self) -> dict:
        return {"range": self.range.to_json(), "target": self.target.to_json()}


@dataclass
class FoldingRange:
    REGION_KIND: ClassVar[str] = "region"
    COMMENT_KIND: ClassVar[str] = "comment"
    IMPORT_KIND: ClassVar[str] = "import"

    start_line: int = 0
    end_line: int = 0
    start_character: int | None = None
    end_character: int | None = None
    kind: str = ""

    def to_json(self) -> dict:
        result: dict[str, Any] = {"startLine": self.start_line, "endLine": self.end_line}
        if self.start_character is not None:
            result["startCharacter"] = self.start_character
        if self.end_character is not None:
            result["endCharacter"] = self.end_character
        if self.kind:
            result["kind"] = self.kind
        return result


@dataclass
class ASTNode:
    role: str
    kind: str
    detail: str = ""
    arcana: str = ""
    range: Range | None = None
    children: list[ASTNode] = field(default_factory=list)

    def to_json(self) -> dict:
        result: dict[str, Any] = {"role": self.role, "kind": self.kind}
        if self.children:
            result["children"] = [child.to_json() for child in self.children]
        if self.detail:
            result["detail"] = self.detail
        if self.arcana:
            result["arcana"] = self.arcana
        if self.range is not None:
            result["range"] = self.range.to_json()
        return result

    def _lines(self, level: int):
        line = f"{'  ' * level}{self.role}: {self.kind}"
        if self.detail:
            line += f" - {self.detail}"
        yield line + "\n"
        for child in self.children:
            yield from child._lines(level + 1)

    def render(self) -> str:
        """Render the tree as indented text, one node per line."""
        return "".join(self._lines(0))

    def __str__(self) -> str:
        return self.render()


@dataclass
class InactiveRegionsParams:
    text_document: TextDocumentIdentifier
    inactive_regions: list[Range] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "textDocument": self.text_document.to_json(),
            "regions": [r.to_json() for r in self.inactive_regions],
        }


@dataclass
class WorkDoneProgressCreateParams:
    token: int | str

    def to_json(self) -> dict:
        return {"token": self.token}


@dataclass
class WorkDoneProgressBegin:
    title: str
    cancellable: bool = False
    percentage: bool = False

    def to_json(self) -> dict:
        result: dict[str, Any] = {"kind": "begin", "title": self.title}
        if self.cancellable:
            result["cancellable"] = True
        if self.percentage:
            result["percentage"] = 0
        return result


@dataclass
class WorkDoneProgressReport:
    cancellable: bool | None = None
    message: str | None = None
    percentage: int | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"kind": "report"}
        if self.cancellable is not None:
            result["cancellable"] = self.cancellable
        if self.message is not None:
            result["message"] = self.message
        if self.percentage is not None:
            result["percentage"] = self.percentage
        return result


@dataclass
class WorkDoneProgressEnd:
    message: str | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {"kind": "end"}
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass
class ShowMessageParams:
    type: MessageType = MessageType.INFO
    message: str = ""

    def to_json(self) -> dict:
        return {"type": int(self.type), "message": self.message}


@dataclass
class ApplyWorkspaceEditParams:
    edit: WorkspaceEdit

    def to_json(self) -> dict:
        return {"edit": self.edit.to_json()}


@dataclass
class ApplyWorkspaceEditResponse:
    applied: bool = True
    failure_reason: str | None = None

    @classmethod
    def from_json(cls, value: Any) -> ApplyWorkspaceEditResponse:
        obj = _expect_object(value)
        return cls(
            _required(obj, "applied", _decode_bool),
            _optional(obj, "failureReason", _decode_str),
        )


@dataclass
class TweakArgs:
    file: URIForFile
    selection: Range
    tweak_id: str

    @classmethod
    def from_json(cls, value: Any) -> TweakArgs:
        obj = _expect_object(value)
        return cls(
            _required(obj, "file", URIForFile.from_json),
            _required(obj, "selection", Range.from_json),
            _required(obj, "tweakID", _decode_str),
        )

    def to_json(self) -> dict:
        return {
            "tweakID": self.tweak_id,
            "selection": self.selection.to_json(),
            "file": self.file.to_json(),
        }


@dataclass
class ConfigurationItem:
    scope_uri: str | None = None
    section: str | None = None

    def to_json(self) -> dict:
        result: dict[str, Any] = {}
        if self.scope_uri is not None:
            result["scopeUri"] = self.scope_uri
        if self.section is not None:
            result["section"] = self.section
        return result


@dataclass
class ConfigurationParams:
    items: list[ConfigurationItem] = field(default_factory=list)

    def to_json(self) -> dict:
        return {"items": [item.to_json() for item in self.items]}