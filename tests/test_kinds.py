import pytest

from lspcore.kinds import (
    CompletionItemKind,
    FileChangeType,
    InlayHintKind,
    MarkupKind,
    OffsetEncoding,
    SymbolKind,
    TraceLevel,
    TypeHierarchyDirection,
    adjust_completion_item_kind,
    adjust_symbol_kind,
    completion_item_kind_from_json,
    completion_item_kinds_from_json,
    file_change_type_from_json,
    inlay_hint_kind_to_json,
    markup_kind_from_json,
    offset_encoding_from_json,
    symbol_kind_from_json,
    symbol_kinds_from_json,
    trace_level_from_json,
    type_hierarchy_direction_from_json,
)


@pytest.mark.parametrize("kind", list(SymbolKind))
def test_symbol_kind_round_trip(kind):
    assert symbol_kind_from_json(int(kind)) is kind


@pytest.mark.parametrize("value", [0, 27, "1", True, None, 1.5])
def test_symbol_kind_rejects(value):
    with pytest.raises(ValueError):
        symbol_kind_from_json(value)


def test_integral_float_accepted():
    assert symbol_kind_from_json(5.0) is SymbolKind.CLASS


def test_symbol_kinds_skip_invalid():
    assert symbol_kinds_from_json([1, 23, 99, "x"]) == {
        SymbolKind.FILE,
        SymbolKind.STRUCT,
    }
    with pytest.raises(ValueError):
        symbol_kinds_from_json({"valueSet": [1]})


def test_completion_kind_bounds():
    assert completion_item_kind_from_json(1) is CompletionItemKind.TEXT
    assert completion_item_kind_from_json(25) is CompletionItemKind.TYPE_PARAMETER
    with pytest.raises(ValueError):
        completion_item_kind_from_json(0)
    with pytest.raises(ValueError):
        completion_item_kind_from_json(26)


def test_completion_kinds_skip_invalid():
    assert completion_item_kinds_from_json([0, 2, 19]) == {
        CompletionItemKind.METHOD,
        CompletionItemKind.FOLDER,
    }
    with pytest.raises(ValueError):
        completion_item_kinds_from_json("2")


@pytest.mark.parametrize(
    "kind, expected",
    [
        (SymbolKind.STRUCT, SymbolKind.CLASS),
        (SymbolKind.ENUM_MEMBER, SymbolKind.ENUM),
        (SymbolKind.FILE, SymbolKind.STRING),
    ],
)
def test_adjust_symbol_kind_fallbacks(kind, expected):
    assert adjust_symbol_kind(kind, set()) is expected


def test_adjust_symbol_kind_supported():
    assert adjust_symbol_kind(SymbolKind.STRUCT, {SymbolKind.STRUCT}) is SymbolKind.STRUCT


@pytest.mark.parametrize(
    "kind, expected",
    [
        (CompletionItemKind.FOLDER, CompletionItemKind.FILE),
        (CompletionItemKind.ENUM_MEMBER, CompletionItemKind.ENUM),
        (CompletionItemKind.STRUCT, CompletionItemKind.CLASS),
        (CompletionItemKind.KEYWORD, CompletionItemKind.TEXT),
    ],
)
def test_adjust_completion_kind_fallbacks(kind, expected):
    assert adjust_completion_item_kind(kind, {CompletionItemKind.TEXT}) is expected


def test_adjust_completion_kind_supported_and_missing():
    supported = set(CompletionItemKind)
    assert adjust_completion_item_kind(CompletionItemKind.FOLDER, supported) is CompletionItemKind.FOLDER
    assert adjust_completion_item_kind(CompletionItemKind.MISSING, supported) is CompletionItemKind.TEXT


def test_trace_level():
    assert trace_level_from_json("off") is TraceLevel.OFF
    assert trace_level_from_json("messages") is TraceLevel.MESSAGES
    assert trace_level_from_json("verbose") is TraceLevel.VERBOSE
    with pytest.raises(ValueError):
        trace_level_from_json("loud")
    with pytest.raises(ValueError):
        trace_level_from_json(1)


def test_markup_kind():
    assert markup_kind_from_json("markdown") is MarkupKind.MARKDOWN
    assert str(markup_kind_from_json("plaintext")) == "plaintext"
    with pytest.raises(ValueError, match="expected string"):
        markup_kind_from_json(3)
    with pytest.raises(ValueError, match="unknown markup kind"):
        markup_kind_from_json("html")


@pytest.mark.parametrize("encoding", list(OffsetEncoding))
def test_offset_encoding_round_trip(encoding):
    assert offset_encoding_from_json(encoding.to_json()) is encoding


def test_offset_encoding_unknown_and_invalid():
    assert offset_encoding_from_json("latin1") is OffsetEncoding.UNSUPPORTED
    assert str(OffsetEncoding.UTF16) == "utf-16"
    with pytest.raises(ValueError):
        offset_encoding_from_json(8)


def test_file_change_type():
    assert file_change_type_from_json(2.0) is FileChangeType.CHANGED
    assert [file_change_type_from_json(t) for t in (1, 2, 3)] == list(FileChangeType)
    for bad in (0, 4, True, "1"):
        with pytest.raises(ValueError):
            file_change_type_from_json(bad)


def test_type_hierarchy_direction():
    assert type_hierarchy_direction_from_json(0) is TypeHierarchyDirection.CHILDREN
    assert type_hierarchy_direction_from_json(2) is TypeHierarchyDirection.BOTH
    for bad in (3, -1, "1"):
        with pytest.raises(ValueError):
            type_hierarchy_direction_from_json(bad)


def test_inlay_hint_kind():
    assert inlay_hint_kind_to_json(InlayHintKind.TYPE) == InlayHintKind.TYPE.value
    assert inlay_hint_kind_to_json(InlayHintKind.PARAMETER) == InlayHintKind.PARAMETER.value
    assert inlay_hint_kind_to_json(InlayHintKind.DESIGNATOR) is None
    assert str(InlayHintKind.DESIGNATOR) == "designator"
    assert str(InlayHintKind.PARAMETER) == "parameter"