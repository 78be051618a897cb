import pytest

from lspcore.basic import (
    ChangeAnnotation,
    Command,
    ErrorCode,
    LSPError,
    Location,
    Position,
    ProtocolDecodeError,
    Range,
    ReferenceLocation,
    TextDocumentContentChangeEvent,
    TextDocumentEdit,
    TextDocumentIdentifier,
    TextDocumentItem,
    TextEdit,
    URIForFile,
    VersionedTextDocumentIdentifier,
    WorkspaceEdit,
)


def _range(a, b, c, d):
    return Range(Position(a, b), Position(c, d))


def test_lsp_error_carries_code():
    err = LSPError("boom", ErrorCode.INVALID_PARAMS)
    assert err.code == ErrorCode.INVALID_PARAMS
    assert str(err) == "boom"


def test_position_round_trip():
    pos = Position(3, 7)
    assert Position.from_json(pos.to_json()) == pos


def test_position_missing_field_reports_path():
    with pytest.raises(ProtocolDecodeError) as info:
        Position.from_json({"line": 1})
    assert info.value.path == ("character",)


def test_position_rejects_non_object():
    with pytest.raises(ProtocolDecodeError):
        Position.from_json([1, 2])


def test_position_rejects_boolean_line():
    with pytest.raises(ProtocolDecodeError):
        Position.from_json({"line": True, "character": 0})


def test_position_str():
    assert str(Position(1, 2)) == "1:2"


def test_range_round_trip_and_str():
    rng = _range(1, 2, 3, 4)
    assert Range.from_json(rng.to_json()) == rng
    assert str(rng) == f"{rng.start}-{rng.end}"


def test_range_contains_range():
    outer = _range(0, 0, 5, 0)
    assert outer.contains(_range(1, 0, 2, 0))
    assert outer.contains(outer)
    assert not outer.contains(_range(1, 0, 6, 0))


def test_range_contains_position_is_half_open():
    rng = _range(1, 0, 2, 0)
    assert rng.contains(Position(1, 5))
    assert not rng.contains(Position(2, 0))


def test_nested_error_path():
    with pytest.raises(ProtocolDecodeError) as info:
        TextEdit.from_json(
            {"range": {"start": {"line": 0}, "end": {"line": 0, "character": 0}},
             "newText": ""}
        )
    assert info.value.path == ("range", "start", "character")
    assert info.value.location == "range.start.character"


def test_uri_for_file_from_json():
    assert URIForFile.from_json("file:///a/b").file == "/a/b"


def test_uri_for_file_json_round_trip():
    uri = URIForFile("/tmp/some file.nix")
    assert URIForFile.from_json(uri.to_json()) == uri


@pytest.mark.parametrize("value", ["http://x/y", "no-colon", 3, None])
def test_uri_for_file_rejects_bad_values(value):
    with pytest.raises(ProtocolDecodeError):
        URIForFile.from_json(value)


def test_uri_for_file_canonicalize_plain_path():
    assert URIForFile.canonicalize("/a/b", "/a/b") == URIForFile("/a/b")


def test_text_document_identifier_round_trip():
    ident = TextDocumentIdentifier(URIForFile("/x/y"))
    assert TextDocumentIdentifier.from_json(ident.to_json()) == ident


def test_versioned_identifier_without_version():
    ident = VersionedTextDocumentIdentifier.from_json({"uri": "file:///x"})
    assert ident.version is None
    assert ident.to_json()["version"] is None


def test_versioned_identifier_round_trip():
    ident = VersionedTextDocumentIdentifier(URIForFile("/x"), 5)
    assert VersionedTextDocumentIdentifier.from_json(ident.to_json()) == ident


def test_text_document_item():
    item = TextDocumentItem.from_json(
        {"uri": "file:///a.nix", "languageId": "nix", "version": 2, "text": "{}"}
    )
    assert item.uri.file == "/a.nix"
    assert (item.language_id, item.version, item.text) == ("nix", 2, "{}")


def test_text_document_item_missing_text():
    with pytest.raises(ProtocolDecodeError):
        TextDocumentItem.from_json({"uri": "file:///a", "languageId": "nix"})


def test_text_edit_omits_empty_annotation():
    edit = TextEdit(_range(0, 0, 0, 1), "x")
    assert "annotationId" not in edit.to_json()
    assert TextEdit.from_json(edit.to_json()) == edit


def test_text_edit_with_annotation_round_trip():
    edit = TextEdit(_range(0, 0, 0, 1), "x", "ann")
    assert edit.to_json()["annotationId"] == "ann"
    assert TextEdit.from_json(edit.to_json()) == edit


def test_text_edit_str_escapes_quote():
    edit = TextEdit(_range(0, 0, 0, 1), 'a"b')
    assert str(edit).endswith('"a\\22b"')


def test_change_annotation_optional_fields():
    annotation = ChangeAnnotation("label")
    assert annotation.to_json() == {"label": "label"}
    full = ChangeAnnotation("label", True, "why")
    assert ChangeAnnotation.from_json(full.to_json()) == full


def test_text_document_edit_round_trip():
    doc_edit = TextDocumentEdit(
        VersionedTextDocumentIdentifier(URIForFile("/f"), 1),
        [TextEdit(_range(0, 0, 0, 0), "a")],
    )
    assert TextDocumentEdit.from_json(doc_edit.to_json()) == doc_edit


def test_workspace_edit_round_trip():
    uri = URIForFile("/f").uri
    edit = WorkspaceEdit(
        changes={uri: [TextEdit(_range(0, 0, 0, 1), "z")]},
        change_annotations={"a": ChangeAnnotation("label")},
    )
    assert WorkspaceEdit.from_json(edit.to_json()) == edit


def test_empty_workspace_edit():
    assert WorkspaceEdit().to_json() == {}
    assert WorkspaceEdit.from_json({}) == WorkspaceEdit()


def test_command_arguments():
    assert "arguments" not in Command("t", "c").to_json()
    assert Command("t", "c", {"k": 1}).to_json()["arguments"] == [{"k": 1}]


def test_location_and_reference_location():
    loc = Location(URIForFile("/f"), _range(0, 0, 0, 1))
    assert loc.to_json() == {"uri": loc.uri.uri, "range": loc.range.to_json()}
    ref = ReferenceLocation(URIForFile("/f"), _range(0, 0, 0, 1))
    assert "containerName" not in ref.to_json()
    ref_named = ReferenceLocation(URIForFile("/f"), _range(0, 0, 0, 1), "ns")
    assert ref_named.to_json()["containerName"] == "ns"


def test_content_change_full_text():
    change = TextDocumentContentChangeEvent.from_json({"text": "abc"})
    assert change.range is None
    assert change.range_length is None
    assert change.text == "abc"


def test_content_change_with_range():
    rng = _range(0, 1, 0, 2)
    change = TextDocumentContentChangeEvent.from_json(
        {"range": rng.to_json(), "rangeLength": 1, "text": "q"}
    )
    assert change.range == rng
    assert change.range_length == 1


def test_content_change_missing_text():
    with pytest.raises(ProtocolDecodeError):
        TextDocumentContentChangeEvent.from_json({"rangeLength": 1})