import pytest

from lspcore.basic import Position, ProtocolDecodeError, Range
from lspcore.kinds import (
    CompletionTriggerKind,
    MarkupKind,
    OffsetEncoding,
    symbol_kinds_from_json,
    trace_level_from_json,
)
from lspcore.requests import (
    ASTParams,
    ClientCapabilities,
    CodeActionContext,
    CodeActionParams,
    CompletionParams,
    ConfigurationSettings,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    ExecuteCommandParams,
    InitializationOptions,
    InitializeParams,
    ReferenceParams,
    RenameParams,
    SelectionRangeParams,
    TextDocumentPositionParams,
    WorkspaceSymbolParams,
)

URI = "file:///tmp/a.nix"
DOC = {"uri": URI}
POS = {"line": 1, "character": 2}
RANGE = {"start": {"line": 0, "character": 0}, "end": {"line": 3, "character": 4}}


def test_did_open_decodes_item():
    params = DidOpenTextDocumentParams.from_json(
        {"textDocument": {"uri": URI, "languageId": "nix", "version": 7, "text": "{}"}}
    )
    item = params.text_document
    assert item.uri.file == "/tmp/a.nix"
    assert item.language_id == "nix"
    assert item.version == 7
    assert item.text == "{}"


def test_did_change_defaults_and_changes():
    params = DidChangeTextDocumentParams.from_json(
        {
            "textDocument": {"uri": URI, "version": 3},
            "contentChanges": [{"text": "x", "range": RANGE, "rangeLength": 5}],
            "forceRebuild": None,
        }
    )
    assert params.text_document.version == 3
    assert params.force_rebuild is False
    assert params.want_diagnostics is None
    assert len(params.content_changes) == 1
    assert params.content_changes[0].range == Range(Position(0, 0), Position(3, 4))
    assert params.content_changes[0].range_length == 5


def test_did_change_requires_content_changes():
    with pytest.raises(ProtocolDecodeError):
        DidChangeTextDocumentParams.from_json({"textDocument": {"uri": URI}})


def test_execute_command_arguments():
    assert ExecuteCommandParams.from_json({"command": "c"}).argument is None
    one = ExecuteCommandParams.from_json({"command": "c", "arguments": [{"a": 1}]})
    assert one.command == "c"
    assert one.argument == {"a": 1}
    assert ExecuteCommandParams.from_json({"command": "c", "arguments": []}).argument is None


@pytest.mark.parametrize("arguments", [[1, 2], "x", {"a": 1}])
def test_execute_command_bad_arguments(arguments):
    with pytest.raises(ProtocolDecodeError) as info:
        ExecuteCommandParams.from_json({"command": "c", "arguments": arguments})
    assert info.value.path == ("arguments",)


def test_client_capabilities_flags():
    caps = ClientCapabilities.from_json(
        {
            "textDocument": {
                "completion": {"completionItem": {"snippetSupport": True}},
                "hover": {"contentFormat": ["bogus", "markdown"]},
                "signatureHelp": {},
                "semanticTokens": {},
                "codeAction": {"codeActionLiteralSupport": {}},
            },
            "window": {"workDoneProgress": True},
            "general": {"staleRequestSupport": {"cancel": True}},
            "offsetEncoding": ["utf-16"],
        }
    )
    assert caps.completion_snippets is True
    assert caps.hover_content_format is MarkupKind.MARKDOWN
    assert caps.has_signature_help is True
    assert caps.semantic_tokens is True
    assert caps.code_action_structure is True
    assert caps.work_done_progress is True
    assert caps.cancels_stale_requests is True
    assert caps.offset_encoding == [OffsetEncoding.UTF16]
    assert caps.completion_documentation_format is MarkupKind.PLAIN_TEXT


def test_client_capabilities_defaults_from_empty():
    caps = ClientCapabilities.from_json({})
    assert caps == ClientCapabilities()
    assert caps.offset_encoding is None


def test_client_capabilities_ignores_non_bool_flags():
    caps = ClientCapabilities.from_json({"window": {"workDoneProgress": "yes"}})
    assert caps.work_done_progress is False


def test_client_capabilities_symbol_kinds():
    caps = ClientCapabilities.from_json(
        {"workspace": {"symbol": {"symbolKind": {"valueSet": [1, 2]}}}}
    )
    assert caps.workspace_symbol_kinds == symbol_kinds_from_json([1, 2])


def test_client_capabilities_errors():
    with pytest.raises(ProtocolDecodeError):
        ClientCapabilities.from_json([])
    with pytest.raises(ProtocolDecodeError) as info:
        ClientCapabilities.from_json({"offsetEncoding": "utf-8"})
    assert info.value.path[0] == "offsetEncoding"


def test_initialize_tolerates_malformed_fields():
    params = InitializeParams.from_json(
        {
            "processId": "not a number",
            "rootPath": "/tmp",
            "capabilities": {"window": {"workDoneProgress": True}},
            "trace": "verbose",
        }
    )
    assert params.process_id is None
    assert params.root_path == "/tmp"
    assert params.capabilities.work_done_progress is True
    assert params.raw_capabilities == {"window": {"workDoneProgress": True}}
    assert params.trace == trace_level_from_json("verbose")


def test_initialize_requires_object():
    with pytest.raises(ProtocolDecodeError):
        InitializeParams.from_json(3)


def test_initialization_options():
    opts = InitializationOptions.from_json(
        {
            "compilationDatabasePath": "/build",
            "fallbackFlags": ["-a"],
            "clangdFileStatus": True,
            "compilationDatabaseChanges": {
                "/x.c": {"workingDirectory": "/w", "compilationCommand": ["cc"]}
            },
        }
    )
    assert opts.compilation_database_path == "/build"
    assert opts.fallback_flags == ["-a"]
    assert opts.file_status is True
    change = opts.config_settings.compilation_database_changes["/x.c"]
    assert change.working_directory == "/w"
    assert change.compilation_command == ["cc"]
    assert InitializationOptions.from_json("anything") == InitializationOptions()


def test_did_change_configuration_needs_settings():
    params = DidChangeConfigurationParams.from_json({"settings": 5})
    assert params.settings == ConfigurationSettings()
    with pytest.raises(ProtocolDecodeError):
        DidChangeConfigurationParams.from_json({})


def test_code_action_params():
    params = CodeActionParams.from_json(
        {
            "textDocument": DOC,
            "range": RANGE,
            "context": {
                "diagnostics": [{"range": RANGE, "message": "m", "severity": 2}],
                "only": "bad",
            },
        }
    )
    assert params.range.end == Position(3, 4)
    assert params.context.only is None
    assert params.context.diagnostics[0].message == "m"
    assert params.context.diagnostics[0].severity == 2


def test_code_action_context_requires_diagnostics():
    with pytest.raises(ProtocolDecodeError):
        CodeActionContext.from_json({"only": ["quickfix"]})


def test_completion_params_context():
    params = CompletionParams.from_json(
        {
            "textDocument": DOC,
            "position": POS,
            "context": {"triggerKind": 2, "triggerCharacter": "."},
            "limit": 10,
        }
    )
    assert params.position == Position(1, 2)
    assert params.context.trigger_kind == CompletionTriggerKind(2)
    assert params.context.trigger_character == "."
    assert params.limit == 10


def test_completion_params_without_context():
    params = CompletionParams.from_json({"textDocument": DOC, "position": POS})
    assert params.limit is None
    assert params.context.trigger_character == ""
    with pytest.raises(ProtocolDecodeError):
        CompletionParams.from_json(
            {"textDocument": DOC, "position": POS, "context": None}
        )


def test_position_params_require_position():
    with pytest.raises(ProtocolDecodeError) as info:
        TextDocumentPositionParams.from_json({"textDocument": DOC})
    assert info.value.path == ("position",)


def test_reference_params():
    params = ReferenceParams.from_json(
        {"textDocument": DOC, "position": POS, "context": {"includeDeclaration": True}}
    )
    assert params.context.include_declaration is True
    plain = ReferenceParams.from_json({"textDocument": DOC, "position": POS})
    assert plain.context.include_declaration is False


def test_rename_and_symbols():
    rename = RenameParams.from_json({"textDocument": DOC, "position": POS, "newName": "y"})
    assert rename.new_name == "y"
    query = WorkspaceSymbolParams.from_json({"query": "q", "limit": None})
    assert query.query == "q"
    assert query.limit is None


def test_selection_range_and_ast():
    sel = SelectionRangeParams.from_json({"textDocument": DOC, "positions": [POS, POS]})
    assert sel.positions == [Position(1, 2), Position(1, 2)]
    ast = ASTParams.from_json({"textDocument": DOC})
    assert ast.range is None
    assert ast.text_document.uri.file == "/tmp/a.nix"