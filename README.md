# lspcore

Building blocks for writing a Language Server Protocol server in Python,
using only the standard library.

## Modules

- `lspcore.connection`: JSON-RPC over byte streams. `InboundPort` reads
  messages framed with `Content-Length` headers (`JSONStreamStyle.STANDARD`)
  or, for scripted testing, the lines inside fenced `json` blocks, skipping
  lines that start with `#` (`JSONStreamStyle.DELIMITED`). `dispatch` routes
  each message to a `MessageHandler` (`on_notify`, `on_call`, `on_reply`).
  `OutboundPort` writes notifications, calls and replies, compact or
  pretty-printed; an exception passed to `reply` is sent as an error object
  (`encode_error`). `decode_error` turns a received error object into an
  `LSPError` (or a `RuntimeError` when it has no integer code).
- `lspcore.server`: `LSPServer`, a `MessageHandler` that sends calls and
  notifications to handlers registered in its `HandlerRegistry`
  (`add_method(name, handler)` with `handler(params, reply)`, and
  `add_notification(name, handler)` with `handler(params)`). An `exit`
  notification stops `run()`. A call to an unregistered method also stops the
  loop. `bind_reply(callback)` returns an id for an outgoing call; when more
  than `max_pending_calls` (default 100) are waiting, the oldest callback is
  given a `RuntimeError` and dropped.
- `lspcore.basic`: `Position`, `Range`, `URIForFile`, `TextEdit`,
  `WorkspaceEdit` and other basic types, `ErrorCode`, `LSPError`, and
  `ProtocolDecodeError`, which `from_json` methods raise with the path to the
  offending value.
- `lspcore.requests`: client-to-server parameters (`InitializeParams`,
  `ClientCapabilities`, `DidChangeTextDocumentParams`, `CodeActionParams`,
  ...) with `from_json`.
- `lspcore.results`: server-to-client structures (`Diagnostic`,
  `PublishDiagnosticsParams`, `CodeAction`, `CompletionItem`, `Hover`,
  semantic tokens, hierarchy items, progress messages, ...) with `to_json`.
- `lspcore.kinds`: the protocol's enumerations and their JSON decoders,
  plus `adjust_symbol_kind` and `adjust_completion_item_kind`, which fall back
  to a close kind the client supports.
- `lspcore.uri`: `URI.parse`, `str(uri)`, `URI.create_file`, `URI.resolve`
  and `URI.resolve_path`, percent-encoding helpers, and `register_scheme` /
  `find_scheme` for schemes other than `file`. Errors raise `URIError`.
- `lspcore.sourcecode`: `lsp_length` (UTF-16 code units),
  `position_to_offset` and `offset_to_position` (offsets are Python string
  indices), and `apply_change`, which returns the new text after one
  `TextDocumentContentChangeEvent` and raises `ValueError` when the change
  does not fit the text. A change that points at the start of the line after
  a document with no final newline gets that newline added.
- `lspcore.draftstore`: `DraftStore`, a thread-safe map of open file paths to
  `Draft(contents, version)`. Versions are opaque strings; adding a draft
  without a version bumps the numeric suffix of the old one (`""` becomes
  `"0"`, `"9"` becomes `"10"`).
- `lspcore.logger`: `elog`, `log`, `vlog` and `dlog`, with `{0}`, `{1}`, ...
  placeholders, written to the `Logger` installed by a `LoggingSession`
  (only one at a time) or to standard error otherwise. `StreamLogger` prefixes
  each line with a level letter, the time and the process id, and drops
  messages below its minimum `Level`.

## Example

```python
import sys

from lspcore.connection import InboundPort, JSONStreamStyle, OutboundPort
from lspcore.logger import Level, LoggingSession, StreamLogger
from lspcore.server import LSPServer


class EchoServer(LSPServer):
    def __init__(self, inbound, outbound):
        super().__init__(inbound, outbound)
        self.registry.add_method("initialize", self.on_initialize)

    def on_initialize(self, params, reply):
        reply({"capabilities": {}})


with LoggingSession(StreamLogger(sys.stderr, Level.INFO)):
    server = EchoServer(
        InboundPort(sys.stdin.buffer, JSONStreamStyle.STANDARD),
        OutboundPort(sys.stdout.buffer),
    )
    server.run()
```

`run()` returns after an `exit` notification, at end of input, when a message
cannot be parsed or is not JSON-RPC 2.0, or when a handler method returns
False.

## What it does not do

`lspcore` is a library only. It has no command to start, and it does not
analyse any programming language: it provides no diagnostics, completion or
code actions of its own. A server built on it supplies those by registering
handlers.

## Running the tests

```
pip install .[test]
pytest
```