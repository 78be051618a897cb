import io
import json

import pytest

from lspcore.connection import InboundPort, OutboundPort
from lspcore.server import HandlerRegistry, LSPServer


def frame(message):
    body = json.dumps(message).encode("utf-8")
    return b"Content-Length: " + str(len(body)).encode() + b"\r\n\r\n" + body


def parse_frames(data):
    messages = []
    while data:
        header, _, rest = data.partition(b"\r\n\r\n")
        length = int(header.decode().split(": ")[1])
        messages.append(json.loads(rest[:length].decode("utf-8")))
        data = rest[length:]
    return messages


def make_server(data=b"", max_pending_calls=100):
    out = io.BytesIO()
    server = LSPServer(
        InboundPort(io.BytesIO(data)), OutboundPort(out), max_pending_calls
    )
    return server, out


def test_registry_stores_handlers():
    registry = HandlerRegistry()

    def method(params, reply):
        reply(params)

    def notification(params):
        return None

    registry.add_method("m", method)
    registry.add_notification("n", notification)
    assert registry.method_handlers == {"m": method}
    assert registry.notification_handlers == {"n": notification}


def test_exit_notification_stops():
    server, _ = make_server()
    assert server.on_notify("exit", None) is False


def test_notification_handler_called():
    server, _ = make_server()
    seen = []
    server.registry.add_notification("initialized", seen.append)
    assert server.on_notify("initialized", {"x": 1}) is True
    assert server.on_notify("unknown", None) is True
    assert seen == [{"x": 1}]


def test_call_replies_with_result():
    server, out = make_server()
    server.registry.add_method("echo", lambda params, reply: reply(params))
    assert server.on_call("echo", [1, 2], 5) is True
    assert parse_frames(out.getvalue()) == [
        {"jsonrpc": "2.0", "id": 5, "result": [1, 2]}
    ]


def test_call_replies_with_error():
    server, out = make_server()
    server.registry.add_method(
        "fail", lambda params, reply: reply(RuntimeError("nope"))
    )
    server.on_call("fail", None, 1)
    (message,) = parse_frames(out.getvalue())
    assert message["error"]["message"] == "nope"


def test_unknown_call_returns_false():
    server, out = make_server()
    assert server.on_call("missing", None, 1) is False
    assert out.getvalue() == b""


def test_bind_reply_and_on_reply():
    server, _ = make_server()
    results = []
    first = server.bind_reply(results.append)
    second = server.bind_reply(results.append)
    assert second == first + 1
    assert server.on_reply(second, "b") is True
    assert server.on_reply(first, "a") is True
    assert results == ["b", "a"]
    assert server.on_reply(first, "again") is True
    assert results == ["b", "a"]


def test_on_reply_rejects_bad_ids():
    server, _ = make_server()
    with pytest.raises(TypeError):
        server.on_reply("abc", None)
    with pytest.raises(ValueError):
        server.on_reply(2**31, None)


def test_pending_limit_drops_oldest():
    server, _ = make_server(max_pending_calls=2)
    first_results = []
    others = []
    first = server.bind_reply(first_results.append)
    server.bind_reply(others.append)
    server.bind_reply(others.append)
    assert len(first_results) == 1
    assert isinstance(first_results[0], RuntimeError)
    assert f"({first})" in str(first_results[0])
    assert others == []
    server.on_reply(first, "late")
    assert len(first_results) == 1


def test_run_serves_until_exit():
    data = (
        frame({"jsonrpc": "2.0", "id": 1, "method": "ping", "params": "x"})
        + frame({"jsonrpc": "2.0", "method": "exit"})
        + frame({"jsonrpc": "2.0", "id": 2, "method": "ping", "params": "y"})
    )
    server, out = make_server(data)
    server.registry.add_method("ping", lambda params, reply: reply(params))
    server.run()
    assert parse_frames(out.getvalue()) == [
        {"jsonrpc": "2.0", "id": 1, "result": "x"}
    ]