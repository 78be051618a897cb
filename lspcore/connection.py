"""JSON-RPC message framing and dispatch over byte streams."""

from __future__ import annotations

import abc
import enum
import json
import sys
import threading
from typing import Any, BinaryIO

from .basic import ErrorCode, LSPError
from .logger import elog, vlog

__all__ = [
    "JSONStreamStyle",
    "MessageHandler",
    "OutboundPort",
    "InboundPort",
    "encode_error",
    "decode_error",
]

_UNKNOWN_ERROR_CODE = -32001
_CONTENT_LENGTH = "Content-Length: "


class JSONStreamStyle(enum.Enum):
    """How messages are framed on the input stream."""

    STANDARD = "standard"
    DELIMITED = "delimited"


def encode_error(error: BaseException) -> dict:
    """Encode an exception as a JSON-RPC error object."""
    if isinstance(error, LSPError):
        message = getattr(error, "message", str(error))
        code = getattr(error, "code", _UNKNOWN_ERROR_CODE)
    else:
        message = str(error)
        code = _UNKNOWN_ERROR_CODE
    return {"message": message, "code": int(code)}


def decode_error(obj: dict) -> Exception:
    """Turn a JSON-RPC error object into an exception."""
    message = obj.get("message")
    if not isinstance(message, str):
        message = "Unspecified error"
    code = obj.get("code")
    if isinstance(code, int) and not isinstance(code, bool):
        try:
            code = ErrorCode(code)
        except ValueError:
            pass
        return LSPError(message, code)
    return RuntimeError(message)


class MessageHandler(abc.ABC):
    """Receives decoded messages; each method returns False to stop the loop."""

    @abc.abstractmethod
    def on_notify(self, method: str, params: Any) -> bool:
        """Handle a notification."""

    @abc.abstractmethod
    def on_call(self, method: str, params: Any, id: Any) -> bool:
        """Handle a request that expects a reply."""

    @abc.abstractmethod
    def on_reply(self, id: Any, result: Any) -> bool:
        """Handle a reply; ``result`` is an exception for error replies."""


class OutboundPort:
    """Writes framed JSON-RPC messages to a binary stream."""

    def __init__(self, out: BinaryIO | None = None, pretty: bool = False) -> None:
        self.out = out if out is not None else sys.stdout.buffer
        self.pretty = pretty
        self._lock = threading.Lock()

    def notify(self, method: str, params: Any) -> None:
        self.send_message({"jsonrpc": "2.0", "method": method, "params": params})

    def call(self, method: str, params: Any, id: Any) -> None:
        self.send_message(
            {"jsonrpc": "2.0", "id": id, "method": method, "params": params}
        )

    def reply(self, id: Any, result: Any) -> None:
        """Send a reply; an exception as ``result`` is sent as an error."""
        if isinstance(result, BaseException):
            self.send_message(
                {"jsonrpc": "2.0", "id": id, "error": encode_error(result)}
            )
        else:
            self.send_message({"jsonrpc": "2.0", "id": id, "result": result})

    def send_message(self, message: Any) -> None:
        vlog(">>> {}", json.dumps(message, ensure_ascii=False))
        if self.pretty:
            text = json.dumps(message, indent=2, ensure_ascii=False)
        else:
            text = json.dumps(message, separators=(",", ":"), ensure_ascii=False)
        body = text.encode("utf-8")
        with self._lock:
            self.out.write(f"Content-Length: {len(body)}\r\n\r\n".encode("ascii"))
            self.out.write(body)
            self.out.flush()


class InboundPort:
    """Reads JSON-RPC messages from a binary stream and dispatches them."""

    def __init__(
        self,
        in_stream: BinaryIO | None = None,
        style: JSONStreamStyle = JSONStreamStyle.STANDARD,
    ) -> None:
        self.in_stream = in_stream if in_stream is not None else sys.stdin.buffer
        self.style = style

    def _read_line(self) -> str | None:
        raw = self.in_stream.readline()
        if not raw.endswith(b"\n"):
            return None
        return raw[:-1].decode("utf-8", errors="replace")

    def dispatch(self, message: Any, handler: MessageHandler) -> bool:
        """Route one decoded message to the handler; False stops the loop."""
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
            elog("Not a JSON-RPC 2.0 message: {}", json.dumps(message, indent=2))
            return False
        has_id = "id" in message
        id_ = message.get("id")
        method = message.get("method")
        if not isinstance(method, str):
            if not has_id:
                elog("No method and no response ID: {}", json.dumps(message, indent=2))
                return False
            error = message.get("error")
            if isinstance(error, dict):
                return handler.on_reply(id_, decode_error(error))
            return handler.on_reply(id_, message.get("result"))
        params = message.get("params")
        if has_id:
            return handler.on_call(method, params, id_)
        return handler.on_notify(method, params)

    def _read_standard_message(self) -> str | None:
        content_length = 0
        while True:
            line = self._read_line()
            if line is None:
                return None
            if line.startswith(_CONTENT_LENGTH):
                try:
                    content_length = int(line[len(_CONTENT_LENGTH):].strip(), 0)
                except ValueError:
                    pass
                continue
            if not line.strip():
                break
        chunks = []
        read = 0
        while read < content_length:
            chunk = self.in_stream.read(content_length - read)
            if not chunk:
                elog(
                    "Input was aborted. Read only {} bytes of expected {}.",
                    read,
                    content_length,
                )
                return None
            chunks.append(chunk)
            read += len(chunk)
        return b"".join(chunks).decode("utf-8", errors="replace")

    def _read_delimited_message(self) -> str:
        parts: list[str] = []
        in_block = False
        while (line := self._read_line()) is not None:
            stripped = line.strip()
            if in_block:
                if stripped.startswith("#"):
                    continue
                if stripped.startswith("```"):
                    break
                parts.append(line)
            elif stripped.startswith("```json"):
                in_block = True
        return "".join(parts)

    def read_message(self) -> str | None:
        """Return the next message text, or None when input has ended."""
        if self.style is JSONStreamStyle.DELIMITED:
            return self._read_delimited_message()
        return self._read_standard_message()

    def loop(self, handler: MessageHandler) -> None:
        """Read and dispatch messages until input ends or the handler stops."""
        while (text := self.read_message()) is not None:
            vlog("<<< {}", text)
            try:
                message = json.loads(text)
            except ValueError as err:
                elog("The received json cannot be parsed, reason: {}", err)
                return
            if not self.dispatch(message, handler):
                return