"""A language server core: routes requests to registered handlers."""

from __future__ import annotations

import threading
from typing import Any, Callable

from .connection import InboundPort, MessageHandler, OutboundPort
from .logger import elog, log

__all__ = ["HandlerRegistry", "LSPServer"]

_INT_MAX = 2**31 - 1

Reply = Callable[[Any], None]


class HandlerRegistry:
    """Maps method names to request and notification handlers."""

    def __init__(self) -> None:
        self.method_handlers: dict[str, Callable[[Any, Reply], None]] = {}
        self.notification_handlers: dict[str, Callable[[Any], None]] = {}

    def add_method(self, name: str, handler: Callable[[Any, Reply], None]) -> None:
        """Register ``handler(params, reply)`` for a request method."""
        self.method_handlers[name] = handler

    def add_notification(self, name: str, handler: Callable[[Any], None]) -> None:
        """Register ``handler(params)`` for a notification."""
        self.notification_handlers[name] = handler


class LSPServer(MessageHandler):
    """Dispatches incoming messages and tracks calls made to the client."""

    def __init__(
        self,
        in_port: InboundPort,
        out_port: OutboundPort,
        max_pending_calls: int = 100,
    ) -> None:
        self.in_port = in_port
        self.out_port = out_port
        self.registry = HandlerRegistry()
        self.max_pending_calls = max_pending_calls
        self._pending: dict[int, Reply] = {}
        self._pending_lock = threading.Lock()
        self._top_id = 0

    def run(self) -> None:
        """Serve until input ends or an exit notification arrives."""
        self.in_port.loop(self)

    def on_notify(self, method: str, params: Any) -> bool:
        log("<-- {}", method)
        if method == "exit":
            return False
        handler = self.registry.notification_handlers.get(method)
        if handler is None:
            log("unhandled notification {}", method)
        else:
            handler(params)
        return True

    def on_call(self, method: str, params: Any, id: Any) -> bool:
        log("<-- {}({})", method, id)
        handler = self.registry.method_handlers.get(method)
        if handler is None:
            return False

        def reply(response: Any) -> None:
            if isinstance(response, BaseException):
                log("--> reply:{}({}), error: {}", method, id, response)
            else:
                log("--> reply:{}({})", method, id)
            self.out_port.reply(id, response)

        handler(params, reply)
        return True

    def on_reply(self, id: Any, result: Any) -> bool:
        """Deliver a reply to the callback bound to its id.

        Raises TypeError for a non-integer id and ValueError for one that is
        too large.
        """
        log("<-- reply({})", id)
        if isinstance(id, float) and id.is_integer():
            id = int(id)
        if not isinstance(id, int) or isinstance(id, bool):
            raise TypeError("jsonrpc: not an integer message ID")
        if id > _INT_MAX:
            raise ValueError("jsonrpc: id is too large (> INT_MAX)")
        with self._pending_lock:
            callback = self._pending.pop(id, None)
        if callback is None:
            elog("received a reply with ID {}, but there was no such call", id)
            return True
        callback(result)
        return True

    def bind_reply(self, callback: Reply) -> int:
        """Remember a callback for an outgoing call and return its id.

        When too many calls are pending, the oldest is dropped and its
        callback receives an exception.
        """
        with self._pending_lock:
            new_id = self._top_id
            self._top_id += 1
            self._pending[new_id] = callback
            if len(self._pending) > self.max_pending_calls:
                oldest_id = next(iter(self._pending))
                oldest = self._pending.pop(oldest_id)
                oldest(
                    RuntimeError(
                        f"failed to receive a client reply for request ({oldest_id})"
                    )
                )
                elog(
                    "more than {} outstanding LSP calls, forgetting about {}",
                    self.max_pending_calls,
                    oldest_id,
                )
        return new_id