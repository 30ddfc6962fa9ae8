"""
events.py — Per-gateway broadcast of dispatch events.

Emission is synchronous and happens on the same pipeline step that triggers
it. Listeners run in subscription order; a failing listener is logged and
skipped, it never stops later listeners nor the pipeline.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Set, Union

logger = logging.getLogger("smsgateway.events")


class EventKind(str, Enum):
    MESSAGE_IN = "msg-in"        # IncomingMessage received
    MESSAGE_OUT = "msg-out"      # OutgoingMessage about to be handed to a provider
    MESSAGE_SENT = "msg-sent"    # OutgoingMessage accepted by its provider
    STATUS = "status"            # MessageStatus received
    ERROR = "error"              # Provider or handler failure


Listener = Callable[[Any], Any]


class EventBus:
    def __init__(self):
        self._listeners: Dict[EventKind, List[Listener]] = {kind: [] for kind in EventKind}
        # Scheduled listener tasks, held until done
        self._pending: Set[asyncio.Future] = set()

    def subscribe(self, kind: Union[EventKind, str], listener: Listener) -> Listener:
        """Add a listener. Returns it so this works as a decorator helper."""
        self._listeners[EventKind(kind)].append(listener)
        return listener

    def unsubscribe(self, kind: Union[EventKind, str], listener: Listener) -> None:
        try:
            self._listeners[EventKind(kind)].remove(listener)
        except ValueError:
            pass

    def listeners(self, kind: Union[EventKind, str]) -> List[Listener]:
        return list(self._listeners[EventKind(kind)])

    def emit(self, kind: Union[EventKind, str], payload: Any) -> None:
        """Deliver `payload` to every listener of `kind`."""
        kind = EventKind(kind)
        for listener in list(self._listeners[kind]):
            try:
                result = listener(payload)
            except Exception:
                logger.exception(f"Listener {_name(listener)} failed on '{kind.value}'")
                continue
            if inspect.isawaitable(result):
                self._schedule(kind, listener, result)

    def _schedule(self, kind: EventKind, listener: Listener, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.error(f"Listener {_name(listener)} returned an awaitable outside an event loop")
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)

        def _done(t: asyncio.Future) -> None:
            self._pending.discard(t)
            if not t.cancelled() and t.exception() is not None:
                logger.error(
                    f"Listener {_name(listener)} failed on '{kind.value}'",
                    exc_info=t.exception(),
                )

        task.add_done_callback(_done)


def _name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)
