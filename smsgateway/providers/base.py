# base.py
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from smsgateway.data import OutgoingMessage

if TYPE_CHECKING:
    from smsgateway.dispatch.gateway import Gateway
    from smsgateway.transport import ProviderMount


class MessageIdSequence:
    """Monotonic message id counter, starting at 1. Safe across threads."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        return self._value


class Provider(ABC):
    """
    Abstract base class for all providers.

    Constructed by the gateway as Provider(gateway, alias, config, mount).
    Inbound traffic is reported back through the gateway:
    report_incoming_message(), report_message_status(), report_error().
    """

    def __init__(
        self,
        gateway: Gateway,
        alias: str,
        config: Optional[Dict[str, Any]],
        mount: ProviderMount,
    ):
        self.gateway = gateway
        self.alias = alias
        self.config: Dict[str, Any] = dict(config or {})
        self.mount = mount
        self.logger = logging.getLogger(f"smsgateway.providers.{alias}")

    @abstractmethod
    async def send(self, message: OutgoingMessage) -> OutgoingMessage:
        """
        Send a message.

        Must populate message.msgid and message.info on success, and raise a
        SendMessageError on failure.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(alias={self.alias!r})"


# Anything that builds a provider from (gateway, alias, config, mount).
# Provider subclasses qualify as-is.
ProviderFactory = Callable[["Gateway", str, Optional[Dict[str, Any]], "ProviderMount"], Provider]
