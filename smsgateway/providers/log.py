# log.py
from __future__ import annotations

from typing import Callable

from smsgateway.data import OutgoingMessage
from smsgateway.providers.base import MessageIdSequence, Provider


class LogProvider(Provider):
    """
    Logs outgoing messages instead of sending them.

    Config:
        log   callable(OutgoingMessage); default writes one INFO line
              "SMS to <to>: <body>" to this provider's logger.
    """

    def __init__(self, gateway, alias, config, mount):
        super().__init__(gateway, alias, config, mount)
        self.log: Callable[[OutgoingMessage], None] = self.config.get("log") or self._default_log
        self._msgid = MessageIdSequence()

    def _default_log(self, message: OutgoingMessage) -> None:
        self.logger.info(f"SMS to {message.to}: {message.body}")

    async def send(self, message: OutgoingMessage) -> OutgoingMessage:
        message.msgid = self._msgid.next()
        message.info = {}
        self.log(message)
        return message
