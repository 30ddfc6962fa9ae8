# null.py
from __future__ import annotations

from smsgateway.data import OutgoingMessage
from smsgateway.providers.base import MessageIdSequence, Provider


class NullProvider(Provider):
    """Accepts every message and drops it."""

    def __init__(self, gateway, alias, config, mount):
        super().__init__(gateway, alias, config, mount)
        self._msgid = MessageIdSequence()

    async def send(self, message: OutgoingMessage) -> OutgoingMessage:
        message.msgid = self._msgid.next()
        message.info = {}
        return message
