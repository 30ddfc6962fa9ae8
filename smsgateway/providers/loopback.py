"""
loopback.py — In-process provider for tests and demos.

Outgoing messages are delivered to virtual subscribers registered with
subscribe(); subscribers may reply, which comes back as an incoming message.
All traffic is recorded and can be drained with get_traffic().

HTTP:
    POST /<alias>/receive   {"from": "+123", "to": "+456", "body": "hi"}
        200 {"ok": 1}
        400 {"ok": 0, "error": "Incomplete"}     from/body missing
        500 {"ok": 0, "error": "..."}            a handler failed
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from smsgateway.data import IncomingMessage, MessageStatus, OutgoingMessage, StatusCode
from smsgateway.providers.base import MessageIdSequence, Provider

# callback(src, body, reply); reply(text) simulates an answer from the subscriber
Reply = Callable[[str], Awaitable[None]]
Subscriber = Callable[[Optional[str], str, Reply], Any]


class InboundPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    src: str = Field(alias="from", min_length=1)
    to: Optional[str] = None
    body: str = Field(min_length=1)


class LoopbackProvider(Provider):
    def __init__(self, gateway, alias, config, mount):
        super().__init__(gateway, alias, config, mount)

        # Shared by sent and received messages
        self._msgid = MessageIdSequence()

        self.subscribers: Dict[str, Subscriber] = {}
        self.traffic: List[Union[IncomingMessage, OutgoingMessage]] = []

        mount.post("/receive")(self._http_receive)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_traffic(self) -> List[Union[IncomingMessage, OutgoingMessage]]:
        """Return recorded traffic and reset it."""
        traffic, self.traffic = self.traffic, []
        return traffic

    def subscribe(self, number: str, callback: Subscriber) -> "LoopbackProvider":
        """Register a virtual subscriber receiving messages sent to `number`."""
        self.subscribers[number] = callback
        return self

    async def receive(self, src: str, body: str) -> None:
        """Simulate an incoming message from `src`."""
        message = IncomingMessage(
            provider=self.alias,
            src=src,
            to="",
            body=body,
            msgid=self._msgid.next(),
            info={},
        )
        self.traffic.append(message)
        await self.gateway.report_incoming_message(message)

    # ------------------------------------------------------------------
    # Provider
    # ------------------------------------------------------------------

    async def send(self, message: OutgoingMessage) -> OutgoingMessage:
        msgid = self._msgid.next()
        message.msgid = msgid
        message.info = {"msgid": msgid}
        self.traffic.append(message)

        subscriber = self.subscribers.get(message.to)
        if subscriber is not None:
            number = message.to

            async def reply(text: str) -> None:
                try:
                    await self.receive(number, text)
                except Exception as e:
                    # Already broadcast as an error event by the gateway
                    self.logger.warning(f"Reply from {number} was not handled: {e!r}")

            result = subscriber(message.src, message.body, reply)
            if inspect.isawaitable(result):
                await result

        if message.options.status_report:
            status = MessageStatus(provider=self.alias, msgid=msgid).set_status(StatusCode.OK)
            try:
                await self.gateway.report_message_status(status)
            except Exception as e:
                # The message went out; a failing status handler doesn't undo that
                self.logger.warning(f"Status report for {msgid} was not handled: {e!r}")

        return message

    # ------------------------------------------------------------------
    # HTTP receiver
    # ------------------------------------------------------------------

    async def _http_receive(self, request: Request) -> JSONResponse:
        try:
            payload = InboundPayload.model_validate(await request.json())
        except (ValidationError, ValueError):
            return JSONResponse({"ok": 0, "error": "Incomplete"}, status_code=400)

        message = IncomingMessage(
            provider=self.alias,
            src=payload.src,
            to=payload.to,
            body=payload.body,
            msgid=self._msgid.next(),
            info={},
        )
        try:
            await self.gateway.report_incoming_message(message)
        except Exception as e:
            return JSONResponse({"ok": 0, "error": str(e)}, status_code=500)
        return JSONResponse({"ok": 1})
