"""
gateway.py — The dispatch core.

Send pipeline (per message, strictly ordered):
    resolve alias → msg-out → lookup provider → provider.send()
        → msg-sent (success) | error + raise (failure)

Receive pipelines (per inbound message / status report):
    msg-in | status → all functional handlers → error + raise on any failure

Handlers run concurrently through aiostream; the pipeline waits for every
one of them before concluding.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from aiostream import pipe, stream

from smsgateway.config import GatewayConfig
from smsgateway.data import IncomingMessage, MessageStatus, OutgoingMessage
from smsgateway.dispatch.events import EventBus, EventKind, Listener
from smsgateway.dispatch.registry import ProviderEntry, ProviderRegistry
from smsgateway.dispatch.router import Router, resolve_alias
from smsgateway.errors import SendMessageError, UnknownProviderAliasError
from smsgateway.providers.base import Provider, ProviderFactory
from smsgateway.providers.catalog import ProviderCatalog, default_catalog
from smsgateway.transport import GatewayTransport

logger = logging.getLogger("smsgateway.gateway")

Handler = Callable[[Any], Any]


class Gateway:
    """
    Sends messages through registered providers and fans inbound traffic
    out to handlers and event listeners.
    """

    def __init__(
        self,
        catalog: Optional[ProviderCatalog] = None,
        config: Optional[GatewayConfig] = None,
    ):
        self.config = config or GatewayConfig()
        self.catalog = catalog if catalog is not None else default_catalog()

        self.events = EventBus()
        self.transport = GatewayTransport(title=self.config.name)
        self.providers = ProviderRegistry(self, self.catalog, self.transport)

        self._router: Optional[Router] = None
        self._message_handlers: List[Handler] = []
        self._status_handlers: List[Handler] = []

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def add_provider(
        self,
        kind: Union[str, Iterable[Union[ProviderEntry, Mapping[str, Any]]], Mapping[str, Mapping[str, Any]]],
        alias: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> "Gateway":
        """
        Register providers by kind name.

            add_provider("loopback", "lo0", {})
            add_provider([{"alias": "lo0", "kind": "loopback", "config": {}}, ...])
            add_provider({"lo0": {"kind": "loopback", "config": {}}, ...})

        The list and mapping forms register atomically, in order.
        """
        if isinstance(kind, str):
            if not alias:
                raise ValueError("add_provider(kind, alias, config): alias is required")
            self.providers.register_kind(kind, alias, config)
        elif isinstance(kind, Mapping):
            self.providers.register_bulk(_entries_from_mapping(kind))
        else:
            self.providers.register_bulk(kind)
        return self

    def add_provider_instance(
        self,
        factory: ProviderFactory,
        alias: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> "Gateway":
        """Register a provider from a factory, bypassing the catalog."""
        self.providers.register(alias, factory, config)
        return self

    def get_provider(self, alias: str) -> Optional[Provider]:
        return self.providers.lookup(alias)

    # ------------------------------------------------------------------
    # Routing & handlers
    # ------------------------------------------------------------------

    def set_router(self, router: Optional[Router] = None) -> "Gateway":
        """Install a router; call without arguments to clear it."""
        self._router = router
        return self

    def on_incoming_message(self, handler: Handler) -> Handler:
        self._message_handlers.append(handler)
        return handler

    def on_message_status(self, handler: Handler) -> Handler:
        self._status_handlers.append(handler)
        return handler

    def on(self, kind: Union[EventKind, str], listener: Listener) -> Listener:
        return self.events.subscribe(kind, listener)

    def off(self, kind: Union[EventKind, str], listener: Listener) -> None:
        self.events.unsubscribe(kind, listener)

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    def message(self, to: str, body: str) -> "MessageBuilder":
        return MessageBuilder(self, OutgoingMessage(to=to, body=body))

    async def send(self, message: OutgoingMessage) -> OutgoingMessage:
        # 1. Resolve
        if not message.provider:
            message.provider = resolve_alias(self._router, message, self.providers)

        # 2. Announce, even if the alias turns out to be unknown
        self.events.emit(EventKind.MESSAGE_OUT, message)

        # 3. Lookup
        provider = self.providers.lookup(message.provider)
        if provider is None:
            raise UnknownProviderAliasError(message.provider)

        # 4. Deliver
        logger.debug(f"Sending to {message.to} via {message.provider}")
        try:
            result = await provider.send(message)
        except SendMessageError as e:
            logger.warning(f"Send via {message.provider} failed: [{e.code}] {e.message}")
            self.events.emit(EventKind.ERROR, e)
            raise
        except Exception as e:
            error = SendMessageError.from_exception(e)
            logger.warning(f"Send via {message.provider} crashed: {error.message}")
            self.events.emit(EventKind.ERROR, error)
            raise error from e

        # 5. Done
        sent = result if result is not None else message
        self.events.emit(EventKind.MESSAGE_SENT, sent)
        return sent

    # ------------------------------------------------------------------
    # Receive (called by providers)
    # ------------------------------------------------------------------

    async def report_incoming_message(self, message: IncomingMessage) -> None:
        self.events.emit(EventKind.MESSAGE_IN, message)
        await self._run_handlers(self._message_handlers, message)

    async def report_message_status(self, status: MessageStatus) -> None:
        self.events.emit(EventKind.STATUS, status)
        await self._run_handlers(self._status_handlers, status)

    def report_error(self, error: BaseException) -> None:
        self.events.emit(EventKind.ERROR, error)

    async def _run_handlers(self, handlers: List[Handler], item: Any) -> None:
        """Invoke every handler, wait for all, then fail on the first failure."""
        if not handlers:
            return

        async def invoke(indexed: Tuple[int, Handler]) -> Tuple[int, Optional[Exception]]:
            index, handler = indexed
            try:
                result = handler(item)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                return index, e
            return index, None

        outcomes = (
            stream.iterate(list(enumerate(handlers)))
            | pipe.map(invoke, task_limit=self.config.max_concurrent_handlers)
        )

        failures: List[Tuple[int, Exception]] = []
        async with outcomes.stream() as streamer:
            async for index, error in streamer:
                if error is not None:
                    failures.append((index, error))

        if not failures:
            return

        failures.sort(key=lambda f: f[0])
        first = failures[0][1]
        for _, extra in failures[1:]:
            logger.error(f"Additional handler failure: {extra!r}")

        self.events.emit(EventKind.ERROR, first)
        raise first

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def mount(self):
        """FastAPI application routing /<alias>/... to each provider."""
        return self.transport.app()

    async def listen(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Serve mount() over HTTP until cancelled."""
        import uvicorn

        server = uvicorn.Server(
            uvicorn.Config(
                self.mount(),
                host=host or self.config.host,
                port=port if port is not None else self.config.port,
                log_level=self.config.log_level.lower(),
            )
        )
        logger.info(f"Listening on {server.config.host}:{server.config.port}")
        await server.serve()


class MessageBuilder:
    """Fluent construction of an OutgoingMessage, bound to a gateway."""

    def __init__(self, gateway: Gateway, message: OutgoingMessage):
        self.gateway = gateway
        self.message = message

    def from_(self, number: str) -> "MessageBuilder":
        self.message.src = number
        return self

    def provider(self, alias: str) -> "MessageBuilder":
        self.message.provider = alias
        return self

    def route(self, *values: Any) -> "MessageBuilder":
        """Attach routing values, passed to the router after the message."""
        self.message.routing_values = values
        return self

    def options(self, patch: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "MessageBuilder":
        self.message.options = self.message.options.merged({**(patch or {}), **kwargs})
        return self

    def params(self, patch: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "MessageBuilder":
        self.message.params.update(patch or {}, **kwargs)
        return self

    async def send(self) -> OutgoingMessage:
        return await self.gateway.send(self.message)


def _entries_from_mapping(providers: Mapping[str, Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """{alias: {"kind"|"provider": ..., "config": ...}} → entry list."""
    entries = []
    for alias, data in providers.items():
        data = dict(data or {})
        entries.append({
            "alias": alias,
            "kind": data.get("kind", data.get("provider")),
            "config": data.get("config") or {},
        })
    return entries
