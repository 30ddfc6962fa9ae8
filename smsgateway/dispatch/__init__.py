"""
dispatch — Provider registry, routing, event bus and the send/receive pipelines.

Key classes:
    Gateway           The dispatch core; send() and report_*() pipelines
    MessageBuilder    Fluent OutgoingMessage construction (gateway.message())
    ProviderRegistry  Alias → provider table, registration order preserved
    EventBus          Synchronous per-gateway event broadcast
    EventKind         msg-in, msg-out, msg-sent, status, error

Usage:
    from smsgateway.dispatch import Gateway

    gw = Gateway()
    gw.add_provider("loopback", "lo0", {})
    message = await gw.message("+123", "hi").send()
"""

from smsgateway.dispatch.events import EventBus, EventKind
from smsgateway.dispatch.registry import ProviderEntry, ProviderRegistry
from smsgateway.dispatch.router import Router, resolve_alias
from smsgateway.dispatch.gateway import Gateway, MessageBuilder

__all__ = [
    "Gateway",
    "MessageBuilder",
    "ProviderRegistry",
    "ProviderEntry",
    "EventBus",
    "EventKind",
    "Router",
    "resolve_alias",
]
