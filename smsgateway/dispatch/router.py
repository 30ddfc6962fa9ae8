# router.py
from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Optional

from smsgateway.data import OutgoingMessage
from smsgateway.errors import NoProvidersError

if TYPE_CHECKING:
    from smsgateway.dispatch.registry import ProviderRegistry

# router(message, *routing_values) -> alias, or None for the default provider
Router = Callable[..., Optional[str]]


def resolve_alias(
    router: Optional[Router],
    message: OutgoingMessage,
    registry: ProviderRegistry,
) -> str:
    """
    Pick the provider alias for `message`.

    The router sees a shallow view of the message: reassigning its fields
    doesn't touch the one being dispatched, and `params` is read-only.
    Param values themselves are shared, never copied. Whatever alias the
    router returns is taken as-is: unknown aliases are rejected later by
    the pipeline, after msg-out.
    """
    if not len(registry):
        raise NoProvidersError()

    if router is not None:
        alias = router(_router_view(message), *(message.routing_values or ()))
        if alias:
            return alias

    return registry.default_alias()


def _router_view(message: OutgoingMessage) -> OutgoingMessage:
    return dataclasses.replace(message, params=MappingProxyType(message.params))
