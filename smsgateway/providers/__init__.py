"""
providers — Provider contract, kind catalog and the bundled providers.

    Provider          ABC every provider implements (async send)
    ProviderCatalog   Explicit kind name → factory table
    LogProvider       "log": logs outgoing messages
    NullProvider      "null": drops outgoing messages
    LoopbackProvider  "loopback": in-process subscribers, for tests
"""

from smsgateway.providers.base import MessageIdSequence, Provider, ProviderFactory
from smsgateway.providers.catalog import ProviderCatalog, default_catalog
from smsgateway.providers.log import LogProvider
from smsgateway.providers.null import NullProvider
from smsgateway.providers.loopback import LoopbackProvider

__all__ = [
    "Provider",
    "ProviderFactory",
    "MessageIdSequence",
    "ProviderCatalog",
    "default_catalog",
    "LogProvider",
    "NullProvider",
    "LoopbackProvider",
]
