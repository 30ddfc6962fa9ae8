# smsgateway/__init__.py
"""
smsgateway
==========
One send/receive contract over many messaging providers.
"""

from smsgateway.config import ConfigLoader as ConfigLoader
from smsgateway.config import GatewayConfig as GatewayConfig
from smsgateway.config import bootstrap as bootstrap
from smsgateway.data import IncomingMessage as IncomingMessage
from smsgateway.data import MessageStatus as MessageStatus
from smsgateway.data import OutgoingMessage as OutgoingMessage
from smsgateway.data import SendingOptions as SendingOptions
from smsgateway.data import StatusCode as StatusCode
from smsgateway.dispatch import EventKind as EventKind
from smsgateway.dispatch import Gateway as Gateway
from smsgateway.errors import ErrorKind as ErrorKind
from smsgateway.errors import SendMessageError as SendMessageError
from smsgateway.providers import Provider as Provider
from smsgateway.providers import ProviderCatalog as ProviderCatalog


__all__ = [
    "Gateway",
    "EventKind",
    "OutgoingMessage",
    "SendingOptions",
    "IncomingMessage",
    "MessageStatus",
    "StatusCode",
    "SendMessageError",
    "ErrorKind",
    "Provider",
    "ProviderCatalog",
    "GatewayConfig",
    "ConfigLoader",
    "bootstrap",
]

__version__ = "0.1.0"
