"""
data — Canonical records flowing through the dispatch pipelines.

    OutgoingMessage   Built by callers, completed by providers
    SendingOptions    Standardized sending flags
    IncomingMessage   Built by providers on receipt
    MessageStatus     Delivery report, with the status transition rule
"""

from smsgateway.data.outgoing import OutgoingMessage, SendingOptions
from smsgateway.data.incoming import IncomingMessage
from smsgateway.data.status import MessageStatus, StatusCode

__all__ = [
    "OutgoingMessage",
    "SendingOptions",
    "IncomingMessage",
    "MessageStatus",
    "StatusCode",
]
