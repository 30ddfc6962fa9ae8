from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class StatusCode(str, Enum):
    UNK = "UNK"            # Unknown
    SENDING = "SENDING"    # Accepted, in flight
    OK = "OK"              # Delivered
    SENT = "SENT"          # Handed to the network, treated as delivered
    ERR = "ERR"            # Failed
    EXPIRED = "EXPIRED"    # Validity period ran out


DELIVERED_CODES = frozenset({StatusCode.OK, StatusCode.SENT})


@dataclass
class MessageStatus:
    """Delivery status report for a previously sent message."""
    provider: str
    msgid: Any
    delivered: bool = False
    error: Optional[str] = None          # Only ever set by an ERR status
    status: StatusCode = StatusCode.UNK
    status_text: Optional[str] = None
    info: Dict[str, Any] = field(default_factory=dict)
    received: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def set_status(self, code: Union[StatusCode, str], text: Optional[str] = None) -> "MessageStatus":
        """
        Apply a status code.

        delivered follows OK/SENT, error carries `text` for ERR only.
        The result depends on this call alone, never on earlier ones.
        """
        code = StatusCode(code)
        self.status = code
        self.status_text = text
        self.delivered = code in DELIVERED_CODES
        self.error = text if code is StatusCode.ERR else None
        return self
