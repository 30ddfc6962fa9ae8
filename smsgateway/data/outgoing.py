from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SendingOptions:
    """
    Standardized sending options.

    Unset optional fields (None) mean "provider default", never zero.
    Providers may ignore options they cannot honour.
    """
    allow_reply: bool = False            # Replies allowed
    status_report: bool = False          # Request a delivery report
    escalate: bool = False               # High-priority delivery
    expires: Optional[int] = None        # Validity period, minutes
    sender_id: Optional[str] = None      # Replaces the source number

    def merged(self, patch: Mapping[str, Any]) -> "SendingOptions":
        """Return a copy with `patch` applied."""
        known = {f.name for f in fields(self)}
        unknown = set(patch) - known
        if unknown:
            raise ValueError(f"Unknown sending options: {', '.join(sorted(unknown))}")
        return replace(self, **patch)


@dataclass
class OutgoingMessage:
    """A message on its way out through the dispatch pipeline."""
    to: str
    body: str
    src: Optional[str] = None

    provider: Optional[str] = None       # Resolved alias, set by dispatch
    created: datetime = field(default_factory=_utcnow)
    msgid: Any = None                    # Populated by the provider on send

    routing_values: Optional[Tuple[Any, ...]] = None
    options: SendingOptions = field(default_factory=SendingOptions)
    params: Dict[str, Any] = field(default_factory=dict)   # Provider-specific

    info: Optional[Dict[str, Any]] = None  # Populated by the provider on send
