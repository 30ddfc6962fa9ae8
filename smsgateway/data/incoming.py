from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class IncomingMessage:
    """A message received by a provider. Only providers create these."""
    provider: str
    src: str
    to: Optional[str]                    # Empty when the provider can't tell
    body: str
    msgid: Any = None
    info: Dict[str, Any] = field(default_factory=dict)
    received: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
