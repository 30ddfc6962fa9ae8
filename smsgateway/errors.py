"""
errors.py — Error taxonomy for message dispatch.

Two families live here:

- SendMessageError: raised by providers when a send fails. One exception type
  tagged with an ErrorKind; each kind carries a stable numeric code.
- GatewayError: faults raised by the gateway itself (registration problems,
  unresolvable provider aliases). These are not part of the code table.

Providers raise the most specific kind that applies:

    raise invalid_destination_error(f"Bad number: {message.to}")
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


# ============================================================================
# Send errors
# ============================================================================

class ErrorKind(Enum):
    """Error kinds with their stable codes. Codes are never reused."""

    GENERIC = (1, "Generic Provider Error")
    AUTH = (2, "Provider Authentication Error")
    LIMITS = (3, "Provider Limits")
    CREDIT = (4, "Provider Credit Error")
    UNSUPPORTED = (5, "Unsupported")

    REQUEST = (40, "Request Error")
    INVALID_SOURCE = (41, "Invalid Source Number")
    INVALID_DESTINATION = (42, "Invalid Destination Number")
    INVALID_PARAMETER = (43, "Invalid Parameter")

    SERVER = (50, "Generic Server Error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def title(self) -> str:
        return self.value[1]

    @property
    def family(self) -> str:
        """'provider' (1-39), 'request' (40-49) or 'server' (50+)."""
        if self.code >= 50:
            return "server"
        if self.code >= 40:
            return "request"
        return "provider"

    @classmethod
    def from_code(cls, code: int) -> "ErrorKind":
        for kind in cls:
            if kind.code == code:
                return kind
        raise ValueError(f"Unknown error code: {code}")


def check_error_codes() -> Dict[int, ErrorKind]:
    """Verify every ErrorKind has a distinct code. Returns the code table."""
    table: Dict[int, ErrorKind] = {}
    for kind in ErrorKind:
        if kind.code in table:
            raise RuntimeError(
                f"Error code {kind.code} used by both {table[kind.code].name} and {kind.name}"
            )
        table[kind.code] = kind
    return table


class SendMessageError(Exception):
    """A failed send, tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.title
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return self.kind.code

    @property
    def name(self) -> str:
        return self.kind.name

    @property
    def is_provider_error(self) -> bool:
        return self.kind.family == "provider"

    @property
    def is_request_error(self) -> bool:
        return self.kind.family == "request"

    @property
    def is_server_error(self) -> bool:
        return self.kind.family == "server"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "SendMessageError":
        """Wrap a foreign exception; SendMessageErrors pass through unchanged."""
        if isinstance(exc, SendMessageError):
            return exc
        return cls(ErrorKind.GENERIC, f"{type(exc).__name__}: {exc}")

    def __repr__(self) -> str:
        return f"SendMessageError({self.kind.name}, code={self.code}, message={self.message!r})"


def generic_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.GENERIC, message)


def auth_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.AUTH, message)


def limits_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.LIMITS, message)


def credit_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.CREDIT, message)


def unsupported_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.UNSUPPORTED, message)


def request_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.REQUEST, message)


def invalid_source_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.INVALID_SOURCE, message)


def invalid_destination_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.INVALID_DESTINATION, message)


def invalid_parameter_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.INVALID_PARAMETER, message)


def server_error(message: Optional[str] = None) -> SendMessageError:
    return SendMessageError(ErrorKind.SERVER, message)


# ============================================================================
# Gateway faults
# ============================================================================

class GatewayError(Exception):
    """Base for faults raised by the gateway itself."""


class DuplicateAliasError(GatewayError, ValueError):
    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Duplicate provider alias: {alias}")


class UnknownProviderKindError(GatewayError, LookupError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown provider kind: {kind}")


class InvalidProviderEntryError(GatewayError, ValueError):
    """A bulk registration entry is malformed (e.g. missing alias or kind)."""


class NoProvidersError(GatewayError):
    def __init__(self):
        super().__init__("No providers registered")


class UnknownProviderAliasError(GatewayError, LookupError):
    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Unknown provider alias: {alias}")


check_error_codes()
