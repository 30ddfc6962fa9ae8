"""
registry.py — Alias → live provider table.

Providers are kept in registration order; the first one registered is the
default route. Aliases are unique and re-registration is rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from smsgateway.errors import DuplicateAliasError, InvalidProviderEntryError
from smsgateway.providers.base import Provider, ProviderFactory

if TYPE_CHECKING:
    from smsgateway.dispatch.gateway import Gateway
    from smsgateway.providers.catalog import ProviderCatalog
    from smsgateway.transport import GatewayTransport

logger = logging.getLogger("smsgateway.registry")


class ProviderEntry(BaseModel):
    """One item of a bulk registration."""
    alias: str = Field(min_length=1, pattern=r"^[^/]+$")
    kind: str = Field(min_length=1)
    config: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def _empty_config(cls, value: Any) -> Any:
        return {} if value is None else value


class ProviderRegistry:
    def __init__(self, gateway: Gateway, catalog: ProviderCatalog, transport: GatewayTransport):
        self.gateway = gateway
        self.catalog = catalog
        self.transport = transport
        self._providers: Dict[str, Provider] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        alias: str,
        factory: ProviderFactory,
        config: Optional[Dict[str, Any]] = None,
    ) -> Provider:
        """Construct a provider with `factory` and store it under `alias`."""
        if not isinstance(alias, str) or not alias or "/" in alias:
            raise InvalidProviderEntryError(f"Invalid provider alias: {alias!r}")
        if alias in self._providers:
            raise DuplicateAliasError(alias)

        mount = self.transport.mount_for(alias)
        try:
            provider = factory(self.gateway, alias, config or {}, mount)
        except Exception:
            self.transport.unmount(alias)
            raise

        self._providers[alias] = provider
        logger.info(f"Registered provider: {alias} ({type(provider).__name__})")
        return provider

    def register_kind(self, kind: str, alias: str, config: Optional[Dict[str, Any]] = None) -> Provider:
        """Register a provider by catalog kind name."""
        factory = self.catalog.get(kind)
        return self.register(alias, factory, config)

    def register_bulk(self, entries: Iterable[Union[ProviderEntry, Mapping[str, Any]]]) -> List[Provider]:
        """
        Register a batch, all-or-nothing.

        Every entry is validated (fields, kinds, alias uniqueness) before any
        provider is constructed. A factory failing mid-batch rolls back the
        providers this batch already added.
        """
        parsed = [self._parse_entry(i, entry) for i, entry in enumerate(entries)]

        seen = set(self._providers)
        factories = []
        for entry in parsed:
            if entry.alias in seen:
                raise DuplicateAliasError(entry.alias)
            seen.add(entry.alias)
            factories.append(self.catalog.get(entry.kind))

        added: List[str] = []
        try:
            for entry, factory in zip(parsed, factories):
                self.register(entry.alias, factory, entry.config)
                added.append(entry.alias)
        except Exception:
            for alias in added:
                self._remove(alias)
            logger.warning(f"Bulk registration rolled back: {added}")
            raise

        return [self._providers[alias] for alias in added]

    @staticmethod
    def _parse_entry(index: int, entry: Union[ProviderEntry, Mapping[str, Any]]) -> ProviderEntry:
        if isinstance(entry, ProviderEntry):
            return entry
        if not isinstance(entry, Mapping):
            raise InvalidProviderEntryError(f"Provider entry #{index} is not a mapping: {entry!r}")
        try:
            return ProviderEntry.model_validate(dict(entry))
        except ValidationError as e:
            missing = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise InvalidProviderEntryError(f"Provider entry #{index} is invalid: {missing}") from e

    def _remove(self, alias: str) -> None:
        self._providers.pop(alias, None)
        self.transport.unmount(alias)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, alias: str) -> Optional[Provider]:
        return self._providers.get(alias)

    def aliases(self) -> List[str]:
        return list(self._providers)

    def default_alias(self) -> Optional[str]:
        """First registered alias, or None when empty."""
        return next(iter(self._providers), None)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, alias: object) -> bool:
        return alias in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)
