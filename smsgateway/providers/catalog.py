"""
catalog.py — Explicit table of available provider kinds.

Kinds are registered up front, either as factories or as dotted import
paths. Nothing is discovered by naming convention.
"""

from __future__ import annotations

import importlib
import logging
from typing import Dict, Iterator, List

from smsgateway.errors import UnknownProviderKindError
from smsgateway.providers.base import ProviderFactory

logger = logging.getLogger("smsgateway.catalog")


class ProviderCatalog:
    def __init__(self):
        self._factories: Dict[str, ProviderFactory] = {}

    def register(self, kind: str, factory: ProviderFactory) -> None:
        if not callable(factory):
            raise TypeError(f"Provider factory for '{kind}' is not callable")
        if kind in self._factories:
            logger.info(f"Replacing provider kind '{kind}'")
        self._factories[kind] = factory

    def register_path(self, kind: str, path: str) -> ProviderFactory:
        """Register `module.attr` under `kind`."""
        mod, attr = path.rsplit(".", 1)
        factory = getattr(importlib.import_module(mod), attr)
        self.register(kind, factory)
        return factory

    def get(self, kind: str) -> ProviderFactory:
        try:
            return self._factories[kind]
        except KeyError:
            raise UnknownProviderKindError(kind) from None

    def kinds(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, kind: object) -> bool:
        return kind in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)


def default_catalog() -> ProviderCatalog:
    """A catalog with the bundled providers: log, null, loopback."""
    from smsgateway.providers.log import LogProvider
    from smsgateway.providers.loopback import LoopbackProvider
    from smsgateway.providers.null import NullProvider

    catalog = ProviderCatalog()
    catalog.register("log", LogProvider)
    catalog.register("null", NullProvider)
    catalog.register("loopback", LoopbackProvider)
    return catalog
