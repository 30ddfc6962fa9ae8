"""
Configuration for smsgateway.

Handles:
- gateway.yaml → GatewayConfig
- dotted import paths for extra provider kinds and functional handlers
- bootstrap(): config file → ready Gateway

Example:

    gateway:
      name: demo
      host: 127.0.0.1
      port: 8080
      log_level: INFO
    max_concurrent_handlers: 20
    provider_kinds:
      custom: mypkg.providers.CustomProvider
    providers:
      - alias: primary
        kind: loopback
        config: {}
    message_handlers:
      - handlers.logging_handlers.log_incoming
    status_handlers:
      - handlers.logging_handlers.log_status
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List

import yaml

if TYPE_CHECKING:
    from smsgateway.dispatch.gateway import Gateway

logger = logging.getLogger("smsgateway.config")


@dataclass
class ProviderConfig:
    alias: str
    kind: str
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayConfig:
    name: str = "smsgateway"
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    # Concurrent functional-handler invocations per inbound event
    max_concurrent_handlers: int = 20

    provider_kinds: Dict[str, str] = field(default_factory=dict)
    providers: List[ProviderConfig] = field(default_factory=list)

    message_handler_paths: List[str] = field(default_factory=list)
    status_handler_paths: List[str] = field(default_factory=list)
    message_handlers: List[Callable] = field(default_factory=list, repr=False)
    status_handlers: List[Callable] = field(default_factory=list, repr=False)


class ConfigLoader:
    @classmethod
    def load(cls, path: str | Path) -> GatewayConfig:
        with open(Path(path)) as f:
            raw = yaml.safe_load(f) or {}
        return cls._parse(raw)

    @classmethod
    def _parse(cls, raw: dict) -> GatewayConfig:
        gw = raw.get("gateway", {}) or {}
        config = GatewayConfig(
            name=gw.get("name", "smsgateway"),
            host=gw.get("host", "127.0.0.1"),
            port=gw.get("port", 8080),
            log_level=str(gw.get("log_level", "INFO")).upper(),
            max_concurrent_handlers=raw.get("max_concurrent_handlers", 20),
            provider_kinds=dict(raw.get("provider_kinds", {}) or {}),
            message_handler_paths=list(raw.get("message_handlers", []) or []),
            status_handler_paths=list(raw.get("status_handlers", []) or []),
        )

        for entry in raw.get("providers", []) or []:
            config.providers.append(cls._parse_provider(entry))

        cls._resolve_imports(config)
        return config

    @classmethod
    def _parse_provider(cls, raw: dict) -> ProviderConfig:
        # Missing alias/kind is reported by the registry with the whole batch
        return ProviderConfig(
            alias=raw.get("alias"),
            kind=raw.get("kind"),
            config=raw.get("config") or {},
        )

    @classmethod
    def _resolve_imports(cls, config: GatewayConfig) -> None:
        config.message_handlers = [_import_path(p) for p in config.message_handler_paths]
        config.status_handlers = [_import_path(p) for p in config.status_handler_paths]


def _import_path(path: str) -> Any:
    mod, attr = path.rsplit(".", 1)
    return getattr(importlib.import_module(mod), attr)


def bootstrap(config_path: str | Path = "config/gateway.yaml") -> Gateway:
    """Load config and build a gateway with its providers and handlers."""
    from smsgateway.dispatch.gateway import Gateway
    from smsgateway.providers.catalog import default_catalog

    config = ConfigLoader.load(config_path)

    catalog = default_catalog()
    for kind, path in config.provider_kinds.items():
        catalog.register_path(kind, path)

    gateway = Gateway(catalog=catalog, config=config)
    gateway.add_provider([
        {"alias": p.alias, "kind": p.kind, "config": p.config}
        for p in config.providers
    ])
    for handler in config.message_handlers:
        gateway.on_incoming_message(handler)
    for handler in config.status_handlers:
        gateway.on_message_status(handler)

    logger.info(f"Gateway: {config.name}")
    logger.info(f"Providers: {gateway.providers.aliases()}")
    return gateway


__all__ = [
    "GatewayConfig",
    "ProviderConfig",
    "ConfigLoader",
    "bootstrap",
]
