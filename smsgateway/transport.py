"""
transport.py — HTTP surface for provider receivers.

Each provider gets a ProviderMount scoped under /<alias>; the gateway
aggregates all mounts into one FastAPI application:

    mount = transport.mount_for("lo0")

    @mount.post("/receive")
    async def receive(request: Request): ...

    app = transport.app()        # POST /lo0/receive
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, FastAPI


class ProviderMount:
    """Routes owned by one provider, mounted at /<alias>."""

    def __init__(self, alias: str):
        self.alias = alias
        self.prefix = f"/{alias}"
        self.router = APIRouter(prefix=self.prefix, tags=[alias])

    def get(self, path: str, **kwargs: Any) -> Callable:
        return self.router.get(path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Callable:
        return self.router.post(path, **kwargs)

    def route(self, path: str, methods: List[str], **kwargs: Any) -> Callable:
        return self.router.api_route(path, methods=methods, **kwargs)

    @property
    def routes(self) -> list:
        return self.router.routes


class GatewayTransport:
    """All provider mounts of one gateway."""

    def __init__(self, title: str = "smsgateway"):
        self.title = title
        self._mounts: Dict[str, ProviderMount] = {}

    def mount_for(self, alias: str) -> ProviderMount:
        if alias in self._mounts:
            raise ValueError(f"Mount already exists: /{alias}")
        mount = ProviderMount(alias)
        self._mounts[alias] = mount
        return mount

    def unmount(self, alias: str) -> None:
        self._mounts.pop(alias, None)

    def get(self, alias: str) -> Optional[ProviderMount]:
        return self._mounts.get(alias)

    def mounts(self) -> List[ProviderMount]:
        return list(self._mounts.values())

    def app(self) -> FastAPI:
        """Build an application serving every mount registered so far."""
        app = FastAPI(title=self.title)
        for mount in self._mounts.values():
            app.include_router(mount.router)
        return app
