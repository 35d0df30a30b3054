"""Relayer clients for the SportX SDK."""

from typing import Any, Dict, List, Protocol

from ..types import Metadata, NewOrder, RelayerResponse
from .client import SportX, new_sportx
from .http import RelayerHTTPClient
from .legacy import LegacySportX, new_legacy_sportx


class SportXClient(Protocol):
    """What both relayer clients offer, whichever protocol version they speak."""

    async def init(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def get_metadata(self) -> Metadata:
        ...

    async def get_leagues(self) -> List[Dict[str, Any]]:
        ...

    async def get_sports(self) -> List[Dict[str, Any]]:
        ...

    async def get_active_markets(self) -> List[Dict[str, Any]]:
        ...

    async def new_order(self, order: NewOrder) -> RelayerResponse:
        ...

    async def cancel_order(self, order_hashes: List[str]) -> RelayerResponse:
        ...


__all__ = [
    "SportXClient",
    "SportX",
    "LegacySportX",
    "RelayerHTTPClient",
    "new_sportx",
    "new_legacy_sportx",
]
