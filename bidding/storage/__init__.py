"""Storage backend factory."""

from __future__ import annotations

from typing import Protocol

from ..config import ServerConfig
from .firestore import FirestoreStorage
from .in_memory import InMemoryStorage
from .postgres import PostgresStorage
from .redis import RedisStorage


class BidStorage(Protocol):
    async def create_bid(self, bid: dict) -> dict:
        """Insert a bid; raises BidConflictError if the buyer already bid on the product."""
        ...

    async def get_bid(self, product_id: str, buyer_email: str) -> dict | None: ...

    async def list_bids(self, product_id: str | None = None) -> list[dict]: ...

    async def update_bid(
        self,
        product_id: str,
        buyer_email: str,
        updates: dict,
        expected_status: str | None = None,
    ) -> dict:
        """Merge updates into a stored bid in one conditional write.

        Raises BidNotFoundError if missing and InvalidBidTransition when the
        stored status no longer equals ``expected_status``.
        """
        ...


class ProductStorage(Protocol):
    async def get_product(self, product_id: str) -> dict | None: ...

    async def save_product(self, product: dict) -> dict: ...


def build_storage(config: ServerConfig) -> BidStorage:
    backend = config.storage.backend
    options = dict(config.storage.options)
    if backend == "in_memory":
        return InMemoryStorage()
    if backend == "redis":
        return RedisStorage(**options)
    if backend == "postgres":
        return PostgresStorage(**options)
    if backend == "firestore":
        return FirestoreStorage(**options)
    raise ValueError(f"unknown storage backend {backend}")
