"""In-memory storage backend for bids and products."""

from __future__ import annotations

import asyncio
from copy import deepcopy
from typing import Any

from ..exceptions import BidConflictError, BidNotFoundError, InvalidBidTransition


class InMemoryStorage:
    def __init__(self) -> None:
        self._bids: dict[tuple[str, str], dict[str, Any]] = {}
        self._products: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create_bid(self, bid: dict[str, Any]) -> dict[str, Any]:
        key = (bid["product_id"], bid["buyer_email"])
        async with self._lock:
            if key in self._bids:
                raise BidConflictError(f"bid for {key[0]} by {key[1]} already exists")
            self._bids[key] = deepcopy(bid)
            return deepcopy(bid)

    async def get_bid(self, product_id: str, buyer_email: str) -> dict[str, Any] | None:
        async with self._lock:
            bid = self._bids.get((product_id, buyer_email))
            return deepcopy(bid) if bid else None

    async def list_bids(self, product_id: str | None = None) -> list[dict[str, Any]]:
        async with self._lock:
            return [
                deepcopy(bid)
                for (bid_product, _), bid in self._bids.items()
                if product_id is None or bid_product == product_id
            ]

    async def update_bid(
        self,
        product_id: str,
        buyer_email: str,
        updates: dict[str, Any],
        expected_status: str | None = None,
    ) -> dict[str, Any]:
        key = (product_id, buyer_email)
        async with self._lock:
            if key not in self._bids:
                raise BidNotFoundError(f"bid for {product_id} by {buyer_email} not found")
            current = self._bids[key].get("status")
            if expected_status is not None and current != expected_status:
                raise InvalidBidTransition(
                    f"bid status changed from {expected_status} to {current}"
                )
            self._bids[key].update(updates)
            return deepcopy(self._bids[key])

    # Product storage methods

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        async with self._lock:
            product = self._products.get(product_id)
            return deepcopy(product) if product else None

    async def save_product(self, product: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            self._products[product["product_id"]] = deepcopy(product)
            return deepcopy(product)
