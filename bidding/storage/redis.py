"""Redis storage backend using redis-py asyncio client."""

from __future__ import annotations

from typing import Any

import orjson
from redis import asyncio as aioredis
from redis.exceptions import WatchError

from ..exceptions import BidConflictError, BidNotFoundError, InvalidBidTransition


class RedisStorage:
    def __init__(self, *, url: str, prefix: str = "eauction:bids") -> None:
        if not url:
            raise ValueError("redis url missing")
        self._redis = aioredis.from_url(url)
        self._prefix = prefix.rstrip(":")

    def _bid_key(self, product_id: str, buyer_email: str) -> str:
        return f"{self._prefix}:bid:{product_id}:{buyer_email}"

    def _product_index_key(self, product_id: str) -> str:
        return f"{self._prefix}:product-bids:{product_id}"

    def _product_key(self, product_id: str) -> str:
        return f"{self._prefix}:product:{product_id}"

    async def create_bid(self, bid: dict[str, Any]) -> dict[str, Any]:
        key = self._bid_key(bid["product_id"], bid["buyer_email"])
        created = await self._redis.set(key, orjson.dumps(bid), nx=True)
        if not created:
            raise BidConflictError(
                f"bid for {bid['product_id']} by {bid['buyer_email']} already exists"
            )
        await self._redis.sadd(self._product_index_key(bid["product_id"]), key)
        return bid

    async def get_bid(self, product_id: str, buyer_email: str) -> dict[str, Any] | None:
        raw = await self._redis.get(self._bid_key(product_id, buyer_email))
        if raw is None:
            return None
        return orjson.loads(raw)

    async def list_bids(self, product_id: str | None = None) -> list[dict[str, Any]]:
        if product_id is not None:
            keys = list(await self._redis.smembers(self._product_index_key(product_id)))
        else:
            keys = []
            cursor = 0
            while True:
                cursor, batch = await self._redis.scan(
                    cursor=cursor, match=f"{self._prefix}:bid:*", count=100
                )
                keys.extend(batch)
                if cursor == 0:
                    break
        if not keys:
            return []
        values = await self._redis.mget(sorted(keys))
        return [orjson.loads(value) for value in values if value]

    async def update_bid(
        self,
        product_id: str,
        buyer_email: str,
        updates: dict[str, Any],
        expected_status: str | None = None,
    ) -> dict[str, Any]:
        key = self._bid_key(product_id, buyer_email)
        async with self._redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    if raw is None:
                        raise BidNotFoundError(f"bid for {product_id} by {buyer_email} not found")
                    bid = orjson.loads(raw)
                    if expected_status is not None and bid.get("status") != expected_status:
                        raise InvalidBidTransition(
                            f"bid status changed from {expected_status} to {bid.get('status')}"
                        )
                    bid.update(updates)
                    pipe.multi()
                    pipe.set(key, orjson.dumps(bid))
                    await pipe.execute()
                    return bid
                except WatchError:
                    # key changed between WATCH and EXEC, re-read
                    continue

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        raw = await self._redis.get(self._product_key(product_id))
        if raw is None:
            return None
        return orjson.loads(raw)

    async def save_product(self, product: dict[str, Any]) -> dict[str, Any]:
        await self._redis.set(self._product_key(product["product_id"]), orjson.dumps(product))
        return product
