"""Postgres storage backend leveraging asyncpg."""

from __future__ import annotations

from typing import Any

import asyncpg
import orjson

from ..exceptions import BidConflictError, BidNotFoundError, InvalidBidTransition


class PostgresStorage:
    def __init__(self, *, dsn: str | None = None, **connect_kwargs: Any) -> None:
        if not dsn and not connect_kwargs:
            raise ValueError("postgres connection details missing")
        self._dsn = dsn
        self._connect_kwargs = connect_kwargs
        self._pool: asyncpg.Pool | None = None

    def _encode(self, payload: dict[str, Any]) -> str:
        return orjson.dumps(payload).decode()

    def _decode(self, value: Any) -> dict[str, Any]:
        if isinstance(value, (bytes, bytearray)):
            value = value.decode()
        if isinstance(value, str):
            return orjson.loads(value)
        return value

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            self._pool = await asyncpg.create_pool(dsn=self._dsn, **self._connect_kwargs)
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS bids (
                        product_id TEXT NOT NULL,
                        buyer_email TEXT NOT NULL,
                        data JSONB NOT NULL,
                        created_at TIMESTAMP DEFAULT NOW(),
                        updated_at TIMESTAMP DEFAULT NOW(),
                        PRIMARY KEY (product_id, buyer_email)
                    );
                    CREATE TABLE IF NOT EXISTS products (
                        product_id TEXT PRIMARY KEY,
                        data JSONB NOT NULL
                    );
                    """
                )
        return self._pool

    async def create_bid(self, bid: dict[str, Any]) -> dict[str, Any]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            inserted = await conn.fetchval(
                """INSERT INTO bids(product_id, buyer_email, data) VALUES($1, $2, $3)
                   ON CONFLICT (product_id, buyer_email) DO NOTHING
                   RETURNING product_id""",
                bid["product_id"],
                bid["buyer_email"],
                self._encode(bid),
            )
        if inserted is None:
            raise BidConflictError(
                f"bid for {bid['product_id']} by {bid['buyer_email']} already exists"
            )
        return bid

    async def get_bid(self, product_id: str, buyer_email: str) -> dict[str, Any] | None:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT data FROM bids WHERE product_id=$1 AND buyer_email=$2""",
                product_id,
                buyer_email,
            )
        if not row:
            return None
        return self._decode(row["data"])

    async def list_bids(self, product_id: str | None = None) -> list[dict[str, Any]]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            if product_id is None:
                rows = await conn.fetch("SELECT data FROM bids ORDER BY product_id, created_at")
            else:
                rows = await conn.fetch(
                    "SELECT data FROM bids WHERE product_id=$1 ORDER BY created_at",
                    product_id,
                )
        return [self._decode(row["data"]) for row in rows]

    async def update_bid(
        self,
        product_id: str,
        buyer_email: str,
        updates: dict[str, Any],
        expected_status: str | None = None,
    ) -> dict[str, Any]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE bids SET data = data || $3::jsonb, updated_at=NOW()
                   WHERE product_id=$1 AND buyer_email=$2
                     AND ($4::text IS NULL OR data->>'status' = $4::text)
                   RETURNING data""",
                product_id,
                buyer_email,
                self._encode(updates),
                expected_status,
            )
        if row:
            return self._decode(row["data"])
        current = await self.get_bid(product_id, buyer_email)
        if current is None:
            raise BidNotFoundError(f"bid for {product_id} by {buyer_email} not found")
        raise InvalidBidTransition(
            f"bid status changed from {expected_status} to {current.get('status')}"
        )

    # Product storage methods

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT data FROM products WHERE product_id=$1""",
                product_id,
            )
        if not row:
            return None
        return self._decode(row["data"])

    async def save_product(self, product: dict[str, Any]) -> dict[str, Any]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                """INSERT INTO products(product_id, data) VALUES($1, $2)
                   ON CONFLICT (product_id) DO UPDATE SET data=EXCLUDED.data""",
                product["product_id"],
                self._encode(product),
            )
        return product
