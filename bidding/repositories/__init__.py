"""Repositories translating between stored documents and bid entities."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import BidNotFoundError, ProductNotFoundError
from ..models import Bid, Product
from ..storage import BidStorage, ProductStorage
from .fsm import BidEvent, transition


@dataclass
class BidRepository:
    storage: BidStorage

    async def list_bids(self, product_id: str) -> list[Bid]:
        return [Bid.from_dict(item) for item in await self.storage.list_bids(product_id)]

    async def list_all(self) -> list[Bid]:
        return [Bid.from_dict(item) for item in await self.storage.list_bids()]

    async def get_bid(self, product_id: str, buyer_email: str) -> Bid | None:
        data = await self.storage.get_bid(product_id, buyer_email)
        return Bid.from_dict(data) if data else None

    async def create_bid(self, bid: Bid) -> Bid:
        return Bid.from_dict(await self.storage.create_bid(bid.to_dict()))

    async def update_amount(self, product_id: str, buyer_email: str, amount: float) -> Bid:
        current = await self._require(product_id, buyer_email)
        transition(current.status, BidEvent.AMOUNT_UPDATED)
        data = await self.storage.update_bid(
            product_id,
            buyer_email,
            {"amount": amount},
            expected_status=current.status.value,
        )
        return Bid.from_dict(data)

    async def accept_bid(self, bid: Bid) -> Bid:
        return await self._apply(bid, BidEvent.ACCEPTED)

    async def reject_bid(self, bid: Bid) -> Bid:
        return await self._apply(bid, BidEvent.REJECTED)

    async def _apply(self, bid: Bid, event: BidEvent) -> Bid:
        current = await self._require(bid.product_id, bid.buyer_email)
        status = transition(current.status, event)
        data = await self.storage.update_bid(
            bid.product_id,
            bid.buyer_email,
            {"status": status.value},
            expected_status=current.status.value,
        )
        return Bid.from_dict(data)

    async def _require(self, product_id: str, buyer_email: str) -> Bid:
        bid = await self.get_bid(product_id, buyer_email)
        if bid is None:
            raise BidNotFoundError(f"bid for {product_id} by {buyer_email} not found")
        return bid


@dataclass
class ProductRepository:
    storage: ProductStorage

    async def get_product(self, product_id: str) -> Product:
        data = await self.storage.get_product(product_id)
        if data is None:
            raise ProductNotFoundError(f"product {product_id} not found")
        return Product.from_dict(data)

    async def save_product(self, product: Product) -> Product:
        return Product.from_dict(await self.storage.save_product(product.to_dict()))
