"""Bid API gateway: forwards bid requests to the mediator and repositories."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from typing import Any, Callable, Protocol

from .dates import is_past_deadline, today
from .exceptions import BidExpiredError
from .mediator import (
    BidCreateCommand,
    BidUpdateCommand,
    GetBidByProductIdAndEmailQuery,
    GetBidsByProductIdQuery,
)
from .models import Bid, BidCreateEvent, Product

logger = logging.getLogger(__name__)

APP_NAME = "Bidding"


class Dispatcher(Protocol):
    async def send(self, request: Any) -> Any: ...


class BidSettlement(Protocol):
    async def accept_bid(self, bid: Bid) -> Bid: ...

    async def reject_bid(self, bid: Bid) -> Bid: ...


class ProductLookup(Protocol):
    async def get_product(self, product_id: str) -> Product:
        """Return the product; raises ProductNotFoundError if unknown."""
        ...


class EventPublisher(Protocol):
    async def publish(self, queue_name: str, event: Any) -> None: ...


class ObjectMapper(Protocol):
    def map(self, target_type: type, source: Any) -> Any: ...


@dataclass
class BidGateway:
    """Entry point for every bid operation exposed over HTTP.

    Holds no per-request state. Queries and amount changes go through the
    mediator; accept and reject talk to the bid repository directly.
    """

    mediator: Dispatcher
    bid_repository: BidSettlement
    product_repository: ProductLookup
    event_bus: EventPublisher
    mapper: ObjectMapper
    bid_create_queue: str
    deadline_tz: tzinfo = timezone.utc
    clock: Callable[[tzinfo], date] = field(default=today)

    async def list_bids(self, product_id: str) -> list[Bid]:
        return list(await self.mediator.send(GetBidsByProductIdQuery(product_id)))

    async def get_bid(self, product_id: str, buyer_email: str) -> Bid | None:
        return await self.mediator.send(GetBidByProductIdAndEmailQuery(product_id, buyer_email))

    async def create_bid(self, command: BidCreateCommand) -> Bid:
        result = await self.mediator.send(command)
        event = self.mapper.map(BidCreateEvent, command)
        try:
            await self.event_bus.publish(self.bid_create_queue, event)
        except Exception:
            logger.error(
                "ERROR Publishing integration event: %s from %s",
                event.id,
                APP_NAME,
                exc_info=True,
            )
            raise
        return result

    async def update_bid_amount(self, product_id: str, buyer_email: str, new_amount: float) -> Bid:
        product = await self.product_repository.get_product(product_id)
        if is_past_deadline(product.bid_end_date, self.clock(self.deadline_tz), self.deadline_tz):
            raise BidExpiredError("Bid cannot be updated after the bid end date")
        return await self.mediator.send(BidUpdateCommand(product_id, buyer_email, new_amount))

    async def accept_bid(self, bid: Bid) -> Bid:
        return await self.bid_repository.accept_bid(bid)

    async def reject_bid(self, bid: Bid) -> Bid:
        return await self.bid_repository.reject_bid(bid)
