"""Handlers backing the bid commands and queries."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from ..dates import utc_now
from ..models import Bid, BidStatus
from ..repositories import BidRepository
from .dispatcher import Mediator
from .requests import (
    BidCreateCommand,
    BidUpdateCommand,
    GetBidByProductIdAndEmailQuery,
    GetBidsByProductIdQuery,
)

logger = logging.getLogger(__name__)


@dataclass
class BidHandlers:
    repository: BidRepository

    async def get_bids_by_product_id(self, query: GetBidsByProductIdQuery) -> list[Bid]:
        return await self.repository.list_bids(query.product_id)

    async def get_bid_by_product_id_and_email(
        self, query: GetBidByProductIdAndEmailQuery
    ) -> Bid | None:
        return await self.repository.get_bid(query.product_id, query.buyer_email)

    async def create_bid(self, command: BidCreateCommand) -> Bid:
        bid = Bid(
            id=str(uuid.uuid4()),
            product_id=command.product_id,
            buyer_email=command.buyer_email,
            amount=command.amount,
            status=BidStatus.CREATED,
            created_at=utc_now(),
        )
        created = await self.repository.create_bid(bid)
        logger.info("bid %s placed on product %s", created.id, created.product_id)
        return created

    async def update_bid(self, command: BidUpdateCommand) -> Bid:
        updated = await self.repository.update_amount(
            command.product_id, command.buyer_email, command.new_amount
        )
        logger.info("bid %s amount changed to %s", updated.id, updated.amount)
        return updated


def build_mediator(repository: BidRepository) -> Mediator:
    handlers = BidHandlers(repository)
    mediator = Mediator()
    mediator.register(GetBidsByProductIdQuery, handlers.get_bids_by_product_id)
    mediator.register(GetBidByProductIdAndEmailQuery, handlers.get_bid_by_product_id_and_email)
    mediator.register(BidCreateCommand, handlers.create_bid)
    mediator.register(BidUpdateCommand, handlers.update_bid)
    return mediator
