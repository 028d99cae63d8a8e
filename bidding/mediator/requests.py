"""Commands and queries routed through the mediator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GetBidsByProductIdQuery:
    product_id: str


@dataclass(frozen=True)
class GetBidByProductIdAndEmailQuery:
    product_id: str
    buyer_email: str


@dataclass(frozen=True)
class BidCreateCommand:
    product_id: str
    buyer_email: str
    amount: float


@dataclass(frozen=True)
class BidUpdateCommand:
    product_id: str
    buyer_email: str
    new_amount: float
