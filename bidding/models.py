"""Bid, product and integration event data structures."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from .dates import parse_datetime, utc_now


class BidStatus(str, Enum):
    CREATED = "created"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class Bid:
    product_id: str
    buyer_email: str
    amount: float
    id: str | None = None
    status: BidStatus = BidStatus.CREATED
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "buyer_email": self.buyer_email,
            "amount": self.amount,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Bid":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = parse_datetime(created_at)
        return cls(
            id=data.get("id"),
            product_id=data["product_id"],
            buyer_email=data["buyer_email"],
            amount=float(data.get("amount", 0)),
            status=BidStatus(data.get("status") or BidStatus.CREATED.value),
            created_at=created_at,
        )


@dataclass
class Product:
    product_id: str
    bid_end_date: date | datetime | str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        end = self.bid_end_date
        return {
            "product_id": self.product_id,
            "name": self.name,
            "bid_end_date": end if isinstance(end, str) else end.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        end = data["bid_end_date"]
        if isinstance(end, (date, datetime)):
            end = end.isoformat()
        return cls(product_id=str(data["product_id"]), bid_end_date=str(end), name=data.get("name"))


@dataclass(frozen=True)
class BidCreateEvent:
    """Integration event published once a bid has been placed."""

    id: str
    product_id: str
    buyer_email: str
    amount: float
    creation_date: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["creation_date"] = self.creation_date.isoformat()
        return payload
