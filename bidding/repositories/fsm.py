"""Bid status finite state machine."""

from __future__ import annotations

from enum import Enum

from ..exceptions import InvalidBidTransition
from ..models import BidStatus


class BidEvent(str, Enum):
    AMOUNT_UPDATED = "amount_updated"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


_TRANSITIONS = {
    (BidStatus.CREATED, BidEvent.AMOUNT_UPDATED): BidStatus.CREATED,
    (BidStatus.CREATED, BidEvent.ACCEPTED): BidStatus.ACCEPTED,
    (BidStatus.CREATED, BidEvent.REJECTED): BidStatus.REJECTED,
}


def transition(current: BidStatus, event: BidEvent) -> BidStatus:
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError as exc:
        raise InvalidBidTransition(
            f"invalid transition from {current.value} via {event.value}"
        ) from exc
