"""Operational stats endpoint."""

from __future__ import annotations

from collections import Counter
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..models import BidStatus
from ..repositories import BidRepository

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_bid_repository(request: Request) -> BidRepository:
    return request.app.state.bid_repository


@router.get("/stats")
async def stats(repository: BidRepository = Depends(_get_bid_repository)) -> dict[str, Any]:
    bids = await repository.list_all()
    by_status: Counter[str] = Counter({status.value: 0 for status in BidStatus})
    products: Counter[str] = Counter()
    for bid in bids:
        by_status[bid.status.value] += 1
        products[bid.product_id] += 1
    return {
        "total_bids": len(bids),
        "bids_by_status": dict(by_status),
        "products_with_bids": len(products),
        "highest_amount": max((bid.amount for bid in bids), default=0.0),
    }
