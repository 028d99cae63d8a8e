"""Bid endpoints."""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request
from jsonschema import ValidationError

from ..gateway import BidGateway
from ..mediator import BidCreateCommand
from ..models import Bid
from ..validation import SchemaRegistry

router = APIRouter(prefix="/bids", tags=["bids"])


def get_gateway(request: Request) -> BidGateway:
    return request.app.state.gateway


def get_schema_service(request: Request) -> SchemaRegistry:
    return request.app.state.schema_registry


def _validated(schemas: SchemaRegistry, schema_name: str, payload: dict[str, Any]) -> None:
    try:
        schemas.validate(schema_name, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc.message)) from exc


@router.get("/{product_id}")
async def get_bids_by_product_id(
    product_id: str,
    gateway: BidGateway = Depends(get_gateway),
) -> list[dict[str, Any]]:
    bids = await gateway.list_bids(product_id)
    if not bids:
        raise HTTPException(status_code=404, detail=f"no bids for product {product_id}")
    return [bid.to_dict() for bid in bids]


@router.get("/{product_id}/{buyer_email}")
async def get_bid_by_product_id_and_email(
    product_id: str,
    buyer_email: str,
    gateway: BidGateway = Depends(get_gateway),
) -> dict[str, Any]:
    bid = await gateway.get_bid(product_id, buyer_email)
    if bid is None:
        raise HTTPException(
            status_code=404, detail=f"no bid for product {product_id} by {buyer_email}"
        )
    return bid.to_dict()


@router.post("")
async def create_bid(
    payload: dict[str, Any] = Body(...),
    gateway: BidGateway = Depends(get_gateway),
    schemas: SchemaRegistry = Depends(get_schema_service),
) -> dict[str, Any]:
    _validated(schemas, "bid_create_command", payload)
    try:
        amount = float(payload["amount"])
    except OverflowError:
        amount = math.inf
    if not math.isfinite(amount):
        raise HTTPException(status_code=422, detail="amount must be a finite number")
    command = BidCreateCommand(
        product_id=payload["product_id"],
        buyer_email=payload["buyer_email"],
        amount=amount,
    )
    bid = await gateway.create_bid(command)
    return bid.to_dict()


@router.put("/{product_id}/{buyer_email}/{new_bid_amount}")
async def update_bid_amount(
    product_id: str,
    buyer_email: str,
    new_bid_amount: float = Path(..., gt=0, allow_inf_nan=False),
    gateway: BidGateway = Depends(get_gateway),
) -> dict[str, Any]:
    bid = await gateway.update_bid_amount(product_id, buyer_email, new_bid_amount)
    return bid.to_dict()


@router.post("/accept")
async def accept_bid(
    payload: dict[str, Any] = Body(...),
    gateway: BidGateway = Depends(get_gateway),
    schemas: SchemaRegistry = Depends(get_schema_service),
) -> dict[str, Any]:
    _validated(schemas, "bid", payload)
    bid = await gateway.accept_bid(Bid.from_dict(payload))
    return bid.to_dict()


@router.post("/reject")
async def reject_bid(
    payload: dict[str, Any] = Body(...),
    gateway: BidGateway = Depends(get_gateway),
    schemas: SchemaRegistry = Depends(get_schema_service),
) -> dict[str, Any]:
    _validated(schemas, "bid", payload)
    bid = await gateway.reject_bid(Bid.from_dict(payload))
    return bid.to_dict()
