"""Liveness endpoint for the bidding service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    state = request.app.state
    start_time = getattr(state, "start_time", None)
    uptime = int((datetime.now(timezone.utc) - start_time).total_seconds()) if start_time else 0
    config = getattr(state, "server_config", None)
    return {
        "status": "healthy",
        "service": "bidding",
        "version": request.app.version,
        "uptime_seconds": uptime,
        "storage_backend": config.storage.backend if config else None,
        "event_bus_backend": config.event_bus.backend if config else None,
        "bid_create_queue": config.event_bus.bid_create_queue if config else None,
        "accepting_bids": getattr(state, "gateway", None) is not None,
    }
