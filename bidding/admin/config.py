"""Expose currently loaded server config for debugging."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..config import ServerConfig

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_config(request: Request) -> ServerConfig:
    return request.app.state.server_config


@router.get("/config")
async def config(request: Request, config: ServerConfig = Depends(_get_config)) -> dict:
    return {
        "version": request.app.version,
        "storage_backend": config.storage.backend,
        "event_bus_backend": config.event_bus.backend,
        "queues": {"bid_create": config.event_bus.bid_create_queue},
        "deadline_timezone": config.bidding.deadline_timezone,
        "seeded_products": len(config.products),
    }
