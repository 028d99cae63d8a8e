"""Configuration helpers for the bid service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

_DEFAULT_SERVER_CONFIG = Path(__file__).resolve().parent / "server.yaml"

BID_CREATE_QUEUE = "bidcreate-queue"


@dataclass(frozen=True)
class ListenConfig:
    host: str
    port: int


@dataclass(frozen=True)
class StorageConfig:
    backend: str
    options: Mapping[str, Any]


@dataclass(frozen=True)
class EventBusConfig:
    backend: str
    options: Mapping[str, Any]
    bid_create_queue: str


@dataclass(frozen=True)
class BiddingConfig:
    deadline_timezone: str


@dataclass(frozen=True)
class ServerConfig:
    listen: ListenConfig
    log_level: str
    storage: StorageConfig
    event_bus: EventBusConfig
    bidding: BiddingConfig
    products: tuple[Mapping[str, Any], ...]


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return yaml.safe_load(path.read_text()) or {}


def parse_server_config(data: Mapping[str, Any]) -> ServerConfig:
    listen = data.get("listen") or {}
    logging_section = data.get("logging") or {}
    storage = data.get("storage") or {}
    event_bus = data.get("event_bus") or {}
    queues = event_bus.get("queues") or {}
    bidding = data.get("bidding") or {}
    return ServerConfig(
        listen=ListenConfig(
            host=str(listen.get("host", "0.0.0.0")),
            port=int(listen.get("port", 8000)),
        ),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        storage=StorageConfig(
            backend=str(storage.get("backend", "in_memory")),
            options=dict(storage.get("options") or {}),
        ),
        event_bus=EventBusConfig(
            backend=str(event_bus.get("backend", "local")),
            options=dict(event_bus.get("options") or {}),
            bid_create_queue=str(queues.get("bid_create", BID_CREATE_QUEUE)),
        ),
        bidding=BiddingConfig(
            deadline_timezone=str(bidding.get("deadline_timezone", "UTC")),
        ),
        products=tuple(dict(item) for item in data.get("products") or ()),
    )


@lru_cache(maxsize=1)
def get_server_config() -> ServerConfig:
    path = Path(os.getenv("BIDDING_CONFIG_PATH", _DEFAULT_SERVER_CONFIG))
    return parse_server_config(_load_yaml(path))
