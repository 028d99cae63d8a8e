"""Shared fixtures for bid service unit tests."""

from __future__ import annotations

import asyncio
from datetime import date, timezone

import pytest
from fastapi.testclient import TestClient

from bidding.api.bids import get_gateway, get_schema_service
from bidding.events import EventBusProducer
from bidding.gateway import BidGateway
from bidding.main import app
from bidding.mapping import build_mapper
from bidding.mediator import build_mediator
from bidding.models import Product
from bidding.repositories import BidRepository, ProductRepository
from bidding.storage.in_memory import InMemoryStorage
from bidding.validation import get_schema_registry

OPEN_PRODUCT = "prod-open"
CLOSED_PRODUCT = "prod-closed"
TODAY = date(2024, 6, 15)


@pytest.fixture
def storage():
    storage = InMemoryStorage()
    repository = ProductRepository(storage)
    asyncio.run(repository.save_product(Product(OPEN_PRODUCT, "2024-06-15", name="Open lot")))
    asyncio.run(repository.save_product(Product(CLOSED_PRODUCT, "2024-06-14", name="Closed lot")))
    return storage


@pytest.fixture
def event_bus():
    return EventBusProducer("local")


@pytest.fixture
def gateway(storage, event_bus):
    bid_repository = BidRepository(storage)
    return BidGateway(
        mediator=build_mediator(bid_repository),
        bid_repository=bid_repository,
        product_repository=ProductRepository(storage),
        event_bus=event_bus,
        mapper=build_mapper(),
        bid_create_queue="bidcreate-queue",
        deadline_tz=timezone.utc,
        clock=lambda _tz: TODAY,
    )


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_schema_service] = get_schema_registry
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
