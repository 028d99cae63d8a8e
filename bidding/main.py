from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .admin import config as admin_config
from .admin import health as admin_health
from .admin import stats as admin_stats
from .api import bids
from .config import ServerConfig, get_server_config
from .dates import resolve_timezone
from .events import EventBusProducer
from .exceptions import (
    BidConflictError,
    BidExpiredError,
    BidNotFoundError,
    InvalidBidTransition,
    ProductNotFoundError,
)
from .gateway import BidGateway
from .mapping import build_mapper
from .mediator import build_mediator
from .models import Product
from .repositories import BidRepository, ProductRepository
from .storage import build_storage
from .validation import get_schema_registry

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logging.getLogger("bidding").setLevel(level)


async def seed_products(repository: ProductRepository, config: ServerConfig) -> None:
    for item in config.products:
        product = await repository.save_product(Product.from_dict(dict(item)))
        logger.info("seeded product %s (bids close %s)", product.product_id, product.bid_end_date)


@asynccontextmanager
async def lifespan(app: FastAPI):
    server_config = get_server_config()
    configure_logging(server_config.log_level)
    storage = build_storage(server_config)
    bid_repository = BidRepository(storage)
    product_repository = ProductRepository(storage)
    await seed_products(product_repository, server_config)
    event_bus = EventBusProducer(
        backend=server_config.event_bus.backend,
        options=dict(server_config.event_bus.options),
    )
    gateway = BidGateway(
        mediator=build_mediator(bid_repository),
        bid_repository=bid_repository,
        product_repository=product_repository,
        event_bus=event_bus,
        mapper=build_mapper(),
        bid_create_queue=server_config.event_bus.bid_create_queue,
        deadline_tz=resolve_timezone(server_config.bidding.deadline_timezone),
    )

    app.state.server_config = server_config
    app.state.schema_registry = get_schema_registry()
    app.state.storage = storage
    app.state.bid_repository = bid_repository
    app.state.product_repository = product_repository
    app.state.event_bus = event_bus
    app.state.gateway = gateway
    app.state.start_time = datetime.now(timezone.utc)
    logger.info(
        "bid service started storage=%s event_bus=%s",
        server_config.storage.backend,
        server_config.event_bus.backend,
    )

    yield


app = FastAPI(
    title="EAuction Bid Service",
    version=__version__,
    docs_url="/docs",
    lifespan=lifespan,
)

app.include_router(bids.router)
app.include_router(admin_health.router)
app.include_router(admin_config.router)
app.include_router(admin_stats.router)


# Error mapping --------------------------------------------------------------


def _detail(exc: Exception) -> str:
    return str(exc.args[0]) if exc.args else exc.__class__.__name__


@app.exception_handler(BidExpiredError)
async def bid_expired_handler(_: Request, exc: BidExpiredError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": _detail(exc)})


@app.exception_handler(BidNotFoundError)
@app.exception_handler(ProductNotFoundError)
async def not_found_handler(_: Request, exc: KeyError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": _detail(exc)})


@app.exception_handler(BidConflictError)
@app.exception_handler(InvalidBidTransition)
async def conflict_handler(_: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": _detail(exc)})
