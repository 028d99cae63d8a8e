"""Unit tests for BidGateway with mocked collaborators."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from bidding.exceptions import BidExpiredError, ProductNotFoundError
from bidding.gateway import BidGateway
from bidding.mapping import build_mapper
from bidding.mediator import (
    BidCreateCommand,
    BidUpdateCommand,
    GetBidByProductIdAndEmailQuery,
    GetBidsByProductIdQuery,
)
from bidding.models import Bid, BidCreateEvent, BidStatus, Product


@pytest.fixture
def mediator():
    mediator = AsyncMock()
    mediator.send = AsyncMock()
    return mediator


@pytest.fixture
def bid_repository():
    repository = AsyncMock()
    repository.accept_bid = AsyncMock()
    repository.reject_bid = AsyncMock()
    return repository


@pytest.fixture
def product_repository():
    repository = AsyncMock()
    repository.get_product = AsyncMock(return_value=Product("P1", "2024-01-01"))
    return repository


@pytest.fixture
def event_bus():
    bus = AsyncMock()
    bus.publish = AsyncMock()
    return bus


def make_gateway(mediator, bid_repository, product_repository, event_bus, today: date) -> BidGateway:
    return BidGateway(
        mediator=mediator,
        bid_repository=bid_repository,
        product_repository=product_repository,
        event_bus=event_bus,
        mapper=build_mapper(),
        bid_create_queue="bidcreate-queue",
        clock=lambda _tz: today,
    )


@pytest.fixture
def gateway(mediator, bid_repository, product_repository, event_bus):
    return make_gateway(mediator, bid_repository, product_repository, event_bus, date(2023, 12, 31))


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_bids_sends_product_query(self, gateway, mediator):
        mediator.send.return_value = []

        result = await gateway.list_bids("P1")

        assert result == []
        mediator.send.assert_awaited_once_with(GetBidsByProductIdQuery("P1"))

    @pytest.mark.asyncio
    async def test_get_bid_returns_none_when_missing(self, gateway, mediator):
        mediator.send.return_value = None

        assert await gateway.get_bid("P1", "ann@example.com") is None
        mediator.send.assert_awaited_once_with(
            GetBidByProductIdAndEmailQuery("P1", "ann@example.com")
        )


class TestCreateBid:
    @pytest.mark.asyncio
    async def test_dispatches_then_publishes_event(self, gateway, mediator, event_bus):
        created = Bid("P1", "ann@example.com", 10.0, id="b-1")
        mediator.send.return_value = created
        command = BidCreateCommand("P1", "ann@example.com", 10.0)

        result = await gateway.create_bid(command)

        assert result is created
        mediator.send.assert_awaited_once_with(command)
        event_bus.publish.assert_awaited_once()
        queue, event = event_bus.publish.await_args.args
        assert queue == "bidcreate-queue"
        assert isinstance(event, BidCreateEvent)
        assert (event.product_id, event.buyer_email, event.amount) == ("P1", "ann@example.com", 10.0)
        assert event.id

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged_and_reraised(self, gateway, mediator, event_bus, caplog):
        mediator.send.return_value = Bid("P1", "ann@example.com", 10.0, id="b-1")
        event_bus.publish.side_effect = RuntimeError("queue unavailable")

        with caplog.at_level(logging.ERROR, logger="bidding.gateway"):
            with pytest.raises(RuntimeError, match="queue unavailable"):
                await gateway.create_bid(BidCreateCommand("P1", "ann@example.com", 10.0))

        mediator.send.assert_awaited_once()
        assert "ERROR Publishing integration event" in caplog.text
        assert "Bidding" in caplog.text

    @pytest.mark.asyncio
    async def test_dispatch_failure_skips_publish(self, gateway, mediator, event_bus):
        mediator.send.side_effect = ValueError("storage down")

        with pytest.raises(ValueError):
            await gateway.create_bid(BidCreateCommand("P1", "ann@example.com", 10.0))

        event_bus.publish.assert_not_awaited()


class TestUpdateBidAmount:
    @pytest.mark.asyncio
    async def test_expired_product_never_reaches_mediator(
        self, mediator, bid_repository, product_repository, event_bus
    ):
        gateway = make_gateway(
            mediator, bid_repository, product_repository, event_bus, date(2024, 1, 2)
        )

        with pytest.raises(BidExpiredError):
            await gateway.update_bid_amount("P1", "ann@example.com", 25.0)

        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_before_deadline_is_dispatched(self, gateway, mediator):
        updated = Bid("P1", "ann@example.com", 25.0, id="b-1")
        mediator.send.return_value = updated

        result = await gateway.update_bid_amount("P1", "ann@example.com", 25.0)

        assert result is updated
        mediator.send.assert_awaited_once_with(BidUpdateCommand("P1", "ann@example.com", 25.0))

    @pytest.mark.asyncio
    async def test_deadline_day_is_still_open(
        self, mediator, bid_repository, product_repository, event_bus
    ):
        product_repository.get_product.return_value = Product(
            "P1", datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        )
        gateway = make_gateway(
            mediator, bid_repository, product_repository, event_bus, date(2024, 1, 1)
        )

        await gateway.update_bid_amount("P1", "ann@example.com", 25.0)

        mediator.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_deadline_is_compared_in_gateway_timezone(
        self, mediator, bid_repository, product_repository, event_bus
    ):
        # 23:00 UTC on Jan 1 is already Jan 2 at UTC+2
        product_repository.get_product.return_value = Product("P1", "2024-01-01T23:00:00Z")
        gateway = make_gateway(
            mediator, bid_repository, product_repository, event_bus, date(2024, 1, 2)
        )
        gateway.deadline_tz = timezone(timedelta(hours=2))

        await gateway.update_bid_amount("P1", "ann@example.com", 25.0)

        mediator.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_product_propagates(self, gateway, mediator, product_repository):
        product_repository.get_product.side_effect = ProductNotFoundError("product P9 not found")

        with pytest.raises(ProductNotFoundError):
            await gateway.update_bid_amount("P9", "ann@example.com", 25.0)

        mediator.send.assert_not_awaited()


class TestAcceptReject:
    @pytest.mark.asyncio
    async def test_accept_goes_straight_to_repository(self, gateway, mediator, bid_repository):
        bid = Bid("P1", "ann@example.com", 10.0)
        bid_repository.accept_bid.return_value = Bid(
            "P1", "ann@example.com", 10.0, status=BidStatus.ACCEPTED
        )

        result = await gateway.accept_bid(bid)

        assert result.status is BidStatus.ACCEPTED
        bid_repository.accept_bid.assert_awaited_once_with(bid)
        mediator.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reject_failure_propagates(self, gateway, bid_repository):
        bid_repository.reject_bid.side_effect = KeyError("missing")

        with pytest.raises(KeyError):
            await gateway.reject_bid(Bid("P1", "ann@example.com", 10.0))


class _RecordingDispatcher:
    def __init__(self):
        self.sent = []

    async def send(self, request):
        self.sent.append(request)
        return Bid(request.product_id, request.buyer_email, request.amount)


class _Settlement:
    async def accept_bid(self, bid):
        return Bid(bid.product_id, bid.buyer_email, bid.amount, status=BidStatus.ACCEPTED)

    async def reject_bid(self, bid):
        return Bid(bid.product_id, bid.buyer_email, bid.amount, status=BidStatus.REJECTED)


class _Catalog:
    async def get_product(self, product_id):
        return Product(product_id, "2024-01-01")


class _Outbox:
    def __init__(self):
        self.published = []

    async def publish(self, queue_name, event):
        self.published.append((queue_name, event))


class _PassThroughMapper:
    def map(self, target_type, source):
        return target_type(
            id="evt-1",
            product_id=source.product_id,
            buyer_email=source.buyer_email,
            amount=source.amount,
            creation_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )


class TestPlainCollaborators:
    @pytest.mark.asyncio
    async def test_gateway_runs_on_any_matching_objects(self):
        dispatcher = _RecordingDispatcher()
        outbox = _Outbox()
        gateway = BidGateway(
            mediator=dispatcher,
            bid_repository=_Settlement(),
            product_repository=_Catalog(),
            event_bus=outbox,
            mapper=_PassThroughMapper(),
            bid_create_queue="bidcreate-queue",
        )
        command = BidCreateCommand("P1", "ann@example.com", 25.0)

        created = await gateway.create_bid(command)
        accepted = await gateway.accept_bid(created)

        assert dispatcher.sent == [command]
        assert [queue for queue, _ in outbox.published] == ["bidcreate-queue"]
        assert outbox.published[0][1].id == "evt-1"
        assert accepted.status is BidStatus.ACCEPTED
