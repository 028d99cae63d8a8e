"""Object mapper converting request objects into integration events."""

from __future__ import annotations

import uuid
from typing import Any, Callable, TypeVar

from .dates import utc_now
from .mediator.requests import BidCreateCommand
from .models import BidCreateEvent

T = TypeVar("T")


class Mapper:
    def __init__(self) -> None:
        self._converters: dict[tuple[type, type], Callable[[Any], Any]] = {}

    def register(self, source_type: type, target_type: type[T], converter: Callable[[Any], T]) -> None:
        self._converters[(source_type, target_type)] = converter

    def map(self, target_type: type[T], source: Any) -> T:
        try:
            converter = self._converters[(type(source), target_type)]
        except KeyError as exc:
            raise LookupError(
                f"no mapping from {type(source).__name__} to {target_type.__name__}"
            ) from exc
        return converter(source)


def bid_create_event_from_command(command: BidCreateCommand) -> BidCreateEvent:
    return BidCreateEvent(
        id=str(uuid.uuid4()),
        product_id=command.product_id,
        buyer_email=command.buyer_email,
        amount=command.amount,
        creation_date=utc_now(),
    )


def build_mapper() -> Mapper:
    mapper = Mapper()
    mapper.register(BidCreateCommand, BidCreateEvent, bid_create_event_from_command)
    return mapper
