from .dispatcher import Mediator
from .handlers import BidHandlers, build_mediator
from .requests import (
    BidCreateCommand,
    BidUpdateCommand,
    GetBidByProductIdAndEmailQuery,
    GetBidsByProductIdQuery,
)

__all__ = [
    "BidCreateCommand",
    "BidHandlers",
    "BidUpdateCommand",
    "GetBidByProductIdAndEmailQuery",
    "GetBidsByProductIdQuery",
    "Mediator",
    "build_mediator",
]
