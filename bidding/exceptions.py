"""Domain errors raised by the bid service."""

from __future__ import annotations


class BidExpiredError(Exception):
    """Raised when a bid is modified after the product's bid end date."""


class BidNotFoundError(KeyError):
    """Raised when no bid exists for a product and buyer."""


class ProductNotFoundError(KeyError):
    """Raised when the product repository has no such product."""


class BidConflictError(ValueError):
    """Raised when a buyer already holds a bid on the product."""


class InvalidBidTransition(ValueError):
    """Raised when a bid status change is not allowed."""
