"""HTTP service for placing and managing auction bids."""

__version__ = "1.0.0"
