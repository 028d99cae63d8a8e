from .bus import EventBusProducer

__all__ = ["EventBusProducer"]
