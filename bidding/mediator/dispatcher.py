"""Type-keyed request dispatcher."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class Mediator:
    """Routes each request object to the handler registered for its type."""

    def __init__(self) -> None:
        self._handlers: dict[type, Handler] = {}

    def register(self, request_type: type, handler: Handler) -> None:
        if request_type in self._handlers:
            raise ValueError(f"handler already registered for {request_type.__name__}")
        self._handlers[request_type] = handler

    async def send(self, request: Any) -> Any:
        try:
            handler = self._handlers[type(request)]
        except KeyError as exc:
            raise LookupError(f"no handler registered for {type(request).__name__}") from exc
        logger.debug("dispatching %s", type(request).__name__)
        return await handler(request)
