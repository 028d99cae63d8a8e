"""Queue publishing for integration events."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from redis import asyncio as aioredis

from ..serialization import canonical_dumps

try:  # pragma: no cover - optional dependency
    from google.cloud import pubsub_v1
except Exception:  # pragma: no cover - fallback when library missing
    pubsub_v1 = None

logger = logging.getLogger(__name__)


class _PublisherProtocol:
    async def publish(self, queue_name: str, message: bytes) -> None:  # pragma: no cover - protocol
        raise NotImplementedError


class _LocalPublisher(_PublisherProtocol):
    def __init__(self) -> None:
        self.history: list[tuple[str, bytes]] = []

    async def publish(self, queue_name: str, message: bytes) -> None:
        self.history.append((queue_name, message))
        logger.info("[local-queue] queue=%s delivered %d bytes", queue_name, len(message))


class _RedisPublisher(_PublisherProtocol):
    def __init__(self, options: dict[str, Any]) -> None:
        url = options.get("url")
        if not url:
            raise ValueError("redis event bus requires url")
        self._redis = aioredis.from_url(url)
        self._prefix = str(options.get("prefix", "eauction:queue")).rstrip(":")

    async def publish(self, queue_name: str, message: bytes) -> None:
        await self._redis.rpush(f"{self._prefix}:{queue_name}", message)


class _PubSubPublisher(_PublisherProtocol):
    def __init__(self, options: dict[str, Any]) -> None:
        if pubsub_v1 is None:
            raise RuntimeError("google-cloud-pubsub is required for pubsub backend")
        self._project_id = options.get("project_id")
        if not self._project_id:
            raise ValueError("pubsub backend requires project_id")
        self._topic_prefix = options.get("topic_prefix", "")
        self._publisher = pubsub_v1.PublisherClient()

    def _topic_path(self, queue_name: str) -> str:
        topic = f"{self._topic_prefix}-{queue_name}" if self._topic_prefix else queue_name
        if topic.startswith("projects/"):
            return topic
        return self._publisher.topic_path(self._project_id, topic)

    async def publish(self, queue_name: str, message: bytes) -> None:
        future = self._publisher.publish(self._topic_path(queue_name), message, queue=queue_name)
        await asyncio.to_thread(future.result)


class EventBusProducer:
    """Publishes serialized integration events onto named queues."""

    def __init__(self, backend: str = "local", options: dict[str, Any] | None = None) -> None:
        options = options or {}
        self.backend = backend
        if backend == "local":
            self._publisher: _PublisherProtocol = _LocalPublisher()
        elif backend == "redis":
            self._publisher = _RedisPublisher(options)
        elif backend == "pubsub":
            self._publisher = _PubSubPublisher(options)
        else:
            raise ValueError(f"unknown event bus backend {backend}")

    async def publish(self, queue_name: str, event: Any) -> None:
        payload = event.to_dict() if hasattr(event, "to_dict") else event
        await self._publisher.publish(queue_name, canonical_dumps(payload))
