"""Server-push notifications for the stateless HTTP binding.

Each open ``GET /mcp`` stream subscribes to the ``NotificationHub`` and
receives every published JSON-RPC notification as an SSE ``data:`` event.

Example:
    hub = NotificationHub()
    queue = hub.subscribe()
    hub.publish({"jsonrpc": "2.0", "method": "notifications/tools/list_changed"})
    message = await queue.get()
    hub.unsubscribe(queue)
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any


def format_sse_event(data: Any) -> bytes:
    """Encode a JSON value as one SSE data event."""
    return f"data: {json.dumps(data, separators=(',', ':'))}\n\n".encode()


def format_sse_comment(text: str) -> bytes:
    """Encode an SSE comment line (ignored by clients, keeps proxies open)."""
    return f": {text}\n\n".encode()


@dataclass
class SubscriberState:
    """Tracks state for an individual subscriber.

    Attributes:
        queue: The asyncio queue for delivering messages.
        consecutive_drops: Count of consecutive dropped messages (slow client detection).
    """

    queue: asyncio.Queue[dict[str, Any]] = field(default_factory=lambda: asyncio.Queue())
    consecutive_drops: int = 0


class NotificationHub:
    """Fan-out of JSON-RPC notifications to open SSE streams.

    Queues are bounded. When a subscriber's queue is full the message is
    dropped for that subscriber only; after ``drop_limit`` consecutive drops
    the subscriber is removed and its stream should close.
    """

    def __init__(self, max_queue_size: int = 100, drop_limit: int = 10) -> None:
        self._subscribers: dict[asyncio.Queue[dict[str, Any]], SubscriberState] = {}
        self._max_queue_size = max_queue_size
        self._drop_limit = drop_limit

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers[queue] = SubscriberState(queue=queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        """Remove a subscription. Safe to call for unknown queues."""
        self._subscribers.pop(queue, None)

    def is_subscribed(self, queue: asyncio.Queue[dict[str, Any]]) -> bool:
        return queue in self._subscribers

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, message: dict[str, Any]) -> int:
        """Deliver a message to every subscriber.

        Args:
            message: JSON-RPC notification to push.

        Returns:
            Number of subscribers the message was queued for.
        """
        delivered = 0
        for queue, state in list(self._subscribers.items()):
            try:
                queue.put_nowait(message)
                state.consecutive_drops = 0
                delivered += 1
            except asyncio.QueueFull:
                state.consecutive_drops += 1
                if state.consecutive_drops >= self._drop_limit:
                    self._subscribers.pop(queue, None)
        return delivered
