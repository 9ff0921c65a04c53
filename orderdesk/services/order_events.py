"""In-process change notifications for order writes.

Every write in the lifecycle publishes one event. Subscribers get their own
bounded queue: technicians see events for their own orders, admins (and any
subscriber registered without a technician id) see every event. Write
operations also return the updated record, so subscribers are a convenience
for live views, never a correctness dependency.
"""

from __future__ import annotations

import asyncio
import logging

from orderdesk.config import get_settings

logger = logging.getLogger(__name__)

ALL_ORDERS = "*"


class OrderEventHub:
    def __init__(self, max_queue: int | None = None):
        self._subscribers: dict[str, list[asyncio.Queue]] = {}
        self._max_queue = max_queue or get_settings().notifications.max_queue

    def subscribe(self, technician_id: str | None = None) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue)
        self._subscribers.setdefault(technician_id or ALL_ORDERS, []).append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue):
        for key, queues in list(self._subscribers.items()):
            if queue in queues:
                queues.remove(queue)
            if not queues:
                del self._subscribers[key]

    def publish(self, event: str, order, previous_technician_id: str | None = None) -> dict:
        """Fan an order change out to matching subscribers. Returns the message sent.

        ``previous_technician_id`` also notifies the former owner of a reassigned order.
        """
        message = {
            "event": event,
            "order_id": order.id,
            "technician_id": order.technician_id,
            "status": order.status,
        }
        keys = [order.technician_id, ALL_ORDERS]
        if previous_technician_id and previous_technician_id != order.technician_id:
            keys.append(previous_technician_id)
        targets = [q for key in keys for q in self._subscribers.get(key, [])]
        for queue in targets:
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for order %s: subscriber queue full", event, order.id)
        return message


order_events = OrderEventHub()
