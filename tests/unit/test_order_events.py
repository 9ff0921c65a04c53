from types import SimpleNamespace

from orderdesk.services import lifecycle
from orderdesk.services.order_events import OrderEventHub, order_events

from tests.timeline import NOW, UTC


def _order(technician_id="T1", status="pending"):
    return SimpleNamespace(id="01ORDER", technician_id=technician_id, status=status)


def test_technician_only_receives_own_events():
    hub = OrderEventHub(max_queue=10)
    mine = hub.subscribe("T1")
    theirs = hub.subscribe("T2")
    everything = hub.subscribe()

    hub.publish("created", _order("T1"))

    assert mine.get_nowait() == {
        "event": "created", "order_id": "01ORDER", "technician_id": "T1", "status": "pending",
    }
    assert theirs.empty()
    assert everything.qsize() == 1


def test_reassignment_notifies_previous_owner():
    hub = OrderEventHub(max_queue=10)
    old = hub.subscribe("T1")
    new = hub.subscribe("T2")

    hub.publish("updated", _order("T2"), previous_technician_id="T1")
    assert old.qsize() == 1
    assert new.qsize() == 1


def test_full_queue_drops_events():
    hub = OrderEventHub(max_queue=1)
    queue = hub.subscribe("T1")
    hub.publish("created", _order("T1"))
    hub.publish("status_changed", _order("T1", "completed"))
    assert queue.qsize() == 1
    assert queue.get_nowait()["event"] == "created"


def test_unsubscribe_stops_delivery():
    hub = OrderEventHub(max_queue=10)
    queue = hub.subscribe("T1")
    hub.unsubscribe(queue)
    hub.publish("created", _order("T1"))
    assert queue.empty()


async def test_lifecycle_writes_publish_events(db, tech):
    queue = order_events.subscribe(tech.technician_id)
    try:
        order = (await lifecycle.create_order(db, tech, "A1", 1, now=NOW, tz=UTC)).order
        await lifecycle.update_status(db, tech, order.id, "completed", now=NOW)
        # Re-entering the same status writes nothing, so nothing is published.
        await lifecycle.update_status(db, tech, order.id, "completed", now=NOW)

        events = [queue.get_nowait()["event"] for _ in range(queue.qsize())]
        assert events == ["created", "status_changed"]
    finally:
        order_events.unsubscribe(queue)
