"""Tests for the completed-today counter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from orderdesk.errors import StoreError
from orderdesk.services import lifecycle
from orderdesk.services.productivity import count_completed_today

from tests.timeline import NOW, UTC, YESTERDAY


async def _completed(db, actor, identifier, created=NOW, completed=NOW):
    order = (await lifecycle.create_order(db, actor, identifier, 1, now=created, tz=UTC)).order
    return await lifecycle.update_status(db, actor, order.id, "completed", now=completed)


async def test_counts_only_completed_orders_updated_today(db, tech):
    await _completed(db, tech, "A1")
    await _completed(db, tech, "B2")
    await _completed(db, tech, "C3", created=YESTERDAY, completed=YESTERDAY)
    await lifecycle.create_order(db, tech, "D4", 1, now=NOW, tz=UTC)

    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 2


async def test_double_dips_are_never_counted(db, tech):
    await _completed(db, tech, "A1", created=YESTERDAY, completed=YESTERDAY)
    dip = await _completed(db, tech, "A1")
    assert dip.double_dip is True

    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 0


async def test_order_created_yesterday_completed_today_counts(db, tech):
    await _completed(db, tech, "A1", created=YESTERDAY, completed=NOW)
    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 1


async def test_reopened_order_drops_out_of_count(db, tech):
    order = await _completed(db, tech, "A1")
    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 1

    await lifecycle.update_status(db, tech, order.id, "in-progress", now=NOW)
    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 0


async def test_counts_are_per_technician(db, tech, other_tech):
    await _completed(db, tech, "A1")
    await _completed(db, other_tech, "A1")
    await _completed(db, other_tech, "B2")

    assert await count_completed_today(db, tech.technician_id, NOW, UTC) == 1
    assert await count_completed_today(db, other_tech.technician_id, NOW, UTC) == 2


async def test_store_failure_raises_store_error():
    db = MagicMock()
    db.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("timeout")))
    db.rollback = AsyncMock()
    with pytest.raises(StoreError):
        await count_completed_today(db, "X", NOW, UTC)
