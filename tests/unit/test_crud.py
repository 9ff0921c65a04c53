from orderdesk.db import crud

from tests.timeline import LAST_WEEK, NOW, YESTERDAY


async def test_create_and_get_technician(db):
    tech = await crud.create_technician(db, "Alice Nguyen", tech_code="T-104", email="alice@example.com")
    assert tech.id is not None
    assert tech.role == "tech"
    assert tech.is_active

    fetched = await crud.get_technician(db, tech.id)
    assert fetched is not None
    assert fetched.full_name == "Alice Nguyen"
    assert fetched.tech_code == "T-104"


async def test_list_technicians_active_only(db):
    a = await crud.create_technician(db, "Alice")
    b = await crud.create_technician(db, "Bob")
    await crud.update_technician(db, b, is_active=False)

    active = await crud.list_technicians(db, active_only=True)
    assert [t.id for t in active] == [a.id]
    assert len(await crud.list_technicians(db)) == 2


async def test_insert_order_defaults(db):
    order = await crud.insert_order(db, "A1", "01TECH", 4)
    assert order.id is not None
    assert order.status == "pending"
    assert order.double_dip is False
    assert order.item_name == "Item"
    assert order.notes is None


async def test_find_latest_prior_order_picks_most_recent_before_cutoff(db):
    await crud.insert_order(db, "A1", "01TECH", 1, created_at=LAST_WEEK)
    recent = await crud.insert_order(db, "A1", "01TECH", 1, created_at=YESTERDAY)
    await crud.insert_order(db, "A1", "01TECH", 1, created_at=NOW)
    await crud.insert_order(db, "A1", "01OTHER", 1, created_at=YESTERDAY)
    await crud.insert_order(db, "B2", "01TECH", 1, created_at=YESTERDAY)

    found = await crud.find_latest_prior_order(db, "A1", "01TECH", NOW)
    assert found is not None
    assert found.id == recent.id


async def test_update_order_compare_and_swap(db):
    order = await crud.insert_order(db, "A1", "01TECH", 1, created_at=YESTERDAY)
    stale = order.updated_at

    updated = await crud.update_order(db, order, expected_updated_at=stale, status="in-progress", updated_at=NOW)
    assert updated is not None
    assert updated.status == "in-progress"

    # The old token no longer matches.
    order_id = order.id
    assert await crud.update_order(db, order, expected_updated_at=stale, status="completed") is None
    fetched = await crud.get_order(db, order_id)
    assert fetched.status == "in-progress"


async def test_order_logs_are_kept_after_delete(db):
    order = await crud.insert_order(db, "A1", "01TECH", 1)
    order_id = order.id
    await crud.create_order_log(db, order_id, "checked_in", "01TECH")
    await crud.delete_order(db, order)

    assert not await crud.order_exists(db, order_id)
    logs = await crud.list_order_logs(db, order_id)
    assert [entry.action for entry in logs] == ["checked_in"]
