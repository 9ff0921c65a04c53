"""CRUD operations for orders, order logs and technician profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models import Order, OrderLog, Technician


# ── Technician ────────────────────────────────────────────

async def create_technician(
    db: AsyncSession, full_name: str, tech_code: str = "",
    email: str = "", role: str = "tech",
) -> Technician:
    tech = Technician(full_name=full_name, tech_code=tech_code, email=email, role=role)
    db.add(tech)
    await db.commit()
    await db.refresh(tech)
    return tech


async def get_technician(db: AsyncSession, technician_id: str) -> Technician | None:
    return await db.get(Technician, technician_id)


async def list_technicians(db: AsyncSession, active_only: bool = False) -> list[Technician]:
    query = select(Technician).order_by(Technician.full_name)
    if active_only:
        query = query.where(Technician.is_active == True)
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_technician(db: AsyncSession, tech: Technician, **kwargs) -> Technician:
    for k, v in kwargs.items():
        if v is not None:
            setattr(tech, k, v)
    await db.commit()
    await db.refresh(tech)
    return tech


# ── Order ─────────────────────────────────────────────────

def _new_order(
    order_identifier: str,
    technician_id: str,
    quantity: int,
    notes: str | None = None,
    status: str = "pending",
    double_dip: bool = False,
    created_at: datetime | None = None,
) -> Order:
    order = Order(
        order_identifier=order_identifier,
        technician_id=technician_id,
        quantity=quantity,
        notes=notes,
        status=status,
        double_dip=double_dip,
    )
    if created_at is not None:
        order.created_at = created_at
        order.updated_at = created_at
    return order


async def insert_order(db: AsyncSession, order_identifier: str, technician_id: str, quantity: int, **fields) -> Order:
    order = _new_order(order_identifier, technician_id, quantity, **fields)
    db.add(order)
    await db.commit()
    await db.refresh(order)
    return order


async def insert_orders(db: AsyncSession, rows: list[dict]) -> list[Order]:
    """Insert several orders in a single transaction: all of them land or none do."""
    orders = [_new_order(**row) for row in rows]
    db.add_all(orders)
    await db.commit()
    for order in orders:
        await db.refresh(order)
    return orders


async def get_order(db: AsyncSession, order_id: str) -> Order | None:
    return await db.get(Order, order_id)


async def update_order(
    db: AsyncSession, order: Order, expected_updated_at: datetime | None = None, **kwargs,
) -> Order | None:
    """Write ``kwargs`` to the order row.

    With ``expected_updated_at`` the write is a compare-and-swap: it only lands
    if the stored ``updated_at`` still equals the expected value. Returns None
    when the swap found no matching row.
    """
    stmt = update(Order).where(Order.id == order.id)
    if expected_updated_at is not None:
        stmt = stmt.where(Order.updated_at == expected_updated_at)
    stmt = stmt.values(**kwargs).execution_options(synchronize_session=False)

    result = await db.execute(stmt)
    if result.rowcount == 0:
        await db.rollback()
        return None
    await db.commit()
    await db.refresh(order)
    return order


async def order_exists(db: AsyncSession, order_id: str) -> bool:
    result = await db.execute(select(Order.id).where(Order.id == order_id))
    return result.first() is not None


async def delete_order(db: AsyncSession, order: Order) -> None:
    await db.delete(order)
    await db.commit()


async def find_latest_prior_order(
    db: AsyncSession, order_identifier: str, technician_id: str, before: datetime,
) -> Order | None:
    """Most recent order with this identifier by this technician created before ``before``."""
    result = await db.execute(
        select(Order)
        .where(
            Order.order_identifier == order_identifier,
            Order.technician_id == technician_id,
            Order.created_at < before,
        )
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(1)
    )
    return result.scalars().first()


async def list_orders_for_technician(db: AsyncSession, technician_id: str) -> list[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.technician_id == technician_id)
        .order_by(Order.created_at.desc())
    )
    return list(result.scalars().all())


async def list_orders(
    db: AsyncSession,
    start: datetime | None = None,
    end: datetime | None = None,
    technician_id: str | None = None,
) -> list[Order]:
    """All orders, newest first, optionally bounded by created_at and technician."""
    query = select(Order).order_by(Order.created_at.desc())
    if start is not None:
        query = query.where(Order.created_at >= start)
    if end is not None:
        query = query.where(Order.created_at <= end)
    if technician_id:
        query = query.where(Order.technician_id == technician_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_completed_since(db: AsyncSession, technician_id: str, since: datetime) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Order)
        .where(
            Order.technician_id == technician_id,
            Order.status == "completed",
            Order.double_dip == False,
            Order.updated_at >= since,
        )
    )
    return result.scalar_one()


# ── OrderLog ──────────────────────────────────────────────

async def create_order_log(
    db: AsyncSession,
    order_id: str,
    action: str,
    technician_id: str,
    notes: str | None = None,
    timestamp: datetime | None = None,
) -> OrderLog:
    entry = OrderLog(order_id=order_id, action=action, technician_id=technician_id, notes=notes)
    if timestamp is not None:
        entry.timestamp = timestamp
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def list_order_logs(db: AsyncSession, order_id: str) -> list[OrderLog]:
    result = await db.execute(
        select(OrderLog)
        .where(OrderLog.order_id == order_id)
        .order_by(OrderLog.timestamp, OrderLog.created_at)
    )
    return list(result.scalars().all())
