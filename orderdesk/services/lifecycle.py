"""Order lifecycle: intake, status transitions and administrative edits.

Any status may move to any other status. What the controller guarantees is
that side effects happen once: a ``completed`` log entry is appended only when
an order moves *into* ``completed`` from another state. The transition itself
is the pure function :func:`apply_status`; callers execute the returned log
intents after the status write has landed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Iterable, NamedTuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.errors import (
    ConflictError, ForbiddenError, NotFoundError, StoreError, ValidationError,
)
from orderdesk.models import Order
from orderdesk.services import activity_log
from orderdesk.services.auth import ActorContext
from orderdesk.services.clock import as_utc
from orderdesk.services.duplicates import DuplicateCheck, detect_duplicate
from orderdesk.services.order_events import order_events

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"


class LogAction(str, Enum):
    CHECKED_IN = "checked_in"
    COMPLETED = "completed"


@dataclass(frozen=True)
class LogIntent:
    action: LogAction
    order_id: str
    technician_id: str
    notes: str | None = None


@dataclass
class Transition:
    previous: OrderStatus
    status: OrderStatus
    side_effects: list[LogIntent] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.previous != self.status


@dataclass
class IntakeResult:
    order: Order
    duplicate: DuplicateCheck


class IntakeLine(NamedTuple):
    order_identifier: str
    quantity: int
    notes: str | None = None


# ── Pure state machine ────────────────────────────────────

def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Invalid status {value!r}; expected one of: {allowed}")


def apply_status(order, new_status, technician_id: str | None = None) -> Transition:
    """Compute the transition of ``order`` to ``new_status`` without touching any store.

    Entering ``completed`` from any other state yields exactly one
    ``completed`` log intent, attributed to ``technician_id`` (default: the
    order's owner). Re-entering ``completed`` and every other move yield none.
    """
    previous = parse_status(order.status)
    status = parse_status(new_status)
    side_effects = []
    if status is OrderStatus.COMPLETED and previous is not OrderStatus.COMPLETED:
        side_effects.append(LogIntent(
            action=LogAction.COMPLETED,
            order_id=order.id,
            technician_id=technician_id or order.technician_id,
        ))
    return Transition(previous=previous, status=status, side_effects=side_effects)


# ── Validation ────────────────────────────────────────────

def _clean_identifier(value) -> str:
    identifier = str(value).strip() if value is not None else ""
    if not identifier:
        raise ValidationError("Order identifier is required")
    return identifier


def _check_quantity(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be a whole number")
    if value <= 0:
        raise ValidationError("Quantity must be greater than zero")
    return value


def _clean_notes(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _utc(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def _require_admin(actor: ActorContext):
    if not actor.is_admin:
        raise ForbiddenError("Administrator role required")


# ── Store helpers ─────────────────────────────────────────

async def _load(db: AsyncSession, order_id: str, actor: ActorContext) -> Order:
    try:
        order = await crud.get_order(db, order_id)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not load order {order_id}: {exc}") from exc
    # Technicians only see their own orders; anything else is reported as missing.
    if order is None or (not actor.is_admin and order.technician_id != actor.technician_id):
        raise NotFoundError(f"Order {order_id} not found")
    return order


async def _write(db: AsyncSession, order: Order, **changes) -> Order:
    """Persist ``changes`` with a compare-and-swap on the updated_at we read."""
    order_id = order.id
    expected = order.updated_at
    try:
        updated = await crud.update_order(db, order, expected_updated_at=expected, **changes)
        if updated is None:
            exists = await crud.order_exists(db, order_id)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not update order {order_id}: {exc}") from exc

    if updated is None:
        if not exists:
            raise NotFoundError(f"Order {order_id} not found")
        raise ConflictError(f"Order {order_id} was modified concurrently; reload and retry")
    return updated


async def _insert(db: AsyncSession, **fields) -> Order:
    try:
        return await crud.insert_order(db, **fields)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not record order {fields.get('order_identifier')}: {exc}") from exc


async def _execute(db: AsyncSession, intents: Iterable[LogIntent], now: datetime) -> int:
    """Run log intents against the activity log. Returns how many landed."""
    written = 0
    for intent in intents:
        entry = await activity_log.append(
            db, intent.order_id, intent.action.value, intent.technician_id,
            notes=intent.notes, timestamp=now,
        )
        if entry is not None:
            written += 1
    return written


async def _active_technician(db: AsyncSession, technician_id: str):
    try:
        tech = await crud.get_technician(db, technician_id)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not load technician {technician_id}: {exc}") from exc
    if tech is None or not tech.is_active:
        raise NotFoundError(f"Technician {technician_id} not found")
    return tech


# ── Operations ────────────────────────────────────────────

async def create_order(
    db: AsyncSession,
    actor: ActorContext,
    order_identifier: str,
    quantity: int,
    notes: str | None = None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> IntakeResult:
    """Technician intake: classify the scan, record the order, log the check-in."""
    identifier = _clean_identifier(order_identifier)
    quantity = _check_quantity(quantity)
    now = _utc(now)

    duplicate = await detect_duplicate(db, identifier, actor.technician_id, now, tz)
    order = await _insert(db, **_intake_row(actor, IntakeLine(identifier, quantity, notes), duplicate, now))
    return await _checked_in(db, actor, order, duplicate, now)


def _intake_row(actor: ActorContext, line: IntakeLine, duplicate: DuplicateCheck, now: datetime) -> dict:
    return dict(
        order_identifier=line.order_identifier,
        technician_id=actor.technician_id,
        quantity=line.quantity,
        notes=_clean_notes(line.notes),
        status=OrderStatus.PENDING.value,
        double_dip=duplicate.is_duplicate,
        created_at=now,
    )


async def _checked_in(
    db: AsyncSession, actor: ActorContext, order: Order, duplicate: DuplicateCheck, now: datetime,
) -> IntakeResult:
    """Post-insert side of intake: report the double dip, log the check-in, notify."""
    if duplicate.is_duplicate:
        logger.info(
            "Double dip: order %s by technician %s was already processed on %s",
            order.order_identifier, actor.technician_id, duplicate.previous_order.created_at,
        )
    await _execute(db, [LogIntent(LogAction.CHECKED_IN, order.id, actor.technician_id)], now)
    order_events.publish("created", order)
    return IntakeResult(order=order, duplicate=duplicate)


async def bulk_create_orders(
    db: AsyncSession,
    actor: ActorContext,
    lines: Iterable,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[IntakeResult]:
    """Intake several scanned lines at once.

    Lines with a blank identifier are skipped. Every remaining line is
    validated and classified before anything is written, and the orders are
    inserted in one transaction: a bad quantity or a store failure leaves
    nothing recorded.
    """
    pending = []
    for i, line in enumerate(lines, start=1):
        if not (line.order_identifier or "").strip():
            continue
        try:
            pending.append(IntakeLine(
                _clean_identifier(line.order_identifier),
                _check_quantity(line.quantity),
                line.notes,
            ))
        except ValidationError as exc:
            raise ValidationError(f"Line {i}: {exc.message}") from exc
    if not pending:
        raise ValidationError("Please add at least one order")

    now = _utc(now)
    checks = [
        await detect_duplicate(db, line.order_identifier, actor.technician_id, now, tz)
        for line in pending
    ]
    rows = [_intake_row(actor, line, check, now) for line, check in zip(pending, checks)]
    try:
        orders = await crud.insert_orders(db, rows)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not record {len(rows)} orders: {exc}") from exc
    return [
        await _checked_in(db, actor, order, check, now)
        for order, check in zip(orders, checks)
    ]


async def update_status(
    db: AsyncSession,
    actor: ActorContext,
    order_id: str,
    new_status,
    now: datetime | None = None,
) -> Order:
    """Move an order to ``new_status``; log completion the first time it lands."""
    status = parse_status(new_status)
    order = await _load(db, order_id, actor)
    transition = apply_status(order, status)
    if not transition.changed:
        return order

    now = _utc(now)
    order = await _write(db, order, status=transition.status.value, updated_at=now)
    await _execute(db, transition.side_effects, now)
    order_events.publish("status_changed", order)
    return order


async def admin_create_order(
    db: AsyncSession,
    actor: ActorContext,
    technician_id: str,
    order_identifier: str,
    quantity: int,
    notes: str | None = None,
    status=OrderStatus.PENDING,
    now: datetime | None = None,
) -> Order:
    """Administrative create on behalf of a technician. Trusted: no duplicate check."""
    _require_admin(actor)
    identifier = _clean_identifier(order_identifier)
    quantity = _check_quantity(quantity)
    status = parse_status(status)
    await _active_technician(db, technician_id)
    now = _utc(now)

    order = await _insert(
        db,
        order_identifier=identifier,
        technician_id=technician_id,
        quantity=quantity,
        notes=_clean_notes(notes),
        status=status.value,
        double_dip=False,
        created_at=now,
    )
    intents = [LogIntent(LogAction.CHECKED_IN, order.id, technician_id)]
    if status is OrderStatus.COMPLETED:
        intents.append(LogIntent(LogAction.COMPLETED, order.id, technician_id))
    await _execute(db, intents, now)
    order_events.publish("created", order)
    return order


async def edit_order(
    db: AsyncSession,
    actor: ActorContext,
    order_id: str,
    order_identifier: str | None = None,
    quantity: int | None = None,
    notes: str | None = None,
    technician_id: str | None = None,
    status=None,
    now: datetime | None = None,
) -> Order:
    """Administrative correction of an order's fields.

    Edits are trusted corrections, not intake events: duplicate detection is
    not re-run and ``double_dip`` is never touched. ``None`` leaves a field
    unchanged; ``notes=""`` clears the notes. ``updated_at`` moves only when
    the status changes.
    """
    _require_admin(actor)
    changes = {}
    if order_identifier is not None:
        changes["order_identifier"] = _clean_identifier(order_identifier)
    if quantity is not None:
        changes["quantity"] = _check_quantity(quantity)
    if notes is not None:
        changes["notes"] = _clean_notes(notes)
    new_status = parse_status(status) if status is not None else None

    order = await _load(db, order_id, actor)
    previous_owner = order.technician_id
    owner = previous_owner
    if technician_id is not None and technician_id != previous_owner:
        await _active_technician(db, technician_id)
        changes["technician_id"] = owner = technician_id

    intents = []
    if new_status is not None:
        transition = apply_status(order, new_status, technician_id=owner)
        if transition.changed:
            now = _utc(now)
            changes["status"] = transition.status.value
            changes["updated_at"] = now
            intents = transition.side_effects

    if not changes:
        return order

    order = await _write(db, order, **changes)
    await _execute(db, intents, _utc(now))
    order_events.publish("updated", order, previous_technician_id=previous_owner)
    return order


async def delete_order(db: AsyncSession, actor: ActorContext, order_id: str) -> None:
    """Administrative hard delete. Log entries for the order are kept."""
    _require_admin(actor)
    order = await _load(db, order_id, actor)
    try:
        await crud.delete_order(db, order)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not delete order {order_id}: {exc}") from exc
    order_events.publish("deleted", order)
