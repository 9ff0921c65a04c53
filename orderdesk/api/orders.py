"""Technician order API: intake, status updates and the daily completed count."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.dependencies import get_db, require_actor
from orderdesk.schemas import (
    BulkOrderCreate, IntakeRead, OrderCreate, OrderRead, OrderStatusUpdate,
    ProductivityRead, StatusUpdateRead,
)
from orderdesk.services import lifecycle
from orderdesk.services.auth import ActorContext
from orderdesk.services.productivity import count_completed_today

router = APIRouter(prefix="/api", tags=["orders"])


def _intake_read(result: lifecycle.IntakeResult) -> IntakeRead:
    previous = result.duplicate.previous_order if result.duplicate.is_duplicate else None
    return IntakeRead(
        order=OrderRead.model_validate(result.order),
        double_dip=result.order.double_dip,
        previous_order_id=previous.id if previous else None,
        previous_order_created_at=previous.created_at if previous else None,
        previous_order_status=previous.status if previous else None,
    )


@router.post("/orders", response_model=IntakeRead, status_code=201)
async def create_order(
    body: OrderCreate,
    actor: ActorContext = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await lifecycle.create_order(db, actor, body.order_identifier, body.quantity, body.notes)
    return _intake_read(result)


@router.post("/orders/bulk", response_model=list[IntakeRead], status_code=201)
async def bulk_create_orders(
    body: BulkOrderCreate,
    actor: ActorContext = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    results = await lifecycle.bulk_create_orders(db, actor, body.lines)
    return [_intake_read(r) for r in results]


@router.get("/orders", response_model=list[OrderRead])
async def list_my_orders(
    actor: ActorContext = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_orders_for_technician(db, actor.technician_id)


@router.put("/orders/{order_id}/status", response_model=StatusUpdateRead)
async def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    actor: ActorContext = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    order = await lifecycle.update_status(db, actor, order_id, body.status)
    completed = await count_completed_today(db, order.technician_id)
    return StatusUpdateRead(order=OrderRead.model_validate(order), completed_today=completed)


@router.get("/productivity/today", response_model=ProductivityRead)
async def completed_today(
    actor: ActorContext = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    count = await count_completed_today(db, actor.technician_id)
    return ProductivityRead(technician_id=actor.technician_id, completed_today=count)
