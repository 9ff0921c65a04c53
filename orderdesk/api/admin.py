"""Administrative order API covering every technician's orders."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.dependencies import get_db, require_admin
from orderdesk.errors import NotFoundError
from orderdesk.schemas import OrderAdminCreate, OrderEdit, OrderLogRead, OrderRead, ProductivityRead
from orderdesk.services import lifecycle
from orderdesk.services.auth import ActorContext
from orderdesk.services.clock import day_end, day_start
from orderdesk.services.productivity import count_completed_today

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/orders", response_model=list[OrderRead])
async def list_orders(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    technician_id: str | None = Query(default=None),
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All orders, newest first. ``start``/``end`` are inclusive local calendar days."""
    return await crud.list_orders(
        db,
        start=day_start(start) if start else None,
        end=day_end(end) if end else None,
        technician_id=technician_id,
    )


@router.post("/orders", response_model=OrderRead, status_code=201)
async def create_order(
    body: OrderAdminCreate,
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await lifecycle.admin_create_order(
        db, actor, body.technician_id, body.order_identifier, body.quantity,
        notes=body.notes, status=body.status,
    )


@router.put("/orders/{order_id}", response_model=OrderRead)
async def edit_order(
    order_id: str,
    body: OrderEdit,
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await lifecycle.edit_order(
        db, actor, order_id,
        order_identifier=body.order_identifier,
        quantity=body.quantity,
        notes=body.notes,
        technician_id=body.technician_id,
        status=body.status,
    )


@router.delete("/orders/{order_id}")
async def delete_order(
    order_id: str,
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await lifecycle.delete_order(db, actor, order_id)
    return {"ok": True, "id": order_id}


@router.get("/orders/{order_id}/logs", response_model=list[OrderLogRead])
async def list_order_logs(
    order_id: str,
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_order_logs(db, order_id)


@router.get("/technicians/{technician_id}/productivity", response_model=ProductivityRead)
async def technician_productivity(
    technician_id: str,
    actor: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tech = await crud.get_technician(db, technician_id)
    if not tech:
        raise NotFoundError(f"Technician {technician_id} not found")
    count = await count_completed_today(db, technician_id)
    return ProductivityRead(technician_id=technician_id, completed_today=count)
