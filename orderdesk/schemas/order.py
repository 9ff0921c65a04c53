from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    order_identifier: str
    quantity: int
    notes: str | None = None


class BulkOrderCreate(BaseModel):
    lines: list[OrderCreate] = Field(default_factory=list)


class OrderAdminCreate(OrderCreate):
    technician_id: str
    status: str = "pending"


class OrderEdit(BaseModel):
    order_identifier: str | None = None
    quantity: int | None = None
    notes: str | None = None
    technician_id: str | None = None
    status: str | None = None


class OrderStatusUpdate(BaseModel):
    status: str  # pending | in-progress | on-hold | incomplete | completed


class OrderRead(BaseModel):
    id: str
    order_identifier: str
    technician_id: str
    item_name: str = "Item"
    quantity: int
    notes: str | None = None
    status: str
    double_dip: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class IntakeRead(BaseModel):
    order: OrderRead
    double_dip: bool
    previous_order_id: str | None = None
    previous_order_created_at: datetime | None = None
    previous_order_status: str | None = None


class StatusUpdateRead(BaseModel):
    order: OrderRead
    completed_today: int
