from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class OrderLogRead(BaseModel):
    id: str
    order_id: str
    action: str  # checked_in | completed
    technician_id: str
    notes: str | None = None
    timestamp: datetime

    model_config = {"from_attributes": True}
