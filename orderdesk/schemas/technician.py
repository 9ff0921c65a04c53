from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class TechnicianCreate(BaseModel):
    full_name: str
    tech_code: str = ""
    email: str = ""
    role: str = "tech"


class TechnicianUpdate(BaseModel):
    full_name: str | None = None
    tech_code: str | None = None
    email: str | None = None
    role: str | None = None


class TechnicianRead(BaseModel):
    id: str
    full_name: str
    tech_code: str
    email: str
    role: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductivityRead(BaseModel):
    technician_id: str
    completed_today: int
