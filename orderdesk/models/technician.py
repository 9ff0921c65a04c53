"""Technician profile — mirrors a user of the identity provider."""

from __future__ import annotations

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.models.base import Base, ULIDMixin


class Technician(Base, ULIDMixin):
    __tablename__ = "technicians"

    full_name: Mapped[str] = mapped_column(String(200))
    tech_code: Mapped[str] = mapped_column(String(50), default="")  # badge id, e.g. T-104
    email: Mapped[str] = mapped_column(String(255), default="")
    role: Mapped[str] = mapped_column(String(20), default="tech")  # tech | qa_tech | packer | admin
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
