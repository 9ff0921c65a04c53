"""Order model — one unit of physical work checked in by a technician."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderdesk.models.base import Base, ULIDMixin, utcnow


class Order(Base, ULIDMixin):
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_identifier_tech_created", "order_identifier", "technician_id", "created_at"),
        Index("ix_orders_tech_status_updated", "technician_id", "status", "updated_at"),
    )

    order_identifier: Mapped[str] = mapped_column(String(200))
    technician_id: Mapped[str] = mapped_column(String(26), ForeignKey("technicians.id"))
    item_name: Mapped[str] = mapped_column(String(200), default="Item")
    quantity: Mapped[int] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    status: Mapped[str] = mapped_column(String(20), default="pending")  # see services.lifecycle.OrderStatus
    double_dip: Mapped[bool] = mapped_column(Boolean, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    technician = relationship("Technician")
