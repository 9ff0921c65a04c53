"""Order log model: append-only audit trail of check-in and completion events."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.models.base import Base, ULIDMixin, utcnow


class OrderLog(Base, ULIDMixin):
    __tablename__ = "order_logs"

    # No foreign key: entries outlive deleted orders.
    order_id: Mapped[str] = mapped_column(String(26), index=True)
    action: Mapped[str] = mapped_column(String(20))  # checked_in | completed
    technician_id: Mapped[str] = mapped_column(String(26))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
