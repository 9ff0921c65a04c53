"""SQLAlchemy ORM models."""

from orderdesk.models.base import Base
from orderdesk.models.technician import Technician
from orderdesk.models.order import Order
from orderdesk.models.order_log import OrderLog

__all__ = ["Base", "Technician", "Order", "OrderLog"]
