"""Pydantic request/response schemas."""

from orderdesk.schemas.order import (
    OrderCreate, BulkOrderCreate, OrderAdminCreate, OrderEdit, OrderStatusUpdate,
    OrderRead, IntakeRead, StatusUpdateRead,
)
from orderdesk.schemas.order_log import OrderLogRead
from orderdesk.schemas.technician import (
    TechnicianCreate, TechnicianUpdate, TechnicianRead, ProductivityRead,
)

__all__ = [
    "OrderCreate", "BulkOrderCreate", "OrderAdminCreate", "OrderEdit", "OrderStatusUpdate",
    "OrderRead", "IntakeRead", "StatusUpdateRead",
    "OrderLogRead",
    "TechnicianCreate", "TechnicianUpdate", "TechnicianRead", "ProductivityRead",
]
