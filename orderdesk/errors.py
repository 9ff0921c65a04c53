"""Error taxonomy for order intake and lifecycle operations."""

from __future__ import annotations


class OrderDeskError(Exception):
    """Base class for all errors raised by the order core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OrderDeskError):
    """Bad input: non-positive quantity, empty identifier, unknown status."""


class NotFoundError(OrderDeskError):
    """The operation targets an order (or technician) that does not exist."""


class ForbiddenError(OrderDeskError):
    """The actor's role does not allow the operation (administrative paths)."""


class ConflictError(OrderDeskError):
    """The order changed between read and write (compare-and-swap on updated_at failed)."""


class StoreError(OrderDeskError):
    """The underlying store failed (connection, timeout, integrity)."""
