"""Daily productivity counter, always derived fresh from the order store."""

from __future__ import annotations

from datetime import datetime, tzinfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.errors import StoreError
from orderdesk.services.clock import start_of_today


async def count_completed_today(
    db: AsyncSession,
    technician_id: str,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> int:
    """Completed, non-double-dip orders of a technician updated since local midnight."""
    try:
        return await crud.count_completed_since(db, technician_id, start_of_today(now, tz))
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError(f"Could not count completed orders: {exc}") from exc
