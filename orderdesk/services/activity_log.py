"""Activity log sink: append-only check-in/completion audit entries.

The log is an audit trail, not a correctness dependency. Appends run in their
own short-lived session on the caller's engine so a failed append never rolls
back (or expires) the order the caller just wrote. Failures are logged and
reported through the return value; they are never raised.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.models import OrderLog

logger = logging.getLogger(__name__)


async def append(
    db: AsyncSession,
    order_id: str,
    action: str,
    technician_id: str,
    notes: str | None = None,
    timestamp: datetime | None = None,
) -> OrderLog | None:
    """Append one log entry. Returns None if the sink rejected it."""
    try:
        async with AsyncSession(db.bind, expire_on_commit=False) as log_db:
            return await crud.create_order_log(
                log_db, order_id, action, technician_id, notes=notes, timestamp=timestamp,
            )
    except SQLAlchemyError:
        logger.exception("Failed to log %s for order %s", action, order_id)
        return None
