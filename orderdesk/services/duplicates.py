"""Double-dip detection for newly scanned orders."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.models import Order
from orderdesk.services.clock import start_of_today

logger = logging.getLogger(__name__)

# A prior attempt left in one of these states was abandoned or failed, so
# scanning the same order again is legitimate re-work.
UNRESOLVED_STATUSES = frozenset({"incomplete", "on-hold"})


@dataclass
class DuplicateCheck:
    is_duplicate: bool
    previous_order: Order | None = None


async def detect_duplicate(
    db: AsyncSession,
    order_identifier: str,
    technician_id: str,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> DuplicateCheck:
    """Classify a scan as a re-submission of work resolved on an earlier day.

    Only orders created before local midnight count as prior work; same-day
    re-scans are corrections and never flagged. Store failures fail open.
    """
    before = start_of_today(now, tz)
    try:
        previous = await crud.find_latest_prior_order(db, order_identifier, technician_id, before)
    except SQLAlchemyError:
        logger.exception(
            "Duplicate check failed for order %s (technician %s); accepting intake",
            order_identifier, technician_id,
        )
        await db.rollback()
        return DuplicateCheck(is_duplicate=False)

    if previous is None:
        return DuplicateCheck(is_duplicate=False)
    return DuplicateCheck(
        is_duplicate=previous.status not in UNRESOLVED_STATUSES,
        previous_order=previous,
    )
