"""FastAPI dependency providers for actor identity, DB sessions and role enforcement."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from orderdesk.db.engine import get_db
from orderdesk.services.auth import ActorContext, get_current_actor

__all__ = ["get_db", "require_actor", "require_role", "require_admin"]


async def require_actor(request: Request) -> ActorContext:
    """Require identity headers from the upstream identity provider."""
    return get_current_actor(request)


def require_role(*allowed_roles: str):
    """Factory: returns a dependency that enforces role membership."""
    async def _check(actor: ActorContext = Depends(require_actor)) -> ActorContext:
        if actor.role not in allowed_roles:
            raise HTTPException(403, "Insufficient permissions")
        return actor
    return _check


require_admin = require_role("admin")
