"""Actor identity supplied by the upstream identity provider.

Authentication itself happens in front of this service; the identity proxy
injects the authenticated user's id and role as request headers, which are
trusted as given.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request, HTTPException

TECHNICIAN_HEADER = "X-Technician-Id"
ROLE_HEADER = "X-Role"

ROLES = ("tech", "qa_tech", "packer", "admin")


@dataclass(frozen=True)
class ActorContext:
    technician_id: str
    role: str = "tech"  # 'tech' | 'qa_tech' | 'packer' | 'admin'

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def actor_from_headers(headers) -> ActorContext:
    """Build an ActorContext from identity-proxy headers. Raises 401 when absent."""
    technician_id = (headers.get(TECHNICIAN_HEADER) or "").strip()
    if not technician_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    role = (headers.get(ROLE_HEADER) or "tech").strip().lower()
    if role not in ROLES:
        raise HTTPException(status_code=403, detail="Unknown role")
    return ActorContext(technician_id=technician_id, role=role)


def get_current_actor(request: Request) -> ActorContext:
    return actor_from_headers(request.headers)
