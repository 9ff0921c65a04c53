"""Technician profile management API, admin access only."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db import crud
from orderdesk.dependencies import get_db, require_admin
from orderdesk.schemas import TechnicianCreate, TechnicianRead, TechnicianUpdate
from orderdesk.services.auth import ROLES

router = APIRouter(prefix="/api/admin/technicians", tags=["technicians"])


def _check_role(role: str | None):
    if role is not None and role not in ROLES:
        raise HTTPException(400, f"role must be one of: {', '.join(ROLES)}")


@router.get("", response_model=list[TechnicianRead])
async def list_technicians(
    include_inactive: bool = False,
    actor=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_technicians(db, active_only=not include_inactive)


@router.post("", response_model=TechnicianRead, status_code=201)
async def create_technician(
    body: TechnicianCreate,
    actor=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    full_name = body.full_name.strip()
    if not full_name:
        raise HTTPException(400, "full_name is required")
    _check_role(body.role)

    return await crud.create_technician(
        db,
        full_name=full_name,
        tech_code=body.tech_code.strip(),
        email=body.email.strip(),
        role=body.role,
    )


@router.put("/{tech_id}", response_model=TechnicianRead)
async def update_technician(
    tech_id: str,
    body: TechnicianUpdate,
    actor=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tech = await crud.get_technician(db, tech_id)
    if not tech:
        raise HTTPException(404, "Technician not found")
    _check_role(body.role)

    updates = body.model_dump(exclude_unset=True)
    if updates:
        tech = await crud.update_technician(db, tech, **updates)
    return tech


@router.delete("/{tech_id}")
async def delete_technician(
    tech_id: str,
    actor=Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    tech = await crud.get_technician(db, tech_id)
    if not tech:
        raise HTTPException(404, "Technician not found")

    # Orders keep pointing at the profile, so it is only deactivated.
    tech = await crud.update_technician(db, tech, is_active=False)
    return {"ok": True, "id": tech.id}
