# =============================================================================
# app/routers/admins.py - Admin Roster Endpoints
# =============================================================================
# Any admin can list the roster; only a superadmin can add or remove.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from app.auth import SessionDep, SuperadminDep
from app.dependencies import AdminServiceDep
from core.models.admin import AdminCreate, AdminRecord

router = APIRouter()


@router.get("", response_model=list[AdminRecord])
async def list_admins(
    session: SessionDep,
    service: AdminServiceDep,
    q: Annotated[str | None, Query(description="Search email and role")] = None,
):
    return service.list(q)


@router.post("", response_model=AdminRecord, status_code=status.HTTP_201_CREATED)
async def add_admin(
    session: SuperadminDep,
    service: AdminServiceDep,
    body: AdminCreate,
):
    """
    Add a registered user to the roster.

    Requires superadmin. The user must already have an account.
    """
    return service.add(body.email, body.role, acting_role=session.role)


@router.delete("/{admin_id}")
async def remove_admin(
    session: SuperadminDep,
    service: AdminServiceDep,
    admin_id: Annotated[str, Path(description="Admin row ID")],
):
    """Remove an admin. Requires superadmin."""
    service.remove(admin_id, acting_role=session.role)
    return {"admin_id": admin_id, "deleted": True, "message": "Admin removed successfully"}
