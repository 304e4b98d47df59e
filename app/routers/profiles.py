# =============================================================================
# app/routers/profiles.py - Customer Profile Endpoints
# =============================================================================
# The listing is newest first until a column is chosen. Passing `toggle`
# applies a click on that column's header to the current sort; the sort that
# was applied is echoed in the X-Sort-By / X-Sort-Order headers so a client
# can send it back on the next click.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Path, Query, Response

from app.auth import SessionDep
from app.dependencies import ProfileServiceDep
from core.models.customers import CustomerProfile, CustomerProfileUpdate
from lib.listing import toggle_order

router = APIRouter()

ProfileSortField = Literal["full_name", "email", "phone", "city", "created_at"]


@router.get("", response_model=list[CustomerProfile])
async def list_profiles(
    session: SessionDep,
    service: ProfileServiceDep,
    response: Response,
    q: Annotated[str | None, Query(description="Search name, email, phone and address")] = None,
    sort_by: ProfileSortField | None = None,
    order: Literal["asc", "desc"] | None = None,
    toggle: Annotated[ProfileSortField | None, Query(description="Column header clicked")] = None,
):
    """
    List customer profiles.

    The whole table is fetched, then filtered and sorted in memory.
    """
    field = sort_by or "created_at"
    direction = order or ("desc" if sort_by is None else "asc")
    if toggle:
        field, direction = toggle_order(field, direction, toggle)

    response.headers["X-Sort-By"] = field
    response.headers["X-Sort-Order"] = direction
    return service.list(q, sort_by=field, descending=direction == "desc")


@router.patch("/{profile_id}", response_model=CustomerProfile)
async def update_profile(
    session: SessionDep,
    service: ProfileServiceDep,
    profile_id: Annotated[str, Path(description="Profile ID")],
    body: CustomerProfileUpdate,
):
    return service.update(profile_id, body.model_dump(exclude_unset=True))


@router.delete("/{profile_id}")
async def delete_profile(
    session: SessionDep,
    service: ProfileServiceDep,
    profile_id: Annotated[str, Path(description="Profile ID")],
):
    service.delete(profile_id)
    return {"id": profile_id, "deleted": True, "message": "Profile deleted successfully"}
