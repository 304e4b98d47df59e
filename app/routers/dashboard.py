# =============================================================================
# app/routers/dashboard.py - Dashboard Navigation
# =============================================================================
# The landing screen after sign-in: one entry per management screen.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.auth import SessionDep

router = APIRouter()


class DashboardScreen(BaseModel):
    name: str
    link: str
    description: str


SCREENS = [
    DashboardScreen(name="Products", link="/api/v1/products", description="Furniture listings and their images"),
    DashboardScreen(name="Gallery", link="/api/v1/gallery", description="Showcase projects with images and videos"),
    DashboardScreen(name="Stories", link="/api/v1/stories", description="Short-lived promotional posts"),
    DashboardScreen(name="Team", link="/api/v1/team", description="Staff profiles"),
    DashboardScreen(name="Quotes", link="/api/v1/quotes", description="Quote requests from customers"),
    DashboardScreen(name="Profiles", link="/api/v1/profiles", description="Customer profiles"),
    DashboardScreen(name="Admins", link="/api/v1/admins", description="Who can use this console"),
]


@router.get("", response_model=list[DashboardScreen])
async def list_screens(session: SessionDep):
    """Screens available to the signed-in admin."""
    return SCREENS
