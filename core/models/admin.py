# =============================================================================
# core/models/admin.py - Admin Roster Schemas
# =============================================================================
# The admin table maps auth users to a console role:
# - admin: can reach every screen
# - superadmin: can additionally add and remove admins
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AdminRole(str, Enum):
    """Console roles, lowest privilege first."""
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @classmethod
    def parse(cls, value: Any) -> "AdminRole | None":
        """Map a stored role value to an AdminRole, or None if it isn't one."""
        try:
            return cls(value)
        except ValueError:
            return None


class AdminRecord(BaseModel):
    """One row of the admin table."""
    model_config = ConfigDict(extra="allow")

    admin_id: Any
    user_id: str | None = None
    email: str | None = None
    role: str | None = None
    created_at: datetime | None = None


class AdminCreate(BaseModel):
    """
    Request to add an existing auth user to the roster.

    Example:
        {"email": "manager@shop.com", "role": "admin"}
    """
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$", description="Email of a registered user")
    role: AdminRole = Field(default=AdminRole.ADMIN)
