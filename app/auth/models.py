# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data and the per-request session.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from typing import Optional

from core.models.admin import AdminRole


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class SessionContext(BaseModel):
    """
    Who is making this request and what they may do.

    Built once per request from the access token and the admin roster,
    then passed to every route that needs it.
    """
    model_config = ConfigDict(frozen=True)

    user: AuthUser
    role: AdminRole
    access_token: Optional[str] = Field(default=None, repr=False)

    @property
    def is_superadmin(self) -> bool:
        return self.role is AdminRole.SUPERADMIN

    @property
    def can_manage_admins(self) -> bool:
        return self.is_superadmin


class LoginRequest(BaseModel):
    """
    Email/password sign-in.

    Example:
        {"email": "owner@shop.com", "password": "..."}
    """
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Tokens for an admin who signed in successfully."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: UUID
    email: Optional[str] = None
    role: AdminRole


class MeResponse(BaseModel):
    """The current admin's identity and permissions."""
    user_id: UUID
    email: Optional[str] = None
    role: AdminRole
    can_manage_admins: bool
