# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, and the per-request
# SessionContext that carries the caller's admin role.
#
# Usage:
#   from app.auth import SessionDep
#
#   @router.get("/protected")
#   async def protected(session: SessionDep):
#       return {"role": session.role}
# =============================================================================

from app.auth.dependencies import (
    SessionDep,
    SuperadminDep,
    get_current_user,
    get_session_context,
    require_superadmin,
)
from app.auth.models import AuthUser, SessionContext

__all__ = [
    "SessionDep",
    "SuperadminDep",
    "get_current_user",
    "get_session_context",
    "require_superadmin",
    "AuthUser",
    "SessionContext",
]
