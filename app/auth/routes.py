# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-in, sign-out and "who am I" for console admins.
#
# Sign-in goes through Supabase Auth with the anon key. A user who
# authenticates but has no admin row is signed straight back out and
# rejected, so a storefront customer can't get a console token.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import (
    SessionDep,
    get_access_token,
    get_current_user,
    resolve_admin_role,
)
from app.auth.models import AuthUser, LoginRequest, LoginResponse, MeResponse
from app.exceptions import AuthenticationFailedError, NotAnAdminError, PersistError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest) -> LoginResponse:
    """
    Sign in with email and password.

    Returns:
        LoginResponse: Access/refresh tokens and the admin role

    Raises:
        401: Wrong credentials
        403: Valid credentials but not an admin
        502: The admin roster couldn't be read
    """
    client = SupabaseClient.create_auth_client()

    try:
        response = client.auth.sign_in_with_password({
            "email": body.email,
            "password": body.password,
        })
    except Exception as e:
        logger.warning(f"Sign-in failed for {body.email}: {e}")
        raise AuthenticationFailedError(str(e))

    if response.session is None or response.user is None:
        raise AuthenticationFailedError("no session returned")

    user = AuthUser(id=response.user.id, email=response.user.email)
    try:
        role = resolve_admin_role(user)
    except (NotAnAdminError, PersistError):
        # No console session without a confirmed role
        client.auth.sign_out()
        raise

    logger.info(f"Admin signed in: {user.email} ({role.value})")
    return LoginResponse(
        access_token=response.session.access_token,
        refresh_token=response.session.refresh_token,
        expires_in=response.session.expires_in,
        user_id=user.id,
        email=user.email,
        role=role,
    )


@router.post("/logout")
async def logout(
    user: AuthUser = Depends(get_current_user),
    token: str = Depends(get_access_token),
) -> dict:
    """
    Revoke the caller's session.

    Returns:
        dict: Whether Supabase accepted the sign-out
    """
    try:
        SupabaseClient.get_client().auth.admin.sign_out(token)
    except Exception as e:
        logger.warning(f"Sign-out failed for {user.id}: {e}")
        return {"signed_out": False, "user_id": str(user.id)}

    logger.info(f"Signed out: {user.email}")
    return {"signed_out": True, "user_id": str(user.id)}


@router.get("/me", response_model=MeResponse)
async def me(session: SessionDep) -> MeResponse:
    """
    Get the current admin's identity and role.

    Raises:
        401: If not authenticated
        403: If not an admin
    """
    return MeResponse(
        user_id=session.user.id,
        email=session.user.email,
        role=session.role,
        can_manage_admins=session.can_manage_admins,
    )
