# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and authorization.
#
# Token verification supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Authorization is a SessionContext built once per request from the verified
# token plus the caller's row in the admin table.
#
# Usage:
#   from app.auth import SessionDep
#
#   @router.get("/products")
#   async def list_products(session: SessionDep):
#       ...
# =============================================================================

import logging
import time
from typing import Annotated
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser, SessionContext
from app.exceptions import InsufficientRoleError, NotAnAdminError, PersistError
from core.models.admin import AdminRole
from lib.supabase_client import ADMIN_TABLE, SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys are better than none
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and extract the user.

    Raises:
        HTTPException: 401 if token is invalid, expired or has no user ID
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_access_token)
) -> AuthUser:
    """
    Extract and validate user from Supabase JWT token.

    Returns:
        AuthUser: The authenticated user

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    user = decode_access_token(token)
    logger.debug(f"Authenticated user: {user.id}")
    return user


def resolve_admin_role(user: AuthUser) -> AdminRole:
    """
    Look up the user's console role.

    Raises:
        NotAnAdminError: If the user has no admin row (or an unknown role)
        PersistError: If the roster can't be read
    """
    try:
        stored = SupabaseClient.fetch_admin_role(user.id)
    except SupabaseClientError as e:
        logger.error(f"Admin role lookup failed for {user.id}: {e}")
        raise PersistError(ADMIN_TABLE, "select", e.message)

    role = AdminRole.parse(stored)
    if role is None:
        logger.warning(f"User {user.id} is not on the admin roster (role={stored!r})")
        raise NotAnAdminError(str(user.id))
    return role


async def get_session_context(
    user: AuthUser = Depends(get_current_user),
    token: str = Depends(get_access_token),
) -> SessionContext:
    """
    Build the SessionContext for this request.

    Raises:
        HTTPException: 401 if the token is invalid
        NotAnAdminError: 403 if the user is not an admin
    """
    role = resolve_admin_role(user)
    return SessionContext(user=user, role=role, access_token=token)


async def require_superadmin(
    session: SessionContext = Depends(get_session_context)
) -> SessionContext:
    """
    Raises:
        InsufficientRoleError: 403 for anyone but a superadmin
    """
    if not session.is_superadmin:
        raise InsufficientRoleError(AdminRole.SUPERADMIN.value, session.role.value)
    return session


# Type aliases for dependency injection
SessionDep = Annotated[SessionContext, Depends(get_session_context)]
SuperadminDep = Annotated[SessionContext, Depends(require_superadmin)]
