# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the connections to the hosted Supabase project:
# - a singleton service-role client for tables and storage
# - short-lived anon clients for password sign-in
# - the admin-role lookup used to build a request's session context
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   role = SupabaseClient.fetch_admin_role(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# Roster table: one row per admin, keyed by auth user id
ADMIN_TABLE = "admin"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for the Supabase project.

    Implements singleton pattern - one service-role client instance is shared
    across the application. All methods are class methods for easy access
    without instantiation.
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh anon-key client for a sign-in or sign-out call.

        Auth calls store the resulting session on the client, so these are
        never shared between requests.
        """
        try:
            return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase auth client: {e}",
                code="AUTH_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Admin Roster
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_admin_role(cls, user_id: str | UUID) -> str | None:
        """
        Fetch the role of a user on the admin roster.

        Args:
            user_id: The auth user UUID

        Returns:
            "admin", "superadmin", or None when the user has no admin row

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table(ADMIN_TABLE)
                .select("role, user_id")
                .eq("user_id", user_id_str)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch admin role: {e}",
                code="FETCH_ROLE_FAILED",
                suggestion="Check that the admin table exists and is readable",
                details={"user_id": user_id_str}
            )

        rows = response.data or []
        if not rows:
            logger.debug(f"No admin row for user {user_id_str}")
            return None
        return rows[0].get("role")

    @classmethod
    def find_user_id_by_email(cls, email: str) -> str | None:
        """
        Resolve an auth user's UUID from their email.

        Calls the `get_user_uuid` database function, since auth.users is not
        reachable through the table API.

        Returns:
            The user UUID as a string, or None when no such user exists
        """
        client = cls.get_client()

        try:
            response = client.rpc("get_user_uuid", {"email_input": email}).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to look up user: {e}",
                code="USER_LOOKUP_FAILED",
                suggestion="Check that the get_user_uuid function is installed",
                details={"email": email}
            )

        return response.data or None
