# =============================================================================
# core/services/admin_service.py - Admin Roster
# =============================================================================
# Listing, adding and removing console admins.
#
# Every admin can see the roster. Only a superadmin can change it; the role
# check runs before any store call, so a plain admin's attempt never reaches
# the database.
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    AdminAlreadyExistsError,
    AdminUserNotFoundError,
    InsufficientRoleError,
    PersistError,
    RecordNotFoundError,
)
from core.models.admin import AdminRole
from core.services.record_store import RecordStore
from lib.listing import search_rows
from lib.supabase_client import ADMIN_TABLE, SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


def require_role(actual: AdminRole | str | None, required: AdminRole = AdminRole.SUPERADMIN) -> None:
    """
    Raises:
        InsufficientRoleError: If `actual` is not `required`
    """
    role = AdminRole.parse(actual)
    if role is not required:
        raise InsufficientRoleError(required.value, role.value if role else actual)


class AdminService:
    """
    Service for the admin roster table.

    Args:
        store: Optional RecordStore for the admin table
        lookup_user: Resolves an email to an auth user id (defaults to the
            get_user_uuid database function)
    """

    def __init__(self, store: RecordStore | None = None, lookup_user=None):
        self.store = store or RecordStore(ADMIN_TABLE)
        self.lookup_user = lookup_user or SupabaseClient.find_user_id_by_email

    def list(self, query: str | None = None) -> list[dict[str, Any]]:
        rows = self.store.select(order_by="created_at")
        return search_rows(rows, query, ("email", "role"))

    def add(self, email: str, role: AdminRole, acting_role: AdminRole | str | None) -> dict[str, Any]:
        """
        Add a registered user to the roster.

        Args:
            email: Email of an existing auth user
            role: Role to grant
            acting_role: Role of the admin performing the action

        Returns:
            The inserted admin row

        Raises:
            InsufficientRoleError: If the acting admin is not a superadmin
            AdminUserNotFoundError: If no auth user has this email
            AdminAlreadyExistsError: If the user already has an admin row
            PersistError: If the user lookup or the insert is rejected
        """
        require_role(acting_role)

        email = email.strip()
        try:
            user_id = self.lookup_user(email)
        except SupabaseClientError as e:
            logger.error(f"User lookup failed for {email}: {e}")
            raise PersistError(ADMIN_TABLE, "rpc", e.message)
        if not user_id:
            raise AdminUserNotFoundError(email)

        if self.store.select(filters={"user_id": user_id}):
            raise AdminAlreadyExistsError(email)

        row = self.store.insert({
            "user_id": user_id,
            "email": email,
            "role": AdminRole(role).value,
        })
        logger.info(f"Granted {AdminRole(role).value} to {email}")
        return row

    def remove(self, admin_id: Any, acting_role: AdminRole | str | None) -> None:
        """
        Remove an admin row.

        Raises:
            InsufficientRoleError: If the acting admin is not a superadmin
            RecordNotFoundError: If the row doesn't exist
        """
        require_role(acting_role)

        if self.store.get(admin_id) is None:
            raise RecordNotFoundError(ADMIN_TABLE, admin_id)
        self.store.delete(self.store.key_for(admin_id))
        logger.info(f"Removed admin {admin_id}")
