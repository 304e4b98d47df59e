#!/usr/bin/env python3
# =============================================================================
# scripts/grant_admin.py - Grant Console Access
# =============================================================================
# Puts an existing auth user on the admin roster, or changes their role.
# This is how the first superadmin is created; after that, superadmins can
# manage the roster through the API.
#
# Usage:
#   python scripts/grant_admin.py owner@shop.com --role superadmin
#   python scripts/grant_admin.py manager@shop.com
#
# Prerequisites:
#   - The user has signed up (exists in Supabase Auth)
#   - SUPABASE_URL / SUPABASE_SERVICE_KEY set (.env file)
# =============================================================================

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.exceptions import PersistError
from core.models.admin import AdminRole
from core.services.record_store import RecordStore
from lib.supabase_client import ADMIN_TABLE, SupabaseClient, SupabaseClientError


def grant(email: str, role: AdminRole) -> str:
    """
    Insert or update the user's admin row.

    Returns:
        "added" or "updated"

    Raises:
        LookupError: If no auth user has this email
    """
    user_id = SupabaseClient.find_user_id_by_email(email)
    if not user_id:
        raise LookupError(f"No registered user with email {email}")

    store = RecordStore(ADMIN_TABLE)
    if store.select(filters={"user_id": user_id}):
        store.update({"role": role.value}, {"user_id": user_id})
        return "updated"

    store.insert({"user_id": user_id, "email": email, "role": role.value})
    return "added"


def main():
    parser = argparse.ArgumentParser(description="Grant admin console access to a registered user")
    parser.add_argument("email", help="Email the user signed up with")
    parser.add_argument(
        "--role",
        choices=[r.value for r in AdminRole],
        default=AdminRole.ADMIN.value,
        help="Role to grant (default: admin)",
    )
    args = parser.parse_args()

    try:
        outcome = grant(args.email.strip(), AdminRole(args.role))
    except (LookupError, PersistError, SupabaseClientError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"{args.email}: {outcome} as {args.role}")


if __name__ == "__main__":
    main()
