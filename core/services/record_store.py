# =============================================================================
# core/services/record_store.py - Table CRUD
# =============================================================================
# Generic, table-scoped access to the hosted Postgres tables through the
# PostgREST API. Every screen reads and writes through one of these.
# Each call is a single round-trip; there are no transactions.
# =============================================================================

import logging
from typing import Any

from app.exceptions import PersistError
from lib.supabase_client import ADMIN_TABLE, SupabaseClient

logger = logging.getLogger(__name__)

# Tables behind the admin screens
PRODUCTS_TABLE = "products"
GALLERY_TABLE = "gallery"
STORIES_TABLE = "stories"
TEAM_MEMBERS_TABLE = "team_members"
QUOTES_TABLE = "quotes"
PROFILES_TABLE = "profiles"

# Primary key column per table (default "id")
_PK_MAP: dict[str, str] = {
    ADMIN_TABLE: "admin_id",
}


class RecordStore:
    """
    CRUD for one table.

    Args:
        table: Table name
        client: Optional Supabase client; the shared singleton is used otherwise

    Example:
        store = RecordStore("quotes")
        rows = store.select(order_by="created_at", descending=True)
        store.update({"status": "contacted"}, store.key_for(rows[0]["id"]))
    """

    def __init__(self, table: str, client=None):
        self.table = table
        self.primary_key = _PK_MAP.get(table, "id")
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def key_for(self, record_id: Any) -> dict[str, Any]:
        """Match key selecting a single row by primary key."""
        return {self.primary_key: record_id}

    def _apply_match(self, query, match_key: dict[str, Any]):
        for column, value in match_key.items():
            query = query.eq(column, value)
        return query

    def select(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows, optionally filtered by equality and ordered by one column.

        Raises:
            PersistError: If the query fails
        """
        try:
            query = self.client.table(self.table).select("*")
            query = self._apply_match(query, filters or {})
            if order_by:
                query = query.order(order_by, desc=descending)
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to select from {self.table}: {e}")
            raise PersistError(self.table, "select", str(e))

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} rows from {self.table}")
        return rows

    def get(self, record_id: Any) -> dict[str, Any] | None:
        """Fetch one row by primary key, or None."""
        rows = self.select(filters=self.key_for(record_id))
        return rows[0] if rows else None

    def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row.

        Returns:
            The stored row as returned by the API (falls back to the input)

        Raises:
            PersistError: If the insert is rejected
        """
        try:
            response = self.client.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to insert into {self.table}: {e}")
            raise PersistError(self.table, "insert", str(e))

        logger.info(f"Inserted row into {self.table}")
        return response.data[0] if response.data else dict(row)

    def update(self, row: dict[str, Any], match_key: dict[str, Any]) -> dict[str, Any] | None:
        """
        Update the rows matching `match_key` with the columns in `row`.

        Returns:
            The first updated row, or None if nothing matched

        Raises:
            PersistError: If the update is rejected
        """
        try:
            query = self.client.table(self.table).update(row)
            response = self._apply_match(query, match_key).execute()
        except Exception as e:
            logger.error(f"Failed to update {self.table}: {e}")
            raise PersistError(self.table, "update", str(e))

        logger.info(f"Updated {self.table} where {match_key}")
        return response.data[0] if response.data else None

    def delete(self, match_key: dict[str, Any]) -> None:
        """
        Delete the rows matching `match_key`.

        Raises:
            PersistError: If the delete is rejected
        """
        try:
            query = self.client.table(self.table).delete()
            self._apply_match(query, match_key).execute()
        except Exception as e:
            logger.error(f"Failed to delete from {self.table}: {e}")
            raise PersistError(self.table, "delete", str(e))

        logger.info(f"Deleted from {self.table} where {match_key}")
