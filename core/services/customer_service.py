# =============================================================================
# core/services/customer_service.py - Quotes and Customer Profiles
# =============================================================================
# The two customer-facing tables carry no media, so there is no editor state
# machine here: list, partial update, delete.
#
# Quotes are ordered by the server; profiles are fetched once and sorted in
# memory, matching how the console screens behave.
# =============================================================================

import logging
from typing import Any

from app.exceptions import RecordNotFoundError
from core.services.record_store import PROFILES_TABLE, QUOTES_TABLE, RecordStore
from lib.listing import search_rows, sort_rows

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street_address", "city", "district", "state")


class CustomerRecordService:
    """
    List/update/delete for a table without media.

    Subclasses name the table, the searchable columns and the columns an
    update may touch.
    """

    table: str = ""
    search_fields: tuple[str, ...] = ()
    search_composites: tuple[tuple[str, ...], ...] = ()
    editable_fields: tuple[str, ...] = ()

    def __init__(self, store: RecordStore | None = None):
        self.store = store or RecordStore(self.table)

    def search(self, rows: list[dict[str, Any]], query: str | None) -> list[dict[str, Any]]:
        return search_rows(rows, query, self.search_fields, self.search_composites)

    def update(self, record_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Write only the fields that were sent.

        Raises:
            RecordNotFoundError: If no row has this id
            PersistError: If the update is rejected
        """
        row = {
            k: v for k, v in changes.items()
            if k in self.editable_fields and v is not None
        }
        existing = self.store.get(record_id)
        if existing is None:
            raise RecordNotFoundError(self.table, record_id)
        if not row:
            return existing

        updated = self.store.update(row, self.store.key_for(record_id))
        return updated if updated is not None else {**existing, **row}

    def delete(self, record_id: Any) -> None:
        if self.store.get(record_id) is None:
            raise RecordNotFoundError(self.table, record_id)
        self.store.delete(self.store.key_for(record_id))
        logger.info(f"Deleted {self.table} record {record_id}")


class QuoteService(CustomerRecordService):
    """Quote requests submitted from the storefront."""

    table = QUOTES_TABLE
    search_fields = ("name", "email")
    search_composites = (ADDRESS_FIELDS,)
    editable_fields = ("name", "email", "phone") + ADDRESS_FIELDS

    SORT_FIELDS = ("created_at", "name", "email")

    def list(
        self,
        query: str | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Quotes in server order, then filtered.

        Args:
            query: Substring matched against name, email and the full address
            sort_by: One of SORT_FIELDS
            descending: Sort direction
        """
        if sort_by not in self.SORT_FIELDS:
            sort_by = "created_at"
        rows = self.store.select(order_by=sort_by, descending=descending)
        return self.search(rows, query)


class ProfileService(CustomerRecordService):
    """Customer profiles."""

    table = PROFILES_TABLE
    search_fields = ("full_name", "email", "phone")
    search_composites = (("city", "district", "state"),)
    editable_fields = ("full_name", "email", "phone", "city", "district", "state")

    SORT_FIELDS = ("full_name", "email", "phone", "city", "created_at")

    def list(
        self,
        query: str | None = None,
        sort_by: str | None = None,
        descending: bool | None = None,
    ) -> list[dict[str, Any]]:
        """
        Search, then sort in memory.

        Without a known `sort_by` the newest profiles come first.
        """
        if sort_by not in self.SORT_FIELDS:
            sort_by = "created_at"
            descending = True if descending is None else descending
        rows = self.search(self.store.select(), query)
        return sort_rows(rows, sort_by, bool(descending))
