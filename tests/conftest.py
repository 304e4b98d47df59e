# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-ins for the record store and the storage bucket, so
#   editor scenarios can be checked end to end without a Supabase project
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("STORAGE_BUCKET", "product-images")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from typing import Any

import pytest

from app.exceptions import PersistError, UploadFailedError
from core.services.storage_service import CleanupResult, build_upload_path

PUBLIC_BASE = "https://test-project.supabase.co/storage/v1/object/public/product-images"


# =============================================================================
# Fakes
# =============================================================================

class FakeStorage:
    """
    In-memory bucket with the StorageGateway interface.

    Set `fail_uploads` to filename fragments whose upload should be rejected.
    """

    def __init__(self, objects: dict[str, bytes] | None = None):
        self.objects = dict(objects or {})
        self.uploads: list[str] = []
        self.remove_calls: list[list[str]] = []
        self.fail_uploads: set[str] = set()

    build_upload_path = staticmethod(build_upload_path)

    def upload(self, path: str, blob: bytes, content_type: str | None = None) -> str:
        if any(fragment in path for fragment in self.fail_uploads):
            raise UploadFailedError(path, "bucket rejected the upload")
        self.objects[path] = blob
        self.uploads.append(path)
        return path

    def resolve_public_url(self, path: str) -> str:
        return f"{PUBLIC_BASE}/{path}"

    def remove(self, paths) -> CleanupResult:
        paths = sorted(set(paths))
        self.remove_calls.append(paths)
        result = CleanupResult()
        for path in paths:
            if path in self.objects:
                del self.objects[path]
                result.removed.append(path)
            else:
                result.failed[path] = "object not found"
        return result

    @property
    def removed_paths(self) -> set[str]:
        return {p for call in self.remove_calls for p in call}


class FakeStore:
    """
    In-memory table with the RecordStore interface.

    Ids are compared as strings, like PostgREST filters from a URL path.
    Add an operation name to `fail_on` to make it raise PersistError.
    """

    def __init__(self, table: str, rows: list[dict[str, Any]] | None = None, primary_key: str = "id"):
        self.table = table
        self.primary_key = primary_key
        self.rows = [dict(r) for r in rows or []]
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()
        self._next_id = max(
            (r[primary_key] for r in self.rows if isinstance(r.get(primary_key), int)),
            default=0,
        ) + 1

    def key_for(self, record_id: Any) -> dict[str, Any]:
        return {self.primary_key: record_id}

    @staticmethod
    def _matches(row: dict[str, Any], match_key: dict[str, Any]) -> bool:
        return all(str(row.get(k)) == str(v) for k, v in match_key.items())

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise PersistError(self.table, operation, "permission denied")

    def select(self, filters=None, order_by=None, descending=False):
        self.calls.append(("select", filters))
        self._check("select")
        rows = [dict(r) for r in self.rows if self._matches(r, filters or {})]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    def get(self, record_id):
        rows = self.select(filters=self.key_for(record_id))
        return rows[0] if rows else None

    def insert(self, row):
        self.calls.append(("insert", dict(row)))
        self._check("insert")
        stored = {
            self.primary_key: self._next_id,
            "created_at": f"2024-06-01T10:00:{self._next_id:02d}+00:00",
            **row,
        }
        self._next_id += 1
        self.rows.append(stored)
        return dict(stored)

    def update(self, row, match_key):
        self.calls.append(("update", dict(row)))
        self._check("update")
        updated = None
        for stored in self.rows:
            if self._matches(stored, match_key):
                stored.update(row)
                updated = updated or dict(stored)
        return updated

    def delete(self, match_key):
        self.calls.append(("delete", dict(match_key)))
        self._check("delete")
        self.rows = [r for r in self.rows if not self._matches(r, match_key)]

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def storage():
    """Empty in-memory bucket."""
    return FakeStorage()


@pytest.fixture
def make_store():
    """Factory for in-memory tables."""
    def _make(table: str, rows=None, primary_key: str = "id") -> FakeStore:
        return FakeStore(table, rows, primary_key)
    return _make


@pytest.fixture
def sample_gallery_row():
    """A gallery row written by the current console (Shape C)."""
    return {
        "id": 7,
        "created_at": "2024-05-20T09:30:00+00:00",
        "type": "image",
        "title": "Corner Sofa",
        "description": "Delivered to a client in Pune",
        "size": "large",
        "media": '["gallery/1716197400000-corner.png","gallery/1716197400001-detail.png"]',
    }


@pytest.fixture
def sample_team_row():
    """A team member row from before the JSON column format (Shape B URL)."""
    return {
        "id": 3,
        "created_at": "2023-11-02T12:00:00+00:00",
        "name": "Ravi Kulkarni",
        "role": "Designer",
        "image_url": f"{PUBLIC_BASE}/team-members/1698926400000-ravi.jpg",
    }
