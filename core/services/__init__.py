# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .record_store import RecordStore
from .storage_service import CleanupResult, StorageGateway, build_upload_path
from .editors import (
    EditorState,
    GalleryEditor,
    PendingUpload,
    ProductEditor,
    RecordEditor,
    StoryEditor,
    TeamMemberEditor,
)
from .customer_service import ProfileService, QuoteService
from .admin_service import AdminService, require_role

__all__ = [
    "RecordStore",
    "CleanupResult",
    "StorageGateway",
    "build_upload_path",
    "EditorState",
    "GalleryEditor",
    "PendingUpload",
    "ProductEditor",
    "RecordEditor",
    "StoryEditor",
    "TeamMemberEditor",
    "ProfileService",
    "QuoteService",
    "AdminService",
    "require_role",
]
