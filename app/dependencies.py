# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and overridden in
# tests with app.dependency_overrides.
#
# A fresh editor is built for every request: an editor is one edit session.
# =============================================================================

import logging
from typing import Annotated

from fastapi import Depends, UploadFile

from app.config import settings
from app.exceptions import FileTooLargeError, InvalidMediaFileError
from core.services.admin_service import AdminService
from core.services.customer_service import ProfileService, QuoteService
from core.services.editors import (
    GalleryEditor,
    PendingUpload,
    ProductEditor,
    StoryEditor,
    TeamMemberEditor,
)
from core.services.storage_service import StorageGateway

logger = logging.getLogger(__name__)


def get_storage_gateway() -> StorageGateway:
    """Gateway to the media bucket (shared Supabase client underneath)."""
    return StorageGateway()


StorageDep = Annotated[StorageGateway, Depends(get_storage_gateway)]


def get_product_editor(storage: StorageDep) -> ProductEditor:
    return ProductEditor(storage)


def get_gallery_editor(storage: StorageDep) -> GalleryEditor:
    return GalleryEditor(storage)


def get_story_editor(storage: StorageDep) -> StoryEditor:
    return StoryEditor(storage)


def get_team_editor(storage: StorageDep) -> TeamMemberEditor:
    return TeamMemberEditor(storage)


def get_quote_service() -> QuoteService:
    return QuoteService()


def get_profile_service() -> ProfileService:
    return ProfileService()


def get_admin_service() -> AdminService:
    return AdminService()


# Type aliases for dependency injection
ProductEditorDep = Annotated[ProductEditor, Depends(get_product_editor)]
GalleryEditorDep = Annotated[GalleryEditor, Depends(get_gallery_editor)]
StoryEditorDep = Annotated[StoryEditor, Depends(get_story_editor)]
TeamEditorDep = Annotated[TeamMemberEditor, Depends(get_team_editor)]
QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]


async def read_uploads(files: list[UploadFile] | None) -> list[PendingUpload]:
    """
    Read attached files into memory, checking type and size.

    Empty file inputs (no filename, no content) are ignored.

    Raises:
        InvalidMediaFileError: If a file isn't an accepted media type
        FileTooLargeError: If a file exceeds MAX_UPLOAD_SIZE_MB
    """
    allowed = settings.allowed_media_types_list
    pending = []
    for file in files or []:
        if not file.filename:
            continue

        content_type = (file.content_type or "").lower()
        if not any(content_type.startswith(prefix) for prefix in allowed):
            raise InvalidMediaFileError(file.filename, file.content_type, allowed)

        content = await file.read()
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(
                file.filename,
                len(content) / (1024 * 1024),
                settings.MAX_UPLOAD_SIZE_MB,
            )

        logger.debug(f"Received {file.filename} ({len(content)} bytes, {content_type})")
        pending.append(PendingUpload(file.filename, content, file.content_type))
    return pending
