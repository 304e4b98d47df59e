# =============================================================================
# core/models/catalog.py - Catalog Record Schemas
# =============================================================================
# Schemas for the records that carry media:
# - products: furniture listings (multi-image)
# - gallery: showcase projects (images and video)
# - stories: time-limited promotional posts (single asset)
# - team_members: staff profiles (single portrait)
#
# Media always goes out as a list of MediaEntryOut, whatever shape the
# column had in the table.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


PRODUCT_CATEGORIES = ["Living Room", "Bedroom", "Office", "Kitchen"]


class GalleryType(str, Enum):
    """What a gallery project showcases."""
    IMAGE = "image"
    VIDEO = "video"
    DELIVERY = "delivery"


class GallerySize(str, Enum):
    """Tile size of a project on the public gallery page."""
    LARGE = "large"
    MEDIUM = "medium"
    SMALL = "small"


class MediaEntryOut(BaseModel):
    """
    One attached media item as returned to clients.

    Example:
        {
            "kind": "storagePath",
            "raw": "gallery/1700000000000-sofa.png",
            "url": "https://xxx.supabase.co/storage/v1/object/public/product-images/gallery/1700000000000-sofa.png",
            "is_video": false
        }
    """
    kind: str = Field(..., description="remoteUrl or storagePath")
    raw: str = Field(..., description="Value as stored in the table")
    url: str = Field(..., description="Publicly fetchable URL")
    is_video: bool = Field(default=False)


class RecordView(BaseModel):
    """
    Base for every media-carrying record returned by the API.

    Unknown columns are passed through untouched so the console keeps
    working when the table grows.
    """
    model_config = ConfigDict(extra="allow")

    id: Any = Field(..., description="Primary key")
    created_at: datetime | None = None
    media: list[MediaEntryOut] = Field(
        default_factory=list,
        description="Normalized media, in display order"
    )
    media_raw: Any = Field(
        default=None,
        description="The media column exactly as stored"
    )


class ProductView(RecordView):
    name: str | None = None
    price: float | None = None
    category: str | None = None
    media_source: str | None = Field(
        default=None,
        description="Column the media was read from: images, legacy_image or image"
    )


class GalleryProjectView(RecordView):
    type: str | None = None
    title: str | None = None
    description: str | None = None
    size: str | None = None


class StoryView(RecordView):
    title: str | None = None
    description: str | None = None
    expires_at: datetime | None = None


class TeamMemberView(RecordView):
    name: str | None = None
    role: str | None = None


class DeleteResponse(BaseModel):
    """Result of deleting a record and cleaning up its media."""
    id: Any
    deleted: bool = True
    storage: dict[str, Any] = Field(
        default_factory=dict,
        description="Storage cleanup outcome: removed paths and failures"
    )
    message: str = "Record deleted successfully"
