# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - catalog.py: products, gallery projects, stories, team members
# - customers.py: quotes and customer profiles
# - admin.py: admin roster and roles
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Catalog Models - records with attached media
# -----------------------------------------------------------------------------
from .catalog import (
    PRODUCT_CATEGORIES,
    DeleteResponse,
    GalleryProjectView,
    GallerySize,
    GalleryType,
    MediaEntryOut,
    ProductView,
    RecordView,
    StoryView,
    TeamMemberView,
)

# -----------------------------------------------------------------------------
# Customer Models - quotes and profiles
# -----------------------------------------------------------------------------
from .customers import (
    CustomerProfile,
    CustomerProfileUpdate,
    Quote,
    QuoteUpdate,
)

# -----------------------------------------------------------------------------
# Admin Models - roster and roles
# -----------------------------------------------------------------------------
from .admin import (
    AdminCreate,
    AdminRecord,
    AdminRole,
)

__all__ = [
    # Catalog
    "PRODUCT_CATEGORIES",
    "DeleteResponse",
    "GalleryProjectView",
    "GallerySize",
    "GalleryType",
    "MediaEntryOut",
    "ProductView",
    "RecordView",
    "StoryView",
    "TeamMemberView",
    # Customers
    "CustomerProfile",
    "CustomerProfileUpdate",
    "Quote",
    "QuoteUpdate",
    # Admin
    "AdminCreate",
    "AdminRecord",
    "AdminRole",
]
