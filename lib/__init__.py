# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper (tables, auth, admin roster)
# - media.py: Media Reference Codec for the three stored media shapes
# - listing.py: In-memory search and sort for the list screens
# - utils.py: Shared utilities (UUID normalization, filenames, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import ADMIN_TABLE, SupabaseClient, SupabaseClientError
from lib.media import (
    MediaCodec,
    MediaEntry,
    MediaKind,
    MediaReference,
    classify,
    parse_media_field,
)
from lib.listing import search_rows, sort_rows, toggle_order
from lib.utils import epoch_millis, normalize_uuid, sanitize_filename

__all__ = [
    # Supabase
    "ADMIN_TABLE",
    "SupabaseClient",
    "SupabaseClientError",
    # Media
    "MediaCodec",
    "MediaEntry",
    "MediaKind",
    "MediaReference",
    "classify",
    "parse_media_field",
    # Listing
    "search_rows",
    "sort_rows",
    "toggle_order",
    # Utils
    "epoch_millis",
    "normalize_uuid",
    "sanitize_filename",
]
