# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
import time
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Filename Utilities
# =============================================================================

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_filename(filename: str) -> str:
    """
    Replace every run of whitespace in a filename with a single hyphen.

    Example:
        sanitize_filename("living room  sofa.png")  # "living-room-sofa.png"
    """
    return _WHITESPACE_RUN.sub("-", filename)


def epoch_millis() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)
