# =============================================================================
# lib/media.py - Media Reference Codec
# =============================================================================
# A media column ("media", "images", "image_url", ...) can hold one of three
# shapes, because the schema grew without a migration:
#
#   Shape A: empty / NULL
#   Shape B: one bare string, either a full URL or a bucket path
#   Shape C: a JSON-encoded array of strings (URLs and paths mixed)
#
# This module decodes all three once, at the boundary, into a MediaReference
# (an ordered tuple of MediaEntry), and encodes back to Shape C on write.
# Every entry keeps the raw string it was read from next to its resolved URL,
# so deletes use the real storage path instead of reverse-engineering one.
#
# Nothing in here raises on bad input: unparseable fields decode to "no media"
# and are logged.
#
# Usage:
#   codec = MediaCodec("gallery", storage.resolve_public_url)
#   media = codec.normalize(row["media"])
#   row["media"] = codec.encode(media)
#   storage.remove(codec.paths_to_delete(media))
# =============================================================================

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

# A bare string with one of these suffixes is a single entry, not JSON.
# Checked case-sensitively, after the "http" prefix test.
SINGLE_VALUE_SUFFIXES = (".jpg", ".png", ".mp4")

VIDEO_SUFFIXES = (".mp4",)


class MediaKind(str, Enum):
    """How a stored media string must be interpreted."""
    REMOTE_URL = "remoteUrl"  # fully-qualified, fetch as-is
    STORAGE_PATH = "storagePath"  # bucket-relative key, needs resolving


def classify(raw: str) -> MediaKind:
    """Classify a raw media string by syntax alone."""
    if raw.startswith("http"):
        return MediaKind.REMOTE_URL
    return MediaKind.STORAGE_PATH


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class MediaEntry:
    """
    One attached media item.

    Attributes:
        kind: REMOTE_URL or STORAGE_PATH
        raw: The string exactly as read from (or written to) the table
        resolved_url: A fetchable URL; equals raw for REMOTE_URL entries
    """
    kind: MediaKind
    raw: str
    resolved_url: str

    @property
    def canonical(self) -> str:
        """The string to persist: the storage path whenever one is known."""
        return self.raw

    @property
    def is_video(self) -> bool:
        return urlsplit(self.resolved_url).path.lower().endswith(VIDEO_SUFFIXES)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "raw": self.raw,
            "url": self.resolved_url,
            "is_video": self.is_video,
        }


@dataclass(frozen=True)
class MediaReference:
    """
    All media attached to one record, in display order.

    Built fresh on every read and never shared between records.
    An empty reference is a valid value, never None.
    """
    entries: tuple[MediaEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[MediaEntry]:
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def first(self) -> MediaEntry | None:
        return self.entries[0] if self.entries else None

    @property
    def urls(self) -> list[str]:
        return [entry.resolved_url for entry in self.entries]

    def appended(self, *entries: MediaEntry) -> "MediaReference":
        """Return a new reference with entries added at the end."""
        return MediaReference(self.entries + tuple(entries))

    def without(self, index: int) -> tuple["MediaReference", MediaEntry]:
        """
        Return a new reference with the entry at `index` dropped, and that entry.

        Raises:
            IndexError: If index is out of range (negative indexes are rejected)
        """
        if index < 0 or index >= len(self.entries):
            raise IndexError(f"media index out of range: {index}")
        removed = self.entries[index]
        return MediaReference(self.entries[:index] + self.entries[index + 1:]), removed

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]


# =============================================================================
# Decoding
# =============================================================================

def parse_media_field(raw_field: Any) -> list[str]:
    """
    Decode a persisted media field (Shape A, B or C) into raw strings.

    Args:
        raw_field: None, a string, or an already-parsed list

    Returns:
        The raw strings in stored order. Empty on any ambiguity.
    """
    if raw_field is None:
        return []

    if isinstance(raw_field, (list, tuple)):
        items = list(raw_field)
    elif isinstance(raw_field, str):
        if not raw_field.strip():
            return []
        if raw_field.startswith("http") or raw_field.endswith(SINGLE_VALUE_SUFFIXES):
            return [raw_field]
        try:
            parsed = json.loads(raw_field)
        except ValueError as e:
            logger.warning(f"Unparseable media field {raw_field[:80]!r}: {e}")
            return []
        if not isinstance(parsed, list):
            logger.warning(f"Media field is JSON but not an array: {raw_field[:80]!r}")
            return []
        items = parsed
    else:
        logger.warning(f"Unexpected media field type: {type(raw_field).__name__}")
        return []

    values = []
    for item in items:
        if isinstance(item, str) and item.strip():
            values.append(item)
        else:
            logger.warning(f"Skipping media element {item!r}")
    return values


def _entries_of(media: MediaReference | Iterable[MediaEntry] | None) -> tuple[MediaEntry, ...]:
    if media is None:
        return ()
    if isinstance(media, MediaReference):
        return media.entries
    return tuple(media)


# =============================================================================
# Codec
# =============================================================================

class MediaCodec:
    """
    Converts between persisted media fields and MediaReference for one folder.

    Args:
        folder: Bucket folder of the record type ("products", "gallery",
            "stories", "team-members"); used to derive delete paths from URLs
        resolve_url: Maps a storage path to its public URL. Must not fail.
    """

    def __init__(self, folder: str, resolve_url: Callable[[str], str]):
        self.folder = folder.strip("/")
        self._resolve_url = resolve_url

    def entry_for(self, raw: str) -> MediaEntry:
        """Build an entry from one raw string, resolving storage paths."""
        kind = classify(raw)
        if kind is MediaKind.REMOTE_URL:
            return MediaEntry(kind=kind, raw=raw, resolved_url=raw)
        return MediaEntry(kind=kind, raw=raw, resolved_url=self._resolve_url(raw))

    def normalize(self, raw_field: Any) -> MediaReference:
        """
        Decode any persisted shape into a MediaReference.

        An existing MediaReference is returned unchanged, so normalizing twice
        is a no-op.
        """
        if isinstance(raw_field, MediaReference):
            return raw_field
        return MediaReference(tuple(self.entry_for(raw) for raw in parse_media_field(raw_field)))

    def encode(self, media: MediaReference | Iterable[MediaEntry] | None) -> str | None:
        """
        Encode entries for persistence.

        Returns:
            A compact JSON array of canonical strings (Shape C), or None
            (Shape A) when there are no entries
        """
        entries = _entries_of(media)
        if not entries:
            return None
        return json.dumps([entry.canonical for entry in entries], separators=(",", ":"))

    def paths_to_delete(self, media: MediaReference | Iterable[MediaEntry] | None) -> set[str]:
        """
        Storage paths to remove when these entries are deleted or replaced.

        Storage paths are used verbatim. For URLs the last path segment is
        prefixed with this codec's folder; this is a best guess and may name
        an object that doesn't exist.
        """
        paths: set[str] = set()
        for entry in _entries_of(media):
            if entry.kind is MediaKind.STORAGE_PATH:
                paths.add(entry.raw)
                continue

            segment = unquote(urlsplit(entry.raw).path.rsplit("/", 1)[-1])
            if not segment:
                logger.warning(f"Cannot derive a storage path from {entry.raw!r}")
                continue
            paths.add(f"{self.folder}/{segment}")
        return paths
