# =============================================================================
# core/services/editors.py - Record Editors
# =============================================================================
# One editor per media-carrying screen (products, gallery, stories, team).
# An editor instance is one edit session and owns its working copy of the
# record's media. It moves through:
#
#   viewing -> editing-new | editing-existing -> submitting -> viewing
#
# On submit every pending upload runs concurrently and all of them must
# succeed before the row is written; a failed upload or write puts the
# editor back in its editing state with the form and files intact.
# Deleting cleans up storage first, then deletes the row whatever the
# cleanup outcome was.
# =============================================================================

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from app.exceptions import (
    EditorStateError,
    FormValidationError,
    RecordNotFoundError,
    UploadFailedError,
)
from core.models.catalog import PRODUCT_CATEGORIES, GallerySize, GalleryType
from core.services.record_store import (
    GALLERY_TABLE,
    PRODUCTS_TABLE,
    STORIES_TABLE,
    TEAM_MEMBERS_TABLE,
    RecordStore,
)
from core.services.storage_service import (
    GALLERY_FOLDER,
    PRODUCTS_FOLDER,
    STORIES_FOLDER,
    TEAM_MEMBERS_FOLDER,
    CleanupResult,
    StorageGateway,
)
from lib.media import MediaCodec, MediaEntry, MediaReference, parse_media_field
from lib.utils import epoch_millis

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    VIEWING = "viewing"
    EDITING_NEW = "editing-new"
    EDITING_EXISTING = "editing-existing"
    SUBMITTING = "submitting"


_EDITING_STATES = (EditorState.EDITING_NEW, EditorState.EDITING_EXISTING)


@dataclass
class PendingUpload:
    """A local file attached to the form but not uploaded yet."""
    filename: str
    content: bytes
    content_type: str | None = None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class RecordEditor:
    """
    Base edit session for a table whose rows carry media.

    Subclasses set the table, bucket folder, media column and form fields,
    and may override clean() for field checks and media_columns() for
    tables that store media in more than one column.

    Example:
        editor = GalleryEditor(StorageGateway())
        editor.begin_add()
        editor.attach([PendingUpload("sofa.png", data, "image/png")])
        project = await editor.submit({"title": "Sofa Set", "description": "..."})
    """

    table: str = ""
    folder: str = ""
    media_column: str = "media"
    form_fields: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ()
    defaults: dict[str, Any] = {}
    multiple_files: bool = True
    media_required_on_add: bool = True
    # New uploads replace the existing set instead of being appended
    replace_media_on_upload: bool = False

    def __init__(self, storage: StorageGateway, store: RecordStore | None = None):
        self.storage = storage
        self.store = store or RecordStore(self.table)
        self.codec = MediaCodec(self.folder, storage.resolve_public_url)
        self.state = EditorState.VIEWING
        self._discard()

    def _discard(self) -> None:
        self.record: dict[str, Any] | None = None
        self.media = MediaReference()
        self.pending: list[PendingUpload] = []
        self.removed: list[MediaEntry] = []

    def _require(self, action: str, *states: EditorState) -> None:
        if self.state not in states:
            raise EditorStateError(action, self.state.value)

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def media_source(self, record: dict[str, Any]) -> str | None:
        """Column the record's media is read from."""
        return self.media_column

    def read_media(self, record: dict[str, Any]) -> MediaReference:
        source = self.media_source(record)
        return self.codec.normalize(record.get(source) if source else None)

    def media_for_cleanup(self, record: dict[str, Any]) -> MediaReference:
        """Everything in storage that belongs to this record."""
        return self.read_media(record)

    def present(self, record: dict[str, Any]) -> dict[str, Any]:
        """Row as returned to clients, with media normalized."""
        source = self.media_source(record)
        view = dict(record)
        view["media_raw"] = record.get(source) if source else None
        view["media"] = self.read_media(record).to_list()
        return view

    def list_records(self, order_by: str | None = None, descending: bool = False) -> list[dict[str, Any]]:
        rows = self.store.select(order_by=order_by, descending=descending)
        return [self.present(row) for row in rows]

    def fetch(self, record_id: Any) -> dict[str, Any]:
        """
        Load one row.

        Raises:
            RecordNotFoundError: If no row has this id
        """
        record = self.store.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.table, record_id)
        return record

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def begin_add(self) -> None:
        self._require("add", EditorState.VIEWING)
        self._discard()
        self.state = EditorState.EDITING_NEW

    def begin_edit(self, record: dict[str, Any]) -> None:
        self._require("edit", EditorState.VIEWING)
        self._discard()
        self.record = dict(record)
        self.media = self.read_media(record)
        self.state = EditorState.EDITING_EXISTING

    def cancel(self) -> None:
        self._require("cancel", *_EDITING_STATES)
        self._discard()
        self.state = EditorState.VIEWING

    def attach(self, files: list[PendingUpload]) -> None:
        """Queue local files for upload on submit."""
        self._require("attach files", *_EDITING_STATES)
        files = [f for f in files if f is not None]
        if not self.multiple_files and len(self.pending) + len(files) > 1:
            raise FormValidationError([self.media_column], "Only one file can be attached")
        self.pending.extend(files)

    def remove_media(self, index: int) -> MediaEntry:
        """Drop one working entry; its object is deleted after a successful write."""
        self._require("remove media", *_EDITING_STATES)
        try:
            self.media, removed = self.media.without(index)
        except IndexError:
            raise FormValidationError([self.media_column], f"No media at position {index}")
        self.removed.append(removed)
        return removed

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _effective_form(self, form: dict[str, Any]) -> dict[str, Any]:
        # Editing starts from the stored values; fields left out are unchanged
        if self.state is EditorState.EDITING_EXISTING and self.record is not None:
            values = {f: self.record.get(f) for f in self.form_fields if f in self.record}
        else:
            values = dict(self.defaults)
        values.update({
            k: v for k, v in form.items()
            if k in self.form_fields and v is not None
        })
        return values

    def validate(self, form: dict[str, Any]) -> dict[str, Any]:
        """
        Check required fields before any network call.

        Returns:
            The cleaned field values to write

        Raises:
            FormValidationError: If a field is missing or invalid
        """
        values = self._effective_form(form)
        missing = [f for f in self.required_fields if _is_blank(values.get(f))]
        if (
            self.state is EditorState.EDITING_NEW
            and self.media_required_on_add
            and not self.pending
            and self.media.is_empty
        ):
            missing.append(self.media_column)
        if missing:
            raise FormValidationError(missing)
        return self.clean(values)

    def clean(self, values: dict[str, Any]) -> dict[str, Any]:
        return values

    def _changed(self, values: dict[str, Any], field: str) -> bool:
        return self.record is None or values.get(field) != self.record.get(field)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def media_columns(self, media: MediaReference) -> dict[str, Any]:
        return {self.media_column: self.codec.encode(media)}

    async def _upload_pending(self) -> list[MediaEntry]:
        if not self.pending:
            return []

        base = epoch_millis()
        paths = [
            self.storage.build_upload_path(self.folder, f.filename, base + i)
            for i, f in enumerate(self.pending)
        ]
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.storage.upload, path, f.content, f.content_type)
                for path, f in zip(paths, self.pending)
            ),
            return_exceptions=True,
        )

        failures = [(p, r) for p, r in zip(paths, results) if isinstance(r, BaseException)]
        if failures:
            stored = [r for r in results if not isinstance(r, BaseException)]
            if stored:
                self.storage.remove(stored)
            path, error = failures[0]
            logger.error(f"Aborting {self.table} submit: {len(failures)} of {len(paths)} uploads failed")
            if isinstance(error, UploadFailedError):
                raise error
            raise UploadFailedError(path, str(error))

        return [self.codec.entry_for(path) for path in results]

    def _merge_media(self, uploaded: list[MediaEntry]) -> tuple[MediaReference, list[MediaEntry]]:
        """Working media after this submit, and the entries it replaces."""
        if uploaded and self.replace_media_on_upload:
            return MediaReference(tuple(uploaded)), list(self.media.entries)
        return self.media.appended(*uploaded), []

    def _write(self, prior: EditorState, row: dict[str, Any]) -> dict[str, Any]:
        if prior is EditorState.EDITING_NEW:
            return self.store.insert(row)
        key = self.store.key_for(self.record[self.store.primary_key])
        updated = self.store.update(row, key)
        return updated if updated is not None else {**self.record, **row}

    async def submit(self, form: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Upload pending files, then insert or update the row.

        Returns:
            The saved row, presented

        Raises:
            EditorStateError: If not editing (or already submitting)
            FormValidationError: Before any network call
            UploadFailedError: Nothing was written; editor stays in its editing state
            PersistError: The write was rejected; editor stays in its editing state
        """
        self._require("submit", *_EDITING_STATES)
        values = self.validate(form or {})

        prior = self.state
        self.state = EditorState.SUBMITTING
        uploaded: list[MediaEntry] = []
        try:
            uploaded = await self._upload_pending()
            media, replaced = self._merge_media(uploaded)

            row = {f: values[f] for f in self.form_fields if f in values}
            if uploaded or self.removed or prior is EditorState.EDITING_NEW:
                row.update(self.media_columns(media))

            saved = self._write(prior, row)
        except Exception:
            self.state = prior
            if uploaded:
                self.storage.remove(entry.raw for entry in uploaded)
            raise

        stale = self.removed + replaced
        if stale:
            cleanup = self.storage.remove(self.codec.paths_to_delete(stale))
            if not cleanup.ok:
                logger.warning(f"Replaced media left behind in storage: {sorted(cleanup.failed)}")

        logger.info(f"Saved {self.table} record ({len(uploaded)} new files)")
        self.state = EditorState.VIEWING
        self._discard()
        return self.present(saved)

    async def delete(self, record: dict[str, Any]) -> CleanupResult:
        """
        Remove the record's media from storage, then delete the row.

        The row delete is not gated on the storage cleanup.

        Raises:
            PersistError: If the row delete is rejected
        """
        self._require("delete", EditorState.VIEWING)
        paths = self.codec.paths_to_delete(self.media_for_cleanup(record))
        if paths:
            cleanup = await asyncio.to_thread(self.storage.remove, paths)
        else:
            cleanup = CleanupResult()

        self.store.delete(self.store.key_for(record[self.store.primary_key]))
        return cleanup


# =============================================================================
# Screens
# =============================================================================

class ProductEditor(RecordEditor):
    """
    Product listings.

    Media lives in `images` (JSON array). Older rows only have the single
    `legacy_image` or `image` column; those are read only when `images` is
    absent. Writes fill `images`, mirror the first entry to `legacy_image`
    and clear `image`.
    """

    table = PRODUCTS_TABLE
    folder = PRODUCTS_FOLDER
    media_column = "images"
    form_fields = ("name", "price", "category")
    required_fields = ("name", "price", "category")
    replace_media_on_upload = True

    MEDIA_COLUMNS = ("images", "legacy_image", "image")

    def media_source(self, record: dict[str, Any]) -> str | None:
        for column in self.MEDIA_COLUMNS:
            if parse_media_field(record.get(column)):
                return column
        return None

    def media_for_cleanup(self, record: dict[str, Any]) -> MediaReference:
        entries = []
        for column in self.MEDIA_COLUMNS:
            entries.extend(self.codec.normalize(record.get(column)))
        return MediaReference(tuple(entries))

    def present(self, record: dict[str, Any]) -> dict[str, Any]:
        view = super().present(record)
        view["media_source"] = self.media_source(record)
        return view

    def media_columns(self, media: MediaReference) -> dict[str, Any]:
        first = media.first
        columns = {
            "images": self.codec.encode(media),
            "legacy_image": first.canonical if first else None,
        }
        # The oldest column is retired on write so reads never fall back to it
        if self.record is not None and "image" in self.record:
            columns["image"] = None
        return columns

    def clean(self, values: dict[str, Any]) -> dict[str, Any]:
        try:
            price = float(values["price"])
        except (TypeError, ValueError):
            raise FormValidationError(["price"], "Price must be a number")
        if not math.isfinite(price):
            raise FormValidationError(["price"], "Price must be a finite number")
        if price < 0:
            raise FormValidationError(["price"], "Price cannot be negative")

        if self._changed(values, "category") and values["category"] not in PRODUCT_CATEGORIES:
            raise FormValidationError(
                ["category"],
                f"Category must be one of: {', '.join(PRODUCT_CATEGORIES)}"
            )

        return {**values, "price": int(price) if price.is_integer() else price}


class GalleryEditor(RecordEditor):
    """Gallery projects: several images or videos, appended on edit."""

    table = GALLERY_TABLE
    folder = GALLERY_FOLDER
    media_column = "media"
    form_fields = ("type", "title", "description", "size")
    required_fields = ("title", "description")
    defaults = {"type": GalleryType.IMAGE.value, "size": GallerySize.MEDIUM.value}

    def clean(self, values: dict[str, Any]) -> dict[str, Any]:
        allowed_types = [t.value for t in GalleryType]
        allowed_sizes = [s.value for s in GallerySize]
        if self._changed(values, "type") and values.get("type") not in allowed_types:
            raise FormValidationError(["type"], f"Type must be one of: {', '.join(allowed_types)}")
        if self._changed(values, "size") and values.get("size") not in allowed_sizes:
            raise FormValidationError(["size"], f"Size must be one of: {', '.join(allowed_sizes)}")
        return values


class StoryEditor(RecordEditor):
    """Stories: one image or video, optionally expiring."""

    table = STORIES_TABLE
    folder = STORIES_FOLDER
    media_column = "media"
    form_fields = ("title", "description", "expires_at")
    required_fields = ("title", "description")
    multiple_files = False
    replace_media_on_upload = True

    def clean(self, values: dict[str, Any]) -> dict[str, Any]:
        expires_at = values.get("expires_at")
        if _is_blank(expires_at):
            return {**values, "expires_at": None}
        if isinstance(expires_at, str):
            try:
                datetime.fromisoformat(expires_at.replace("Z", "+00:00"))
            except ValueError:
                raise FormValidationError(["expires_at"], "Expiry must be an ISO date and time")
        return values


class TeamMemberEditor(RecordEditor):
    """Team members: one portrait in `image_url`."""

    table = TEAM_MEMBERS_TABLE
    folder = TEAM_MEMBERS_FOLDER
    media_column = "image_url"
    form_fields = ("name", "role")
    required_fields = ("name", "role")
    multiple_files = False
    replace_media_on_upload = True
