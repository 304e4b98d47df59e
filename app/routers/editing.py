# =============================================================================
# app/routers/editing.py - Editor-Driven Route Helpers
# =============================================================================
# The four media screens (products, gallery, stories, team) share one flow:
#
#   create: begin_add -> attach files -> submit
#   update: fetch -> begin_edit -> drop media by index -> attach -> submit
#   delete: fetch -> delete (storage cleanup, then row)
#
# The routers only translate multipart forms into these calls.
# =============================================================================

import logging
from typing import Any

from fastapi import UploadFile

from app.dependencies import read_uploads
from core.models.catalog import DeleteResponse
from core.services.editors import RecordEditor

logger = logging.getLogger(__name__)


async def create_record(
    editor: RecordEditor,
    form: dict[str, Any],
    files: list[UploadFile] | None,
) -> dict[str, Any]:
    uploads = await read_uploads(files)
    editor.begin_add()
    editor.attach(uploads)
    return await editor.submit(form)


async def update_record(
    editor: RecordEditor,
    record_id: str,
    form: dict[str, Any],
    files: list[UploadFile] | None,
    remove_media: list[int] | None = None,
) -> dict[str, Any]:
    """
    Apply an edit to an existing record.

    `remove_media` holds positions in the record's current media list.
    """
    uploads = await read_uploads(files)
    record = editor.fetch(record_id)
    editor.begin_edit(record)

    # Highest index first so earlier positions stay valid
    for index in sorted(set(remove_media or []), reverse=True):
        editor.remove_media(index)

    editor.attach(uploads)
    return await editor.submit(form)


async def delete_record(editor: RecordEditor, record_id: str, label: str) -> DeleteResponse:
    record = editor.fetch(record_id)
    cleanup = await editor.delete(record)
    if not cleanup.ok:
        logger.warning(f"Deleted {label} {record_id} with storage leftovers: {sorted(cleanup.failed)}")
    return DeleteResponse(
        id=record_id,
        storage=cleanup.to_dict(),
        message=f"{label.capitalize()} deleted successfully",
    )
