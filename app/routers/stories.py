# =============================================================================
# app/routers/stories.py - Story Endpoints
# =============================================================================
# Stories carry a single image or video and an optional expiry.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.auth import SessionDep
from app.dependencies import StoryEditorDep
from app.routers.editing import create_record, delete_record, update_record
from core.models.catalog import DeleteResponse, StoryView

router = APIRouter()


@router.get("", response_model=list[StoryView])
async def list_stories(session: SessionDep, editor: StoryEditorDep):
    """List stories, newest first."""
    return editor.list_records(order_by="created_at", descending=True)


@router.post("", response_model=StoryView, status_code=status.HTTP_201_CREATED)
async def create_story(
    session: SessionDep,
    editor: StoryEditorDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    expires_at: Annotated[str | None, Form(description="ISO date and time")] = None,
    file: Annotated[UploadFile | None, File(description="Image or video")] = None,
):
    return await create_record(
        editor,
        {"title": title, "description": description, "expires_at": expires_at},
        [file] if file else None,
    )


@router.patch("/{story_id}", response_model=StoryView)
async def update_story(
    session: SessionDep,
    editor: StoryEditorDep,
    story_id: Annotated[str, Path(description="Story ID")],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    expires_at: Annotated[str | None, Form(description="ISO date and time")] = None,
    file: Annotated[UploadFile | None, File(description="Replacement image or video")] = None,
):
    """Update a story. A new file replaces the current one."""
    return await update_record(
        editor,
        story_id,
        {"title": title, "description": description, "expires_at": expires_at},
        [file] if file else None,
    )


@router.delete("/{story_id}", response_model=DeleteResponse)
async def delete_story(
    session: SessionDep,
    editor: StoryEditorDep,
    story_id: Annotated[str, Path(description="Story ID")],
):
    return await delete_record(editor, story_id, "story")
