# =============================================================================
# app/routers/gallery.py - Gallery Project Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.auth import SessionDep
from app.dependencies import GalleryEditorDep
from app.routers.editing import create_record, delete_record, update_record
from core.models.catalog import DeleteResponse, GalleryProjectView, GallerySize, GalleryType

router = APIRouter()


@router.get("", response_model=list[GalleryProjectView])
async def list_projects(session: SessionDep, editor: GalleryEditorDep):
    """List gallery projects, newest first."""
    return editor.list_records(order_by="created_at", descending=True)


@router.get("/{project_id}", response_model=GalleryProjectView)
async def get_project(
    session: SessionDep,
    editor: GalleryEditorDep,
    project_id: Annotated[str, Path(description="Gallery project ID")],
):
    return editor.present(editor.fetch(project_id))


@router.post("", response_model=GalleryProjectView, status_code=status.HTTP_201_CREATED)
async def create_project(
    session: SessionDep,
    editor: GalleryEditorDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    type: Annotated[GalleryType, Form()] = GalleryType.IMAGE,
    size: Annotated[GallerySize, Form()] = GallerySize.MEDIUM,
    files: Annotated[list[UploadFile] | None, File(description="Images and videos")] = None,
):
    """Create a gallery project from one or more images or videos."""
    return await create_record(
        editor,
        {"title": title, "description": description, "type": type.value, "size": size.value},
        files,
    )


@router.patch("/{project_id}", response_model=GalleryProjectView)
async def update_project(
    session: SessionDep,
    editor: GalleryEditorDep,
    project_id: Annotated[str, Path(description="Gallery project ID")],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    type: Annotated[GalleryType | None, Form()] = None,
    size: Annotated[GallerySize | None, Form()] = None,
    files: Annotated[list[UploadFile] | None, File(description="Files to append")] = None,
    remove_media: Annotated[list[int] | None, Form(description="Positions of media to drop")] = None,
):
    """
    Update a gallery project.

    New files are appended after the existing media; `remove_media` drops
    entries by position and deletes their objects once the row is saved.
    """
    return await update_record(
        editor,
        project_id,
        {
            "title": title,
            "description": description,
            "type": type.value if type else None,
            "size": size.value if size else None,
        },
        files,
        remove_media,
    )


@router.delete("/{project_id}", response_model=DeleteResponse)
async def delete_project(
    session: SessionDep,
    editor: GalleryEditorDep,
    project_id: Annotated[str, Path(description="Gallery project ID")],
):
    return await delete_record(editor, project_id, "gallery project")
