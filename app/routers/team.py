# =============================================================================
# app/routers/team.py - Team Member Endpoints
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, File, Form, Path, Query, UploadFile, status

from app.auth import SessionDep
from app.dependencies import TeamEditorDep
from app.routers.editing import create_record, delete_record, update_record
from core.models.catalog import DeleteResponse, TeamMemberView
from lib.listing import search_rows, sort_rows

router = APIRouter()


@router.get("", response_model=list[TeamMemberView])
async def list_team_members(
    session: SessionDep,
    editor: TeamEditorDep,
    q: Annotated[str | None, Query(description="Search name and role")] = None,
    sort_by: Literal["name", "role"] | None = None,
    order: Literal["asc", "desc"] = "asc",
):
    """
    List team members.

    Without `sort_by` rows come in insertion order.
    """
    rows = editor.list_records(order_by="created_at")
    rows = search_rows(rows, q, ("name", "role"))
    if sort_by:
        rows = sort_rows(rows, sort_by, descending=order == "desc")
    return rows


@router.post("", response_model=TeamMemberView, status_code=status.HTTP_201_CREATED)
async def create_team_member(
    session: SessionDep,
    editor: TeamEditorDep,
    name: Annotated[str | None, Form()] = None,
    role: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File(description="Portrait")] = None,
):
    return await create_record(
        editor,
        {"name": name, "role": role},
        [file] if file else None,
    )


@router.patch("/{member_id}", response_model=TeamMemberView)
async def update_team_member(
    session: SessionDep,
    editor: TeamEditorDep,
    member_id: Annotated[str, Path(description="Team member ID")],
    name: Annotated[str | None, Form()] = None,
    role: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File(description="Replacement portrait")] = None,
):
    """Update a team member. Without a file the portrait is kept."""
    return await update_record(
        editor,
        member_id,
        {"name": name, "role": role},
        [file] if file else None,
    )


@router.delete("/{member_id}", response_model=DeleteResponse)
async def delete_team_member(
    session: SessionDep,
    editor: TeamEditorDep,
    member_id: Annotated[str, Path(description="Team member ID")],
):
    return await delete_record(editor, member_id, "team member")
