# =============================================================================
# app/routers/quotes.py - Quote Request Endpoints
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Path, Query

from app.auth import SessionDep
from app.dependencies import QuoteServiceDep
from core.models.customers import Quote, QuoteUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Quote])
async def list_quotes(
    session: SessionDep,
    service: QuoteServiceDep,
    q: Annotated[str | None, Query(description="Search name, email and address")] = None,
    sort_by: Literal["created_at", "name", "email"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
):
    """List quote requests, newest first by default."""
    return service.list(q, sort_by=sort_by, descending=order == "desc")


@router.patch("/{quote_id}", response_model=Quote)
async def update_quote(
    session: SessionDep,
    service: QuoteServiceDep,
    quote_id: Annotated[str, Path(description="Quote ID")],
    body: QuoteUpdate,
):
    """Update the fields that were sent; everything else is left alone."""
    return service.update(quote_id, body.model_dump(exclude_unset=True))


@router.delete("/{quote_id}")
async def delete_quote(
    session: SessionDep,
    service: QuoteServiceDep,
    quote_id: Annotated[str, Path(description="Quote ID")],
):
    service.delete(quote_id)
    return {"id": quote_id, "deleted": True, "message": "Quote deleted successfully"}
