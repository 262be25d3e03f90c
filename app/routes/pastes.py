"""
Paste routes.
Handles create, fetch (API), and view (HTML) operations.

Handlers are plain functions so they run on the worker thread pool and may
block on storage I/O.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from app.config import Settings, get_settings
from app.dependencies import get_now, get_store
from app.exceptions import PasteUnavailableError, StorageError
from app.models import ErrorResponse, PasteCreate, PasteResponse, PasteView
from app.paste import format_timestamp
from app.store import PasteStore
from app.templates import render_error_page, render_not_found_page, render_paste_page

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/pastes",
    response_model=PasteResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_paste(
    paste: PasteCreate,
    store: PasteStore = Depends(get_store),
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_settings),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (content, optional ttl_seconds, optional max_views)
        store: Paste store
        now: Creation instant
        settings: Application settings

    Returns:
        Paste ID, shareable URL and timestamps
    """
    created = store.create(
        content=paste.content,
        ttl_seconds=paste.ttl_seconds,
        max_views=paste.max_views,
        now=now,
    )

    base_url = settings.APP_DOMAIN.rstrip("/")
    return PasteResponse(
        id=created.id,
        url=f"{base_url}/p/{created.id}",
        created_at=format_timestamp(created.created_at),
        expires_at=format_timestamp(created.expires_at),
    )


@router.get(
    "/api/pastes/{paste_id}",
    response_model=PasteView,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def fetch_paste(
    paste_id: str,
    store: PasteStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> PasteView:
    """
    Fetch a paste (API endpoint).
    Each successful fetch counts as one view.

    Not-found, expired and exhausted pastes all answer 404 with the same body.
    """
    consumed = store.fetch_and_consume(paste_id, now=now)
    return PasteView(
        content=consumed.content,
        remaining_views=consumed.remaining_views,
        expires_at=format_timestamp(consumed.expires_at),
    )


@router.get("/p/{paste_id}", response_class=HTMLResponse)
def view_paste(
    paste_id: str,
    store: PasteStore = Depends(get_store),
    now: datetime = Depends(get_now),
) -> HTMLResponse:
    """
    View a paste as HTML.
    Each successful view counts as one view.
    """
    try:
        consumed = store.fetch_and_consume(paste_id, now=now)
    except PasteUnavailableError:
        return HTMLResponse(render_not_found_page(), status_code=404)
    except StorageError as e:
        logger.error(f"Storage error viewing paste {paste_id}: {e}")
        return HTMLResponse(render_error_page(), status_code=500)

    return HTMLResponse(render_paste_page(consumed))
