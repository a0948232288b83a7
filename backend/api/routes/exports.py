"""
Export API routes.

Runs the PDF export pipeline over selected albums and serves the result.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse, StreamingResponse
from pydantic import BaseModel

from db import SessionLocal
from domain.errors import EmptyAlbumListError, ExportError, RenderServiceError
from domain.models import ExportCompleted, ExportSelection, LayoutKind, PageSize
from repositories import AlbumsRepository, GroupsRepository
from services.export_orchestrator import completion_message, iter_export_events, run_export
from services.render_service import WeasyPrintRenderService
from storage.file_storage import FileStorage
from settings import settings

router = APIRouter()
albums_repo = AlbumsRepository()
groups_repo = GroupsRepository()
storage = FileStorage(settings.MEDIA_ROOT)
renderer = WeasyPrintRenderService(storage)
logger = logging.getLogger(__name__)

# One export at a time; overlapping requests are rejected
export_lock = asyncio.Lock()


class ExportRequest(BaseModel):
    album_ids: List[str]
    page_size: Optional[str] = None
    layout: Optional[str] = None
    title: Optional[str] = None


class ProgressEntry(BaseModel):
    percent: int
    album_title: str
    step: str


class ExportResponse(BaseModel):
    count: int
    file_name: str
    pdf_path: str
    message: str
    progress: List[ProgressEntry]


def _build_selection(data: ExportRequest) -> ExportSelection:
    try:
        page_size = PageSize(data.page_size) if data.page_size else settings.EXPORT_DEFAULT_PAGE_SIZE
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid page size: {data.page_size}")
    try:
        layout = LayoutKind(data.layout) if data.layout else settings.EXPORT_DEFAULT_LAYOUT
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid layout: {data.layout}")

    # Repeated ids export the album once
    album_ids = list(dict.fromkeys(data.album_ids))
    with SessionLocal() as session:
        albums = albums_repo.get_albums(session, album_ids)
        if len(albums) != len(album_ids):
            found = {a.id for a in albums}
            missing = [aid for aid in album_ids if aid not in found]
            raise HTTPException(status_code=404, detail=f"Albums not found: {', '.join(missing)}")
        theme_colors = groups_repo.theme_colors(session)

    selection = ExportSelection(
        albums=albums,
        page_size=page_size,
        layout=layout,
        theme_color_by_group=theme_colors,
    )
    if data.title:
        selection.title = data.title
    return selection


def _http_error(exc: ExportError) -> HTTPException:
    if isinstance(exc, EmptyAlbumListError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RenderServiceError):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


@router.post("", response_model=ExportResponse)
async def create_export(data: ExportRequest):
    """
    Export the selected albums to a single PDF.

    Albums are ordered oldest first regardless of the order of `album_ids`.
    """
    if export_lock.locked():
        raise HTTPException(status_code=409, detail="Another export is in progress")
    selection = _build_selection(data)

    progress: List[ProgressEntry] = []
    completed: List[int] = []

    async with export_lock:
        try:
            result = await run_export(
                selection,
                on_progress=lambda percent, title, step: progress.append(
                    ProgressEntry(percent=percent, album_title=title, step=step)
                ),
                on_complete=completed.append,
                renderer=renderer,
            )
        except ExportError as exc:
            raise _http_error(exc)

    pdf_path = Path(result.artifact_path)
    return ExportResponse(
        count=completed[0],
        file_name=pdf_path.name,
        pdf_path=str(pdf_path),
        message=completion_message(completed[0]),
        progress=progress,
    )


@router.post("/stream")
async def stream_export(data: ExportRequest):
    """
    Export the selected albums, streaming progress as NDJSON.

    Each line is a progress event; the last line is either
    {"event": "completed", ...} or {"event": "error", ...}.
    """
    if export_lock.locked():
        raise HTTPException(status_code=409, detail="Another export is in progress")
    selection = _build_selection(data)
    if not selection.albums:
        raise _http_error(EmptyAlbumListError())

    async def event_lines():
        # Held only while the body is streamed; a request that slipped past
        # the check above waits here
        async with export_lock:
            try:
                async for event in iter_export_events(selection, renderer):
                    if isinstance(event, ExportCompleted):
                        line = {
                            "event": "completed",
                            "count": event.count,
                            "file_name": Path(event.artifact_path).name,
                            "message": completion_message(event.count),
                        }
                    else:
                        line = {"event": "progress", **event.to_dict()}
                    yield json.dumps(line, ensure_ascii=False) + "\n"
            except ExportError as exc:
                yield json.dumps({"event": "error", "error": type(exc).__name__, "detail": str(exc)}) + "\n"

    return StreamingResponse(event_lines(), media_type="application/x-ndjson")


@router.get("/{file_name}")
async def download_export(file_name: str):
    """Download a generated PDF."""
    path = storage.resolve_export(file_name)
    if path is None:
        raise HTTPException(status_code=404, detail="Export not found")
    return FileResponse(path, media_type="application/pdf", filename=path.name)
