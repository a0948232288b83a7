"""
Export orchestrator.

Drives one export run over a selection of albums:
1. Order albums by date (oldest first)
2. Embed photos and compose one page per album, reporting progress
3. Assemble the cover and pages into one document
4. Render the document to PDF and publish it for download

Per-photo read failures are absorbed by the embedder. Anything else that
goes wrong surfaces once as an ExportError and leaves no partial PDF.
"""
import contextlib
import logging
from typing import AsyncIterator, Callable, List, Optional, Union

from domain.errors import EmptyAlbumListError, ExportError, UnexpectedError
from domain.models import Album, ExportCompleted, ExportProgress, ExportSelection
from services.date_format import parse_album_date
from services.document_assembler import assemble_document, build_cover
from services.image_embedder import embed_image
from services.page_composer import DEFAULT_ALBUM_TITLE, Embedder, embed_album_photos, render_album_page
from services.render_service import RenderService, RenderedArtifact
from storage.file_storage import safe_file_name

logger = logging.getLogger(__name__)

STEP_EMBEDDING = "embedding_photos"
STEP_COMPOSED = "page_composed"
STEP_ASSEMBLING = "assembling"
STEP_RENDERING = "rendering"

# Album phases share 0-90%; assembly and rendering take the rest
ALBUM_PHASES_PERCENT = 90
ASSEMBLING_PERCENT = 90
RENDERING_PERCENT = 95

ProgressCallback = Callable[[int, str, str], None]
CompleteCallback = Callable[[int], None]
ExportEvent = Union[ExportProgress, ExportCompleted]


def order_albums(albums: List[Album]) -> List[Album]:
    """Albums sorted oldest first; ties keep selection order."""
    return sorted(albums, key=lambda album: parse_album_date(album.date, as_utc=True))


def export_file_name(ordered_albums: List[Album]) -> str:
    first = ordered_albums[0]
    name = safe_file_name(first.title, first.date)
    if len(ordered_albums) > 1:
        name = f"{name}_and_{len(ordered_albums) - 1}_more"
    return name


def completion_message(count: int) -> str:
    if count == 1:
        return "1 PDF is ready."
    return f"All {count} albums were exported to PDF."


def _album_percent(index: int, total: int) -> int:
    return index * ALBUM_PHASES_PERCENT // total


async def iter_export_events(
    selection: ExportSelection,
    renderer: RenderService,
    embed: Embedder = embed_image,
) -> AsyncIterator[ExportEvent]:
    """
    Run an export and yield its events.

    Yields ExportProgress items (two per album, in album order, then the
    assembly and rendering steps) followed by a single ExportCompleted.

    Raises:
        EmptyAlbumListError: before any event when nothing is selected
        RenderServiceError: when rendering or publishing fails
        UnexpectedError: for any other failure
    """
    if not selection.albums:
        raise EmptyAlbumListError()

    artifact: Optional[RenderedArtifact] = None
    try:
        albums = order_albums(selection.albums)
        total = len(albums)
        logger.info(
            "[export] Starting export of %s albums (page_size=%s layout=%s)",
            total, selection.page_size.value, selection.layout.value,
        )

        pages: List[str] = []
        for index, album in enumerate(albums):
            title = album.title.strip() or DEFAULT_ALBUM_TITLE
            yield ExportProgress(_album_percent(index, total), title, STEP_EMBEDDING)

            slots = await embed_album_photos(album, embed)
            pages.append(
                render_album_page(
                    album, slots, selection.layout, selection.page_size,
                    selection.theme_color_for(album),
                )
            )
            logger.debug("[export] Composed page %s/%s for album %s", index + 1, total, album.id)
            yield ExportProgress(_album_percent(index + 1, total), title, STEP_COMPOSED)

        yield ExportProgress(ASSEMBLING_PERCENT, "", STEP_ASSEMBLING)
        cover = build_cover(
            albums, selection.page_size, selection.layout,
            title=selection.title, theme_color=selection.theme_color_for(albums[0]),
        )
        document = assemble_document(cover, pages, selection.page_size, title=selection.title)

        yield ExportProgress(RENDERING_PERCENT, "", STEP_RENDERING)
        artifact = await renderer.render(document, selection.page_size)
        published = await renderer.share(artifact, export_file_name(albums))
        artifact = None
    except ExportError:
        logger.exception("[export] Export failed")
        raise
    except Exception as exc:
        logger.exception("[export] Unexpected failure during export")
        raise UnexpectedError(f"Export failed: {exc}") from exc
    finally:
        # Covers errors, cancellation and early close by the consumer
        if artifact is not None:
            renderer.discard(artifact)

    logger.info("[export] %s", completion_message(total))
    yield ExportCompleted(count=total, artifact_path=str(published))


async def run_export(
    selection: ExportSelection,
    on_progress: ProgressCallback,
    on_complete: CompleteCallback,
    renderer: RenderService,
    embed: Embedder = embed_image,
) -> ExportCompleted:
    """
    Run an export with callbacks.

    `on_progress(percent, album_title, step)` is called for every progress
    event; `on_complete(count)` is called exactly once, after the last
    progress event, and only when the export succeeded.

    Callers must not run two exports against the same callbacks at once.
    """
    async with contextlib.aclosing(iter_export_events(selection, renderer, embed)) as events:
        async for event in events:
            if isinstance(event, ExportCompleted):
                try:
                    on_complete(event.count)
                except Exception as exc:
                    raise UnexpectedError(f"Completion callback failed: {exc}") from exc
                return event
            try:
                on_progress(event.percent, event.current_album_title, event.current_step)
            except Exception as exc:
                raise UnexpectedError(f"Progress callback failed: {exc}") from exc
    raise UnexpectedError("Export ended without completing")
