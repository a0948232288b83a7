"""
Album page composer.

Builds one document page per album:
header (title, date, location, weather) -> story -> photo layout.
"""
import asyncio
import html
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from domain.models import Album, LayoutKind, PageSize, PhotoSlot, Theme, WeatherType, EmbeddedImage
from services.date_format import format_album_date
from services.image_embedder import embed_image
from services.layout_engine import layout_photos

logger = logging.getLogger(__name__)

DEFAULT_ALBUM_TITLE = "A Day to Remember"

Embedder = Callable[[str], Awaitable[EmbeddedImage]]


@dataclass(frozen=True)
class PageMetrics:
    """Per page-size typography and spacing, in px."""
    padding: int
    title_size: int
    meta_size: int
    story_size: int


PAGE_METRICS = {
    PageSize.A4: PageMetrics(padding=28, title_size=19, meta_size=11, story_size=12),
    PageSize.A5: PageMetrics(padding=20, title_size=15, meta_size=9, story_size=10),
}


def weather_label(album: Album) -> str:
    """
    Label shown next to the weather emoji.

    Custom text wins for "other"; known tags use their canonical label and
    anything else is shown as stored.
    """
    if not album.weather:
        return ""
    try:
        weather = WeatherType(album.weather)
    except ValueError:
        return album.weather
    if weather == WeatherType.OTHER and album.weather_custom.strip():
        return album.weather_custom.strip()
    return weather.label


def _tag(text: str, background: str, metrics: PageMetrics, theme: Theme, css_class: str) -> str:
    return (
        f'<span class="tag {css_class}" style="display:inline-flex;align-items:center;'
        f"background:{background};border-radius:20px;padding:2px 8px;"
        f'font-size:{metrics.meta_size}px;color:{theme.muted_color};">{text}</span>'
    )


def render_header(album: Album, page_size: PageSize, theme: Theme) -> str:
    metrics = PAGE_METRICS[page_size]
    title = html.escape(album.title.strip() or DEFAULT_ALBUM_TITLE)

    tags: List[str] = [
        _tag(f"📅 {format_album_date(album.date, album.date_end)}", "#fdf2f8", metrics, theme, "tag-date")
    ]
    if album.location.strip():
        tags.append(_tag(f"📍 {html.escape(album.location.strip())}", "#faf5ff", metrics, theme, "tag-location"))
    if album.weather_emoji:
        label = html.escape(weather_label(album))
        tags.append(_tag(f"{html.escape(album.weather_emoji)} {label}".strip(), "#eff6ff", metrics, theme, "tag-weather"))

    return (
        f'<header class="album-header" style="padding-bottom:8px;margin-bottom:12px;'
        f'border-bottom:2px solid {theme.accent_color};">'
        '<div style="display:flex;align-items:center;gap:8px;flex-wrap:wrap;">'
        f'<span class="album-title" style="font-size:{metrics.title_size}px;font-weight:700;'
        f'color:{theme.text_color};line-height:1;">{title}</span>'
        f"{''.join(tags)}"
        "</div></header>"
    )


def render_story(story: str, page_size: PageSize, theme: Theme) -> str:
    if not story.strip():
        return ""
    metrics = PAGE_METRICS[page_size]
    return (
        '<div class="album-story" style="margin-bottom:10px;padding:7px 11px;'
        "background:linear-gradient(135deg,#fdf2f8,#faf5ff);border-radius:8px;"
        f'border-left:3px solid {theme.secondary_color};">'
        f'<p style="margin:0;font-size:{metrics.story_size}px;color:{theme.text_color};line-height:1.6;">'
        f"{html.escape(story.strip())}</p></div>"
    )


def render_album_page(
    album: Album,
    slots: Sequence[PhotoSlot],
    layout: LayoutKind,
    page_size: PageSize,
    theme_color: Optional[str] = None,
) -> str:
    """
    Render an album page from already embedded photos.

    Args:
        album: Album to render
        slots: One PhotoSlot per album photo, in album order
        layout: Photo layout kind
        page_size: Target page size
        theme_color: Group color used as the page accent

    Returns:
        HTML for a single page section that starts on a new printed page
    """
    page_size = PageSize(page_size)
    theme = Theme().with_accent(theme_color)
    metrics = PAGE_METRICS[page_size]
    return (
        f'<section class="album-page" data-album-id="{html.escape(album.id)}" style="'
        f"page-break-before:always;padding:{metrics.padding}px;"
        f'font-family:{theme.font_family};background:#fff;">'
        f"{render_header(album, page_size, theme)}"
        f"{render_story(album.story, page_size, theme)}"
        f'<div class="album-photos">{layout_photos(slots, layout, page_size, theme)}</div>'
        "</section>"
    )


async def embed_album_photos(album: Album, embed: Embedder = embed_image) -> List[PhotoSlot]:
    """Embed every photo of an album concurrently; slot order follows album order."""
    images = await asyncio.gather(*(embed(photo.source_ref) for photo in album.photos))
    missing = sum(1 for image in images if image.is_missing)
    if missing:
        logger.warning("[page_composer] album %s: %s of %s photos replaced by placeholders", album.id, missing, len(images))
    return [PhotoSlot(image=image, caption=photo.caption) for photo, image in zip(album.photos, images)]


async def compose_album_page(
    album: Album,
    layout: LayoutKind,
    page_size: PageSize,
    theme_color: Optional[str] = None,
    embed: Embedder = embed_image,
) -> str:
    """Embed an album's photos and render its page."""
    slots = await embed_album_photos(album, embed)
    return render_album_page(album, slots, layout, page_size, theme_color)
