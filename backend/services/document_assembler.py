"""
Document assembler.

Joins the cover and album pages into one printable HTML document.
Does not touch disk; rendering is done by the render service.
"""
import html
from typing import List, Optional, Sequence

from domain.models import Album, LayoutKind, PAGE_DIMENSIONS, PageSize, Theme
from services.date_format import format_album_date, to_date_only

DEFAULT_BOOK_TITLE = "Our Photo Book"
COVER_SUBTITLE = "Precious moments told in photos"


def _cover_date_span(albums: Sequence[Album]) -> str:
    """Date chip text for the cover; albums are expected oldest first."""
    first, last = albums[0], albums[-1]
    last_day = to_date_only(last.date_end or last.date)
    if len(albums) == 1:
        return format_album_date(first.date, first.date_end)
    return format_album_date(first.date, last_day)


def build_cover(
    albums: Sequence[Album],
    page_size: PageSize,
    layout: LayoutKind,
    title: str = DEFAULT_BOOK_TITLE,
    theme_color: Optional[str] = None,
) -> str:
    """
    Cover page for an export.

    Structure:
    - icon, title and subtitle centered on a gradient
    - chips: date span, album count, photo count
    - footer with page size and layout name
    """
    page_size = PageSize(page_size)
    layout = LayoutKind(layout)
    theme = Theme().with_accent(theme_color)
    is_a5 = page_size == PageSize.A5
    height_pt = PAGE_DIMENSIONS[page_size].height_pt
    padding = 20 if is_a5 else 28
    chip_size = 11 if is_a5 else 13

    chip_style = (
        "background:rgba(255,255,255,0.28);border-radius:20px;padding:7px 14px;"
        f"color:#fff;font-size:{chip_size}px;font-weight:600;"
    )
    chips: List[str] = []
    if albums:
        chips.append(f'<span class="cover-chip" style="{chip_style}">📅 {_cover_date_span(albums)}</span>')
        album_word = "album" if len(albums) == 1 else "albums"
        chips.append(f'<span class="cover-chip" style="{chip_style}">📚 {len(albums)} {album_word}</span>')
        photo_count = sum(len(a.photos) for a in albums)
        photo_word = "photo" if photo_count == 1 else "photos"
        chips.append(f'<span class="cover-chip" style="{chip_style}">🖼️ {photo_count} {photo_word}</span>')

    return f"""
        <section class="cover-page" style="
            width:100%;height:{height_pt}pt;
            display:flex;flex-direction:column;align-items:center;justify-content:center;
            background:linear-gradient(160deg,{theme.accent_color} 0%,{theme.secondary_color} 60%,{theme.cover_gradient_end} 100%);
            padding:{padding}px;text-align:center;position:relative;
            font-family:{theme.font_family};">
            <div style="font-size:{52 if is_a5 else 64}px;margin-bottom:20px;">📸</div>
            <h1 class="cover-title" style="color:#fff;font-size:{26 if is_a5 else 32}px;font-weight:800;margin:0 0 10px 0;line-height:1.2;">
                {html.escape(title.strip() or DEFAULT_BOOK_TITLE)}
            </h1>
            <p style="color:rgba(255,255,255,0.9);font-size:{12 if is_a5 else 14}px;margin:0 0 24px 0;">
                {COVER_SUBTITLE}
            </p>
            <div style="width:48px;height:3px;background:rgba(255,255,255,0.6);border-radius:2px;margin-bottom:24px;"></div>
            <div style="display:flex;gap:8px;flex-wrap:wrap;justify-content:center;">
                {''.join(chips)}
            </div>
            <p class="cover-footer" style="position:absolute;bottom:{padding}px;color:rgba(255,255,255,0.4);font-size:9px;margin:0;">
                {page_size.value} · {layout.label}
            </p>
        </section>
    """


def generate_print_css(page_size: PageSize) -> str:
    """Generate CSS for print output."""
    dims = PAGE_DIMENSIONS[PageSize(page_size)]
    return f"""
        @page {{
            size: {dims.css_size};
            margin: 0;
        }}

        * {{
            box-sizing: border-box;
        }}

        body {{
            margin: 0;
            padding: 0;
            background: #fff;
        }}

        img {{
            display: block;
            max-width: 100%;
        }}
    """


def assemble_document(
    cover: str,
    pages: Sequence[str],
    page_size: PageSize,
    title: str = DEFAULT_BOOK_TITLE,
) -> str:
    """
    Concatenate the cover and album pages, in the given order, into one HTML document.
    """
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8" />
    <title>{html.escape(title.strip() or DEFAULT_BOOK_TITLE)}</title>
    <style>{generate_print_css(page_size)}</style>
</head>
<body>
{cover}
{''.join(pages)}
</body>
</html>"""
