"""
Layout engine service.

Arranges an album's photos into rows of an HTML page section.
Each layout kind is a fixed row template; photos are consumed in input
order and wrap into as many rows as needed.
"""
import html
import logging
from dataclasses import dataclass
from typing import List, Sequence

from domain.models import LayoutKind, PageSize, PhotoSlot, Theme

logger = logging.getLogger(__name__)


@dataclass
class LayoutRow:
    """Indices of the photos placed in one row."""
    indices: List[int]
    columns: int
    role: str = "grid"  # "full" | "feature" | "banner" | "grid"


# Max image height per row, in px, for constrained (multi-column) rows
_ROW_MAX_HEIGHT_PX = {
    LayoutKind.TWO_COL: {PageSize.A4: 280, PageSize.A5: 200},
    LayoutKind.FEATURE: {PageSize.A4: 280, PageSize.A5: 200},
    LayoutKind.MAGAZINE: {PageSize.A4: 220, PageSize.A5: 160},
    LayoutKind.THREE_COL: {PageSize.A4: 200, PageSize.A5: 150},
}

_ROW_GAP_PX = {1: 0, 2: 8, 3: 6}


def _chunk(indices: Sequence[int], size: int) -> List[List[int]]:
    return [list(indices[i:i + size]) for i in range(0, len(indices), size)]


def plan_rows(photo_count: int, layout: LayoutKind) -> List[LayoutRow]:
    """
    Compute the row template for a number of photos.

    Args:
        photo_count: Number of photos, in album order
        layout: Layout kind

    Returns:
        Rows in order; every photo index appears exactly once

    Raises:
        ValueError: for an unknown layout kind
    """
    layout = LayoutKind(layout)
    indices = list(range(photo_count))
    if not indices:
        return []

    if layout == LayoutKind.SINGLE:
        return [LayoutRow(indices=[i], columns=1, role="full") for i in indices]
    elif layout == LayoutKind.TWO_COL:
        return [LayoutRow(indices=chunk, columns=2) for chunk in _chunk(indices, 2)]
    elif layout == LayoutKind.FEATURE:
        rows = [LayoutRow(indices=[0], columns=1, role="feature")]
        rows.extend(LayoutRow(indices=chunk, columns=2) for chunk in _chunk(indices[1:], 2))
        return rows
    elif layout == LayoutKind.MAGAZINE:
        rows = [LayoutRow(indices=[0], columns=1, role="banner")]
        rows.extend(LayoutRow(indices=chunk, columns=2) for chunk in _chunk(indices[1:], 2))
        return rows
    elif layout == LayoutKind.THREE_COL:
        return [LayoutRow(indices=chunk, columns=3) for chunk in _chunk(indices, 3)]
    raise ValueError(f"No layout registered for kind: {layout}")


def render_image(slot: PhotoSlot, theme: Theme, extra_style: str = "") -> str:
    """Image tag for an embedded photo, or a neutral placeholder block."""
    base = f"display:block;width:100%;height:auto;border-radius:8px;{extra_style}"
    if slot.image.is_missing:
        return (
            f'<div class="photo-placeholder" style="{base}min-height:80px;'
            f"background:{theme.placeholder_background};color:{theme.placeholder_color};"
            'display:flex;align-items:center;justify-content:center;font-size:24px;">📷</div>'
        )
    return f'<img class="photo" src="{slot.image.data_uri}" style="{base}" />'


def render_caption(caption: str, theme: Theme) -> str:
    if not caption:
        return ""
    return (
        f'<p class="photo-caption" style="font-size:10px;color:{theme.muted_color};'
        "margin:3px 0 0 0;font-style:italic;padding:5px 8px;background:#fdf2f8;"
        f'border-radius:5px;border-left:3px solid {theme.accent_color};line-height:1.4;">'
        f"{html.escape(caption)}</p>"
    )


def _render_row(row: LayoutRow, slots: Sequence[PhotoSlot], layout: LayoutKind, page_size: PageSize, theme: Theme) -> str:
    if row.columns == 1:
        slot = slots[row.indices[0]]
        margin = 8 if row.role == "banner" else 12
        return (
            f'<div class="photo-row photo-row--{row.role}" style="margin-bottom:{margin}px;">'
            f'<div class="photo-slot">{render_image(slot, theme)}{render_caption(slot.caption, theme)}</div>'
            "</div>"
        )

    max_h = _ROW_MAX_HEIGHT_PX[layout][page_size]
    image_style = f"max-height:{max_h}px;object-fit:contain;"
    cells = []
    for idx in row.indices:
        slot = slots[idx]
        cells.append(
            '<div class="photo-slot" style="flex:1;min-width:0;">'
            f"{render_image(slot, theme, image_style)}{render_caption(slot.caption, theme)}"
            "</div>"
        )
    # Keep cell widths equal on a short last row
    while len(cells) < row.columns:
        cells.append('<div class="photo-slot photo-slot--empty" style="flex:1;min-width:0;"></div>')

    gap = _ROW_GAP_PX[row.columns]
    return (
        f'<div class="photo-row photo-row--cols-{row.columns}" '
        f'style="display:flex;gap:{gap}px;margin-bottom:10px;align-items:flex-start;">'
        f"{''.join(cells)}</div>"
    )


def layout_photos(
    slots: Sequence[PhotoSlot],
    layout: LayoutKind,
    page_size: PageSize,
    theme: Theme | None = None,
) -> str:
    """
    Arrange photos into a page section.

    Args:
        slots: Embedded photos with captions, in album order
        layout: Layout kind
        page_size: Target page size (affects max row heights only)
        theme: Colors for captions and placeholders

    Returns:
        HTML markup block
    """
    theme = theme or Theme()
    layout = LayoutKind(layout)
    page_size = PageSize(page_size)
    if not slots:
        return '<p class="no-photos" style="color:#9ca3af;text-align:center;padding:20px;">No photos</p>'

    rows = plan_rows(len(slots), layout)
    logger.debug("[layout_engine] layout=%s page_size=%s photos=%s rows=%s", layout.value, page_size.value, len(slots), len(rows))
    return "".join(_render_row(row, slots, layout, page_size, theme) for row in rows)
