"""
Image embedding for document generation.

Converts a local photo file into an inline base64 payload so the
generated document is self-contained. A photo that cannot be read
never aborts an export: callers receive NO_PAYLOAD and render a
placeholder instead.
"""
import asyncio
import base64
import logging
from pathlib import Path

from domain.errors import PhotoReadError
from domain.models import EmbeddedImage, NO_PAYLOAD

logger = logging.getLogger(__name__)


def detect_media_subtype(source_ref: str) -> str:
    """`png` when the reference has a PNG extension, otherwise `jpeg`."""
    return "png" if Path(source_ref).suffix.lower() == ".png" else "jpeg"


def _read_photo(source_ref: str) -> bytes:
    if not source_ref:
        raise PhotoReadError(source_ref, "empty reference")
    try:
        data = Path(source_ref).read_bytes()
    except OSError as exc:
        raise PhotoReadError(source_ref, str(exc)) from exc
    if not data:
        raise PhotoReadError(source_ref, "file is empty")
    return data


def embed_image_sync(source_ref: str) -> EmbeddedImage:
    """Blocking variant of `embed_image`."""
    try:
        data = _read_photo(source_ref)
    except PhotoReadError as exc:
        logger.warning("[image_embedder] %s", exc)
        return NO_PAYLOAD
    return EmbeddedImage(
        media_subtype=detect_media_subtype(source_ref),
        data_base64=base64.b64encode(data).decode("ascii"),
    )


async def embed_image(source_ref: str) -> EmbeddedImage:
    """
    Read a local photo and return an inline payload.

    Args:
        source_ref: Path of a photo copied into app storage

    Returns:
        EmbeddedImage, or NO_PAYLOAD when the file cannot be read
    """
    return await asyncio.to_thread(embed_image_sync, source_ref)
