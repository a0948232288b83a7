"""
Photo optimization for local storage.

Uploaded photos are re-encoded before they are kept on disk:
- EXIF orientation is applied
- the longest edge is capped (1920px by default)
- output is JPEG at a moderate quality

The original file stays with the user; only the stored copy is optimized.
"""
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 1920
DEFAULT_JPEG_QUALITY = 75


@dataclass
class OptimizedPhoto:
    data: bytes
    width: Optional[int] = None
    height: Optional[int] = None
    optimized: bool = True


def optimize_photo(
    file_bytes: bytes,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> OptimizedPhoto:
    """
    Resize and compress photo bytes for storage.

    Never raises for undecodable input: the original bytes are returned
    with `optimized=False` so the caller can store them unchanged.
    """
    try:
        img = Image.open(BytesIO(file_bytes))
        img = ImageOps.exif_transpose(img)
    except Exception as exc:
        logger.warning("[photo_optimizer] Cannot decode upload, keeping original bytes: %s", exc)
        return OptimizedPhoto(data=file_bytes, optimized=False)

    width, height = img.size
    if max(width, height) > max_dimension:
        if width >= height:
            new_size = (max_dimension, max(1, round(height * max_dimension / width)))
        else:
            new_size = (max(1, round(width * max_dimension / height)), max_dimension)
        img = img.resize(new_size, Image.LANCZOS)
        logger.debug("[photo_optimizer] Resized %sx%s -> %sx%s", width, height, *new_size)

    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    output = BytesIO()
    img.save(output, format="JPEG", quality=quality, optimize=True)
    return OptimizedPhoto(data=output.getvalue(), width=img.width, height=img.height)


def is_heic_file(filename: str, content_type: Optional[str] = None) -> bool:
    """Check if a file is a HEIC/HEIF image by extension or MIME type."""
    if filename:
        ext = filename.lower().rsplit(".", 1)[-1] if "." in filename else ""
        if ext in ("heic", "heif"):
            return True
    if content_type:
        heic_types = ["image/heic", "image/heif", "image/heic-sequence", "image/heif-sequence"]
        if content_type.lower() in heic_types:
            return True
    return False


def register_heif_opener() -> bool:
    """
    Register the HEIF/HEIC opener with Pillow.

    Call this at application startup to enable HEIC support (iPhone photos).
    """
    from pillow_heif import register_heif_opener as _register

    _register()
    return True
