"""
File storage abstraction.

Provides a simple interface for storing and retrieving files.
Currently uses the local filesystem.
"""
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from services.photo_optimizer import optimize_photo

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def safe_file_name(title: str, date: str) -> str:
    """
    Build a filesystem-safe base name like `Beach_day_20240301`.

    Strips characters that are invalid in file names, falls back to
    `album` for empty titles and appends the date digits.
    """
    safe = _UNSAFE_FILENAME_CHARS.sub("", title or "").strip() or "album"
    safe = re.sub(r"\s+", "_", safe)
    date_digits = (date or "").replace("-", "")[:8]
    return f"{safe}_{date_digits}" if date_digits else safe


@dataclass
class StoredPhoto:
    path: str  # Absolute path on disk
    width: Optional[int] = None
    height: Optional[int] = None


class FileStorage:
    """
    Local file storage implementation.

    Files are organized as:
    - media/albums/{album_id}/photos/  - Optimized album photos
    - media/exports/                   - Generated PDFs
    """

    def __init__(self, media_root: str = "media"):
        self.media_root = Path(media_root)
        self.media_root.mkdir(parents=True, exist_ok=True)

    def get_album_photos_dir(self, album_id: str) -> Path:
        """Get the photos directory for an album."""
        path = self.media_root / "albums" / album_id / "photos"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_exports_dir(self) -> Path:
        """Get the exports directory."""
        path = self.media_root / "exports"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save_photo(
        self,
        album_id: str,
        photo_id: str,
        data: bytes,
        max_dimension: int = 1920,
        quality: int = 75,
    ) -> StoredPhoto:
        """
        Save an optimized copy of a photo.

        Saving is idempotent: if the destination already exists it is
        returned unchanged.

        Returns:
            StoredPhoto with the absolute path and stored dimensions
        """
        dest = self.get_album_photos_dir(album_id) / f"{photo_id}.jpg"
        if dest.exists():
            return StoredPhoto(path=str(dest.resolve()))

        photo = optimize_photo(data, max_dimension=max_dimension, quality=quality)
        with open(dest, "wb") as f:
            f.write(photo.data)
        logger.info(
            "[storage] Saved photo %s for album %s (%s bytes, optimized=%s)",
            photo_id, album_id, len(photo.data), photo.optimized,
        )
        return StoredPhoto(path=str(dest.resolve()), width=photo.width, height=photo.height)

    def get_export_path(self, file_name: str) -> Path:
        """Absolute path for an export artifact; file_name excludes the extension."""
        return self.get_exports_dir() / f"{file_name}.pdf"

    def publish_export(self, source: Path, file_name: str) -> Path:
        """Move a rendered PDF into the exports directory, replacing any previous file of that name."""
        dest = self.get_export_path(file_name)
        if dest.exists():
            dest.unlink()
        shutil.move(str(source), str(dest))
        return dest

    def resolve_export(self, file_name: str) -> Optional[Path]:
        """Path of a published export, or None if it does not exist or escapes the exports dir."""
        exports_dir = self.get_exports_dir().resolve()
        candidate = (exports_dir / file_name).resolve()
        if candidate.parent != exports_dir or not candidate.is_file():
            return None
        return candidate

    def delete_album_files(self, album_id: str) -> bool:
        """Delete all photos for an album."""
        album_dir = self.media_root / "albums" / album_id
        if album_dir.exists():
            shutil.rmtree(album_dir)
            return True
        return False
