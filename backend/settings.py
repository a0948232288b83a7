import logging
import os
from pathlib import Path

from domain.models import LayoutKind, PageSize

logger = logging.getLogger(__name__)

# Basic settings helper to read environment configuration.

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "app.db"


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        logger.warning("[settings] Invalid integer %r, using %s", val, default)
        return default


def _as_enum(enum_cls, val: str | None, default):
    if not val:
        return default
    try:
        return enum_cls(val)
    except ValueError:
        logger.warning("[settings] Invalid %s %r, using %s", enum_cls.__name__, val, default.value)
        return default


class Settings:
    def __init__(self) -> None:
        self.MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "media")
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}")
        self.DATABASE_ECHO: bool = _as_bool(os.getenv("DATABASE_ECHO"))
        self.EXPORT_DEFAULT_PAGE_SIZE: PageSize = _as_enum(
            PageSize, os.getenv("EXPORT_DEFAULT_PAGE_SIZE"), PageSize.A5
        )
        self.EXPORT_DEFAULT_LAYOUT: LayoutKind = _as_enum(
            LayoutKind, os.getenv("EXPORT_DEFAULT_LAYOUT"), LayoutKind.FEATURE
        )
        self.PHOTO_MAX_DIMENSION: int = _as_int(os.getenv("PHOTO_MAX_DIMENSION"), 1920)
        self.PHOTO_JPEG_QUALITY: int = _as_int(os.getenv("PHOTO_JPEG_QUALITY"), 75)


settings = Settings()
