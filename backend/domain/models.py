"""
Core domain models for the photo journal exporter.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import re
import uuid

# Hex, named and rgb()/hsl() colours; nothing that can close a style attribute
CSS_COLOR_PATTERN = r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]{3,20}|(rgb|rgba|hsl|hsla)\([0-9.,%\s]+\))$"
_CSS_COLOR = re.compile(CSS_COLOR_PATTERN)


def is_css_color(value: str) -> bool:
    return bool(_CSS_COLOR.fullmatch(value or ""))


class WeatherType(str, Enum):
    """Weather tag attached to an album."""
    SUNNY = "sunny"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    WINDY = "windy"
    HOT = "hot"
    COLD = "cold"
    OTHER = "other"

    @property
    def emoji(self) -> str:
        return WEATHER_OPTIONS[self][0]

    @property
    def label(self) -> str:
        return WEATHER_OPTIONS[self][1]


# (emoji, canonical label) per weather tag
WEATHER_OPTIONS: Dict[WeatherType, tuple] = {
    WeatherType.SUNNY: ("☀️", "Sunny"),
    WeatherType.PARTLY_CLOUDY: ("⛅", "Partly cloudy"),
    WeatherType.CLOUDY: ("☁️", "Cloudy"),
    WeatherType.RAINY: ("🌧️", "Rain"),
    WeatherType.SNOWY: ("❄️", "Snow"),
    WeatherType.WINDY: ("🌬️", "Windy"),
    WeatherType.HOT: ("🥵", "Hot"),
    WeatherType.COLD: ("🥶", "Cold"),
    WeatherType.OTHER: ("🌡️", "Other"),
}


class PageSize(str, Enum):
    """Paper sizes supported by the print service."""
    A4 = "A4"
    A5 = "A5"


class LayoutKind(str, Enum):
    """
    Photo arrangement templates.

    - SINGLE: one photo per row, full width
    - TWO_COL: two photos per row
    - FEATURE: first photo large, the rest in 2-column rows
    - MAGAZINE: first photo as a banner, the rest in 2-column rows
    - THREE_COL: three photos per row
    """
    SINGLE = "single"
    TWO_COL = "two_col"
    FEATURE = "feature"
    MAGAZINE = "magazine"
    THREE_COL = "three_col"

    @property
    def label(self) -> str:
        return LAYOUT_LABELS[self]


LAYOUT_LABELS: Dict[LayoutKind, str] = {
    LayoutKind.SINGLE: "Single column",
    LayoutKind.TWO_COL: "Two-column grid",
    LayoutKind.FEATURE: "Feature + two columns",
    LayoutKind.MAGAZINE: "Magazine",
    LayoutKind.THREE_COL: "Three-column grid",
}


@dataclass
class PhotoEntry:
    """A photo inside an album. `source_ref` is a local file path."""
    id: str
    source_ref: str
    caption: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoEntry":
        return cls(
            id=data["id"],
            source_ref=data.get("source_ref") or data.get("uri") or "",
            caption=data.get("caption") or "",
            width=data.get("width"),
            height=data.get("height"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_ref": self.source_ref,
            "caption": self.caption,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class Group:
    """A child/group profile; albums belong to exactly one group."""
    id: str
    name: str
    color: str = "#f472b6"
    emoji: str = ""
    birth_date: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass
class Album:
    """
    A dated collection of photos.

    `date` is an ISO date (`YYYY-MM-DD`) optionally carrying a time
    (`YYYY-MM-DDTHH:MM`). `date_end` closes an inclusive date range.
    Photo order is significant: it drives page layout and cover fallback.
    """
    id: str
    group_id: str
    title: str
    date: str
    date_end: Optional[str] = None
    location: str = ""
    weather: Optional[str] = None  # WeatherType value, or free text from older records
    weather_emoji: str = ""
    weather_custom: str = ""
    story: str = ""
    photos: List[PhotoEntry] = field(default_factory=list)
    cover_photo_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())

    @property
    def cover_photo(self) -> Optional[PhotoEntry]:
        """The chosen cover photo, falling back to the first photo."""
        if self.cover_photo_id:
            for photo in self.photos:
                if photo.id == self.cover_photo_id:
                    return photo
        return self.photos[0] if self.photos else None


# Export models

@dataclass(frozen=True)
class PageDimensions:
    """Page size in points (72 dpi) as understood by the print engine."""
    width_pt: int
    height_pt: int

    @property
    def css_size(self) -> str:
        return f"{self.width_pt}pt {self.height_pt}pt"


PAGE_DIMENSIONS: Dict[PageSize, PageDimensions] = {
    PageSize.A4: PageDimensions(width_pt=595, height_pt=842),
    PageSize.A5: PageDimensions(width_pt=420, height_pt=595),
}


@dataclass
class Theme:
    """
    Colors and typography for the exported booklet.

    `accent_color` is replaced by the group's color when one is known.
    """
    accent_color: str = "#f472b6"
    secondary_color: str = "#c084fc"
    text_color: str = "#1f2937"
    muted_color: str = "#6b7280"
    placeholder_background: str = "#f3e8ff"
    placeholder_color: str = "#a855f7"
    font_family: str = "-apple-system, 'Helvetica Neue', Arial, sans-serif"
    cover_gradient_end: str = "#818cf8"

    def with_accent(self, color: Optional[str]) -> "Theme":
        """Copy with `color` as accent; unusable colours keep the default."""
        if not color or not is_css_color(color):
            return self
        return Theme(
            accent_color=color,
            secondary_color=self.secondary_color,
            text_color=self.text_color,
            muted_color=self.muted_color,
            placeholder_background=self.placeholder_background,
            placeholder_color=self.placeholder_color,
            font_family=self.font_family,
            cover_gradient_end=self.cover_gradient_end,
        )


@dataclass
class ExportSelection:
    """
    One export request. Created per invocation and consumed once.
    """
    albums: List[Album]
    page_size: PageSize = PageSize.A5
    layout: LayoutKind = LayoutKind.FEATURE
    theme_color_by_group: Dict[str, str] = field(default_factory=dict)
    title: str = "Our Photo Book"

    @classmethod
    def simple(cls, albums: List[Album], theme_color_by_group: Optional[Dict[str, str]] = None) -> "ExportSelection":
        """Restricted configuration: fixed two-column layout on A4."""
        return cls(
            albums=list(albums),
            page_size=PageSize.A4,
            layout=LayoutKind.TWO_COL,
            theme_color_by_group=dict(theme_color_by_group or {}),
        )

    def theme_color_for(self, album: Album) -> Optional[str]:
        return self.theme_color_by_group.get(album.group_id)


@dataclass(frozen=True)
class ExportProgress:
    """A single progress update emitted during an export run."""
    percent: int
    current_album_title: str
    current_step: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percent": self.percent,
            "album_title": self.current_album_title,
            "step": self.current_step,
        }


@dataclass(frozen=True)
class ExportCompleted:
    """Terminal event of a successful export run."""
    count: int
    artifact_path: Optional[str] = None


@dataclass(frozen=True)
class EmbeddedImage:
    """
    Inline image payload for document generation.

    Use `NO_PAYLOAD` (an instance with empty data) to signal a photo that
    could not be read.
    """
    media_subtype: str = ""
    data_base64: str = ""

    @property
    def is_missing(self) -> bool:
        return not self.data_base64

    @property
    def data_uri(self) -> str:
        if self.is_missing:
            return ""
        return f"data:image/{self.media_subtype};base64,{self.data_base64}"


NO_PAYLOAD = EmbeddedImage()


@dataclass
class PhotoSlot:
    """A photo ready for layout: embedded payload plus caption."""
    image: EmbeddedImage
    caption: str = ""
