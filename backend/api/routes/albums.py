"""
Albums API routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from db import SessionLocal
from domain.models import Album, PhotoEntry, WeatherType
from repositories import AlbumsRepository, GroupsRepository
from services.date_format import parse_album_date, to_date_only
from services.photo_optimizer import is_heic_file
from storage.file_storage import FileStorage
from settings import settings

router = APIRouter()
albums_repo = AlbumsRepository()
groups_repo = GroupsRepository()
storage = FileStorage(settings.MEDIA_ROOT)
logger = logging.getLogger(__name__)


class PhotoPayload(BaseModel):
    id: str
    source_ref: str
    caption: str = Field(default="", max_length=200)
    width: Optional[int] = None
    height: Optional[int] = None


class AlbumUpsert(BaseModel):
    group_id: str
    title: str = Field(default="", max_length=50)
    date: str
    date_end: Optional[str] = None
    location: str = ""
    weather: Optional[str] = None
    weather_emoji: str = ""
    weather_custom: str = ""
    story: str = Field(default="", max_length=1000)
    photos: List[PhotoPayload] = Field(default_factory=list)
    cover_photo_id: Optional[str] = None


class AlbumResponse(BaseModel):
    id: str
    group_id: str
    title: str
    date: str
    date_end: Optional[str] = None
    location: str
    weather: Optional[str] = None
    weather_emoji: str
    weather_custom: str
    story: str
    photos: List[PhotoPayload]
    cover_photo_id: Optional[str] = None
    created_at: str
    updated_at: str


def album_to_response(album: Album) -> AlbumResponse:
    """Convert domain Album to API response."""
    return AlbumResponse(
        id=album.id,
        group_id=album.group_id,
        title=album.title,
        date=album.date,
        date_end=album.date_end,
        location=album.location,
        weather=album.weather,
        weather_emoji=album.weather_emoji,
        weather_custom=album.weather_custom,
        story=album.story,
        photos=[PhotoPayload(**p.to_dict()) for p in album.photos],
        cover_photo_id=album.cover_photo_id,
        created_at=album.created_at.isoformat(),
        updated_at=album.updated_at.isoformat(),
    )


def _validate(data: AlbumUpsert) -> None:
    try:
        parse_album_date(data.date)
        if data.date_end:
            parse_album_date(data.date_end)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date: {data.date}")
    if data.date_end and to_date_only(data.date_end) < to_date_only(data.date):
        raise HTTPException(status_code=400, detail="date_end must not be before date")
    if data.weather:
        try:
            WeatherType(data.weather)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid weather: {data.weather}")


@router.get("", response_model=List[AlbumResponse])
async def list_albums(group_id: Optional[str] = None):
    """List albums newest first, optionally for a single group."""
    with SessionLocal() as session:
        if group_id:
            albums = albums_repo.list_albums_by_group(session, group_id)
        else:
            albums = albums_repo.list_albums(session)
        return [album_to_response(a) for a in albums]


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(album_id: str):
    with SessionLocal() as session:
        album = albums_repo.get_album(session, album_id)
        if not album:
            raise HTTPException(status_code=404, detail="Album not found")
        return album_to_response(album)


@router.put("/{album_id}", response_model=AlbumResponse)
async def upsert_album(album_id: str, data: AlbumUpsert):
    """Create or replace an album by id."""
    _validate(data)
    with SessionLocal() as session:
        if not groups_repo.get_group(session, data.group_id):
            raise HTTPException(status_code=404, detail="Group not found")
        existing = albums_repo.get_album(session, album_id)
        album = Album(
            id=album_id,
            group_id=data.group_id,
            title=data.title,
            date=data.date,
            date_end=data.date_end,
            location=data.location,
            weather=data.weather,
            weather_emoji=data.weather_emoji,
            weather_custom=data.weather_custom,
            story=data.story,
            photos=[PhotoEntry(**p.model_dump()) for p in data.photos],
            cover_photo_id=data.cover_photo_id,
        )
        if existing:
            album.created_at = existing.created_at
        return album_to_response(albums_repo.upsert_album(session, album))


@router.delete("/{album_id}")
async def delete_album(album_id: str):
    """Delete an album and its stored photos."""
    with SessionLocal() as session:
        album = albums_repo.delete_album(session, album_id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found")
    storage.delete_album_files(album_id)
    return {"deleted": album_id}


@router.post("/{album_id}/photos", response_model=AlbumResponse)
async def upload_photo(album_id: str, file: UploadFile = File(...), caption: str = Form("")):
    """Store an optimized copy of a photo and append it to the album."""
    if len(caption) > 200:
        raise HTTPException(status_code=400, detail="Caption is limited to 200 characters")
    with SessionLocal() as session:
        album = albums_repo.get_album(session, album_id)
        if not album:
            raise HTTPException(status_code=404, detail="Album not found")

        content = await file.read()
        if is_heic_file(file.filename or "", file.content_type):
            logger.info("HEIC upload for album %s will be converted to JPEG", album_id)

        photo_id = PhotoEntry.generate_id()
        stored = storage.save_photo(
            album_id,
            photo_id,
            content,
            max_dimension=settings.PHOTO_MAX_DIMENSION,
            quality=settings.PHOTO_JPEG_QUALITY,
        )
        album.photos.append(
            PhotoEntry(
                id=photo_id,
                source_ref=stored.path,
                caption=caption,
                width=stored.width,
                height=stored.height,
            )
        )
        return album_to_response(albums_repo.upsert_album(session, album))
