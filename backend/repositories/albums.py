"""
Album repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Album, PhotoEntry
from repositories.models import AlbumORM


def _photos_from_json(data: Optional[list]) -> List[PhotoEntry]:
    if not data:
        return []
    return [PhotoEntry.from_dict(p) for p in data]


def _photos_to_json(photos: List[PhotoEntry]) -> list:
    return [p.to_dict() for p in photos]


def _album_from_orm(orm: AlbumORM) -> Album:
    return Album(
        id=orm.id,
        group_id=orm.group_id,
        title=orm.title or "",
        date=orm.date,
        date_end=orm.date_end,
        location=orm.location or "",
        weather=orm.weather,
        weather_emoji=orm.weather_emoji or "",
        weather_custom=orm.weather_custom or "",
        story=orm.story or "",
        photos=_photos_from_json(orm.photos),
        cover_photo_id=orm.cover_photo_id,
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


def _update_orm_from_album(orm: AlbumORM, album: Album) -> None:
    orm.group_id = album.group_id
    orm.title = album.title
    orm.date = album.date
    orm.date_end = album.date_end
    orm.location = album.location
    orm.weather = album.weather
    orm.weather_emoji = album.weather_emoji
    orm.weather_custom = album.weather_custom
    orm.story = album.story
    orm.photos = _photos_to_json(album.photos)
    orm.cover_photo_id = album.cover_photo_id
    orm.updated_at = album.updated_at


class AlbumsRepository:
    """Read and upsert albums by id."""

    def list_albums(self, session: Session) -> List[Album]:
        """All albums, newest first."""
        albums = session.query(AlbumORM).order_by(AlbumORM.date.desc()).all()
        return [_album_from_orm(a) for a in albums]

    def list_albums_by_group(self, session: Session, group_id: str) -> List[Album]:
        albums = (
            session.query(AlbumORM)
            .filter(AlbumORM.group_id == group_id)
            .order_by(AlbumORM.date.desc())
            .all()
        )
        return [_album_from_orm(a) for a in albums]

    def get_album(self, session: Session, album_id: str) -> Optional[Album]:
        orm = session.get(AlbumORM, album_id)
        if not orm:
            return None
        return _album_from_orm(orm)

    def get_albums(self, session: Session, album_ids: List[str]) -> List[Album]:
        """Albums for the given ids in request order; unknown ids are skipped."""
        if not album_ids:
            return []
        rows = session.query(AlbumORM).filter(AlbumORM.id.in_(album_ids)).all()
        by_id = {row.id: row for row in rows}
        return [_album_from_orm(by_id[aid]) for aid in album_ids if aid in by_id]

    def upsert_album(self, session: Session, album: Album) -> Album:
        album.updated_at = datetime.utcnow()
        orm = session.get(AlbumORM, album.id)
        if orm is None:
            orm = AlbumORM(id=album.id, created_at=album.created_at or album.updated_at)
        _update_orm_from_album(orm, album)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _album_from_orm(orm)

    def delete_album(self, session: Session, album_id: str) -> Optional[Album]:
        """Delete an album. Returns the deleted album so callers can clean its files."""
        orm = session.get(AlbumORM, album_id)
        if not orm:
            return None
        album = _album_from_orm(orm)
        session.delete(orm)
        session.commit()
        return album
