"""
Group (child profile) repository backed by SQLAlchemy/SQLite.
"""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from domain.models import Group
from repositories.models import AlbumORM, GroupORM


def _group_from_orm(orm: GroupORM) -> Group:
    return Group(
        id=orm.id,
        name=orm.name,
        color=orm.color,
        emoji=orm.emoji or "",
        birth_date=orm.birth_date,
        created_at=orm.created_at,
    )


class GroupsRepository:
    """CRUD operations for groups."""

    def list_groups(self, session: Session) -> List[Group]:
        groups = session.query(GroupORM).order_by(GroupORM.created_at.asc()).all()
        return [_group_from_orm(g) for g in groups]

    def get_group(self, session: Session, group_id: str) -> Optional[Group]:
        orm = session.get(GroupORM, group_id)
        return _group_from_orm(orm) if orm else None

    def upsert_group(self, session: Session, group: Group) -> Group:
        orm = session.get(GroupORM, group.id)
        if orm is None:
            orm = GroupORM(id=group.id, created_at=group.created_at)
        orm.name = group.name
        orm.color = group.color
        orm.emoji = group.emoji
        orm.birth_date = group.birth_date
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _group_from_orm(orm)

    def delete_group(self, session: Session, group_id: str) -> List[str]:
        """
        Delete a group and all of its albums.

        Returns the ids of the deleted albums.
        """
        orm = session.get(GroupORM, group_id)
        if not orm:
            return []
        album_ids = [
            row.id for row in session.query(AlbumORM.id).filter(AlbumORM.group_id == group_id).all()
        ]
        session.query(AlbumORM).filter(AlbumORM.group_id == group_id).delete(synchronize_session=False)
        session.delete(orm)
        session.commit()
        return album_ids

    def theme_colors(self, session: Session) -> Dict[str, str]:
        """Map of group id to theme color."""
        return {g.id: g.color for g in session.query(GroupORM).all()}
