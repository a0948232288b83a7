"""
Groups (child profiles) API routes.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from db import SessionLocal
from domain.models import CSS_COLOR_PATTERN, Group
from repositories import GroupsRepository
from storage.file_storage import FileStorage
from settings import settings

router = APIRouter()
groups_repo = GroupsRepository()
storage = FileStorage(settings.MEDIA_ROOT)
logger = logging.getLogger(__name__)


class GroupUpsert(BaseModel):
    name: str
    color: str = Field(default="#f472b6", pattern=CSS_COLOR_PATTERN)
    emoji: str = ""
    birth_date: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    color: str
    emoji: str
    birth_date: Optional[str] = None
    created_at: str


def group_to_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        color=group.color,
        emoji=group.emoji,
        birth_date=group.birth_date,
        created_at=group.created_at.isoformat(),
    )


@router.get("", response_model=List[GroupResponse])
async def list_groups():
    """List all groups, oldest first."""
    with SessionLocal() as session:
        return [group_to_response(g) for g in groups_repo.list_groups(session)]


@router.post("", response_model=GroupResponse)
async def create_group(data: GroupUpsert):
    """Create a new group."""
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Group name is required")
    group = Group(
        id=Group.generate_id(),
        name=data.name.strip(),
        color=data.color,
        emoji=data.emoji,
        birth_date=data.birth_date,
    )
    with SessionLocal() as session:
        return group_to_response(groups_repo.upsert_group(session, group))


@router.put("/{group_id}", response_model=GroupResponse)
async def upsert_group(group_id: str, data: GroupUpsert):
    """Create or replace a group by id."""
    if not data.name.strip():
        raise HTTPException(status_code=400, detail="Group name is required")
    with SessionLocal() as session:
        existing = groups_repo.get_group(session, group_id)
        group = Group(
            id=group_id,
            name=data.name.strip(),
            color=data.color,
            emoji=data.emoji,
            birth_date=data.birth_date,
        )
        if existing:
            group.created_at = existing.created_at
        return group_to_response(groups_repo.upsert_group(session, group))


@router.delete("/{group_id}")
async def delete_group(group_id: str):
    """Delete a group together with its albums and their photos."""
    with SessionLocal() as session:
        if not groups_repo.get_group(session, group_id):
            raise HTTPException(status_code=404, detail="Group not found")
        album_ids = groups_repo.delete_group(session, group_id)
    for album_id in album_ids:
        storage.delete_album_files(album_id)
    logger.info("Deleted group %s with %s albums", group_id, len(album_ids))
    return {"deleted": group_id, "albums_deleted": len(album_ids)}
