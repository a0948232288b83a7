"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from db import Base


class GroupORM(Base):
    __tablename__ = "groups"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    emoji = Column(String, nullable=True)
    color = Column(String, nullable=False)
    birth_date = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    albums = relationship(
        "AlbumORM",
        back_populates="group",
        cascade="all, delete-orphan",
    )


class AlbumORM(Base):
    __tablename__ = "albums"

    id = Column(String, primary_key=True, index=True)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    date = Column(String, nullable=False)
    date_end = Column(String, nullable=True)
    location = Column(String, nullable=False, default="")
    weather = Column(String, nullable=True)
    weather_emoji = Column(String, nullable=False, default="")
    weather_custom = Column(String, nullable=False, default="")
    story = Column(Text, nullable=False, default="")
    photos = Column(JSON, nullable=True)
    cover_photo_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    group = relationship("GroupORM", back_populates="albums")
