from .albums import AlbumsRepository
from .groups import GroupsRepository
from . import models

__all__ = ["AlbumsRepository", "GroupsRepository", "models"]
