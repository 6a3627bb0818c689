"""
Repository pattern: data access abstraction over the persisted document.
"""

from .base import BaseRepository, IRepository, next_id
from .unit_of_work import UnitOfWork

__all__ = ["BaseRepository", "IRepository", "UnitOfWork", "next_id"]
