"""
Repository abstract base class and generic implementation over a loaded document.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Any, TYPE_CHECKING
from pydantic import BaseModel

if TYPE_CHECKING:
    from .unit_of_work import UnitOfWork

T = TypeVar("T", bound=BaseModel)


class IdGenerator:
    """Millisecond-clock ids, strictly increasing within the process."""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


_id_generator = IdGenerator()


def next_id() -> int:
    """Generate a new record id."""
    return _id_generator.next()


class IRepository(ABC, Generic[T]):
    """Repository interface; defines standard data access API."""

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Get all entities."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create entity."""
        pass

    @abstractmethod
    async def delete(self, id: int) -> bool:
        """Delete entity."""
        pass


class BaseRepository(IRepository[T]):
    """Generic repository over one top-level list of the document held by a UnitOfWork."""

    def __init__(self, uow: "UnitOfWork", collection: str):
        self.uow = uow
        self.collection = collection

    @property
    def items(self) -> List[T]:
        return getattr(self.uow.document, self.collection)

    async def get_by_id(self, id: int) -> Optional[T]:
        return await self.find_one(id=id)

    async def get_all(self) -> List[T]:
        return list(self.items)

    async def create(self, entity: T) -> T:
        """Append entity; the document is written when the UnitOfWork commits."""
        setattr(self.uow.document, self.collection, [*self.items, entity])
        self.uow.mark_dirty()
        return entity

    async def delete(self, id: int) -> bool:
        remaining = [item for item in self.items if getattr(item, "id", None) != id]
        if len(remaining) == len(self.items):
            return False
        setattr(self.uow.document, self.collection, remaining)
        self.uow.mark_dirty()
        return True

    async def find_one(self, **filters: Any) -> Optional[T]:
        """Find first entity whose attributes equal all filters (e.g. email='a@b.c')."""
        for item in self.items:
            if _matches(item, filters):
                return item
        return None

    async def find_all(self, **filters: Any) -> List[T]:
        return [item for item in self.items if _matches(item, filters)]

    async def count(self, **filters: Any) -> int:
        return len(await self.find_all(**filters))


def _matches(item: BaseModel, filters: dict) -> bool:
    return all(getattr(item, key, None) == value for key, value in filters.items())
