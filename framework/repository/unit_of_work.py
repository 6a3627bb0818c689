"""
Unit of Work: loads the document, hands it to repositories, writes it back once.
"""

from typing import Generic, Optional, Type, TypeVar
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from framework.database.base import DocumentDriver
from framework.logging.logger import get_logger

logger = get_logger("unit_of_work")

D = TypeVar("D", bound=BaseModel)


class UnitOfWork(Generic[D]):
    """
    One read-modify-write cycle over the whole document.

    `async with uow:` takes the driver lock, loads and validates the document,
    and on a clean exit writes it back if any repository changed it. On an
    exception the in-memory view is dropped and the file is left untouched.
    """

    def __init__(self, driver: DocumentDriver, document_model: Type[D]):
        if driver is None:
            raise ValueError("Driver must be provided.")
        self.driver = driver
        self.document_model = document_model
        self.document: Optional[D] = None
        self._repositories = {}
        self._dirty = False

    def get_repository(self, repo_class):
        """Get or create a repository instance (cached)."""
        cache_key = repo_class.__name__
        if cache_key not in self._repositories:
            self._repositories[cache_key] = repo_class(self)
        return self._repositories[cache_key]

    def mark_dirty(self) -> None:
        self._dirty = True

    async def load(self) -> D:
        """Read and validate the document; file access runs off the event loop."""
        raw = await run_in_threadpool(self.driver.read)
        self.document = self.document_model.model_validate(raw)
        self._dirty = False
        return self.document

    async def commit(self) -> None:
        """Write the whole document back, keeping every key that was loaded or set."""
        if self.document is None:
            return
        await run_in_threadpool(self.driver.write, self.document.model_dump(mode="json", exclude_unset=True))
        self._dirty = False

    async def rollback(self) -> None:
        """Discard the in-memory view."""
        self.document = None
        self._dirty = False

    async def __aenter__(self):
        await self.driver.lock.acquire()
        try:
            await self.load()
        except Exception:
            self.driver.lock.release()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                await self.rollback()
            elif self._dirty:
                await self.commit()
        finally:
            self.document = None
            self._repositories.clear()
            self.driver.lock.release()
