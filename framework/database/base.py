from abc import ABC, abstractmethod
from typing import Any, Dict

class BaseDatabaseDriver(ABC):
    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def disconnect(self):
        pass


class DocumentDriver(BaseDatabaseDriver):
    """Driver that persists one whole document; every write replaces it."""

    @abstractmethod
    def read(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def write(self, document: Dict[str, Any]) -> None:
        pass
