import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict
from starlette.concurrency import run_in_threadpool
from framework.logging.logger import get_logger
from .base import DocumentDriver

logger = get_logger("json_driver")


def empty_document() -> Dict[str, Any]:
    return {"users": [], "feedback": []}


class JsonFileDriver(DocumentDriver):
    """
    Whole-document persistence in a single JSON file.

    `lock` serializes read-modify-write cycles inside one process; it does not
    coordinate separate worker processes. `read` and `write` block, so async
    callers run them in the threadpool.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.lock = asyncio.Lock()

    async def connect(self):
        """Create the document if it does not exist yet."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            await run_in_threadpool(self.write, empty_document())
            logger.info(f"Created empty document at {self.path}")

    async def disconnect(self):
        pass

    def read(self) -> Dict[str, Any]:
        """Load the document; a missing or unreadable file yields the empty structure."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError:
            return empty_document()
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read document {self.path}, starting from empty: {e}")
            return empty_document()

        if not isinstance(document, dict):
            logger.warning(f"Document {self.path} is not a JSON object, starting from empty")
            return empty_document()
        document.setdefault("users", [])
        document.setdefault("feedback", [])
        return document

    def write(self, document: Dict[str, Any]) -> None:
        """Replace the document atomically (temp file in the same directory, then rename)."""
        directory = self.path.parent
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Document written to {self.path}")
