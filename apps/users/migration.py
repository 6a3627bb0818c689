"""Startup normalization of stored users (backfills collections added after a user was created)."""

from starlette.concurrency import run_in_threadpool
from framework.database.base import DocumentDriver
from framework.logging.logger import get_logger
from .models import USER_COLLECTIONS

logger = get_logger("user_migration")


async def migrate_users(driver: DocumentDriver) -> bool:
    """
    Ensure every stored user carries all nested collections.

    Writes the document once, and only if a user was missing something.
    Returns whether a write happened.
    """
    async with driver.lock:
        document = await run_in_threadpool(driver.read)
        updated = False

        for user in document["users"]:
            if not isinstance(user, dict):
                continue
            for collection in USER_COLLECTIONS:
                if user.get(collection) is None:
                    user[collection] = []
                    updated = True

        if updated:
            await run_in_threadpool(driver.write, document)
            logger.info("User data migration completed.")
        return updated
