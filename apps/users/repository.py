"""User repository: lookups on the users list and mutations of each user's nested collections."""

from typing import Any, List, Optional
from framework.repository.base import BaseRepository
from .models import Record, Tenant, User


def same_id(record_id: Any, raw: str) -> bool:
    """Path ids arrive as text: match integer ids numerically, anything else as a string."""
    if isinstance(record_id, int) and not isinstance(record_id, bool):
        try:
            return record_id == int(raw)
        except (TypeError, ValueError):
            return False
    return record_id is not None and str(record_id) == raw


class UserRepository(BaseRepository[User]):
    """User repository."""

    def __init__(self, uow):
        super().__init__(uow, "users")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find user by email (exact, case-sensitive)."""
        return await self.find_one(email=email)

    async def list_by_email(self, email: str) -> List[User]:
        return await self.find_all(email=email)

    async def replace_tenant(self, user: User, tenant: Tenant) -> User:
        """A user keeps at most one tenant: the new one replaces all previous ones."""
        user.tenants = [tenant]
        self.uow.mark_dirty()
        return user

    async def append_record(self, user: User, collection: str, record: Record) -> User:
        # assign rather than append so a defaulted collection is written out
        setattr(user, collection, [*getattr(user, collection), record])
        self.uow.mark_dirty()
        return user

    async def remove_assessment(self, user: User, assessment_id: str) -> bool:
        """Remove by id; False when nothing matched."""
        before = len(user.assessments)
        user.assessments = [a for a in user.assessments if not same_id(a.id, assessment_id)]
        if len(user.assessments) == before:
            return False
        self.uow.mark_dirty()
        return True
