from typing import Any, Dict, List, Optional
from framework.exceptions.handler import AuthError, ConflictError, NotFoundError, ValidationError
from framework.logging.logger import get_logger
from framework.repository.base import next_id
from framework.repository.unit_of_work import UnitOfWork
from framework.security import prepare_password, verify_password
from .models import (
    Assessment,
    ClientCredential,
    FeedbackEntry,
    OnPremCredential,
    Tenant,
    User,
    USER_COLLECTIONS,
)
from .repository import UserRepository, same_id

logger = get_logger("user_service")

ASSESSMENT_FIELDS = ("type", "reportName", "status", "date")


def is_blank(value: Any) -> bool:
    """Missing, null and empty string all count as absent."""
    return value is None or value == ""


def require(message: str, *values: Any) -> None:
    if any(is_blank(v) for v in values):
        raise ValidationError(message)


class UserService:
    """Users and their nested records. Each public method is one read-modify-write of the document."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _users(self) -> UserRepository:
        return self.uow.get_repository(UserRepository)

    async def _get_user(self, email: str) -> User:
        user = await self._users().get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def register(self, email: Optional[str], password: Optional[str]) -> User:
        """Create a user with empty collections."""
        require("Email and password are required", email, password)

        async with self.uow:
            users = self._users()
            if await users.get_by_email(email):
                raise ConflictError("User with this email already exists")

            user = User(
                id=next_id(),
                email=email,
                password=prepare_password(password),
                **{collection: [] for collection in USER_COLLECTIONS},
            )
            await users.create(user)

        logger.info(f"User {email} registered (id={user.id})")
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> str:
        """Return the stored email on a match; the caller keeps any session state."""
        require("Email and password are required", email, password)

        async with self.uow:
            candidates = await self._users().list_by_email(email)
            user = next((u for u in candidates if verify_password(password, u.password)), None)

        if user is None:
            raise AuthError("Invalid email or password")
        logger.info(f"User {email} logged in")
        return user.email

    async def set_tenant(self, email: Optional[str], fields: Dict[str, Any]) -> User:
        """Save the tenant configuration, replacing any previous one."""
        require("Email and Tenant ID are required", email, fields.get("tenantId"))

        async with self.uow:
            user = await self._get_user(email)
            tenant = Tenant(**fields, id=next_id())
            await self._users().replace_tenant(user, tenant)

        logger.info(f"Tenant {tenant.tenantId} saved for {email}")
        return user

    async def get_tenants(self, email: str) -> List[Tenant]:
        async with self.uow:
            user = await self._get_user(email)
            return list(user.tenants)

    async def add_client_credential(
        self, email: Optional[str], client_id: Optional[str], client_secret: Optional[str]
    ) -> User:
        require("Email, Client ID, and Client Secret are required", email, client_id, client_secret)

        async with self.uow:
            user = await self._get_user(email)
            if any(c.clientId == client_id and c.clientSecret == client_secret for c in user.client_credentials):
                raise ConflictError("These credentials already exist for this user")

            credential = ClientCredential(id=next_id(), clientId=client_id, clientSecret=client_secret)
            await self._users().append_record(user, "client_credentials", credential)

        logger.info(f"Client credential {client_id} saved for {email}")
        return user

    async def add_feedback(self, email: Optional[str], feedback: Optional[str]) -> User:
        require("Email and feedback content are required", email, feedback)

        async with self.uow:
            user = await self._get_user(email)
            if any(f.feedback == feedback for f in user.feedback):
                raise ConflictError("This feedback has already been submitted")

            await self._users().append_record(user, "feedback", FeedbackEntry(id=next_id(), feedback=feedback))

        logger.info(f"Feedback submitted by {email}")
        return user

    async def add_on_prem_credential(
        self,
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        domain: Optional[Any] = None,
    ) -> User:
        require("Email, username, and password are required", email, username, password)

        async with self.uow:
            user = await self._get_user(email)
            if any(c.username == username and c.password == password for c in user.on_prem_credentials):
                raise ConflictError("These on-prem credentials already exist for this user")

            extra = {} if is_blank(domain) else {"domain": domain}
            credential = OnPremCredential(id=next_id(), username=username, password=password, **extra)
            await self._users().append_record(user, "on_prem_credentials", credential)

        logger.info(f"On-prem credential {username} saved for {email}")
        return user

    async def add_assessment(
        self,
        email: Optional[str],
        assessment_type: Any,
        report_name: Any,
        status: Any,
        date: Any,
    ) -> User:
        """Add one assessment; an existing (type, reportName) pair is left as is."""
        require("Email, type, report name, status, and date are required", email, assessment_type, report_name, status, date)

        async with self.uow:
            user = await self._get_user(email)
            if any(a.key == (assessment_type, report_name) for a in user.assessments):
                logger.debug(f"Assessment {assessment_type}/{report_name} already exists for {email}, skipped")
            else:
                assessment = Assessment(id=next_id(), type=assessment_type, reportName=report_name, status=status, date=date)
                await self._users().append_record(user, "assessments", assessment)
            self.uow.mark_dirty()

        return user

    async def add_assessments_bulk(self, email: Optional[str], assessments: Any) -> User:
        """
        Add many assessments in one write.

        Items missing a required field or repeating an existing (type, reportName), including one added earlier in the same batch, are
        skipped without failing the request.
        """
        if is_blank(email) or not isinstance(assessments, list):
            raise ValidationError("Email and assessments array are required")

        async with self.uow:
            user = await self._get_user(email)
            users = self._users()
            added = skipped = 0

            for item in assessments:
                if not isinstance(item, dict) or any(is_blank(item.get(f)) for f in ASSESSMENT_FIELDS):
                    logger.warning(f"Invalid assessment object skipped: {item!r}")
                    skipped += 1
                    continue
                if any(a.key == (item["type"], item["reportName"]) for a in user.assessments):
                    skipped += 1
                    continue
                assessment = Assessment.model_validate({**item, "id": next_id()})
                await users.append_record(user, "assessments", assessment)
                added += 1

            self.uow.mark_dirty()

        logger.info(f"Bulk assessments for {email}: {added} added, {skipped} skipped")
        return user

    async def get_assessments(self, email: str) -> List[Assessment]:
        async with self.uow:
            user = await self._get_user(email)
            return list(user.assessments)

    async def get_assessment(self, email: str, assessment_id: str) -> Assessment:
        async with self.uow:
            user = await self._get_user(email)
            assessment = next((a for a in user.assessments if same_id(a.id, assessment_id)), None)
            if assessment is None:
                raise NotFoundError("Assessment not found")
            return assessment

    async def delete_assessment(self, email: str, assessment_id: str) -> None:
        async with self.uow:
            user = await self._get_user(email)
            if not await self._users().remove_assessment(user, assessment_id):
                raise NotFoundError("Assessment not found for this user")

        logger.info(f"Assessment {assessment_id} deleted for {email}")
