"""Test config and shared fixtures."""
import json
import pytest
from pathlib import Path
from typing import AsyncGenerator, Optional
from httpx import AsyncClient, ASGITransport

from main import app
from framework.database.json_driver import JsonFileDriver
from framework.exceptions.handler import GatewayError
from framework.repository.unit_of_work import UnitOfWork
from apps.users.models import Database
from apps.users.service import UserService


TEST_EMAIL = "test_user@example.com"
TEST_PASSWORD = "test123456"


class FakeReportTrigger:
    """Stands in for the runbook webhook."""

    def __init__(self, job_id: str = "job-0001", error: Optional[GatewayError] = None):
        self.job_id = job_id
        self.error = error
        self.payloads = []

    async def trigger(self, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.job_id


class FakeJobStatus:
    def __init__(self, status: str = "Completed", error: Optional[GatewayError] = None):
        self.status = status
        self.error = error
        self.requested = []

    async def get_status(self, job_id):
        self.requested.append(job_id)
        if self.error:
            raise self.error
        return self.status


class FakeBlobAccess:
    def __init__(self, error: Optional[GatewayError] = None):
        self.error = error

    async def create_download_url(self, storage_account_name, container_name, blob_name):
        if self.error:
            raise self.error
        return f"https://{storage_account_name}.blob.core.windows.net/{container_name}/{blob_name}?sig=test"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture
def json_driver(db_path: Path) -> JsonFileDriver:
    """Document driver on a temp file."""
    return JsonFileDriver(db_path)


@pytest.fixture
def read_document(db_path: Path):
    """Read the persisted document as stored on disk."""
    def _read():
        with open(db_path, "r", encoding="utf-8") as f:
            return json.load(f)
    return _read


@pytest.fixture
def user_service(json_driver: JsonFileDriver) -> UserService:
    return UserService(UnitOfWork(json_driver, Database))


@pytest.fixture
def report_trigger() -> FakeReportTrigger:
    return FakeReportTrigger()


@pytest.fixture
def job_status() -> FakeJobStatus:
    return FakeJobStatus()


@pytest.fixture
def blob_access() -> FakeBlobAccess:
    return FakeBlobAccess()


@pytest.fixture
async def client(
    json_driver: JsonFileDriver,
    report_trigger: FakeReportTrigger,
    job_status: FakeJobStatus,
    blob_access: FakeBlobAccess,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    from apps.users.api.router import get_db
    from apps.reports.api.router import (
        get_blob_access_gateway,
        get_job_status_gateway,
        get_report_trigger_gateway,
    )

    app.dependency_overrides[get_db] = lambda: json_driver
    app.dependency_overrides[get_report_trigger_gateway] = lambda: report_trigger
    app.dependency_overrides[get_job_status_gateway] = lambda: job_status
    app.dependency_overrides[get_blob_access_gateway] = lambda: blob_access

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def registered_user(client: AsyncClient) -> dict:
    """Register the default test user through the API."""
    response = await client.post("/register", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert response.status_code == 201
    return response.json()["user"]
