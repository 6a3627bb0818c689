"""Tenant, credential and feedback API test cases."""
import pytest
from httpx import AsyncClient
from conftest import TEST_EMAIL

TENANT = {
    "hasAppId": True,
    "clientId": "app-1",
    "clientSecret": "secret-1",
    "certificateThumbprint": "ABCDEF",
    "gaAccount": "admin@contoso.onmicrosoft.com",
    "gaPassword": "ga-pass",
    "tenantId": "tenant-1",
    "tenantUrl": "https://contoso.sharepoint.com",
    "azureFileStorage": "contosostorage",
    "storageAccountKey": "key==",
    "storageAccountCredential": True,
}


class TestTenants:
    """Test /users/tenants."""

    @pytest.mark.asyncio
    async def test_save_tenant(self, client: AsyncClient, registered_user):
        response = await client.post("/users/tenants", json={"email": TEST_EMAIL, **TENANT})

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Tenant saved successfully"
        tenants = data["user"]["tenants"]
        assert len(tenants) == 1
        assert {k: tenants[0][k] for k in TENANT} == TENANT
        assert isinstance(tenants[0]["id"], int)

    @pytest.mark.asyncio
    async def test_save_tenant_twice_replaces(self, client: AsyncClient, registered_user):
        await client.post("/users/tenants", json={"email": TEST_EMAIL, **TENANT})
        await client.post("/users/tenants", json={"email": TEST_EMAIL, "tenantId": "tenant-2"})

        response = await client.get(f"/users/tenants/{TEST_EMAIL}")
        assert response.status_code == 200
        tenants = response.json()["tenants"]
        assert len(tenants) == 1
        assert tenants[0]["tenantId"] == "tenant-2"
        # fields not sent the second time are not carried over
        assert "clientSecret" not in tenants[0]

    @pytest.mark.asyncio
    async def test_save_tenant_requires_tenant_id(self, client: AsyncClient, registered_user):
        response = await client.post("/users/tenants", json={"email": TEST_EMAIL, "clientId": "x"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email and Tenant ID are required"

    @pytest.mark.asyncio
    async def test_save_tenant_keeps_non_string_values(self, client: AsyncClient, registered_user, read_document):
        response = await client.post(
            "/users/tenants", json={"email": TEST_EMAIL, "tenantId": 12345, "tenantUrl": None}
        )

        assert response.status_code == 201
        stored = read_document()["users"][0]["tenants"][0]
        assert stored["tenantId"] == 12345
        assert stored["tenantUrl"] is None
        assert "clientId" not in stored

    @pytest.mark.asyncio
    async def test_save_tenant_unknown_user(self, client: AsyncClient):
        response = await client.post("/users/tenants", json={"email": "ghost@example.com", "tenantId": "t"})

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_get_tenants_empty(self, client: AsyncClient, registered_user):
        response = await client.get(f"/users/tenants/{TEST_EMAIL}")

        assert response.status_code == 200
        assert response.json() == {"tenants": []}

    @pytest.mark.asyncio
    async def test_get_tenants_unknown_user(self, client: AsyncClient):
        response = await client.get("/users/tenants/ghost@example.com")
        assert response.status_code == 404


class TestClientCredentials:
    """Test /users/client-credentials."""

    @pytest.mark.asyncio
    async def test_add_client_credential(self, client: AsyncClient, registered_user):
        response = await client.post(
            "/users/client-credentials",
            json={"email": TEST_EMAIL, "clientId": "cid", "clientSecret": "csecret"},
        )

        assert response.status_code == 201
        creds = response.json()["user"]["client_credentials"]
        assert len(creds) == 1
        assert creds[0]["clientId"] == "cid"
        assert creds[0]["clientSecret"] == "csecret"

    @pytest.mark.asyncio
    async def test_duplicate_client_credential_rejected(self, client: AsyncClient, registered_user, read_document):
        payload = {"email": TEST_EMAIL, "clientId": "cid", "clientSecret": "csecret"}
        await client.post("/users/client-credentials", json=payload)
        response = await client.post("/users/client-credentials", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "These credentials already exist for this user"
        assert len(read_document()["users"][0]["client_credentials"]) == 1

    @pytest.mark.asyncio
    async def test_same_client_id_new_secret_allowed(self, client: AsyncClient, registered_user):
        await client.post("/users/client-credentials", json={"email": TEST_EMAIL, "clientId": "cid", "clientSecret": "a"})
        response = await client.post(
            "/users/client-credentials", json={"email": TEST_EMAIL, "clientId": "cid", "clientSecret": "b"}
        )

        assert response.status_code == 201
        assert len(response.json()["user"]["client_credentials"]) == 2

    @pytest.mark.asyncio
    async def test_client_credential_missing_secret(self, client: AsyncClient, registered_user):
        response = await client.post("/users/client-credentials", json={"email": TEST_EMAIL, "clientId": "cid"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email, Client ID, and Client Secret are required"

    @pytest.mark.asyncio
    async def test_client_credential_unknown_user(self, client: AsyncClient):
        response = await client.post(
            "/users/client-credentials",
            json={"email": "ghost@example.com", "clientId": "cid", "clientSecret": "s"},
        )
        assert response.status_code == 404


class TestFeedback:
    """Test /users/feedback."""

    @pytest.mark.asyncio
    async def test_add_feedback(self, client: AsyncClient, registered_user, read_document):
        response = await client.post("/users/feedback", json={"email": TEST_EMAIL, "feedback": "Great tool"})

        assert response.status_code == 201
        assert [f["feedback"] for f in response.json()["user"]["feedback"]] == ["Great tool"]
        # the legacy top-level list is never written to
        assert read_document()["feedback"] == []

    @pytest.mark.asyncio
    async def test_duplicate_feedback_rejected(self, client: AsyncClient, registered_user):
        await client.post("/users/feedback", json={"email": TEST_EMAIL, "feedback": "Great tool"})
        response = await client.post("/users/feedback", json={"email": TEST_EMAIL, "feedback": "Great tool"})

        assert response.status_code == 400
        assert response.json()["message"] == "This feedback has already been submitted"

    @pytest.mark.asyncio
    async def test_feedback_missing_text(self, client: AsyncClient, registered_user):
        response = await client.post("/users/feedback", json={"email": TEST_EMAIL, "feedback": ""})
        assert response.status_code == 400


class TestOnPremCredentials:
    """Test /users/on-prem-credentials."""

    @pytest.mark.asyncio
    async def test_add_on_prem_credential(self, client: AsyncClient, registered_user):
        response = await client.post(
            "/users/on-prem-credentials",
            json={"email": TEST_EMAIL, "username": "svc", "password": "pw", "domain": "CORP"},
        )

        assert response.status_code == 201
        creds = response.json()["user"]["on_prem_credentials"]
        assert len(creds) == 1
        assert creds[0]["domain"] == "CORP"

    @pytest.mark.asyncio
    async def test_domain_is_optional(self, client: AsyncClient, registered_user):
        response = await client.post(
            "/users/on-prem-credentials", json={"email": TEST_EMAIL, "username": "svc", "password": "pw"}
        )

        assert response.status_code == 201
        assert "domain" not in response.json()["user"]["on_prem_credentials"][0]

    @pytest.mark.asyncio
    async def test_duplicate_on_prem_credential_rejected(self, client: AsyncClient, registered_user):
        payload = {"email": TEST_EMAIL, "username": "svc", "password": "pw"}
        await client.post("/users/on-prem-credentials", json=payload)
        # a different domain does not make it a different credential
        response = await client.post("/users/on-prem-credentials", json={**payload, "domain": "OTHER"})

        assert response.status_code == 400
        assert response.json()["message"] == "These on-prem credentials already exist for this user"

    @pytest.mark.asyncio
    async def test_on_prem_missing_password(self, client: AsyncClient, registered_user):
        response = await client.post("/users/on-prem-credentials", json={"email": TEST_EMAIL, "username": "svc"})

        assert response.status_code == 400
        assert response.json()["message"] == "Email, username, and password are required"
