"""
Clients for the Azure services behind the report endpoints.

Nothing here retries. Failures surface as GatewayError carrying whatever the
downstream service said.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.mgmt.automation import AutomationClient
from azure.storage.blob import BlobSasPermissions, BlobServiceClient, generate_blob_sas
from starlette.concurrency import run_in_threadpool

from framework.exceptions.handler import GatewayError
from framework.logging.logger import get_logger

logger = get_logger("report_gateway")


def _response_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ReportTriggerGateway:
    """Starts the report runbook through its Azure Automation webhook."""

    def __init__(
        self,
        webhook_url: Optional[str],
        verify_tls: bool = True,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.transport = transport

    async def trigger(self, payload: Dict[str, Any]) -> str:
        """POST the report parameters and return the first job id Azure answers with."""
        if not self.webhook_url:
            raise GatewayError("Failed to start the report generation.", detail="Report webhook URL is not configured")

        if not self.verify_tls:
            logger.warning("TLS verification disabled for report webhook call")

        logger.info("Triggering Azure Automation runbook...")
        try:
            async with httpx.AsyncClient(verify=self.verify_tls, timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                "Failed to start the report generation.", detail=_response_details(e.response)
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError("Failed to start the report generation.", detail=str(e)) from e

        body = _response_details(response)
        job_ids = body.get("JobIds") if isinstance(body, dict) else None
        if not isinstance(job_ids, list) or not job_ids:
            logger.error(f"Failed to get Job ID from Azure response: {body!r}")
            raise GatewayError("Failed to get Job ID from Azure.")

        job_id = job_ids[0]
        logger.info(f"Runbook triggered successfully. Job ID: {job_id}")
        return job_id


class JobStatusGateway:
    """Reads runbook job status from the Azure Automation management API."""

    def __init__(self, subscription_id: Optional[str], resource_group: str, automation_account: str, credential=None):
        self.subscription_id = subscription_id
        self.resource_group = resource_group
        self.automation_account = automation_account
        self.credential = credential

    def _get_status(self, job_id: str) -> str:
        if not self.subscription_id:
            raise ValueError("AZURE_SUBSCRIPTION_ID is not configured")
        credential = self.credential or DefaultAzureCredential()
        client = AutomationClient(credential, self.subscription_id)
        job = client.job.get(self.resource_group, self.automation_account, job_id)
        # SDK enums are str subclasses; return the plain value
        return getattr(job.status, "value", job.status)

    async def get_status(self, job_id: str) -> str:
        try:
            return await run_in_threadpool(self._get_status, job_id)
        except (AzureError, ValueError) as e:
            raise GatewayError("Failed to get job status.", detail=getattr(e, "message", None) or str(e)) from e


class BlobAccessGateway:
    """Mints read-only, time-limited blob URLs signed with a user delegation key."""

    def __init__(self, account_url_template: str, ttl_seconds: int = 3600, credential=None):
        self.account_url_template = account_url_template
        self.ttl = timedelta(seconds=ttl_seconds)
        self.credential = credential

    def _create_url(self, storage_account_name: str, container_name: str, blob_name: str) -> str:
        account_url = self.account_url_template.format(account=storage_account_name)
        service_client = BlobServiceClient(account_url, credential=self.credential or DefaultAzureCredential())

        starts_on = datetime.now(timezone.utc)
        expires_on = starts_on + self.ttl
        delegation_key = service_client.get_user_delegation_key(starts_on, expires_on)

        sas_token = generate_blob_sas(
            account_name=storage_account_name,
            container_name=container_name,
            blob_name=blob_name,
            user_delegation_key=delegation_key,
            permission=BlobSasPermissions(read=True),
            start=starts_on,
            expiry=expires_on,
            protocol="https",
        )
        blob_url = service_client.get_blob_client(container_name, blob_name).url
        return f"{blob_url}?{sas_token}"

    async def create_download_url(self, storage_account_name: str, container_name: str, blob_name: str) -> str:
        try:
            return await run_in_threadpool(self._create_url, storage_account_name, container_name, blob_name)
        except (AzureError, ValueError) as e:
            raise GatewayError("Failed to generate download link.", detail=getattr(e, "message", None) or str(e)) from e
