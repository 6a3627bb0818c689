from typing import Any, Dict, Optional
from framework.exceptions.handler import ValidationError
from framework.logging.logger import get_logger
from framework.response import ResponseModel
from .gateway import BlobAccessGateway, JobStatusGateway, ReportTriggerGateway

logger = get_logger("report_service")

REPORT_FIELDS = (
    "TenantId",
    "ClientId",
    "CertificateName",
    "StorageAccountName",
    "StorageAccountKey",
    "ContainerName",
)


class InvalidReportRequest(ValidationError):
    """400 reported in the report endpoints' {error} shape."""

    def content(self) -> dict:
        return ResponseModel.error(self.message)


class ReportService:
    """Report runs: start the runbook, poll its job, hand out the result blob."""

    def __init__(
        self,
        trigger: ReportTriggerGateway,
        job_status: JobStatusGateway,
        blob_access: BlobAccessGateway,
    ):
        self.trigger = trigger
        self.job_status = job_status
        self.blob_access = blob_access

    async def execute_report(self, parameters: Dict[str, Any]) -> str:
        """Relay the report parameters to the runbook webhook; returns the job id."""
        payload = {k: parameters[k] for k in REPORT_FIELDS if parameters.get(k) is not None}
        return await self.trigger.trigger(payload)

    async def get_report_status(self, job_id: str) -> str:
        job_status = await self.job_status.get_status(job_id)
        logger.debug(f"Job {job_id} status: {job_status}")
        return job_status

    async def get_download_link(
        self,
        storage_account_name: Optional[str],
        container_name: Optional[str],
        blob_name: Optional[str],
    ) -> str:
        if not storage_account_name or not container_name or not blob_name:
            raise InvalidReportRequest("storageAccountName, containerName, and blobName are required.")

        url = await self.blob_access.create_download_url(storage_account_name, container_name, blob_name)
        logger.info(f"Download link issued for {container_name}/{blob_name} in {storage_account_name}")
        return url
