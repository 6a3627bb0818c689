from fastapi import APIRouter, Depends
from typing import Optional
from framework.config import settings
from framework.response import ResponseModel
from ..gateway import BlobAccessGateway, JobStatusGateway, ReportTriggerGateway
from ..service import ReportService
from pydantic import BaseModel

router = APIRouter()

class ExecuteReportSchema(BaseModel):
    TenantId: Optional[str] = None
    ClientId: Optional[str] = None
    CertificateName: Optional[str] = None
    StorageAccountName: Optional[str] = None
    StorageAccountKey: Optional[str] = None
    ContainerName: Optional[str] = None

class DownloadLinkSchema(BaseModel):
    storageAccountName: Optional[str] = None
    containerName: Optional[str] = None
    blobName: Optional[str] = None


def get_report_trigger_gateway() -> ReportTriggerGateway:
    return ReportTriggerGateway(
        settings.REPORT_WEBHOOK_URL,
        verify_tls=settings.REPORT_WEBHOOK_VERIFY_TLS,
        timeout=settings.REPORT_WEBHOOK_TIMEOUT,
    )

def get_job_status_gateway() -> JobStatusGateway:
    return JobStatusGateway(
        settings.AZURE_SUBSCRIPTION_ID,
        settings.AZURE_RESOURCE_GROUP,
        settings.AZURE_AUTOMATION_ACCOUNT,
    )

def get_blob_access_gateway() -> BlobAccessGateway:
    return BlobAccessGateway(settings.BLOB_ACCOUNT_URL_TEMPLATE, ttl_seconds=settings.DOWNLOAD_LINK_TTL_SECONDS)

def get_report_service(
    trigger: ReportTriggerGateway = Depends(get_report_trigger_gateway),
    job_status: JobStatusGateway = Depends(get_job_status_gateway),
    blob_access: BlobAccessGateway = Depends(get_blob_access_gateway),
) -> ReportService:
    """Dependency: create ReportService."""
    return ReportService(trigger, job_status, blob_access)


@router.post("/execute-report")
async def execute_report(data: ExecuteReportSchema, service: ReportService = Depends(get_report_service)):
    """Start the report runbook and return its Azure Automation job id."""
    job_id = await service.execute_report(data.model_dump())
    return ResponseModel.success(jobId=job_id)

@router.get("/report-status/{job_id}")
async def report_status(job_id: str, service: ReportService = Depends(get_report_service)):
    job_status = await service.get_report_status(job_id)
    return ResponseModel.success(status=job_status)

@router.post("/get-download-link")
async def get_download_link(data: DownloadLinkSchema, service: ReportService = Depends(get_report_service)):
    """Return a read-only signed URL for the report blob."""
    url = await service.get_download_link(data.storageAccountName, data.containerName, data.blobName)
    return ResponseModel.success(downloadUrl=url)
