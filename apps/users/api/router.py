from fastapi import APIRouter, Depends, status
from typing import Any, Optional
from framework.database.base import DocumentDriver
from framework.database.manager import DatabaseManager
from framework.repository.unit_of_work import UnitOfWork
from framework.response import ResponseModel
from ..models import Database
from ..service import UserService
from pydantic import BaseModel

# /register and /login live at the root; the record endpoints under /users
auth_router = APIRouter()
router = APIRouter()

# Every field is optional at the schema level: absence is reported by the
# service as a 400 with the endpoint's own message. Tenant and assessment
# values are stored as sent, whatever their JSON type.

class CredentialsSchema(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class TenantSchema(BaseModel):
    email: Optional[str] = None
    hasAppId: Optional[Any] = None
    clientId: Optional[Any] = None
    clientSecret: Optional[Any] = None
    certificateThumbprint: Optional[Any] = None
    gaAccount: Optional[Any] = None
    gaPassword: Optional[Any] = None
    tenantId: Optional[Any] = None
    tenantUrl: Optional[Any] = None
    azureFileStorage: Optional[Any] = None
    storageAccountKey: Optional[Any] = None
    storageAccountCredential: Optional[Any] = None

class ClientCredentialSchema(BaseModel):
    email: Optional[str] = None
    clientId: Optional[str] = None
    clientSecret: Optional[str] = None

class FeedbackSchema(BaseModel):
    email: Optional[str] = None
    feedback: Optional[str] = None

class OnPremCredentialSchema(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    domain: Optional[str] = None

class AssessmentSchema(BaseModel):
    email: Optional[str] = None
    type: Optional[Any] = None
    reportName: Optional[Any] = None
    status: Optional[Any] = None
    date: Optional[Any] = None

class BulkAssessmentSchema(BaseModel):
    email: Optional[str] = None
    assessments: Optional[Any] = None


def get_db() -> DocumentDriver:
    """Document driver of the running app."""
    return DatabaseManager.get_instance().json

def get_uow(db: DocumentDriver = Depends(get_db)) -> UnitOfWork:
    """Dependency: create UnitOfWork."""
    return UnitOfWork(db, Database)

def get_user_service(uow: UnitOfWork = Depends(get_uow)) -> UserService:
    """Dependency: create UserService."""
    return UserService(uow)


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: CredentialsSchema, service: UserService = Depends(get_user_service)):
    user = await service.register(data.email, data.password)
    return ResponseModel.success("User registered successfully", user=user.public_dict())

@auth_router.post("/login")
async def login(data: CredentialsSchema, service: UserService = Depends(get_user_service)):
    """Check email and password; only the email comes back, no token or session."""
    email = await service.login(data.email, data.password)
    return ResponseModel.success("Login successful", email=email)


@router.post("/tenants", status_code=status.HTTP_201_CREATED)
async def save_tenant(data: TenantSchema, service: UserService = Depends(get_user_service)):
    """Save the tenant configuration; replaces the previous one."""
    fields = data.model_dump(exclude={"email"}, exclude_unset=True)
    user = await service.set_tenant(data.email, fields)
    return ResponseModel.success("Tenant saved successfully", user=user.public_dict())

@router.get("/tenants/{email}")
async def get_tenants(email: str, service: UserService = Depends(get_user_service)):
    tenants = await service.get_tenants(email)
    return ResponseModel.success(tenants=[t.model_dump(mode="json", exclude_unset=True) for t in tenants])

@router.post("/client-credentials", status_code=status.HTTP_201_CREATED)
async def add_client_credential(data: ClientCredentialSchema, service: UserService = Depends(get_user_service)):
    user = await service.add_client_credential(data.email, data.clientId, data.clientSecret)
    return ResponseModel.success("Credentials saved successfully", user=user.public_dict())

@router.post("/feedback", status_code=status.HTTP_201_CREATED)
async def add_feedback(data: FeedbackSchema, service: UserService = Depends(get_user_service)):
    user = await service.add_feedback(data.email, data.feedback)
    return ResponseModel.success("Feedback submitted successfully", user=user.public_dict())

@router.post("/on-prem-credentials", status_code=status.HTTP_201_CREATED)
async def add_on_prem_credential(data: OnPremCredentialSchema, service: UserService = Depends(get_user_service)):
    user = await service.add_on_prem_credential(data.email, data.username, data.password, data.domain)
    return ResponseModel.success("On-prem credentials saved successfully", user=user.public_dict())

@router.post("/assessments", status_code=status.HTTP_201_CREATED)
async def add_assessment(data: AssessmentSchema, service: UserService = Depends(get_user_service)):
    user = await service.add_assessment(data.email, data.type, data.reportName, data.status, data.date)
    return ResponseModel.success("Assessment saved successfully", user=user.public_dict())

@router.post("/assessments/bulk", status_code=status.HTTP_201_CREATED)
async def add_assessments_bulk(data: BulkAssessmentSchema, service: UserService = Depends(get_user_service)):
    """Add a batch; malformed and duplicate items are skipped, never rejected."""
    user = await service.add_assessments_bulk(data.email, data.assessments)
    return ResponseModel.success("Assessments saved successfully", user=user.public_dict())

@router.get("/assessments/{email}")
async def list_assessments(email: str, service: UserService = Depends(get_user_service)):
    assessments = await service.get_assessments(email)
    return ResponseModel.success(assessments=[a.model_dump(mode="json", exclude_unset=True) for a in assessments])

@router.get("/assessments/{email}/{assessment_id}")
async def get_assessment(email: str, assessment_id: str, service: UserService = Depends(get_user_service)):
    assessment = await service.get_assessment(email, assessment_id)
    return ResponseModel.success(assessment=assessment.model_dump(mode="json", exclude_unset=True))

@router.delete("/assessments/{email}/{assessment_id}")
async def delete_assessment(email: str, assessment_id: str, service: UserService = Depends(get_user_service)):
    await service.delete_assessment(email, assessment_id)
    return ResponseModel.success("Assessment deleted successfully")
