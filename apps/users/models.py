from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Union

# Keys that every stored user must carry; the startup migration backfills them.
USER_COLLECTIONS = ("tenants", "client_credentials", "feedback", "on_prem_credentials", "assessments")

# Stored records are loaded as they are found in the file. Required-field checks
# happen in UserService when a record is created, so one legacy entry cannot make
# the whole document unreadable.


class Record(BaseModel):
    """Nested record owned by a user; unknown keys survive rewrites."""
    model_config = ConfigDict(extra="allow")

    # generated ids are integers; older bulk inserts may have kept a caller's id
    id: Union[int, str, None] = None


class Tenant(Record):
    """Tenant configuration. Only tenantId is required; absent keys are not stored."""
    hasAppId: Any = None
    clientId: Any = None
    clientSecret: Any = None
    certificateThumbprint: Any = None
    gaAccount: Any = None
    gaPassword: Any = None
    tenantId: Any = None
    tenantUrl: Any = None
    azureFileStorage: Any = None
    storageAccountKey: Any = None
    storageAccountCredential: Any = None


class ClientCredential(Record):
    clientId: Any = None
    clientSecret: Any = None


class OnPremCredential(Record):
    username: Any = None
    password: Any = None
    domain: Optional[Any] = None


class FeedbackEntry(Record):
    feedback: Any = None


class Assessment(Record):
    """Report run record; extra keys sent by the caller are kept as passthrough."""
    type: Any = None
    reportName: Any = None
    status: Any = None
    date: Any = None

    @property
    def key(self):
        return (self.type, self.reportName)


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Union[int, str, None] = None
    email: Any = None
    password: Any = None
    tenants: List[Tenant] = Field(default_factory=list)
    client_credentials: List[ClientCredential] = Field(default_factory=list)
    feedback: List[FeedbackEntry] = Field(default_factory=list)
    on_prem_credentials: List[OnPremCredential] = Field(default_factory=list)
    assessments: List[Assessment] = Field(default_factory=list)

    def public_dict(self) -> dict:
        """Wire representation returned by the API: the stored keys, nulls included."""
        return self.model_dump(mode="json", exclude_unset=True)


class Database(BaseModel):
    """Root document. `feedback` is a legacy top-level list kept for file compatibility."""
    model_config = ConfigDict(extra="allow")

    users: List[User] = Field(default_factory=list)
    feedback: List[Any] = Field(default_factory=list)
