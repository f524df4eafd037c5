"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  Core to I/O libraries.
- Payloads are serialized by the JSON encoder, so quotes or unicode in an
  organization name or password can never corrupt a request body.

Note:
- These models describe *what* gets provisioned, not *how* it is sent.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict

TENANT_ADMIN_ROLE = "tenant-admin"
BYTES_PER_GB = 1024**3


class ApiTarget(BaseModel):
    """Resolved management API location and super-admin credential."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        ...,
        min_length=1,
        description="Base URL of the mail server (without the /api suffix).",
    )
    username: str = Field(
        ...,
        min_length=1,
        description="Super-admin username.",
    )
    secret: SecretStr = Field(
        ...,
        description="Super-admin password (never rendered in repr/logs).",
    )

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api"


class ProvisionRequest(BaseModel):
    """Everything needed to onboard one organization."""

    domain: str = Field(
        ...,
        min_length=1,
        description="Primary email domain for the organization.",
    )
    org_display_name: str = Field(
        ...,
        min_length=1,
        description="Organization display name (normalized into the tenant name).",
    )
    admin_email: str = Field(
        ...,
        min_length=1,
        description="Email address of the organization administrator.",
    )
    admin_password: SecretStr = Field(
        ...,
        description="Password of the organization administrator.",
    )
    quota_bytes: int = Field(
        default=10 * BYTES_PER_GB,
        ge=0,
        description="Tenant disk quota in bytes.",
    )
    description: str | None = Field(
        default=None,
        description="Tenant description; the display name is used when absent.",
    )
    brand_name: str | None = Field(default=None)
    brand_logo_url: str | None = Field(default=None)
    brand_theme: str | None = Field(default=None)

    @property
    def quota_gb(self) -> int:
        return self.quota_bytes // BYTES_PER_GB


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_json_body(self) -> dict[str, Any]:
        """Wire representation: camelCase aliases, unset optionals omitted."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TenantPayload(_Payload):
    type: Literal["tenant"] = "tenant"
    name: str = Field(..., min_length=1)
    description: str
    quota: int = Field(..., ge=0)
    brand_name: str | None = Field(default=None, alias="brandName")
    brand_logo_url: str | None = Field(default=None, alias="brandLogoUrl")
    brand_theme: str | None = Field(default=None, alias="brandTheme")


class DomainPayload(_Payload):
    type: Literal["domain"] = "domain"
    name: str = Field(..., min_length=1)
    tenant: str = Field(..., min_length=1)


class AdminPayload(_Payload):
    type: Literal["individual"] = "individual"
    name: str
    secrets: list[str]
    emails: list[str]
    tenant: str = Field(..., min_length=1)
    roles: list[str] = Field(default_factory=lambda: [TENANT_ADMIN_ROLE])


PrincipalPayload = Annotated[
    Union[TenantPayload, DomainPayload, AdminPayload],
    Field(discriminator="type"),
]


class StepStatus(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    FAILED = "failed"


class StepOutcome(BaseModel):
    """Result of one provisioning step (reporting only)."""

    step_name: str = Field(..., min_length=1)
    status: StepStatus
    http_status: int | None = Field(
        default=None,
        description="HTTP status of the failed call; None on success or transport failure.",
    )
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status is StepStatus.CREATED


class ProvisionReport(BaseModel):
    """Aggregate of one onboarding run, safe to print or export (no secrets)."""

    organization: str
    tenant_name: str
    domain: str
    admin_email: str
    server_url: str
    quota_bytes: int
    outcomes: list[StepOutcome] = Field(default_factory=list)

    @property
    def quota_gb(self) -> int:
        return self.quota_bytes // BYTES_PER_GB

    @property
    def web_admin_url(self) -> str:
        return f"{self.server_url}/login"

    @property
    def failed_steps(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.status is StepStatus.FAILED]

    @property
    def all_succeeded(self) -> bool:
        return all(o.succeeded for o in self.outcomes)
