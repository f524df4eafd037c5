"""Organization provisioning orchestration.

This module holds the whole onboarding flow: required-value validation,
payload construction and the three-step create sequence. Side-effects
(printing, colors) stay in the CLI layer and are reached through hooks, so
the sequence is reusable from tests or other entry-points.

The sequence never stops early. A step whose API call fails is recorded and
the next step still runs, which makes re-running against a partially
provisioned tenant safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from core.domain.errors import ApiError, MissingArgument
from core.domain.models import (
    AdminPayload,
    DomainPayload,
    PrincipalPayload,
    ProvisionReport,
    ProvisionRequest,
    StepOutcome,
    StepStatus,
    TenantPayload,
)
from core.domain.naming import admin_local_part, derive_tenant_name
from core.interfaces.principal_api import PrincipalApi

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("domain", "org_display_name", "admin_email", "admin_password")


def build_request(
    *,
    domain: str | None,
    org_display_name: str | None,
    admin_email: str | None,
    admin_password: str | None,
    quota_bytes: int,
    description: str | None = None,
    brand_name: str | None = None,
    brand_logo_url: str | None = None,
    brand_theme: str | None = None,
) -> ProvisionRequest:
    """Validate raw values and build a `ProvisionRequest`.

    Raises `MissingArgument` for the first required value that is None or
    empty. No format checks are made on the domain or the email.
    """

    values = {
        "domain": domain,
        "org_display_name": org_display_name,
        "admin_email": admin_email,
        "admin_password": admin_password,
    }
    for field in REQUIRED_FIELDS:
        if not values[field]:
            raise MissingArgument(field)

    return ProvisionRequest(
        domain=domain,
        org_display_name=org_display_name,
        admin_email=admin_email,
        admin_password=admin_password,
        quota_bytes=quota_bytes,
        description=description or None,
        brand_name=brand_name or None,
        brand_logo_url=brand_logo_url or None,
        brand_theme=brand_theme or None,
    )


def build_tenant_payload(request: ProvisionRequest) -> TenantPayload:
    return TenantPayload(
        name=derive_tenant_name(request.org_display_name),
        description=request.description or request.org_display_name,
        quota=request.quota_bytes,
        brand_name=request.brand_name,
        brand_logo_url=request.brand_logo_url,
        brand_theme=request.brand_theme,
    )


def build_domain_payload(request: ProvisionRequest) -> DomainPayload:
    return DomainPayload(
        name=request.domain,
        tenant=derive_tenant_name(request.org_display_name),
    )


def build_admin_payload(request: ProvisionRequest) -> AdminPayload:
    return AdminPayload(
        name=admin_local_part(request.admin_email),
        secrets=[request.admin_password.get_secret_value()],
        emails=[request.admin_email],
        tenant=derive_tenant_name(request.org_display_name),
    )


class ProvisioningState(str, Enum):
    NOT_STARTED = "not_started"
    TENANT_STEP = "tenant"
    DOMAIN_STEP = "domain"
    ADMIN_STEP = "admin"
    DONE = "done"


@dataclass(frozen=True)
class _Step:
    state: ProvisioningState
    label: str
    subject: Callable[[ProvisionRequest], str]
    build: Callable[[ProvisionRequest], PrincipalPayload]


_STEPS: tuple[_Step, ...] = (
    _Step(ProvisioningState.TENANT_STEP, "Tenant", lambda r: r.org_display_name, build_tenant_payload),
    _Step(ProvisioningState.DOMAIN_STEP, "Domain", lambda r: r.domain, build_domain_payload),
    _Step(ProvisioningState.ADMIN_STEP, "Admin account", lambda r: r.admin_email, build_admin_payload),
)


@dataclass
class ProvisioningHooks:
    """Optional callbacks for UI layers (progress, per-step status)."""

    step_start: Callable[[int, int, str, str], None] | None = None
    step_done: Callable[[StepOutcome], None] | None = None


class ProvisioningSequencer:
    """Runs tenant → domain → admin against a `PrincipalApi`.

    `state` always advances, whatever the outcome of the current step;
    after `run()` it is `DONE`.
    """

    def __init__(self, api: PrincipalApi, hooks: ProvisioningHooks | None = None) -> None:
        self._api = api
        self._hooks = hooks or ProvisioningHooks()
        self.state = ProvisioningState.NOT_STARTED

    def run(self, request: ProvisionRequest, *, server_url: str) -> ProvisionReport:
        report = ProvisionReport(
            organization=request.org_display_name,
            tenant_name=derive_tenant_name(request.org_display_name),
            domain=request.domain,
            admin_email=request.admin_email,
            server_url=server_url,
            quota_bytes=request.quota_bytes,
        )

        total = len(_STEPS)
        for index, step in enumerate(_STEPS, start=1):
            self.state = step.state
            if self._hooks.step_start:
                self._hooks.step_start(index, total, step.label, step.subject(request))
            outcome = self._run_step(step, request)
            report.outcomes.append(outcome)
            if self._hooks.step_done:
                self._hooks.step_done(outcome)

        self.state = ProvisioningState.DONE
        return report

    def _run_step(self, step: _Step, request: ProvisionRequest) -> StepOutcome:
        payload = step.build(request)
        try:
            self._api.create_principal(payload)
        except ApiError as exc:
            status = StepStatus.EXISTS if exc.already_exists else StepStatus.FAILED
            logger.info(
                "%s step ended as %s (%s %s): %s", step.label, status.value, exc.method, exc.endpoint, exc
            )
            return StepOutcome(
                step_name=step.label,
                status=status,
                http_status=exc.status_code,
                message=str(exc),
            )
        return StepOutcome(step_name=step.label, status=StepStatus.CREATED, message=f"{step.label} created.")


def provision(
    *,
    request: ProvisionRequest,
    api: PrincipalApi,
    server_url: str,
    hooks: ProvisioningHooks | None = None,
) -> ProvisionReport:
    """Run the full onboarding sequence and return its report."""

    return ProvisioningSequencer(api, hooks).run(request, server_url=server_url)
