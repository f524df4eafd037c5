"""Shared fixtures for the onboarding tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from core.config import AppSettings
from core.domain.errors import ApiError
from core.domain.models import ProvisionRequest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the developer's environment and .env files out of the tests."""

    for name in ("ADMIN_SECRET", "RMAIL_SERVER_URL", "RMAIL_SUPERADMIN_USER", "RMAIL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def client_a_request() -> ProvisionRequest:
    return ProvisionRequest(
        domain="clientA.com",
        org_display_name="Client A Inc.",
        admin_email="admin@clientA.com",
        admin_password="SecurePass123!",
    )


class FakePrincipalApi:
    """In-memory `PrincipalApi`: records payloads, fails on demand per principal type."""

    def __init__(self, failures: dict[str, ApiError] | None = None) -> None:
        self.failures = failures or {}
        self.calls: list[dict[str, Any]] = []

    def create_principal(self, payload) -> Any:
        body = payload.to_json_body()
        self.calls.append(body)
        if body["type"] in self.failures:
            raise self.failures[body["type"]]
        return {"data": len(self.calls)}


@pytest.fixture
def fake_api() -> FakePrincipalApi:
    return FakePrincipalApi()


@pytest.fixture
def fake_api_factory() -> type[FakePrincipalApi]:
    return FakePrincipalApi


class RecordingServer:
    """`httpx.MockTransport` handler that records requests and replays canned statuses."""

    def __init__(self, statuses: dict[str, int] | None = None) -> None:
        self.statuses = statuses or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content) if request.content else {}
        status = self.statuses.get(body.get("type", ""), 200)
        if status >= 300:
            return httpx.Response(status, text=f"rejected {body.get('type')}")
        return httpx.Response(status, json={"data": len(self.requests)})

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def server() -> RecordingServer:
    return RecordingServer()
