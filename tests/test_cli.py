"""End-to-end tests for the onboarding command against a mocked management API."""

from __future__ import annotations

import base64
import functools
import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from adapters import http_client
from cli import main as cli_main

runner = CliRunner()

CLIENT_A_ARGS = [
    "--domain", "clientA.com",
    "--org", "Client A Inc.",
    "--admin", "admin@clientA.com",
    "--password", "SecurePass123!",
]


@pytest.fixture
def mocked_server(monkeypatch: pytest.MonkeyPatch, server):
    """Route every client the command builds to the recording server."""

    monkeypatch.setattr(
        cli_main,
        "build_sync_client",
        functools.partial(http_client.build_sync_client, transport=server.transport()),
    )
    # Wide console so status lines are not wrapped mid-message.
    monkeypatch.setattr(cli_main, "_console", Console(width=200))
    return server


def _invoke(args: list[str]):
    return runner.invoke(cli_main.app, args)


class TestOnboardingCommand:

    def test_provisions_tenant_domain_and_admin(self, mocked_server):
        result = _invoke(CLIENT_A_ARGS)

        assert result.exit_code == 0, result.output
        assert [str(r.url) for r in mocked_server.requests] == ["http://localhost:8080/api/principal"] * 3
        assert all(r.method == "POST" for r in mocked_server.requests)
        assert mocked_server.bodies == [
            {"type": "tenant", "name": "client-a-inc.", "description": "Client A Inc.", "quota": 10737418240},
            {"type": "domain", "name": "clientA.com", "tenant": "client-a-inc."},
            {
                "type": "individual",
                "name": "admin",
                "secrets": ["SecurePass123!"],
                "emails": ["admin@clientA.com"],
                "tenant": "client-a-inc.",
                "roles": ["tenant-admin"],
            },
        ]

    def test_summary_output(self, mocked_server):
        result = _invoke(CLIENT_A_ARGS)

        assert "10 GB" in result.output
        assert "Step 1/3" in result.output
        assert "Step 3/3" in result.output
        assert "Setup Complete!" in result.output
        assert "http://localhost:8080/login" in result.output
        assert "DKIM" in result.output
        assert "SecurePass123!" not in result.output

    def test_uses_placeholder_secret_by_default(self, mocked_server):
        _invoke(CLIENT_A_ARGS)

        expected = "Basic " + base64.b64encode(b"admin:changeme").decode()
        assert {r.headers["Authorization"] for r in mocked_server.requests} == {expected}

    def test_admin_secret_env_and_flag_precedence(self, mocked_server, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ADMIN_SECRET", "from-env")
        _invoke(CLIENT_A_ARGS)
        _invoke([*CLIENT_A_ARGS, "--superadmin", "ops", "--secret", "from-flag"])

        headers = [r.headers["Authorization"] for r in mocked_server.requests]
        assert headers[0] == "Basic " + base64.b64encode(b"admin:from-env").decode()
        assert headers[-1] == "Basic " + base64.b64encode(b"ops:from-flag").decode()

    def test_empty_admin_secret_uses_placeholder(self, mocked_server, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ADMIN_SECRET", "")

        _invoke(CLIENT_A_ARGS)

        expected = "Basic " + base64.b64encode(b"admin:changeme").decode()
        assert {r.headers["Authorization"] for r in mocked_server.requests} == {expected}

    def test_server_and_quota_flags(self, mocked_server):
        result = _invoke([*CLIENT_A_ARGS, "--server", "https://mail.example.com", "--quota", "5368709120"])

        assert result.exit_code == 0, result.output
        assert str(mocked_server.requests[0].url) == "https://mail.example.com/api/principal"
        assert mocked_server.bodies[0]["quota"] == 5368709120
        assert "5 GB" in result.output

    def test_branding_flags_reach_tenant_payload(self, mocked_server):
        _invoke([*CLIENT_A_ARGS, "--brand-name", "Client A", "--brand-logo-url", "https://a.example/logo.png"])

        tenant = mocked_server.bodies[0]
        assert tenant["brandName"] == "Client A"
        assert tenant["brandLogoUrl"] == "https://a.example/logo.png"
        assert "brandTheme" not in tenant

    def test_continues_when_tenant_creation_fails(self, mocked_server):
        mocked_server.statuses = {"tenant": 500}

        result = _invoke(CLIENT_A_ARGS)

        assert result.exit_code == 0, result.output
        assert [b["type"] for b in mocked_server.bodies] == ["tenant", "domain", "individual"]
        assert "rejected tenant" in result.output

    def test_fail_on_error_sets_exit_status(self, mocked_server):
        mocked_server.statuses = {"domain": 500}

        result = _invoke([*CLIENT_A_ARGS, "--fail-on-error"])

        assert result.exit_code == 1
        assert len(mocked_server.requests) == 3

    def test_fail_on_error_ignores_existing_principals(self, mocked_server):
        mocked_server.statuses = {"tenant": 409, "domain": 409, "individual": 409}

        result = _invoke([*CLIENT_A_ARGS, "--fail-on-error"])

        assert result.exit_code == 0, result.output
        assert "already exists" in result.output

    def test_writes_json_report(self, mocked_server, tmp_path):
        report_path = tmp_path / "reports" / "client-a.json"

        result = _invoke([*CLIENT_A_ARGS, "--report", str(report_path)])

        assert result.exit_code == 0, result.output
        text = report_path.read_text(encoding="utf-8")
        assert "SecurePass123!" not in text
        data = json.loads(text)
        assert data["tenant_name"] == "client-a-inc."
        assert data["quota_gb"] == 10
        assert [o["status"] for o in data["outcomes"]] == ["created", "created", "created"]


class TestUsageErrors:

    @pytest.mark.parametrize("flag", ["--domain", "--org", "--admin", "--password"])
    def test_missing_required_flag(self, mocked_server, flag):
        index = CLIENT_A_ARGS.index(flag)
        args = CLIENT_A_ARGS[:index] + CLIENT_A_ARGS[index + 2:]

        result = _invoke(args)

        assert result.exit_code == 2
        assert f"{flag} is required" in result.output
        assert "Usage" in result.output
        assert mocked_server.requests == []

    def test_empty_required_value(self, mocked_server):
        args = list(CLIENT_A_ARGS)
        args[args.index("--org") + 1] = ""

        result = _invoke(args)

        assert result.exit_code == 2
        assert mocked_server.requests == []

    def test_unknown_option(self, mocked_server):
        result = _invoke([*CLIENT_A_ARGS, "--bogus"])

        assert result.exit_code != 0
        assert "No such option" in result.output
        assert "Usage" in result.output
        assert mocked_server.requests == []

    def test_help_exits_non_zero(self, mocked_server):
        result = _invoke(["--help"])

        assert result.exit_code == 1
        assert "Usage" in result.output
        assert "--superadmin" in result.output
        assert mocked_server.requests == []

    def test_negative_quota_is_rejected(self, mocked_server):
        result = _invoke([*CLIENT_A_ARGS, "--quota", "-1"])

        assert result.exit_code == 2
        assert mocked_server.requests == []

    def test_invalid_server_url(self, mocked_server):
        result = _invoke([*CLIENT_A_ARGS, "--server", "http://bad\x01host:8080"])

        assert result.exit_code == 2
        assert "invalid server URL" in result.output
        assert "Usage" in result.output
        assert mocked_server.requests == []

    def test_invalid_log_level_setting(self, mocked_server, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("RMAIL_LOG_LEVEL", "verbose")

        result = _invoke(CLIENT_A_ARGS)

        assert result.exit_code == 2
        assert "invalid configuration" in result.output
        assert mocked_server.requests == []
