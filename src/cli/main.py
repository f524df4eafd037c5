"""Onboarding command: tenant + domain + tenant admin in one run.

Exit codes:
- 0 once the required values are valid, whatever the per-step outcomes
  (re-runs against a partially provisioned tenant are expected).
- 1 with `--fail-on-error` when a step genuinely failed ("already exists"
  never counts), and for `--help`.
- 2 for usage errors: missing required values, unknown options, invalid
  configuration or an unparseable server URL.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import build_sync_client
from adapters.json_exporter import export_report_json
from adapters.management_api import ManagementApiClient
from cli.ui_components import (
    build_outcomes_table,
    build_request_table,
    build_summary_panel,
    print_banner,
    print_step_outcome,
    print_step_start,
)
from core.config import AppSettings, resolve_target
from core.domain.errors import MissingArgument
from core.services.provisioning import ProvisioningHooks, build_request, provision

app = typer.Typer(add_completion=False, rich_markup_mode=None)

_console = Console()

_FLAG_FOR_FIELD: dict[str, str] = {
    "domain": "--domain",
    "org_display_name": "--org",
    "admin_email": "--admin",
    "admin_password": "--password",
}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _help_callback(ctx: typer.Context, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    typer.echo(ctx.get_help())
    raise typer.Exit(code=1)


# --help is declared on the command itself so it can exit non-zero.
@app.command(context_settings={"help_option_names": []})
def setup_org(
    ctx: typer.Context,
    domain: str | None = typer.Option(None, "--domain", help="Primary email domain for the organization (required)."),
    org: str | None = typer.Option(None, "--org", help="Organization display name (required)."),
    admin: str | None = typer.Option(None, "--admin", help="Admin email address for this organization (required)."),
    password: str | None = typer.Option(None, "--password", help="Password for the admin account (required)."),
    server: str | None = typer.Option(None, "--server", help="Mail server URL (default: http://localhost:8080)."),
    superadmin: str | None = typer.Option(None, "--superadmin", help="Super-admin username (default: admin)."),
    secret: str | None = typer.Option(None, "--secret", help="Super-admin password (default: ADMIN_SECRET env var)."),
    quota: int | None = typer.Option(None, "--quota", min=0, help="Disk quota in bytes (default: 10737418240 = 10GB)."),
    description: str | None = typer.Option(None, "--description", help="Tenant description (default: organization name)."),
    brand_name: str | None = typer.Option(None, "--brand-name", help="Brand name shown by web clients."),
    brand_logo_url: str | None = typer.Option(None, "--brand-logo-url", help="Brand logo URL."),
    brand_theme: str | None = typer.Option(None, "--brand-theme", help="Brand theme identifier."),
    report_path: Path | None = typer.Option(None, "--report", help="Write the run report as JSON to this path."),
    fail_on_error: bool = typer.Option(False, "--fail-on-error", help="Exit with status 1 if any step failed."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    show_help: bool = typer.Option(
        False,
        "--help",
        is_eager=True,
        callback=_help_callback,
        help="Show this help message and exit.",
    ),
) -> None:
    """Onboard a new client organization: tenant, domain and admin account."""

    try:
        settings = AppSettings()
    except ValidationError as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    _configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        request = build_request(
            domain=domain,
            org_display_name=org,
            admin_email=admin,
            admin_password=password,
            quota_bytes=settings.default_quota_bytes if quota is None else quota,
            description=description,
            brand_name=brand_name,
            brand_logo_url=brand_logo_url,
            brand_theme=brand_theme,
        )
    except MissingArgument as exc:
        typer.echo(
            f"Error: {_FLAG_FOR_FIELD[exc.field]} is required "
            "(--domain, --org, --admin, and --password are all required).",
            err=True,
        )
        typer.echo(ctx.get_help())
        raise typer.Exit(code=2) from exc

    target = resolve_target(settings, server=server, superadmin=superadmin, secret=secret)
    try:
        client = build_sync_client(target, settings)
    except httpx.InvalidURL as exc:
        typer.echo(f"Error: invalid server URL {target.base_url!r}: {exc}", err=True)
        typer.echo(ctx.get_help())
        raise typer.Exit(code=2) from exc

    print_banner(_console)
    _console.print(build_request_table(request, server_url=target.base_url))
    _console.print()

    hooks = ProvisioningHooks(
        step_start=lambda index, total, label, subject: print_step_start(_console, index, total, label, subject),
        step_done=lambda outcome: print_step_outcome(_console, outcome),
    )
    with ManagementApiClient(client) as api:
        report = provision(request=request, api=api, server_url=target.base_url, hooks=hooks)

    _console.print()
    _console.print(build_outcomes_table(report))
    _console.print(build_summary_panel(report))

    if report_path is not None:
        written = export_report_json(report=report, output_path=report_path)
        _console.print(f"[green]Report saved to:[/green] {written}")

    if fail_on_error and report.failed_steps:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
