"""UI components for the CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- User-supplied text is markup-escaped here, once, so an organization named
  "[bold]Acme" prints literally.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ProvisionReport, ProvisionRequest, StepOutcome, StepStatus

_STATUS_STYLE: dict[StepStatus, str] = {
    StepStatus.CREATED: "green",
    StepStatus.EXISTS: "yellow",
    StepStatus.FAILED: "red",
}


def print_banner(console: Console) -> None:
    title = Text("RMail", style="bold cyan")
    subtitle = Text("New Organization Setup", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_request_table(request: ProvisionRequest, *, server_url: str) -> Table:
    """Key/value table echoing what is about to be provisioned (no secrets)."""

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Organization", escape(request.org_display_name))
    table.add_row("Domain", escape(request.domain))
    table.add_row("Admin", escape(request.admin_email))
    table.add_row("Server", escape(server_url))
    table.add_row("Quota", f"{request.quota_gb} GB")
    if request.brand_name:
        table.add_row("Brand", escape(request.brand_name))
    return table


def print_step_start(console: Console, index: int, total: int, label: str, subject: str) -> None:
    console.print(f"Step {index}/{total}: Creating {label.lower()} '{escape(subject)}'...")


def print_step_outcome(console: Console, outcome: StepOutcome) -> None:
    if outcome.status is StepStatus.CREATED:
        console.print(f"  [green]✅ {escape(outcome.step_name)} created.[/green]")
    elif outcome.status is StepStatus.EXISTS:
        console.print(
            f"  [yellow]⚠️  {escape(outcome.step_name)} already exists (continuing).[/yellow]"
        )
    else:
        console.print(
            f"  [red]⚠️  {escape(outcome.step_name)} may already exist or an error occurred "
            f"(continuing): {escape(outcome.message)}[/red]"
        )


def build_outcomes_table(report: ProvisionReport) -> Table:
    table = Table(title="Provisioning Steps")
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("HTTP", style="dim")
    table.add_column("Details", style="dim")
    for outcome in report.outcomes:
        style = _STATUS_STYLE[outcome.status]
        table.add_row(
            escape(outcome.step_name),
            f"[{style}]{outcome.status.value}[/{style}]",
            str(outcome.http_status) if outcome.http_status is not None else "-",
            escape(outcome.message),
        )
    return table


def build_summary_panel(report: ProvisionReport) -> Panel:
    """Completion block with the manual follow-up checklist."""

    domain = report.domain
    body = Text()
    body.append(f"The organization '{report.organization}' is ready.\n\n")
    body.append("Admin login:  ", style="bold")
    body.append(f"{report.admin_email}\n")
    body.append("Web admin:    ", style="bold")
    body.append(f"{report.web_admin_url}\n\n")
    body.append("Next steps:\n", style="bold")
    body.append(f"  - Configure DNS records (MX, SPF, DKIM, DMARC) for {domain}\n")
    body.append("  - Add user accounts via the web admin or API\n")
    body.append(f"  - Configure TLS certificates for {domain}")

    border = "green" if report.all_succeeded else "yellow"
    return Panel(body, title=Text("Setup Complete!", style="bold"), border_style=border)
