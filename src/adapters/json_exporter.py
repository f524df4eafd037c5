"""JSON export of the onboarding report.

Why JSON:
- Interoperability with other tooling and pipelines (ticketing, audits).
- Keeps a record of which steps were created/already existed after the run.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import ProvisionReport


def export_report_json(*, report: ProvisionReport, output_path: Path) -> Path:
    """Export `ProvisionReport` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    payload["quota_gb"] = report.quota_gb
    payload["web_admin_url"] = report.web_admin_url
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
