"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and auth for every management API call.
- Eases testing: a `transport` can be swapped for `httpx.MockTransport`.
"""

from __future__ import annotations

import base64

import httpx

from core.config import AppSettings
from core.domain.models import ApiTarget


def basic_auth_header(username: str, secret: str) -> str:
    """`Authorization` value for HTTP Basic: ``Basic base64(username:secret)``."""

    token = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_sync_client(
    target: ApiTarget,
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` bound to `{base_url}/api` with safe defaults.

    Why a builder:
    - Centralizes timeout/headers so every request carries the same credential.
    - Redirects are not followed: a 3xx from the admin API is an error.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Authorization": basic_auth_header(target.username, target.secret.get_secret_value()),
    }
    return httpx.Client(
        base_url=target.api_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )
