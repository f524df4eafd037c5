"""Mail server management API adapter.

Implements the `PrincipalApi` contract over HTTP. One call, one outcome:
no retries, and any non-2xx status (or a request that never completes)
becomes an `ApiError` for the caller to judge.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.domain.errors import ApiError
from core.domain.models import PrincipalPayload
from core.interfaces.principal_api import PrincipalApi

logger = logging.getLogger(__name__)

_ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class ManagementApiClient(PrincipalApi):
    """Thin client over `{server_url}/api`.

    The `httpx.Client` is expected to come from `build_sync_client`, which
    already carries the base URL, timeout and Basic auth header.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def __enter__(self) -> "ManagementApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(self, method: str, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        """Perform one request and return the decoded 2xx body.

        Returns parsed JSON when possible, the raw text otherwise, and None
        for an empty body.
        """

        method = method.upper()
        if method not in _ALLOWED_METHODS:
            raise ValueError(f"unsupported HTTP method: {method}")

        try:
            if body is not None:
                # httpx sets Content-Type: application/json for `json=`.
                response = self._client.request(method, endpoint, json=body)
            else:
                response = self._client.request(method, endpoint)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("%s %s -> no response (%s)", method, endpoint, exc)
            raise ApiError(None, str(exc) or exc.__class__.__name__, method=method, endpoint=endpoint) from exc

        logger.debug("%s %s -> HTTP %s", method, endpoint, response.status_code)
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, response.text, method=method, endpoint=endpoint)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def create_principal(self, payload: PrincipalPayload) -> Any:
        logger.info("creating %s principal '%s'", payload.type, payload.name)
        return self.request("POST", "/principal", payload.to_json_body())
