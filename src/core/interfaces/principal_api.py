"""Management API contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The sequencer can be exercised with an in-memory fake, no HTTP involved.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import PrincipalPayload


@runtime_checkable
class PrincipalApi(Protocol):
    """Minimal contract for creating principals on the mail server.

    Design rules:
    - `create_principal` is synchronous: provisioning is strictly sequential.
    - Returns the decoded 2xx body, raises `ApiError` on anything else.
    """

    def create_principal(self, payload: PrincipalPayload) -> Any:
        """Send `POST /principal` with `payload` and return the response body."""

        ...
