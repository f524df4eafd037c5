"""Onboarding error taxonomy.

Pre-flight errors (`MissingArgument`) abort the run before any network call.
`ApiError` is raised by the management API adapter and downgraded to a
warning by the provisioning sequencer.
"""

from __future__ import annotations

HTTP_CONFLICT = 409


class OnboardingError(Exception):
    """Base exception for all onboarding errors"""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class MissingArgument(OnboardingError):
    """Raised when a required value is absent or empty"""

    def __init__(self, field: str):
        super().__init__(f"missing required value: {field}", error_code="missing_argument")
        self.field = field


class ApiError(OnboardingError):
    """Raised when a management API call does not return a 2xx status.

    `status_code` is None when the request never got a response
    (connection refused, timeout, invalid URL).
    """

    def __init__(self, status_code: int | None, body: str, *, method: str = "", endpoint: str = ""):
        status = f"HTTP {status_code}" if status_code is not None else "no response"
        super().__init__(f"API Error ({status}): {body}", error_code="api_error")
        self.status_code = status_code
        self.body = body
        self.method = method
        self.endpoint = endpoint

    @property
    def already_exists(self) -> bool:
        return self.status_code == HTTP_CONFLICT
