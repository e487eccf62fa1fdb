"""Errors raised when talking to the auth service or the backend API"""

from typing import Optional


class DashboardError(Exception):
    """A failure with a message that can be shown to the agent as-is."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(DashboardError):
    """The auth service rejected a request or could not be reached."""


class BackendError(DashboardError):
    """The backend API answered with an error or could not be reached."""

    @property
    def is_quota_error(self) -> bool:
        return "insufficient_quota" in self.message
