"""
Exception classes for spotify2github.

Every failure is fatal to a run; nothing here is caught and retried locally.

Exception Hierarchy:
    Spotify2GithubError (base)
        ConfigurationError - required credentials missing or config unreadable
        AuthenticationError - token exchange failed or returned no token
        TransportError - non-success response from a resource call
            MutationError - a batched playlist add/remove failed mid-sequence
"""

from typing import Optional


class Spotify2GithubError(Exception):
    """Base exception for all spotify2github errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(Spotify2GithubError):
    """Raised before any network call when required settings are missing."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message, details={"missing": list(missing or [])})
        self.missing = list(missing or [])


class AuthenticationError(Spotify2GithubError):
    """Raised when the refresh-token exchange does not yield an access token."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, details={"status": status})
        self.status = status


class TransportError(Spotify2GithubError):
    """
    Raised for any non-success HTTP response from a resource or mutation call.

    No distinction is made between transient (429, 5xx) and permanent (4xx)
    failures; both abort the run.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message, details={"status": status, "operation": operation})
        self.status = status
        self.operation = operation

    @property
    def rate_limited(self) -> bool:
        return self.status == 429


class MutationError(TransportError):
    """
    Raised when a batched playlist mutation fails.

    Chunks applied before the failure stay applied; `applied` counts the
    items already sent, `total` the items requested.
    """

    def __init__(
        self,
        message: str,
        op: str,
        applied: int,
        total: int,
        status: Optional[int] = None,
    ):
        super().__init__(message, status=status, operation=f"playlist_{op}")
        self.op = op
        self.applied = applied
        self.total = total
        self.details.update({"op": op, "applied": applied, "total": total})
