"""Exception hierarchy shared by the API client and command layer."""

from __future__ import annotations


class VercelxError(Exception):
    """Base class for failures the CLI reports to the user."""


class MissingTokenError(VercelxError):
    pass


class VercelApiError(VercelxError):
    """Non-success response from the Vercel REST API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Vercel API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message


class AuthenticationError(VercelApiError):
    """Token rejected with 401/403."""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            status_code,
            "Authentication failed. Check your token or create a new one at https://vercel.com/account/tokens.",
        )
