"""Vercel token resolution from the CLI flag or environment."""

from __future__ import annotations

import os

from .errors import MissingTokenError

TOKEN_ENV_VAR = "VERCEL_TOKEN"


def load_token(provided: str | None = None) -> str | None:
    """Return the flag token, else ``$VERCEL_TOKEN``, else ``None``."""
    if provided and provided.strip():
        return provided.strip()
    env_token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    return env_token or None


def require_token(provided: str | None = None) -> str:
    token = load_token(provided)
    if token is None:
        raise MissingTokenError(
            "Vercel authentication token not found.\n"
            "Please provide a token using:\n"
            "  - Command line: vercelx projects --token YOUR_TOKEN\n"
            f"  - Environment variable: export {TOKEN_ENV_VAR}=YOUR_TOKEN"
        )
    return token
