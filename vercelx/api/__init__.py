"""Vercel REST API client and decoded record types."""

from .client import DEFAULT_API_URL, VercelApi
from .models import (
    Creator,
    DeploymentRecord,
    Domain,
    GitLink,
    ProjectDetails,
    ProjectRecord,
    Team,
    User,
)

__all__ = [
    "DEFAULT_API_URL",
    "VercelApi",
    "Creator",
    "DeploymentRecord",
    "Domain",
    "GitLink",
    "ProjectDetails",
    "ProjectRecord",
    "Team",
    "User",
]
