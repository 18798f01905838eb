from __future__ import annotations

from .client import (
    APIClient,
    APIResponse,
    APIError,
    AuthMethod,
    BearerAuth,
    BodyTokenAuth,
    auth_for,
)

__all__ = [
    "APIClient",
    "APIResponse",
    "APIError",
    "AuthMethod",
    "BearerAuth",
    "BodyTokenAuth",
    "auth_for",
]
