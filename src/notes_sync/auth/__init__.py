from __future__ import annotations

from .flow import (
    AuthFlow,
    AuthState,
    auth_state,
)

__all__ = [
    "AuthFlow",
    "AuthState",
    "auth_state",
]
