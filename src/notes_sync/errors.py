from __future__ import annotations

from typing import Optional


class NotesError(Exception):
    """Base class for every failure a user action can end in."""


class ValidationError(NotesError):
    """Input rejected locally, before any request was sent."""


class FetchError(NotesError):
    """A notes request failed in transport or returned a non-2xx status."""
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class AuthError(NotesError):
    """Signup or signin was refused by the service."""
    def __init__(self, message: str, status: Optional[int] = None, likely_duplicate: bool = False):
        super().__init__(message)
        self.status = status
        self.likely_duplicate = likely_duplicate


class SessionError(NotesError):
    """The session token could not be written to or removed from disk."""
