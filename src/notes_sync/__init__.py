from __future__ import annotations

from .auth import AuthFlow, AuthState, auth_state
from .config import AuthTransport, ClientSettings
from .errors import AuthError, FetchError, NotesError, SessionError, ValidationError
from .notes import EditPatch, Note, NotesClient, PinPatch
from .session import MemorySessionStore, SessionStore
from .sync import StatusLine, ViewSynchronizer, build_view
from .tags import encode_tags, normalize_tags, parse_tags

__version__ = "0.1.0"

__all__ = [
    "AuthFlow",
    "AuthState",
    "auth_state",
    "AuthTransport",
    "ClientSettings",
    "AuthError",
    "FetchError",
    "NotesError",
    "SessionError",
    "ValidationError",
    "EditPatch",
    "Note",
    "NotesClient",
    "PinPatch",
    "MemorySessionStore",
    "SessionStore",
    "StatusLine",
    "ViewSynchronizer",
    "build_view",
    "encode_tags",
    "normalize_tags",
    "parse_tags",
]
