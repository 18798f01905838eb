from __future__ import annotations

from .client import NotesClient
from .models import (
    Note,
    NoteId,
    NotePatch,
    PinPatch,
    EditPatch,
)

__all__ = [
    "NotesClient",
    "Note",
    "NoteId",
    "NotePatch",
    "PinPatch",
    "EditPatch",
]
