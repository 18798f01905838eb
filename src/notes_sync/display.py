from __future__ import annotations

from typing import Iterable

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .logging import console
from .notes.models import Note
from .sync import StatusLine
from .tags import encode_tags


def _updated_label(note: Note) -> str:
    if not note.updated_ms:
        return "-"
    try:
        return note.updated_at.strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return "-"


def build_notes_render(notes: Iterable[Note]) -> Table:
    table = Table(title="Notes", box=box.SIMPLE_HEAVY, show_lines=False)
    for col in ("ID", "Pin", "Updated", "Content", "Tags"):
        table.add_column(col)
    for note in notes:
        table.add_row(
            str(note.id),
            "📌" if note.pinned else "",
            _updated_label(note),
            note.content or "(empty)",
            encode_tags(note.tags) or "no tags",
        )
    return table


def build_changes_render(note_id: object, text: str) -> Panel:
    return Panel(text or "No changes", title=f"Changes · #{note_id}", box=box.ROUNDED)


def print_notes(notes: Iterable[Note]) -> None:
    console().print(build_notes_render(notes))


def print_status(status: StatusLine) -> None:
    if not status.message:
        return
    style = "red" if status.is_error else "green"
    console().print(Text(status.message, style=style))
