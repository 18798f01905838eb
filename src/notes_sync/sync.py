from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List, Optional

from notes_sync.auth.flow import AuthFlow, AuthState, auth_state
from notes_sync.errors import NotesError
from notes_sync.logging import get_logger
from notes_sync.notes.client import NotesClient
from notes_sync.notes.models import Note, NoteId

log = get_logger(__name__)

Renderer = Callable[[List[Note]], None]


@dataclass
class StatusLine:
    message: str = ""
    is_error: bool = False


class ViewSynchronizer:
    """Keeps the rendered notes equal to the server's latest list.

    Every mutation is followed by a full refetch; the rendered list is only
    ever replaced whole, and only from a successful ``list()``. Failures are
    reported on the status line and leave the previous list in place.
    """

    def __init__(self, client: NotesClient, auth: AuthFlow, render: Optional[Renderer] = None) -> None:
        self.client = client
        self.auth = auth
        self.render = render
        self.notes: List[Note] = []
        self.status = StatusLine()
        self.auth_state = auth_state(auth.session)

    def set_status(self, message: str, is_error: bool = False) -> None:
        self.status = StatusLine(message, is_error)
        if is_error:
            log.debug(f"status: {message}")

    def _sync_auth_state(self) -> None:
        self.auth_state = auth_state(self.auth.session)

    async def refresh(self) -> bool:
        self.set_status("Loading...")
        try:
            notes = await self.client.list()
        except NotesError as e:
            self.set_status(str(e) or "Failed to load notes", is_error=True)
            return False
        self.notes = notes
        if self.render:
            self.render(list(notes))
        self.set_status(f"{len(notes)} note" if len(notes) == 1 else f"{len(notes)} notes")
        return True

    async def _mutate(self, pending: str, action: Callable[[], Awaitable[object]]) -> bool:
        self.set_status(pending)
        try:
            await action()
        except NotesError as e:
            self.set_status(str(e), is_error=True)
            return False
        return await self.refresh()

    async def create(self, content: str, pinned: bool = False, tags: Optional[Iterable[str]] = None) -> bool:
        return await self._mutate("Saving...", lambda: self.client.create(content, pinned, tags))

    async def toggle_pin(self, note: Note) -> bool:
        return await self._mutate("Updating...", lambda: self.client.set_pinned(note.id, not note.pinned))

    async def set_pinned(self, note_id: NoteId, pinned: bool) -> bool:
        return await self._mutate("Updating...", lambda: self.client.set_pinned(note_id, pinned))

    async def edit(self, note_id: NoteId, content: str, tags: Optional[Iterable[str]] = None) -> bool:
        return await self._mutate("Updating...", lambda: self.client.edit(note_id, content, tags))

    async def delete(self, note_id: NoteId) -> bool:
        return await self._mutate("Deleting...", lambda: self.client.delete(note_id))

    async def changes(self, note_id: NoteId) -> Optional[str]:
        self.set_status("Loading changes...")
        try:
            text = await self.client.changes(note_id)
        except NotesError as e:
            self.set_status(str(e), is_error=True)
            return None
        self.set_status("No changes" if not text else f"Changes for note {note_id}")
        return text

    async def _authenticate(self, pending: str, action: Callable[[], Awaitable[AuthState]]) -> bool:
        self.set_status(pending)
        try:
            await action()
        except NotesError as e:
            self._sync_auth_state()
            self.set_status(str(e), is_error=True)
            return False
        self._sync_auth_state()
        return await self.refresh()

    async def signin(self, username: str, password: str) -> bool:
        return await self._authenticate("Signing in...", lambda: self.auth.signin(username, password))

    async def signup(self, username: str, password: str) -> bool:
        return await self._authenticate("Signing up...", lambda: self.auth.signup(username, password))

    async def signout(self) -> bool:
        try:
            self.auth.signout()
        except NotesError as e:
            self._sync_auth_state()
            self.set_status(str(e), is_error=True)
            return False
        self._sync_auth_state()
        return await self.refresh()

    async def aclose(self) -> None:
        await self.client.aclose()


def build_view(settings, session, transport=None, render: Optional[Renderer] = None) -> ViewSynchronizer:
    """Wire client, auth flow and synchronizer around one shared session."""
    client = NotesClient(settings, session, transport=transport)
    return ViewSynchronizer(client, AuthFlow(client.api, session), render=render)
