from __future__ import annotations

from typing import Iterable, List, Optional

import httpx

from notes_sync.api.client import APIClient, APIError, APIResponse, TokenSource, auth_for
from notes_sync.config import ClientSettings
from notes_sync.errors import FetchError, ValidationError
from notes_sync.logging import get_logger
from notes_sync.notes.models import EditPatch, Note, NoteId, NotePatch, PinPatch
from notes_sync.tags import normalize_tags

log = get_logger(__name__)

NOTES_PATH = "/api/notes"
CHANGES_PATH = "/api/notes-changes"
HEALTH_PATH = "/health"


class NotesClient:
    """Remote notes collection, seen through the current session.

    Mutations return nothing: the remote list is the only source of truth,
    so callers re-list after every successful write. The session is read on
    every request, never cached.
    """

    def __init__(
        self,
        settings: ClientSettings,
        session: TokenSource,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.session = session
        self.api = APIClient(
            base_url=settings.base_url,
            default_headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            auth=auth_for(settings.auth_transport, session),
            timeout=settings.timeout,
            transport=transport,
        )

    async def _send(self, method: str, url: str, action: str, json_data: Optional[dict] = None) -> APIResponse:
        try:
            response = await self.api.request(method, url, json_data=json_data)
        except APIError as e:
            raise FetchError(f"Failed to {action}: {e}")
        # 204 is inside 2xx, so delete needs no special case
        if not response.ok:
            log.warning(f"{method} {url} returned {response.status_code}")
            raise FetchError(f"Failed to {action} (HTTP {response.status_code})", status=response.status_code)
        return response

    async def list(self) -> List[Note]:
        """All notes visible to the session, in server order."""
        response = await self._send("GET", NOTES_PATH, "load notes")
        data = response.json
        if not isinstance(data, list):
            raise FetchError("Failed to load notes: response is not a list", status=response.status_code)
        return [Note.from_json(item) for item in data if isinstance(item, dict)]

    async def get(self, note_id: NoteId) -> Note:
        response = await self._send("GET", f"{NOTES_PATH}/{note_id}", f"load note {note_id}")
        data = response.json
        if not isinstance(data, dict):
            raise FetchError(f"Failed to load note {note_id}: response is not an object", status=response.status_code)
        return Note.from_json(data)

    async def create(self, content: str, pinned: bool = False, tags: Optional[Iterable[str]] = None) -> None:
        text = (content or "").strip()
        if not text:
            raise ValidationError("Content is empty")
        body = {"content": text, "pinned": bool(pinned), "tags": normalize_tags(tags)}
        await self._send("POST", NOTES_PATH, "save note", body)
        log.info("Created note")

    async def update(self, note_id: NoteId, patch: NotePatch) -> None:
        """Apply one of the two supported patch shapes: pin toggle or full edit."""
        if isinstance(patch, EditPatch):
            text = (patch.content or "").strip()
            if not text:
                raise ValidationError("Content is empty")
            patch = EditPatch(content=text, tags=normalize_tags(patch.tags))
        elif not isinstance(patch, PinPatch):
            raise ValidationError(f"Unsupported patch: {patch!r}")
        await self._send("PATCH", f"{NOTES_PATH}/{note_id}", "update note", patch.body())
        log.info(f"Updated note {note_id}")

    async def set_pinned(self, note_id: NoteId, pinned: bool) -> None:
        await self.update(note_id, PinPatch(pinned=bool(pinned)))

    async def edit(self, note_id: NoteId, content: str, tags: Optional[Iterable[str]] = None) -> None:
        await self.update(note_id, EditPatch(content=content, tags=list(tags or [])))

    async def delete(self, note_id: NoteId) -> None:
        await self._send("DELETE", f"{NOTES_PATH}/{note_id}", "delete note")
        log.info(f"Deleted note {note_id}")

    async def changes(self, note_id: NoteId) -> str:
        """Server-rendered change history for one note; ``""`` means none."""
        response = await self._send("GET", f"{CHANGES_PATH}/{note_id}", f"load changes for note {note_id}")
        return response.text

    async def health(self) -> bool:
        try:
            response = await self.api.request("GET", HEALTH_PATH, authenticated=False)
        except APIError:
            return False
        return response.ok

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
