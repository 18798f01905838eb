from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from notes_sync.errors import SessionError
from notes_sync.logging import get_logger
from notes_sync.paths import ensure_dir

log = get_logger(__name__)

TOKEN_KEY = "session_token"


class MemorySessionStore:
    """Session token held for the lifetime of the process only."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: Optional[str]) -> None:
        if not token:
            self.clear()
            return
        self._token = token

    def clear(self) -> None:
        self._token = None

    @property
    def signed_in(self) -> bool:
        return self.get() is not None


class SessionStore(MemorySessionStore):
    """Session token persisted as a single JSON key so it survives restarts.

    The file is read lazily on the first ``get()``. There is no expiry
    tracking: a revoked token is only discovered when a request using it
    fails.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._loaded = False

    def _load(self) -> None:
        self._loaded = True
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as e:
            log.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        if isinstance(token, str) and token:
            self._token = token

    def get(self) -> Optional[str]:
        if not self._loaded:
            self._load()
        return self._token

    def set(self, token: Optional[str]) -> None:
        if not token:
            self.clear()
            return
        self._loaded = True
        try:
            ensure_dir(self.path.parent)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({TOKEN_KEY: token}, f)
        except OSError as e:
            raise SessionError(f"Could not save session to {self.path}: {e}")
        # only a token that reached disk counts as signed in
        self._token = token
        log.debug(f"Session token saved to {self.path}")

    def clear(self) -> None:
        self._loaded = True
        self._token = None
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except OSError as e:
            raise SessionError(f"Could not remove session file {self.path}: {e}")
        log.debug(f"Session file {self.path} removed")
