from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from notes_sync.paths import default_session_path

DEFAULT_BASE_URL = "http://127.0.0.1:8080"


class AuthTransport(str, Enum):
    # where the session token rides on every request
    HEADER = "header"
    BODY = "body"


class ClientSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    auth_transport: AuthTransport = AuthTransport.HEADER
    # None leaves hang detection to the transport
    timeout: float | None = None
    session_path: Path = Field(default_factory=default_session_path)
    user_agent: str = "notes-sync/0.1"

    @classmethod
    def from_env(cls, **overrides) -> "ClientSettings":
        values: dict = {}
        if os.environ.get("NOTES_API_URL"):
            values["base_url"] = os.environ["NOTES_API_URL"]
        if os.environ.get("NOTES_AUTH_TRANSPORT"):
            values["auth_transport"] = os.environ["NOTES_AUTH_TRANSPORT"]
        if os.environ.get("NOTES_SESSION_FILE"):
            values["session_path"] = Path(os.environ["NOTES_SESSION_FILE"])
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
