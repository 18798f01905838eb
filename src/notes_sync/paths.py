from __future__ import annotations

from pathlib import Path

SESSION_FILE_NAME = "session.json"

def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path

def user_config_dir() -> Path:
    """Best-effort to locate a per-user config folder across OSes."""
    import os
    home = Path.home()
    if os.name == "posix":
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg) / "notes-sync"
        return home / ".config" / "notes-sync"
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata) / "notes-sync"
    return home / ".notes-sync"

def default_session_path() -> Path:
    return user_config_dir() / SESSION_FILE_NAME
