from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

NoteId = Union[int, str]


@dataclass
class Note:
    id: NoteId
    content: str
    pinned: bool = False
    tags: List[str] = field(default_factory=list)
    updated_ms: int = 0
    created_ms: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Note":
        """Build a Note from a server payload, tolerating missing or odd fields."""
        raw_tags = data.get("tags")
        tags = [str(t).strip() for t in raw_tags if str(t).strip()] if isinstance(raw_tags, list) else []
        content = data.get("content")
        return cls(
            id=data.get("id", ""),
            content=content if isinstance(content, str) else "",
            pinned=data.get("pinned") is True,
            tags=tags,
            updated_ms=_as_ms(data.get("updated_ms")) or 0,
            created_ms=_as_ms(data.get("created_ms")),
        )

    @property
    def updated_at(self) -> datetime:
        return datetime.fromtimestamp(self.updated_ms / 1000)


@dataclass(frozen=True)
class PinPatch:
    pinned: bool

    def body(self) -> Dict[str, Any]:
        return {"pinned": self.pinned}


@dataclass(frozen=True)
class EditPatch:
    content: str
    tags: List[str] = field(default_factory=list)

    def body(self) -> Dict[str, Any]:
        return {"content": self.content, "tags": list(self.tags)}


NotePatch = Union[PinPatch, EditPatch]


def _as_ms(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
