from __future__ import annotations

from typing import Iterable, List, Optional

TAG_SEPARATOR = ","


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split comma separated input into trimmed, non-empty labels.

    Order and duplicates are preserved; ``None`` and blank input give ``[]``.
    """
    if not raw:
        return []
    return [t.strip() for t in raw.split(TAG_SEPARATOR) if t.strip()]


def encode_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Tags as they go over the wire: trimmed, no blanks, first occurrence wins."""
    out: List[str] = []
    for tag in tags or []:
        label = str(tag).strip()
        if label and label not in out:
            out.append(label)
    return out
