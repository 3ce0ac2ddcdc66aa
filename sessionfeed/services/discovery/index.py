from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from ...logging_config import logger


SESSION_ID_PATTERN = re.compile(
    r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$", re.IGNORECASE
)
FIRST_PROMPT_LIMIT = 100


def is_valid_session_id(value: Any) -> bool:
    return isinstance(value, str) and bool(SESSION_ID_PATTERN.match(value))


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class SessionIndexEntry:
    """Cached metadata for one session, as written by the assistant."""

    session_id: str
    entry_count: int = 0
    first_prompt: Optional[str] = None
    created: Optional[str] = None
    modified: Optional[str] = None
    title: Optional[str] = None


def _entry_from_raw(raw: Any) -> Optional[SessionIndexEntry]:
    if not isinstance(raw, dict):
        return None
    session_id = raw.get("sessionId")
    if not is_valid_session_id(session_id):
        return None
    count = raw.get("messageCount")
    first_prompt = raw.get("firstPrompt")
    title = raw.get("customTitle")
    return SessionIndexEntry(
        session_id=session_id,
        entry_count=count if isinstance(count, int) and count > 0 else 0,
        first_prompt=first_prompt[:FIRST_PROMPT_LIMIT] if isinstance(first_prompt, str) and first_prompt else None,
        created=raw.get("created") if isinstance(raw.get("created"), str) else None,
        modified=raw.get("modified") if isinstance(raw.get("modified"), str) else None,
        title=title if isinstance(title, str) and title else None,
    )


def load_session_index(path: Path) -> Optional[List[SessionIndexEntry]]:
    """Read a project's session index.

    Returns ``None`` when the index is absent or unreadable; callers then rely on
    the directory listing alone. The file is read once, so a concurrent rewrite
    yields either the old or the new document.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(
            "session index unreadable; falling back to directory scan",
            extra={"error": str(exc), "path": str(path)},
        )
        return None

    raw_entries = data.get("entries") if isinstance(data, dict) else None
    if not isinstance(raw_entries, list):
        return []

    entries: List[SessionIndexEntry] = []
    for raw in raw_entries:
        entry = _entry_from_raw(raw)
        if entry is None:
            logger.debug("ignoring invalid session index entry", extra={"path": str(path)})
            continue
        entries.append(entry)
    return entries


__all__ = [
    "FIRST_PROMPT_LIMIT",
    "SESSION_ID_PATTERN",
    "SessionIndexEntry",
    "is_valid_session_id",
    "load_session_index",
    "parse_timestamp",
]
