"""Project and session discovery over the assistant's storage root.

Sessions come from two sources. The precomputed index is fast but lags behind
new sessions and is sometimes empty; a single non-recursive listing of each
project directory recovers whatever the index missed. The listing only adds
sessions, it never removes one the index reported.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from ...logging_config import logger
from ..history.errors import InvalidSessionIdError, SessionNotFoundError
from .index import is_valid_session_id, load_session_index, parse_timestamp
from .paths import project_display_name, slug_to_path


DEFAULT_EXTENSION = ".jsonl"
DEFAULT_EXCLUDED_PREFIX = "agent-"
DEFAULT_INDEX_FILENAME = "sessions-index.json"

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    project: str
    entry_count: int
    first_prompt: str
    mtime: datetime
    created: Optional[str] = None
    title: Optional[str] = None
    source: str = "index"


@dataclass(frozen=True)
class ProjectInfo:
    slug: str
    name: str
    path: str
    session_count: int
    last_modified: Optional[datetime]


def _mtime(stat_result: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc)


def _ctime(stat_result: os.stat_result) -> str:
    birth = getattr(stat_result, "st_birthtime", None) or stat_result.st_ctime
    return datetime.fromtimestamp(birth, tz=timezone.utc).isoformat()


class SessionStorage:
    """Read-only handle on a storage root of per-project session logs."""

    def __init__(
        self,
        root: Path,
        *,
        extension: str = DEFAULT_EXTENSION,
        excluded_prefix: str = DEFAULT_EXCLUDED_PREFIX,
        index_filename: str = DEFAULT_INDEX_FILENAME,
    ):
        self._root = Path(root).expanduser()
        self._extension = extension
        self._excluded_prefix = excluded_prefix
        self._index_filename = index_filename

    @property
    def root(self) -> Path:
        return self._root

    def project_dir(self, project: str) -> Path:
        if not project or project in {".", ".."} or "/" in project or "\\" in project or "\x00" in project:
            raise InvalidSessionIdError(f"Invalid project slug: {project!r}")
        return self._root / project

    def session_path(self, project: str, session_id: str) -> Path:
        if not is_valid_session_id(session_id):
            raise InvalidSessionIdError("Invalid sessionId format")
        return self.project_dir(project) / f"{session_id}{self._extension}"

    def is_session_file(self, name: str) -> bool:
        if not name.endswith(self._extension) or name.startswith(self._excluded_prefix):
            return False
        return is_valid_session_id(name[: -len(self._extension)])

    def _scan_session_files(self, project_dir: Path) -> Dict[str, os.stat_result]:
        """One directory listing; files are stat'ed, never opened."""
        found: Dict[str, os.stat_result] = {}
        try:
            with os.scandir(project_dir) as entries:
                for entry in entries:
                    if not self.is_session_file(entry.name):
                        continue
                    try:
                        if not entry.is_file():
                            continue
                        found[entry.name[: -len(self._extension)]] = entry.stat()
                    except OSError as exc:
                        # Deleted between listing and stat
                        logger.debug(
                            "session file stat failed",
                            extra={"error": str(exc), "file": entry.name},
                        )
        except FileNotFoundError:
            return found
        except OSError as exc:
            logger.warning(
                "session directory scan failed",
                extra={"error": str(exc), "path": str(project_dir)},
            )
        return found

    def list_sessions(self, project: str) -> List[SessionInfo]:
        project_dir = self.project_dir(project)
        indexed = load_session_index(project_dir / self._index_filename) or []
        on_disk = self._scan_session_files(project_dir)

        sessions: Dict[str, SessionInfo] = {}
        for entry in indexed:
            stat_result = on_disk.get(entry.session_id)
            if stat_result is not None:
                mtime = _mtime(stat_result)
            else:
                mtime = parse_timestamp(entry.modified) or parse_timestamp(entry.created) or _EPOCH
            sessions[entry.session_id] = SessionInfo(
                session_id=entry.session_id,
                project=project,
                entry_count=entry.entry_count,
                first_prompt=entry.first_prompt or "No prompt",
                mtime=mtime,
                created=entry.created,
                title=entry.title,
                source="index",
            )

        recovered = 0
        for session_id, stat_result in on_disk.items():
            if session_id in sessions:
                continue
            sessions[session_id] = SessionInfo(
                session_id=session_id,
                project=project,
                entry_count=0,
                first_prompt="New session",
                mtime=_mtime(stat_result),
                created=_ctime(stat_result),
                source="scan",
            )
            recovered += 1

        if recovered:
            logger.debug(
                "recovered unindexed sessions",
                extra={"project": project, "recovered": recovered, "indexed": len(indexed)},
            )
        return sorted(sessions.values(), key=lambda info: info.mtime, reverse=True)

    def _project_slugs(self) -> List[str]:
        try:
            with os.scandir(self._root) as entries:
                return sorted(entry.name for entry in entries if entry.is_dir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning(
                "projects directory listing failed",
                extra={"error": str(exc), "path": str(self._root)},
            )
            return []

    def list_projects(self) -> List[ProjectInfo]:
        projects: List[ProjectInfo] = []
        for slug in self._project_slugs():
            sessions = self.list_sessions(slug)
            if not sessions:
                continue
            projects.append(
                ProjectInfo(
                    slug=slug,
                    name=project_display_name(slug),
                    path=slug_to_path(slug),
                    session_count=len(sessions),
                    last_modified=sessions[0].mtime,
                )
            )
        return sorted(projects, key=lambda info: info.last_modified or _EPOCH, reverse=True)

    def list_recent_sessions(self, limit: int = 50) -> List[SessionInfo]:
        if limit <= 0:
            raise ValueError("limit must be positive")
        sessions: List[SessionInfo] = []
        for slug in self._project_slugs():
            sessions.extend(self.list_sessions(slug))
        sessions.sort(key=lambda info: info.mtime, reverse=True)
        return sessions[:limit]

    def require_session(self, project: str, session_id: str) -> Path:
        path = self.session_path(project, session_id)
        if not path.parent.is_dir():
            raise SessionNotFoundError(f"Project not found: {project}")
        return path


def list_sessions(storage_root: SessionStorage, project: str) -> List[SessionInfo]:
    return storage_root.list_sessions(project)


__all__ = [
    "DEFAULT_EXCLUDED_PREFIX",
    "DEFAULT_EXTENSION",
    "DEFAULT_INDEX_FILENAME",
    "ProjectInfo",
    "SessionInfo",
    "SessionStorage",
    "list_sessions",
]
