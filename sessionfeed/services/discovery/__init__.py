"""Project and session discovery."""

from .index import SessionIndexEntry, is_valid_session_id, load_session_index
from .paths import path_to_slug, project_display_name, slug_to_path
from .storage import ProjectInfo, SessionInfo, SessionStorage, list_sessions

__all__ = [
    "ProjectInfo",
    "SessionIndexEntry",
    "SessionInfo",
    "SessionStorage",
    "is_valid_session_id",
    "list_sessions",
    "load_session_index",
    "path_to_slug",
    "project_display_name",
    "slug_to_path",
]
