"""Service layer components."""

from ..config import Settings
from .discovery import ProjectInfo, SessionInfo, SessionStorage
from .history import (
    HistoryError,
    HistoryPage,
    HistoryPaginator,
    HistoryUnavailableError,
    InvalidSessionIdError,
    SessionNotFoundError,
)


def create_session_storage(settings: Settings) -> SessionStorage:
    return SessionStorage(
        settings.projects_dir,
        extension=settings.session_extension,
        excluded_prefix=settings.excluded_session_prefix,
        index_filename=settings.session_index_filename,
    )


def create_history_paginator(settings: Settings) -> HistoryPaginator:
    return HistoryPaginator(
        max_buffer_size=settings.history_buffer_size,
        initial_turns=settings.history_initial_turns,
        page_turns=settings.history_page_turns,
    )


__all__ = [
    "HistoryError",
    "HistoryPage",
    "HistoryPaginator",
    "HistoryUnavailableError",
    "InvalidSessionIdError",
    "ProjectInfo",
    "SessionInfo",
    "SessionNotFoundError",
    "SessionStorage",
    "create_history_paginator",
    "create_session_storage",
]
