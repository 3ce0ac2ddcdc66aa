"""Dependencies and payload builders shared by the HTTP and WebSocket routes."""

from __future__ import annotations

from fastapi import Request

from ..config import Settings
from ..models import (
    OlderHistoryResponse,
    ProjectPayload,
    SessionHistoryResponse,
    SessionPayload,
)
from ..services import HistoryPage, HistoryPaginator, ProjectInfo, SessionInfo, SessionStorage
from ..services.history import turn_to_payload


def get_storage(request: Request) -> SessionStorage:
    return request.app.state.storage


def get_paginator(request: Request) -> HistoryPaginator:
    return request.app.state.paginator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def session_payload(info: SessionInfo) -> SessionPayload:
    return SessionPayload(
        id=info.session_id,
        project=info.project,
        entry_count=info.entry_count,
        first_prompt=info.first_prompt,
        title=info.title,
        created=info.created,
        mtime=info.mtime,
        source=info.source,
    )


def project_payload(info: ProjectInfo) -> ProjectPayload:
    return ProjectPayload(
        slug=info.slug,
        name=info.name,
        path=info.path,
        session_count=info.session_count,
        last_modified=info.last_modified,
    )


def history_response(session_id: str, page: HistoryPage) -> SessionHistoryResponse:
    return SessionHistoryResponse(
        session_id=session_id,
        turns=[turn_to_payload(turn) for turn in page.turns],
        total_turns=page.total_turns,
        has_older=page.has_older,
        offset=page.offset,
        summary_count=page.summary_count,
        last_summary=page.last_summary,
        skipped_lines=page.skipped_lines,
    )


def older_response(session_id: str, requested_offset: int, page: HistoryPage) -> OlderHistoryResponse:
    return OlderHistoryResponse(
        session_id=session_id,
        turns=[turn_to_payload(turn) for turn in page.turns],
        has_older=page.has_older,
        requested_offset=requested_offset,
        offset=page.offset,
        total_turns=page.total_turns,
        skipped_lines=page.skipped_lines,
    )
