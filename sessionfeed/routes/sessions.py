from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings
from ..models import (
    OlderHistoryResponse,
    ProjectListResponse,
    RecentSessionsResponse,
    SessionHistoryResponse,
    SessionListResponse,
)
from ..services import HistoryPaginator, SessionStorage
from .common import (
    get_app_settings,
    get_paginator,
    get_storage,
    history_response,
    older_response,
    project_payload,
    session_payload,
)

router = APIRouter(tags=["sessions"])


@router.get("/projects", response_model=ProjectListResponse)
# List projects that have at least one session, most recently active first
def list_projects(storage: SessionStorage = Depends(get_storage)) -> ProjectListResponse:
    return ProjectListResponse(projects=[project_payload(info) for info in storage.list_projects()])


@router.get("/projects/{project}/sessions", response_model=SessionListResponse)
def list_project_sessions(project: str, storage: SessionStorage = Depends(get_storage)) -> SessionListResponse:
    sessions = storage.list_sessions(project)
    return SessionListResponse(project=project, sessions=[session_payload(info) for info in sessions])


@router.get("/sessions/recent", response_model=RecentSessionsResponse)
# Sessions across every project, newest first
def recent_sessions(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    storage: SessionStorage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> RecentSessionsResponse:
    sessions = storage.list_recent_sessions(limit or settings.recent_sessions_limit)
    return RecentSessionsResponse(sessions=[session_payload(info) for info in sessions])


@router.get("/projects/{project}/sessions/{session_id}/history", response_model=SessionHistoryResponse)
# Load the newest turns of a session
def session_history(
    project: str,
    session_id: str,
    turns: Optional[int] = Query(default=None, ge=1),
    storage: SessionStorage = Depends(get_storage),
    paginator: HistoryPaginator = Depends(get_paginator),
) -> SessionHistoryResponse:
    path = storage.require_session(project, session_id)
    page = paginator.load_recent(path, turns)
    return history_response(session_id, page)


@router.get(
    "/projects/{project}/sessions/{session_id}/history/older",
    response_model=OlderHistoryResponse,
)
# Load the turns preceding an offset counted from the newest turn
def older_history(
    project: str,
    session_id: str,
    offset: int = Query(..., ge=0),
    turns: Optional[int] = Query(default=None, ge=1),
    storage: SessionStorage = Depends(get_storage),
    paginator: HistoryPaginator = Depends(get_paginator),
) -> OlderHistoryResponse:
    path = storage.require_session(project, session_id)
    page = paginator.load_older(path, offset, turns)
    return older_response(session_id, offset, page)


__all__ = ["router"]
