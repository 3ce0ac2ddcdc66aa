"""WebSocket protocol for the browser UI.

Every inbound frame is a JSON object with a ``type``; every request gets
exactly one reply frame. Failures reply with ``{"type": "error", ...}`` and
the connection stays open.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from ..logging_config import logger
from ..services import (
    HistoryError,
    HistoryPaginator,
    InvalidSessionIdError,
    SessionNotFoundError,
    SessionStorage,
)
from .common import history_response, older_response, project_payload, session_payload

router = APIRouter(tags=["websocket"])


class ProtocolError(Exception):
    """A frame the server cannot act on."""


@dataclass
class ConnectionContext:
    storage: SessionStorage
    paginator: HistoryPaginator
    recent_limit: int = 50
    project: Optional[str] = None


Handler = Callable[[ConnectionContext, Dict[str, Any]], Awaitable[Dict[str, Any]]]


def _require_project(context: ConnectionContext) -> str:
    if not context.project:
        raise ProtocolError("No project selected")
    return context.project


def _require_session_id(message: Dict[str, Any]) -> str:
    session_id = message.get("session_id")
    if not session_id or not isinstance(session_id, str):
        raise ProtocolError("Session ID is required")
    return session_id


def _optional_int(message: Dict[str, Any], key: str, minimum: int) -> Optional[int]:
    value = message.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ProtocolError(f"{key} must be an integer >= {minimum}")
    return value


async def _get_projects(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    projects = await run_in_threadpool(context.storage.list_projects)
    return {
        "type": "projects_list",
        "projects": [project_payload(info).model_dump(mode="json") for info in projects],
    }


async def _select_project(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    project = message.get("project")
    if not project or not isinstance(project, str):
        raise ProtocolError("Project is required")
    project_dir = await run_in_threadpool(context.storage.project_dir, project)
    if not await run_in_threadpool(project_dir.is_dir):
        raise SessionNotFoundError(f"Project not found: {project}")
    context.project = project
    return {"type": "project_selected", "project": project}


async def _get_sessions(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    project = _require_project(context)
    sessions = await run_in_threadpool(context.storage.list_sessions, project)
    return {
        "type": "sessions_list",
        "project": project,
        "sessions": [session_payload(info).model_dump(mode="json") for info in sessions],
    }


async def _get_recent_sessions(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    limit = _optional_int(message, "limit", 1) or context.recent_limit
    sessions = await run_in_threadpool(context.storage.list_recent_sessions, limit)
    return {
        "type": "recent_sessions",
        "sessions": [session_payload(info).model_dump(mode="json") for info in sessions],
    }


async def _select_session(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    project = _require_project(context)
    session_id = _require_session_id(message)
    turns = _optional_int(message, "turns", 1)
    path = await run_in_threadpool(context.storage.require_session, project, session_id)
    page = await run_in_threadpool(context.paginator.load_recent, path, turns)
    payload = history_response(session_id, page).model_dump(mode="json")
    payload["type"] = "session_history"
    return payload


async def _load_older_messages(context: ConnectionContext, message: Dict[str, Any]) -> Dict[str, Any]:
    project = _require_project(context)
    session_id = _require_session_id(message)
    offset = _optional_int(message, "offset", 0) or 0
    turns = _optional_int(message, "turns", 1)
    path = await run_in_threadpool(context.storage.require_session, project, session_id)
    page = await run_in_threadpool(context.paginator.load_older, path, offset, turns)
    payload = older_response(session_id, offset, page).model_dump(mode="json")
    payload["type"] = "older_messages"
    return payload


HANDLERS: Dict[str, Handler] = {
    "get_projects": _get_projects,
    "select_project": _select_project,
    "get_sessions": _get_sessions,
    "get_recent_sessions": _get_recent_sessions,
    "select_session": _select_session,
    "load_older_messages": _load_older_messages,
}


def _error_frame(message: str, *, code: str, retryable: bool = False, session_id: Any = None) -> Dict[str, Any]:
    frame: Dict[str, Any] = {"type": "error", "message": message, "code": code, "retryable": retryable}
    if session_id is not None:
        frame["session_id"] = session_id
    return frame


async def dispatch(context: ConnectionContext, message: Any) -> Dict[str, Any]:
    if not isinstance(message, dict):
        return _error_frame("Frame must be a JSON object", code="bad_request")
    message_type = message.get("type")
    handler = HANDLERS.get(message_type) if isinstance(message_type, str) else None
    if handler is None:
        return _error_frame(f"Unknown message type: {message_type}", code="bad_request")

    session_id = message.get("session_id")
    try:
        return await handler(context, message)
    except ProtocolError as exc:
        return _error_frame(str(exc), code="bad_request", session_id=session_id)
    except InvalidSessionIdError as exc:
        return _error_frame(str(exc), code="bad_request", session_id=session_id)
    except SessionNotFoundError as exc:
        return _error_frame(str(exc), code="not_found", session_id=session_id)
    except HistoryError as exc:
        logger.warning(
            "websocket request failed",
            extra={"type": message_type, "error": str(exc), "retryable": exc.retryable},
        )
        return _error_frame(str(exc), code="unavailable", retryable=exc.retryable, session_id=session_id)
    except ValueError as exc:
        return _error_frame(str(exc), code="bad_request", session_id=session_id)


@router.websocket("/ws")
async def session_feed(websocket: WebSocket) -> None:
    state = websocket.app.state
    context = ConnectionContext(
        storage=state.storage,
        paginator=state.paginator,
        recent_limit=state.settings.recent_sessions_limit,
    )
    await websocket.accept()
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json(_error_frame("Invalid JSON", code="bad_request"))
                continue
            await websocket.send_json(await dispatch(context, message))
    except WebSocketDisconnect:
        logger.debug("websocket client disconnected", extra={"project": context.project})


__all__ = ["ConnectionContext", "dispatch", "router"]
