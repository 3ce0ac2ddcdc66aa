from .history import FeedMessage, OlderHistoryResponse, SessionHistoryResponse, TurnPayload
from .meta import HealthResponse, RootResponse
from .sessions import (
    ProjectListResponse,
    ProjectPayload,
    RecentSessionsResponse,
    SessionListResponse,
    SessionPayload,
)

__all__ = [
    "FeedMessage",
    "TurnPayload",
    "SessionHistoryResponse",
    "OlderHistoryResponse",
    "SessionPayload",
    "SessionListResponse",
    "RecentSessionsResponse",
    "ProjectPayload",
    "ProjectListResponse",
    "HealthResponse",
    "RootResponse",
]
