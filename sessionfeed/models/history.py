from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedMessage(BaseModel):
    """A single renderable item of the chat feed."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., min_length=1)
    content: Any = None
    timestamp: Optional[str] = None
    model: Optional[str] = None

    # tool_use
    tool: Optional[str] = None
    input: Any = None
    id: Optional[str] = None

    # tool_result
    tool_use_id: Optional[str] = None
    is_error: bool = False

    # user
    permission_mode: Optional[str] = None
    dangerously_skip_permissions: bool = False


class TurnPayload(BaseModel):
    index: int = Field(..., ge=0)
    prompt: Optional[str] = None
    truncated: bool = False
    messages: List[FeedMessage] = Field(default_factory=list)


class SessionHistoryResponse(BaseModel):
    session_id: str
    turns: List[TurnPayload] = Field(default_factory=list)
    total_turns: int = 0
    has_older: bool = False
    offset: int = 0
    summary_count: int = 0
    last_summary: Optional[str] = None
    skipped_lines: int = 0


class OlderHistoryResponse(BaseModel):
    session_id: str
    turns: List[TurnPayload] = Field(default_factory=list)
    has_older: bool = False
    requested_offset: int = 0
    offset: int = 0
    total_turns: int = 0
    skipped_lines: int = 0
