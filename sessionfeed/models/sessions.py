from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SessionPayload(BaseModel):
    id: str
    project: str
    entry_count: int = 0
    first_prompt: str
    title: Optional[str] = None
    created: Optional[str] = None
    mtime: datetime
    source: str = Field(default="index", description="'index' or 'scan'")


class SessionListResponse(BaseModel):
    project: str
    sessions: List[SessionPayload] = Field(default_factory=list)


class RecentSessionsResponse(BaseModel):
    sessions: List[SessionPayload] = Field(default_factory=list)


class ProjectPayload(BaseModel):
    slug: str
    name: str
    path: str
    session_count: int = 0
    last_modified: Optional[datetime] = None


class ProjectListResponse(BaseModel):
    projects: List[ProjectPayload] = Field(default_factory=list)
