from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..config import Settings
from ..models import HealthResponse, RootResponse
from .common import get_app_settings

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=HealthResponse)
# Return service health status for monitoring
def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    return HealthResponse(ok=True, service="sessionfeed", version=settings.app_version)


@router.get("/meta", response_model=RootResponse)
# Return service metadata including available API endpoints
def meta(request: Request, settings: Settings = Depends(get_app_settings)) -> RootResponse:
    endpoints = sorted(
        {
            route.path
            for route in request.app.routes
            if getattr(route, "include_in_schema", False) and route.path.startswith("/api/")
        }
    )
    return RootResponse(
        status="ok",
        service="sessionfeed",
        version=settings.app_version,
        endpoints=endpoints,
        projects_dir=str(settings.projects_dir),
    )
