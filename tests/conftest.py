from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sessionfeed.app import create_app
from sessionfeed.config import Settings

from .logs import PROJECT


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def project_dir(projects_dir: Path) -> Path:
    directory = projects_dir / PROJECT
    directory.mkdir()
    return directory


@pytest.fixture
def session_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def settings(projects_dir: Path) -> Settings:
    return Settings(projects_dir=projects_dir)


@pytest.fixture
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))
