import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sessionfeed.app import create_app
from sessionfeed.config import Settings

from .logs import (
    PROJECT,
    assistant,
    conversation,
    index_entry,
    summary,
    tool_result,
    tool_use,
    user,
    write_index,
    write_log,
)


BASE = "/api/v1"


def _history_url(session_id: str, project: str = PROJECT) -> str:
    return f"{BASE}/projects/{project}/sessions/{session_id}/history"


class TestMetaRoutes:
    def test_health(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/health")
        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_meta_lists_endpoints(self, client: TestClient, projects_dir: Path) -> None:
        body = client.get(f"{BASE}/meta").json()
        assert f"{BASE}/projects" in body["endpoints"]
        assert body["projects_dir"] == str(projects_dir)


class TestSessionRoutes:
    def test_projects_and_sessions(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(2))
        write_index(project_dir, [])

        projects = client.get(f"{BASE}/projects").json()["projects"]
        assert [project["slug"] for project in projects] == [PROJECT]
        assert projects[0]["session_count"] == 1

        sessions = client.get(f"{BASE}/projects/{PROJECT}/sessions").json()
        assert sessions["project"] == PROJECT
        assert [item["id"] for item in sessions["sessions"]] == [session_id]
        assert sessions["sessions"][0]["source"] == "scan"

    def test_recent_sessions_uses_configured_limit(self, projects_dir: Path) -> None:
        for slug in ("-one", "-two", "-three"):
            write_log(projects_dir / slug / f"{uuid.uuid4()}.jsonl", conversation(1))
        app = create_app(Settings(projects_dir=projects_dir, recent_sessions_limit=2))
        client = TestClient(app)

        assert len(client.get(f"{BASE}/sessions/recent").json()["sessions"]) == 2
        assert len(client.get(f"{BASE}/sessions/recent", params={"limit": 3}).json()["sessions"]) == 3

    def test_index_metadata_is_served(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(1))
        write_index(project_dir, [index_entry(session_id, "refactor the cache", count=7, customTitle="Cache")])

        item = client.get(f"{BASE}/projects/{PROJECT}/sessions").json()["sessions"][0]
        assert item["first_prompt"] == "refactor the cache"
        assert item["entry_count"] == 7
        assert item["title"] == "Cache"
        assert item["source"] == "index"

    def test_odd_index_title_does_not_break_listing(
        self, client: TestClient, project_dir: Path, session_id: str
    ) -> None:
        other = str(uuid.uuid4())
        write_index(project_dir, [index_entry(session_id), index_entry(other, customTitle={"x": 1})])

        response = client.get(f"{BASE}/projects/{PROJECT}/sessions")

        assert response.status_code == 200
        items = {item["id"]: item for item in response.json()["sessions"]}
        assert set(items) == {session_id, other}
        assert items[other]["title"] is None

    def test_history_returns_recent_turns_with_messages(
        self, client: TestClient, project_dir: Path, session_id: str
    ) -> None:
        write_log(
            project_dir / f"{session_id}.jsonl",
            conversation(4)
            + [user("read the file", permissionMode="plan"), tool_use("Read"), tool_result("toolu_1", "contents")]
            + [assistant("It says hello", model="claude-opus-4-1")],
        )

        body = client.get(_history_url(session_id)).json()

        assert body["session_id"] == session_id
        assert body["total_turns"] == 5
        assert body["has_older"] is True
        assert body["offset"] == 3
        assert [turn["index"] for turn in body["turns"]] == [2, 3, 4]

        last = body["turns"][-1]
        assert last["prompt"] == "read the file"
        assert [message["type"] for message in last["messages"]] == ["user", "tool_use", "tool_result", "text"]
        assert last["messages"][0]["permission_mode"] == "plan"
        assert last["messages"][1]["tool"] == "Read"
        assert last["messages"][2]["tool_use_id"] == "toolu_1"
        assert last["messages"][3]["model"] == "opus"

    def test_history_turn_parameter(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(4))
        body = client.get(_history_url(session_id), params={"turns": 10}).json()
        assert len(body["turns"]) == 4
        assert body["has_older"] is False

    def test_empty_session(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        (project_dir / f"{session_id}.jsonl").write_bytes(b"")
        body = client.get(_history_url(session_id)).json()
        assert body["turns"] == []
        assert body["total_turns"] == 0
        assert body["has_older"] is False

    def test_summary_is_reported(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(2) + [summary("short")] + conversation(1, start=2))
        body = client.get(_history_url(session_id)).json()
        assert body["summary_count"] == 1
        assert body["last_summary"] == "short"
        assert [turn["prompt"] for turn in body["turns"]] == ["prompt 2"]

    def test_older_history(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(9))
        body = client.get(f"{_history_url(session_id)}/older", params={"offset": 3}).json()

        assert [turn["index"] for turn in body["turns"]] == [1, 2, 3, 4, 5]
        assert body["requested_offset"] == 3
        assert body["offset"] == 8
        assert body["has_older"] is True

    def test_older_history_past_the_start(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(2))
        response = client.get(f"{_history_url(session_id)}/older", params={"offset": 50, "turns": 5})
        assert response.status_code == 200
        assert response.json()["turns"] == []
        assert response.json()["has_older"] is False

    def test_missing_session_is_404(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        response = client.get(_history_url(session_id))
        assert response.status_code == 404
        assert response.json() == {"ok": False, "error": f"Session log not found: {session_id}.jsonl", "retryable": False}

    def test_missing_project_is_404(self, client: TestClient, session_id: str) -> None:
        assert client.get(_history_url(session_id, project="-nope")).status_code == 404

    def test_invalid_session_id_is_400(self, client: TestClient, project_dir: Path) -> None:
        response = client.get(_history_url("not-a-uuid"))
        assert response.status_code == 400
        assert response.json()["ok"] is False

    def test_unreadable_log_is_retryable(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        (project_dir / f"{session_id}.jsonl").mkdir()
        response = client.get(_history_url(session_id))
        assert response.status_code == 503
        assert response.json()["retryable"] is True

    @pytest.mark.parametrize("params", [{"turns": 0}, {"turns": -2}])
    def test_invalid_turns_rejected(self, client: TestClient, project_dir: Path, session_id: str, params) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(1))
        assert client.get(_history_url(session_id), params=params).status_code == 422


class TestWebSocketProtocol:
    def test_full_browse_flow(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        write_log(project_dir / f"{session_id}.jsonl", conversation(8))

        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_json({"type": "get_projects"})
            projects = websocket.receive_json()
            assert projects["type"] == "projects_list"
            assert projects["projects"][0]["slug"] == PROJECT

            websocket.send_json({"type": "select_project", "project": PROJECT})
            assert websocket.receive_json() == {"type": "project_selected", "project": PROJECT}

            websocket.send_json({"type": "get_sessions"})
            sessions = websocket.receive_json()
            assert [item["id"] for item in sessions["sessions"]] == [session_id]

            websocket.send_json({"type": "select_session", "session_id": session_id})
            history = websocket.receive_json()
            assert history["type"] == "session_history"
            assert [turn["index"] for turn in history["turns"]] == [5, 6, 7]

            websocket.send_json(
                {"type": "load_older_messages", "session_id": session_id, "offset": history["offset"]}
            )
            older = websocket.receive_json()
            assert older["type"] == "older_messages"
            assert [turn["index"] for turn in older["turns"]] == [0, 1, 2, 3, 4]
            assert older["has_older"] is False

    def test_session_requires_project(self, client: TestClient, session_id: str) -> None:
        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_json({"type": "select_session", "session_id": session_id})
            frame = websocket.receive_json()
            assert frame["type"] == "error"
            assert frame["code"] == "bad_request"
            assert frame["retryable"] is False

    def test_path_checks_report_errors_as_frames(self, client: TestClient, project_dir: Path) -> None:
        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_json({"type": "select_project", "project": ".."})
            assert websocket.receive_json()["code"] == "bad_request"

            websocket.send_json({"type": "select_project", "project": PROJECT})
            websocket.receive_json()
            websocket.send_json({"type": "select_session", "session_id": "../../etc/passwd"})
            frame = websocket.receive_json()
            assert frame["code"] == "bad_request"
            assert frame["session_id"] == "../../etc/passwd"

            websocket.send_json({"type": "load_older_messages", "session_id": "nope", "offset": 3})
            assert websocket.receive_json()["code"] == "bad_request"

    def test_missing_session_is_not_retryable(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_json({"type": "select_project", "project": PROJECT})
            websocket.receive_json()
            websocket.send_json({"type": "select_session", "session_id": session_id})
            frame = websocket.receive_json()
            assert frame["code"] == "not_found"
            assert frame["retryable"] is False
            assert frame["session_id"] == session_id

    def test_unavailable_log_is_retryable(self, client: TestClient, project_dir: Path, session_id: str) -> None:
        (project_dir / f"{session_id}.jsonl").mkdir()
        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_json({"type": "select_project", "project": PROJECT})
            websocket.receive_json()
            websocket.send_json({"type": "select_session", "session_id": session_id})
            frame = websocket.receive_json()
            assert frame["code"] == "unavailable"
            assert frame["retryable"] is True

    def test_bad_frames_keep_connection_open(self, client: TestClient) -> None:
        with client.websocket_connect(f"{BASE}/ws") as websocket:
            websocket.send_text("not json")
            assert websocket.receive_json()["code"] == "bad_request"

            websocket.send_json({"type": "launch_rockets"})
            assert "Unknown message type" in websocket.receive_json()["message"]

            websocket.send_json({"type": "get_recent_sessions", "limit": 0})
            assert websocket.receive_json()["type"] == "error"

            websocket.send_json({"type": "get_recent_sessions"})
            assert websocket.receive_json() == {"type": "recent_sessions", "sessions": []}
