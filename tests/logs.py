"""Builders for synthetic session logs and indexes."""

from __future__ import annotations

import json
import os
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


PROJECT = "-home-dev-projects-demo"


def user(text: Any = "hello", **extra: Any) -> Dict[str, Any]:
    return {"type": "user", "message": {"role": "user", "content": text}, **extra}


def tool_result(tool_use_id: str = "toolu_1", content: str = "ok") -> Dict[str, Any]:
    return {
        "type": "user",
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": tool_use_id, "content": content}],
        },
    }


def assistant(text: str = "answer", model: str = "claude-sonnet-4-5-20250929") -> Dict[str, Any]:
    return {
        "type": "assistant",
        "message": {"role": "assistant", "model": model, "content": [{"type": "text", "text": text}]},
    }


def tool_use(name: str = "Read", tool_id: str = "toolu_1") -> Dict[str, Any]:
    return {
        "type": "assistant",
        "message": {
            "role": "assistant",
            "content": [{"type": "tool_use", "id": tool_id, "name": name, "input": {"path": "a.py"}}],
        },
    }


def summary(text: str = "Earlier work was summarized") -> Dict[str, Any]:
    return {"type": "summary", "summary": text, "leafUuid": str(uuid.uuid4())}


def system(text: str = "init") -> Dict[str, Any]:
    return {"type": "system", "content": text}


def conversation(turns: int, replies_per_turn: int = 1, start: int = 0) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for number in range(start, start + turns):
        records.append(user(f"prompt {number}"))
        for reply in range(replies_per_turn):
            records.append(assistant(f"reply {number}.{reply}"))
    return records


def write_log(path: Path, records: Iterable[Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [record if isinstance(record, str) else json.dumps(record) for record in records]
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return path


def write_index(project_dir: Path, entries: List[Dict[str, Any]]) -> Path:
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / "sessions-index.json"
    path.write_text(json.dumps({"version": 1, "entries": entries}), encoding="utf-8")
    return path


def index_entry(session_id: str, first_prompt: str = "indexed prompt", count: int = 4, **extra: Any) -> Dict[str, Any]:
    return {
        "sessionId": session_id,
        "firstPrompt": first_prompt,
        "messageCount": count,
        "created": "2025-01-01T00:00:00.000Z",
        "modified": "2025-01-02T00:00:00.000Z",
        **extra,
    }


def set_mtime(path: Path, timestamp: float) -> None:
    os.utime(path, (timestamp, timestamp))


def prompts(page) -> List[Optional[str]]:
    return [turn.prompt for turn in page.turns]
