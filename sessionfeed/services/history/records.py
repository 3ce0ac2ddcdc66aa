from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


USER_TYPES = frozenset({"user", "human"})


@dataclass(frozen=True)
class Record:
    """Snapshot of a single session log line."""

    sequence_index: int
    payload: Dict[str, Any] = field(repr=False, compare=False)

    @property
    def type(self) -> str:
        value = self.payload.get("type")
        return value if isinstance(value, str) else ""

    @property
    def timestamp(self) -> Optional[str]:
        value = self.payload.get("timestamp")
        return value if isinstance(value, str) else None

    @property
    def message(self) -> Dict[str, Any]:
        value = self.payload.get("message")
        return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class UserRecord(Record):
    text: str = ""

    @property
    def has_prompt(self) -> bool:
        return bool(self.text.strip())


@dataclass(frozen=True)
class AssistantRecord(Record):
    pass


@dataclass(frozen=True)
class SummaryRecord(Record):
    summary: str = ""


@dataclass(frozen=True)
class SystemRecord(Record):
    pass


@dataclass(frozen=True)
class OtherRecord(Record):
    """Any record type the feed does not interpret."""


def extract_text(content: Any, separator: str = "\n") -> str:
    """Return the textual part of a message ``content`` field.

    Content is either a plain string or a list of typed blocks; only ``text``
    blocks contribute.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            block.get("text") or ""
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        return separator.join(part for part in parts if isinstance(part, str))
    return ""


def parse_record(payload: Dict[str, Any], sequence_index: int) -> Record:
    record_type = payload.get("type")
    if record_type in USER_TYPES:
        message = payload.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        return UserRecord(sequence_index, payload, text=extract_text(content))
    if record_type == "assistant":
        return AssistantRecord(sequence_index, payload)
    if record_type == "summary":
        summary = payload.get("summary")
        return SummaryRecord(
            sequence_index,
            payload,
            summary=summary if isinstance(summary, str) and summary else "Session summarized",
        )
    if record_type == "system":
        return SystemRecord(sequence_index, payload)
    return OtherRecord(sequence_index, payload)


__all__ = [
    "AssistantRecord",
    "OtherRecord",
    "Record",
    "SummaryRecord",
    "SystemRecord",
    "UserRecord",
    "extract_text",
    "parse_record",
]
