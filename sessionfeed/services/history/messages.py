from __future__ import annotations

import json
from typing import Iterable, List, Optional

from ...models import FeedMessage, TurnPayload
from .records import AssistantRecord, Record, UserRecord
from .turns import Turn


_MODEL_FAMILIES = ("opus", "haiku", "sonnet")


def model_family(model: Optional[str]) -> Optional[str]:
    """Shorten a full model id (``claude-sonnet-4-5-...``) to its family name."""
    if not model:
        return None
    for family in _MODEL_FAMILIES:
        if family in model:
            return family
    return None


def _user_messages(record: UserRecord) -> List[FeedMessage]:
    messages: List[FeedMessage] = []
    content = record.message.get("content")
    if isinstance(content, list):
        for block in content:
            if isinstance(block, dict) and block.get("type") == "tool_result":
                messages.append(
                    FeedMessage(
                        type="tool_result",
                        tool_use_id=block.get("tool_use_id"),
                        content=block.get("content"),
                        is_error=bool(block.get("is_error")),
                        timestamp=record.timestamp,
                    )
                )
    if record.has_prompt:
        payload = record.payload
        messages.append(
            FeedMessage(
                type="user",
                content=record.text,
                timestamp=record.timestamp,
                permission_mode=payload.get("permissionMode") or "default",
                dangerously_skip_permissions=bool(payload.get("dangerouslySkipPermissions")),
                model=payload.get("model"),
            )
        )
    return messages


def _assistant_messages(record: AssistantRecord) -> List[FeedMessage]:
    messages: List[FeedMessage] = []
    blocks = record.message.get("content")
    if not isinstance(blocks, list):
        return messages
    family = model_family(record.message.get("model"))
    for block in blocks:
        if not isinstance(block, dict):
            continue
        if block.get("type") == "text" and block.get("text"):
            messages.append(
                FeedMessage(type="text", content=block["text"], timestamp=record.timestamp, model=family)
            )
        elif block.get("type") == "tool_use":
            messages.append(
                FeedMessage(
                    type="tool_use",
                    tool=block.get("name"),
                    input=block.get("input"),
                    id=block.get("id"),
                    timestamp=record.timestamp,
                    model=family,
                )
            )
    return messages


def _tool_result_message(record: Record) -> List[FeedMessage]:
    content = record.message.get("content")
    if not content:
        return []
    return [
        FeedMessage(
            type="tool_result",
            tool_use_id=record.message.get("tool_use_id"),
            content=content if isinstance(content, str) else json.dumps(content),
            timestamp=record.timestamp,
        )
    ]


def record_to_messages(record: Record) -> List[FeedMessage]:
    if isinstance(record, UserRecord):
        return _user_messages(record)
    if isinstance(record, AssistantRecord):
        return _assistant_messages(record)
    if record.type == "tool_result":
        return _tool_result_message(record)
    # System and unknown records are orchestration metadata, not chat content
    return []


def records_to_messages(records: Iterable[Record]) -> List[FeedMessage]:
    messages: List[FeedMessage] = []
    for record in records:
        messages.extend(record_to_messages(record))
    return messages


def turn_to_payload(turn: Turn) -> TurnPayload:
    return TurnPayload(
        index=turn.index,
        prompt=turn.prompt,
        truncated=turn.truncated,
        messages=records_to_messages(turn.records),
    )


__all__ = ["model_family", "record_to_messages", "records_to_messages", "turn_to_payload"]
