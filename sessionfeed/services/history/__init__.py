"""Session history streaming and turn pagination."""

from .buffer import DEFAULT_MAX_BUFFER_SIZE, SummaryAwareBuffer
from .errors import HistoryError, HistoryUnavailableError, InvalidSessionIdError, SessionNotFoundError
from .messages import model_family, records_to_messages, turn_to_payload
from .pagination import DEFAULT_INITIAL_TURNS, DEFAULT_PAGE_TURNS, HistoryPage, HistoryPaginator
from .reader import ReadStats, RecordReader, iter_records
from .records import (
    AssistantRecord,
    OtherRecord,
    Record,
    SummaryRecord,
    SystemRecord,
    UserRecord,
    extract_text,
    parse_record,
)
from .turns import Turn, TurnCounter, count_turns, is_turn_start, split_turns

__all__ = [
    "DEFAULT_INITIAL_TURNS",
    "DEFAULT_MAX_BUFFER_SIZE",
    "DEFAULT_PAGE_TURNS",
    "AssistantRecord",
    "HistoryError",
    "HistoryPage",
    "HistoryPaginator",
    "HistoryUnavailableError",
    "InvalidSessionIdError",
    "OtherRecord",
    "ReadStats",
    "Record",
    "RecordReader",
    "SessionNotFoundError",
    "SummaryAwareBuffer",
    "SummaryRecord",
    "SystemRecord",
    "Turn",
    "TurnCounter",
    "UserRecord",
    "count_turns",
    "extract_text",
    "is_turn_start",
    "iter_records",
    "model_family",
    "parse_record",
    "records_to_messages",
    "split_turns",
    "turn_to_payload",
]
