"""Turn-aligned pagination over session logs.

``load_recent`` anchors on the tail of the log and serves the newest turns out
of a bounded window. ``load_older`` re-reads the log from the start and keeps
only as many turns as the cursor needs; turns are not indexed on disk, so every
page derives its boundaries from a fresh pass.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, List, Optional

from ...logging_config import logger
from .buffer import DEFAULT_MAX_BUFFER_SIZE, SummaryAwareBuffer
from .reader import ReadStats, RecordReader
from .records import Record, SummaryRecord
from .turns import Turn, TurnCounter, is_turn_start, number_turns, split_turns


DEFAULT_INITIAL_TURNS = 3
DEFAULT_PAGE_TURNS = 5


@dataclass
class HistoryPage:
    """One page of the turn feed, oldest turn first.

    ``offset`` counts the whole turns the caller holds once it has this page,
    measured from the newest end of the log; pass it back to ``load_older``.
    A leading ``truncated`` turn is not counted: the next ``load_older`` page
    returns it in full and supersedes the partial copy.
    """

    turns: List[Turn] = field(default_factory=list)
    total_turns: int = 0
    has_older: bool = False
    offset: int = 0
    summary_count: int = 0
    last_summary: Optional[str] = None
    skipped_lines: int = 0

    @classmethod
    def empty(cls, total_turns: int = 0, offset: int = 0) -> "HistoryPage":
        return cls(total_turns=total_turns, offset=offset)


def _validate(turn_count: int, offset: int = 0) -> None:
    if turn_count <= 0:
        raise ValueError("turn_count must be positive")
    if offset < 0:
        raise ValueError("offset must not be negative")


class HistoryPaginator:
    def __init__(
        self,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
        initial_turns: int = DEFAULT_INITIAL_TURNS,
        page_turns: int = DEFAULT_PAGE_TURNS,
    ):
        self.max_buffer_size = max_buffer_size
        self.initial_turns = initial_turns
        self.page_turns = page_turns

    def load_recent(self, session: Path, turn_count: Optional[int] = None) -> HistoryPage:
        turn_count = self.initial_turns if turn_count is None else turn_count
        _validate(turn_count)

        stats = ReadStats()
        counter = TurnCounter()
        buffer = SummaryAwareBuffer(self.max_buffer_size)
        for record in RecordReader(Path(session), stats):
            counter.observe(record)
            buffer.append(record)

        total = counter.total
        leading, groups = split_turns(buffer.records)
        first_index = total - len(groups)
        selected = number_turns(groups[-turn_count:], total - min(turn_count, len(groups)))

        if len(selected) < turn_count and leading and first_index > 0:
            # The window opens mid-turn; serve that turn's visible tail.
            selected.insert(0, Turn(index=first_index - 1, records=tuple(leading), truncated=True))

        # A truncated turn is not counted as held, so load_older serves it whole.
        oldest = selected[0].index if selected else total
        oldest_whole = oldest + 1 if selected and selected[0].truncated else oldest
        page = HistoryPage(
            turns=selected,
            total_turns=total,
            has_older=oldest_whole > 0,
            offset=total - oldest_whole,
            summary_count=buffer.summary_count,
            last_summary=buffer.last_summary,
            skipped_lines=stats.skipped_lines,
        )
        logger.debug(
            "loaded recent session history",
            extra={
                "path": str(session),
                "turns": len(page.turns),
                "total_turns": total,
                "window": len(buffer),
                "truncated_window": buffer.was_truncated,
            },
        )
        return page

    def load_older(self, session: Path, offset: int, turn_count: Optional[int] = None) -> HistoryPage:
        turn_count = self.page_turns if turn_count is None else turn_count
        _validate(turn_count, offset)

        stats = ReadStats()
        summary_count = 0
        last_summary: Optional[str] = None
        window: Deque[List[Record]] = deque(maxlen=offset + turn_count)
        current: Optional[List[Record]] = None
        total = 0

        for record in RecordReader(Path(session), stats):
            if isinstance(record, SummaryRecord):
                summary_count += 1
                last_summary = record.summary
                continue
            if is_turn_start(record):
                if current is not None:
                    window.append(current)
                current = [record]
                total += 1
            elif current is not None:
                current.append(record)
        if current is not None:
            window.append(current)

        held = list(window)
        if offset >= len(held):
            logger.debug(
                "older history requested past the first turn",
                extra={"path": str(session), "offset": offset, "total_turns": total},
            )
            page = HistoryPage.empty(total_turns=total, offset=min(offset, total))
            page.summary_count = summary_count
            page.last_summary = last_summary
            page.skipped_lines = stats.skipped_lines
            return page

        groups = held[: len(held) - offset]
        first_index = total - len(held)
        turns = number_turns(groups, first_index)
        return HistoryPage(
            turns=turns,
            total_turns=total,
            has_older=first_index > 0,
            offset=offset + len(turns),
            summary_count=summary_count,
            last_summary=last_summary,
            skipped_lines=stats.skipped_lines,
        )


__all__ = [
    "DEFAULT_INITIAL_TURNS",
    "DEFAULT_PAGE_TURNS",
    "HistoryPage",
    "HistoryPaginator",
]
