from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

from .records import Record, SummaryRecord


DEFAULT_MAX_BUFFER_SIZE = 500


class SummaryAwareBuffer:
    """Bounded window over the relevant tail of a session log.

    A summary record supersedes everything before it, so it empties the window.
    Otherwise the window slides, evicting the oldest record once it holds
    ``max_size`` records. Summary records themselves are never stored.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_BUFFER_SIZE):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._records: Deque[Record] = deque(maxlen=max_size)
        self.max_size = max_size
        self.last_summary_index: Optional[int] = None
        self.last_summary: Optional[str] = None
        self.summary_count = 0
        self.evicted = 0

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: Record) -> None:
        if isinstance(record, SummaryRecord):
            self._records.clear()
            self.last_summary_index = record.sequence_index
            self.last_summary = record.summary
            self.summary_count += 1
            self.evicted = 0
            return
        if len(self._records) == self.max_size:
            self.evicted += 1
        self._records.append(record)

    def extend(self, records: Iterable[Record]) -> "SummaryAwareBuffer":
        for record in records:
            self.append(record)
        return self

    @property
    def records(self) -> List[Record]:
        return list(self._records)

    @property
    def was_truncated(self) -> bool:
        """True when records were dropped by a summary reset or the size cap."""
        return self.summary_count > 0 or self.evicted > 0


__all__ = ["DEFAULT_MAX_BUFFER_SIZE", "SummaryAwareBuffer"]
