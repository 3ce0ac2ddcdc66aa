"""Turn boundary detection over ordered session records.

A turn opens at a user record that carries prompt text. Tool results are also
logged as ``user`` records but carry no text, so they stay inside the turn in
progress together with every assistant and system record that follows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .records import Record, SummaryRecord, UserRecord


def is_turn_start(record: Record) -> bool:
    return isinstance(record, UserRecord) and record.has_prompt


@dataclass(frozen=True)
class Turn:
    """A user prompt plus everything up to the next prompt."""

    index: int
    records: Tuple[Record, ...]
    truncated: bool = False

    @property
    def prompt(self) -> Optional[str]:
        if self.records and is_turn_start(self.records[0]):
            return self.records[0].text  # type: ignore[attr-defined]
        return None

    def __len__(self) -> int:
        return len(self.records)


class TurnCounter:
    """Counts turn boundaries while a load pass streams records."""

    def __init__(self) -> None:
        self.total = 0

    def observe(self, record: Record) -> bool:
        if is_turn_start(record):
            self.total += 1
            return True
        return False


def split_turns(records: Iterable[Record]) -> Tuple[List[Record], List[List[Record]]]:
    """Split ``records`` into (leading records, turns).

    Leading records precede the first boundary: either a preamble or the tail
    of a turn whose prompt is outside the window. Summary records are dropped.
    """
    leading: List[Record] = []
    turns: List[List[Record]] = []
    for record in records:
        if isinstance(record, SummaryRecord):
            continue
        if is_turn_start(record):
            turns.append([record])
        elif turns:
            turns[-1].append(record)
        else:
            leading.append(record)
    return leading, turns


def count_turns(records: Iterable[Record]) -> int:
    counter = TurnCounter()
    for record in records:
        counter.observe(record)
    return counter.total


def number_turns(groups: Sequence[List[Record]], first_index: int) -> List[Turn]:
    return [Turn(index=first_index + offset, records=tuple(group)) for offset, group in enumerate(groups)]


__all__ = ["Turn", "TurnCounter", "count_turns", "is_turn_start", "number_turns", "split_turns"]
