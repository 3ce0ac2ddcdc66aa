"""Lazy, line-by-line reader for JSONL session logs."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ...logging_config import logger
from .errors import HistoryUnavailableError, SessionNotFoundError
from .records import Record, parse_record


@dataclass
class ReadStats:
    """Diagnostics gathered while a log is read."""

    lines_read: int = 0
    records: int = 0
    skipped_lines: int = 0
    snapshot_size: int = 0

    def reset(self) -> None:
        self.lines_read = 0
        self.records = 0
        self.skipped_lines = 0
        self.snapshot_size = 0


class RecordReader:
    """Iterable over the records of one session log.

    Every iteration opens the file again and starts at line 0. The size of the
    file at open time bounds the read, so lines appended while iterating are not
    observed. Malformed lines are skipped and counted in ``stats``, which
    describe the most recent pass only.
    """

    def __init__(self, path: Path, stats: Optional[ReadStats] = None):
        self._path = path
        self.stats = stats if stats is not None else ReadStats()

    @property
    def path(self) -> Path:
        return self._path

    def __iter__(self) -> Iterator[Record]:
        self.stats.reset()
        try:
            handle = self._path.open("rb")
        except FileNotFoundError as exc:
            raise SessionNotFoundError(f"Session log not found: {self._path.name}") from exc
        except OSError as exc:
            logger.warning(
                "session log open failed",
                extra={"error": str(exc), "path": str(self._path)},
            )
            raise HistoryUnavailableError(f"Session log unavailable: {self._path.name}") from exc

        with handle:
            try:
                remaining = os.fstat(handle.fileno()).st_size
                self.stats.snapshot_size = remaining
                yield from self._iter_lines(handle, remaining)
            except OSError as exc:
                logger.warning(
                    "session log read failed",
                    extra={"error": str(exc), "path": str(self._path)},
                )
                raise HistoryUnavailableError(f"Session log unavailable: {self._path.name}") from exc

        if self.stats.skipped_lines:
            logger.warning(
                "skipped malformed session log lines",
                extra={"path": str(self._path), "skipped": self.stats.skipped_lines},
            )

    def _iter_lines(self, handle, remaining: int) -> Iterator[Record]:
        for line_index, raw in enumerate(handle):
            if remaining <= 0:
                break
            if len(raw) > remaining:
                raw = raw[:remaining]
            remaining -= len(raw)
            self.stats.lines_read += 1

            if not raw.strip():
                continue
            record = self._parse_line(raw, line_index)
            if record is None:
                self.stats.skipped_lines += 1
                continue
            self.stats.records += 1
            yield record

    def _parse_line(self, raw: bytes, line_index: int) -> Optional[Record]:
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.debug(
                "malformed session log line",
                extra={"path": str(self._path), "line": line_index, "error": str(exc)},
            )
            return None
        if not isinstance(payload, dict):
            logger.debug(
                "session log line is not an object",
                extra={"path": str(self._path), "line": line_index},
            )
            return None
        return parse_record(payload, line_index)


def iter_records(path: Path, stats: Optional[ReadStats] = None) -> Iterator[Record]:
    return iter(RecordReader(path, stats))


__all__ = ["ReadStats", "RecordReader", "iter_records"]
