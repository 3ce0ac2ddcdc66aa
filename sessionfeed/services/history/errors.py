"""Exceptions raised by the session history engine."""

from __future__ import annotations


class HistoryError(Exception):
    """Base class for session history failures."""

    retryable = False


class SessionNotFoundError(HistoryError):
    """The requested session log (or its project) does not exist."""


class HistoryUnavailableError(HistoryError):
    """A transient I/O failure; the caller may retry the same request."""

    retryable = True


class InvalidSessionIdError(HistoryError, ValueError):
    """A session id or project slug that must not be turned into a path."""


__all__ = [
    "HistoryError",
    "HistoryUnavailableError",
    "InvalidSessionIdError",
    "SessionNotFoundError",
]
