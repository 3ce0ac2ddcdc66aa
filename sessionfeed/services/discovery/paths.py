"""Translate between project slugs and filesystem paths.

The assistant names each project directory after the project's absolute path
with every ``/`` replaced by ``-``. Folder names may themselves contain hyphens,
so the reverse mapping probes the filesystem for which hyphens were separators.
"""

from __future__ import annotations

import os
from typing import List, Optional


MAX_PATH_DEPTH = 64
MAX_PROBES = 512


def path_to_slug(project_path: str) -> str:
    return "-" + project_path.replace("/", "-").lstrip("-")


class _ProbeBudget:
    def __init__(self, limit: int):
        self.remaining = limit

    def take(self) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


def _find_path(parts: List[str], current: str, start: int, depth: int, budget: _ProbeBudget) -> Optional[str]:
    if start >= len(parts):
        return current if os.path.exists(current or "/") else None
    if depth >= MAX_PATH_DEPTH:
        return None

    # Try 1, 2, 3... consecutive parts as a single folder name
    for end in range(start, len(parts)):
        if not budget.take():
            return None
        candidate = f"{current}/{'-'.join(parts[start : end + 1])}"
        if os.path.exists(candidate):
            found = _find_path(parts, candidate, end + 1, depth + 1, budget)
            if found:
                return found
    return None


def slug_to_path(slug: str, max_probes: int = MAX_PROBES) -> str:
    """Best-effort reconstruction of the project path behind ``slug``."""
    normalized = slug[1:] if slug.startswith("-") else slug
    parts = normalized.split("-")
    found = _find_path(parts, "", 0, 0, _ProbeBudget(max_probes))
    if found:
        return found
    return "/" + normalized.replace("-", "/")


def project_display_name(slug: str) -> str:
    path = slug_to_path(slug)
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else slug


__all__ = ["path_to_slug", "project_display_name", "slug_to_path"]
