"""File-backed leaderboard keeping each player's best attempt."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from threading import Lock

from quizrank.constants.quiz_constants import LEADERBOARD_LIMIT
from quizrank.core.errors import InternalError
from quizrank.core.models import LeaderboardEntry

logger = logging.getLogger(__name__)

_STORAGE_FAILURE_MESSAGE = "The leaderboard could not be saved. Please try again."


def rank_entries(entries: Iterable[LeaderboardEntry], limit: int = LEADERBOARD_LIMIT) -> list[LeaderboardEntry]:
    """Sort by score (desc), time (asc, missing last), completion (asc) and keep the top ``limit``."""
    ordered = sorted(
        entries,
        key=lambda e: (
            -e.score,
            e.total_time is None,
            e.total_time if e.total_time is not None else 0.0,
            e.completed_at,
        ),
    )
    return ordered[:limit]


def merge_entry(entries: list[LeaderboardEntry], new_entry: LeaderboardEntry) -> bool:
    """Apply the replace-if-better rule in place; return True if ``entries`` changed."""
    for index, current in enumerate(entries):
        if current.name == new_entry.name:
            if new_entry.beats(current):
                entries[index] = new_entry
                return True
            return False
    entries.append(new_entry)
    return True


class LeaderboardStore:
    """Persists the ranked leaderboard as a pretty-printed JSON array.

    ``record`` runs read, merge, rank and write under one lock so concurrent
    submissions never overwrite each other's results.
    """

    def __init__(self, path: Path, limit: int = LEADERBOARD_LIMIT) -> None:
        self._path = Path(path)
        self._limit = limit
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> list[LeaderboardEntry]:
        """Return the ranked leaderboard, creating an empty file on first use."""
        with self._lock:
            return rank_entries(self._load(), self._limit)

    def record(self, entry: LeaderboardEntry) -> tuple[list[LeaderboardEntry], bool]:
        """Merge ``entry`` into the stored board and persist the ranked result.

        Returns the ranked board and whether the stored entries changed.
        """
        with self._lock:
            entries = self._load()
            changed = merge_entry(entries, entry)
            ranked = rank_entries(entries, self._limit)
            self._write(ranked)
            return ranked, changed

    def _load(self) -> list[LeaderboardEntry]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Leaderboard %s not found; creating an empty one", self._path)
            self._write([])
            return []
        except OSError as exc:
            logger.exception("Failed to read leaderboard %s", self._path)
            raise InternalError(_STORAGE_FAILURE_MESSAGE) from exc

        try:
            data = json.loads(raw or "[]")
            if not isinstance(data, list):
                raise ValueError("leaderboard root must be a JSON array")
            return [LeaderboardEntry.from_dict(item) for item in data]
        except (ValueError, TypeError, AttributeError) as exc:
            logger.exception("Leaderboard %s is corrupt", self._path)
            raise InternalError(_STORAGE_FAILURE_MESSAGE) from exc

    def _write(self, entries: list[LeaderboardEntry]) -> None:
        payload = json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            logger.exception("Failed to write leaderboard %s", self._path)
            raise InternalError(_STORAGE_FAILURE_MESSAGE) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
