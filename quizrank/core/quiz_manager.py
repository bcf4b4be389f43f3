"""Business logic shared by the HTTP API: question draws, scoring and the leaderboard."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from pathlib import Path

from quizrank.core.models import LeaderboardEntry, Question, SubmissionResult, SubmittedAnswer
from quizrank.core.question_loader import load_question_bank
from quizrank.core.services.leaderboard_store import LeaderboardStore
from quizrank.core.services.question_bank import QuestionBank
from quizrank.core.services.scoring import normalize_total_time, sanitize_player_name, score_answers

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: QuestionBank, scoring and LeaderboardStore."""

    def __init__(
        self,
        bank: QuestionBank,
        leaderboard: LeaderboardStore,
        rng: random.Random | None = None,
    ) -> None:
        self._bank = bank
        self._leaderboard = leaderboard
        self._rng = rng or random.Random()

    @classmethod
    def from_paths(cls, question_bank_path: Path, leaderboard_path: Path) -> QuizManager:
        return cls(load_question_bank(question_bank_path), LeaderboardStore(leaderboard_path))

    # --- Question Bank Delegation ---

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    def get_question_count(self) -> int:
        return len(self._bank)

    def draw_quiz(self, limit: int | None = None) -> list[Question]:
        """Return a random selection of questions, clamped to the bank size."""
        return self._bank.select(limit, self._rng)

    # --- Leaderboard Delegation ---

    def get_leaderboard(self) -> list[LeaderboardEntry]:
        return self._leaderboard.read()

    # --- Submission ---

    def submit(
        self,
        player_name: str | None,
        answers: Sequence[SubmittedAnswer],
        total_time: object = None,
    ) -> SubmissionResult:
        """Validate and score an attempt, then merge it into the leaderboard."""
        name = sanitize_player_name(player_name)
        score, total = score_answers(self._bank, answers)
        entry = LeaderboardEntry(
            name=name,
            score=score,
            total_questions=total,
            total_time=normalize_total_time(total_time),
        )
        leaderboard, changed = self._leaderboard.record(entry)
        logger.info(
            "Submission from %r scored %d/%d in %ss (leaderboard %s)",
            name,
            score,
            total,
            entry.total_time,
            "updated" if changed else "unchanged",
        )
        return SubmissionResult(score=score, total=total, leaderboard=leaderboard)
