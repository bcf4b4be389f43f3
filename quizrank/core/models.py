"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with at least two choices.

    ``answer`` is ``None`` only on the client side when the server withholds
    the answer key.
    """

    id: int
    text: str
    choices: tuple[str, ...]
    answer: int | None = None

    def is_correct(self, choice_index: int) -> bool:
        return self.answer is not None and choice_index == self.answer


class FeedbackStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class AnswerFeedback:
    """Feedback shown after a choice is selected for a question."""

    status: FeedbackStatus
    selected_index: int
    revealed_answer_index: int

    @property
    def is_correct(self) -> bool:
        return self.status is FeedbackStatus.CORRECT


@dataclass(frozen=True, slots=True)
class SubmittedAnswer:
    """A single ``(question_id, choice_index)`` pair of a submission."""

    question_id: int
    choice_index: int


@dataclass(frozen=True, slots=True)
class AnswerSubmission:
    """Payload the client sends once every question has been answered."""

    player_name: str
    answers: tuple[SubmittedAnswer, ...]
    total_time: float | None

    def to_payload(self) -> dict[str, object]:
        return {
            "playerName": self.player_name,
            "answers": [
                {"questionId": answer.question_id, "choiceIndex": answer.choice_index}
                for answer in self.answers
            ],
            "totalTime": self.total_time,
        }


@dataclass(slots=True)
class LeaderboardEntry:
    """Best attempt recorded for one player name."""

    name: str
    score: int
    total_questions: int
    total_time: float | None
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def beats(self, current: LeaderboardEntry) -> bool:
        """Return True when this attempt should replace ``current`` for the same player."""
        if self.score > current.score:
            return True
        if self.score != current.score:
            return False
        if self.total_time is None or current.total_time is None:
            return False
        return self.total_time < current.total_time

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "score": self.score,
            "totalQuestions": self.total_questions,
            "totalTime": self.total_time,
            "completedAt": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> LeaderboardEntry:
        """Build an entry from its persisted form, raising ``ValueError`` when malformed."""
        try:
            name = str(data["name"])
            score = int(data["score"])  # type: ignore[arg-type]
            total_questions = int(data.get("totalQuestions") or 0)  # type: ignore[arg-type]
            raw_time = data.get("totalTime")
            completed_at = datetime.fromisoformat(str(data["completedAt"]).replace("Z", "+00:00"))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed leaderboard entry: {data!r}") from exc
        if completed_at.tzinfo is None:
            completed_at = completed_at.replace(tzinfo=timezone.utc)
        total_time = None if raw_time is None else float(raw_time)  # type: ignore[arg-type]
        return cls(
            name=name,
            score=score,
            total_questions=total_questions,
            total_time=total_time,
            completed_at=completed_at,
        )


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Outcome of a scored submission returned to the client."""

    score: int
    total: int
    leaderboard: list[LeaderboardEntry]
