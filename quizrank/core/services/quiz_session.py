"""Client-side state machine for one player's quiz attempt."""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto

from quizrank.constants.quiz_constants import DEFAULT_QUESTION_COUNT, TOTAL_TIME_PRECISION
from quizrank.core.models import (
    AnswerFeedback,
    AnswerSubmission,
    FeedbackStatus,
    Question,
    SubmittedAnswer,
)
from quizrank.core.services.question_bank import clamp_question_count, draw_questions


class SessionState(Enum):
    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    PENDING = auto()  # finished, waiting for the server to accept the submission
    COMPLETED = auto()


class AdvanceResult(Enum):
    DISABLED = auto()
    MOVED = auto()
    FINISHED = auto()


class SessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the current session state."""


class IncompleteSessionError(ValueError):
    """Raised when a submission is built while some questions are unanswered."""

    def __init__(self, missing_positions: list[int]) -> None:
        super().__init__(
            "Some questions are unanswered. Answer every question before submitting."
        )
        self.missing_positions = missing_positions


@dataclass(frozen=True, slots=True)
class Progress:
    position: int
    total: int

    @property
    def fraction(self) -> float:
        return self.position / self.total if self.total else 0.0

    @property
    def counter(self) -> str:
        if not self.total:
            return "0 / 0"
        return f"{self.position + 1} / {self.total}"


class QuizSession:
    """Owns the question set, the captured answers and the attempt clock.

    Feedback is never stored: it is derived from the recorded answer and the
    question's answer key every time it is requested.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._bank: list[Question] = []
        self._requested_count: int = DEFAULT_QUESTION_COUNT
        self._questions: list[Question] = []
        self._answers: list[int | None] = []
        self._current_index: int = 0
        self._start_time: float | None = None
        self._finish_time: float | None = None
        self._state = SessionState.NOT_STARTED
        self._last_error: str | None = None

    # --- Lifecycle ---

    def start(self, bank: Sequence[Question], count: int | None = DEFAULT_QUESTION_COUNT) -> None:
        """Start a fresh attempt over ``count`` questions drawn from ``bank``."""
        if not bank:
            raise ValueError("Cannot start a quiz without questions.")
        self._bank = list(bank)
        self._requested_count = clamp_question_count(count, len(self._bank))
        self._questions = draw_questions(self._bank, self._requested_count, self._rng)
        self._answers = [None] * len(self._questions)
        self._current_index = 0
        self._start_time = self._clock()
        self._finish_time = None
        self._last_error = None
        self._state = SessionState.IN_PROGRESS

    def reset(self) -> None:
        """Start over with the same bank and count and a new question order."""
        if not self._bank:
            raise SessionStateError("Session has never been started.")
        self.start(self._bank, self._requested_count)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question | None:
        if not self._questions:
            return None
        return self._questions[self._current_index]

    @property
    def last_error(self) -> str | None:
        return self._last_error

    # --- Answers and feedback ---

    def select_choice(self, position: int, choice_index: int) -> AnswerFeedback | None:
        """Record ``choice_index`` for ``position``; re-selecting overwrites."""
        if self._state is not SessionState.IN_PROGRESS:
            raise SessionStateError("Answers can only be selected while the quiz is in progress.")
        if not 0 <= position <= self._current_index:
            raise ValueError(f"Question {position + 1} has not been reached yet.")
        question = self._questions[position]
        if not 0 <= choice_index < len(question.choices):
            raise ValueError(f"Choice {choice_index} does not exist for question {question.id}.")
        self._answers[position] = choice_index
        return self.feedback_for(position)

    def answer_at(self, position: int) -> int | None:
        return self._answers[position]

    def is_answered(self, position: int) -> bool:
        return 0 <= position < len(self._answers) and self._answers[position] is not None

    def feedback_for(self, position: int) -> AnswerFeedback | None:
        """Return feedback for ``position``, or None when unanswered or the key is unknown."""
        if not 0 <= position < len(self._questions):
            return None
        selected = self._answers[position]
        question = self._questions[position]
        if selected is None or question.answer is None:
            return None
        status = FeedbackStatus.CORRECT if selected == question.answer else FeedbackStatus.INCORRECT
        return AnswerFeedback(
            status=status,
            selected_index=selected,
            revealed_answer_index=question.answer,
        )

    def score(self) -> int:
        """Count correct answers where the answer key is known to the client."""
        return sum(
            1
            for question, selected in zip(self._questions, self._answers)
            if selected is not None and question.is_correct(selected)
        )

    def unanswered_positions(self) -> list[int]:
        return [position for position, selected in enumerate(self._answers) if selected is None]

    # --- Navigation ---

    @property
    def is_last_question(self) -> bool:
        return bool(self._questions) and self._current_index == len(self._questions) - 1

    @property
    def can_advance(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and self.is_answered(self._current_index)

    @property
    def can_retreat(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and self._current_index > 0

    def advance(self) -> AdvanceResult:
        if not self.can_advance:
            return AdvanceResult.DISABLED
        if self.is_last_question:
            self._finish_time = self._clock()
            self._state = SessionState.PENDING
            return AdvanceResult.FINISHED
        self._current_index += 1
        return AdvanceResult.MOVED

    def retreat(self) -> bool:
        if not self.can_retreat:
            return False
        self._current_index -= 1
        return True

    def progress(self) -> Progress:
        return Progress(position=self._current_index, total=len(self._questions))

    # --- Timing ---

    def elapsed_time(self) -> float:
        """Seconds since the session started; frozen once the last question is passed."""
        if self._start_time is None:
            return 0.0
        end = self._finish_time if self._finish_time is not None else self._clock()
        return max(0.0, end - self._start_time)

    # --- Submission ---

    def build_submission(self, player_name: str) -> AnswerSubmission:
        """Package the answers for the server; fails locally if any are missing."""
        if self._state is SessionState.NOT_STARTED:
            raise SessionStateError("Session has not been started.")
        missing = self.unanswered_positions()
        if missing:
            raise IncompleteSessionError(missing)
        answers = tuple(
            SubmittedAnswer(question_id=question.id, choice_index=selected)
            for question, selected in zip(self._questions, self._answers)
            if selected is not None
        )
        return AnswerSubmission(
            player_name=player_name,
            answers=answers,
            total_time=round(self.elapsed_time(), TOTAL_TIME_PRECISION),
        )

    def mark_submitted(self) -> None:
        if self._state is not SessionState.PENDING:
            raise SessionStateError("Only a finished session can be marked as submitted.")
        self._last_error = None
        self._state = SessionState.COMPLETED

    def mark_submission_failed(self, message: str) -> None:
        """Remember the failure and keep the answers so the same payload can be resent."""
        if self._state is not SessionState.PENDING:
            raise SessionStateError("Only a finished session can fail to submit.")
        self._last_error = message
