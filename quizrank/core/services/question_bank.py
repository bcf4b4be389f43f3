"""Service holding the read-only collection of quiz questions."""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import TypeVar

from quizrank.constants.quiz_constants import DEFAULT_QUESTION_COUNT
from quizrank.core.errors import QuestionBankError
from quizrank.core.models import Question

T = TypeVar("T")


def clamp_question_count(count: int | None, available: int) -> int:
    """Clamp a requested question count to ``[1, available]``."""
    if count is None:
        count = DEFAULT_QUESTION_COUNT
    return max(1, min(int(count), available))


def draw_questions(items: Sequence[T], count: int, rng: random.Random | None = None) -> list[T]:
    """Return ``count`` items drawn without replacement, uniformly over orderings.

    Fisher-Yates shuffle of a copy, truncated to ``count``.
    """
    rng = rng or random.Random()
    pool = list(items)
    for i in range(len(pool) - 1, 0, -1):
        j = rng.randint(0, i)
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:count]


class QuestionBank:
    """Validated, immutable question collection indexed by id."""

    def __init__(self, questions: Iterable[Question]) -> None:
        prepared = [self._validate_question(q) for q in questions]
        if not prepared:
            raise QuestionBankError("Question bank must contain at least one question.")
        by_id: dict[int, Question] = {}
        for question in prepared:
            if question.id in by_id:
                raise QuestionBankError(f"Duplicate question id {question.id}.")
            by_id[question.id] = question
        self._questions: tuple[Question, ...] = tuple(prepared)
        self._by_id = by_id

    def __len__(self) -> int:
        return len(self._questions)

    def get_questions(self) -> list[Question]:
        """Return a copy of all questions in bank order."""
        return list(self._questions)

    def get_question(self, question_id: int) -> Question | None:
        return self._by_id.get(question_id)

    def has_question(self, question_id: int) -> bool:
        return question_id in self._by_id

    def select(self, count: int | None = None, rng: random.Random | None = None) -> list[Question]:
        """Draw a random quiz of ``count`` questions (clamped to the bank size)."""
        return draw_questions(self._questions, clamp_question_count(count, len(self._questions)), rng)

    @staticmethod
    def _validate_question(question: Question) -> Question:
        text = question.text.strip()
        if not text:
            raise QuestionBankError(f"Question {question.id} has no text.")
        choices = tuple(choice.strip() for choice in question.choices)
        if len(choices) < 2:
            raise QuestionBankError(f"Question {question.id} must have at least two choices.")
        if any(not choice for choice in choices):
            raise QuestionBankError(f"Question {question.id} has an empty choice.")
        if question.answer is None or not 0 <= question.answer < len(choices):
            raise QuestionBankError(
                f"Question {question.id} answer must index one of its {len(choices)} choices."
            )
        return Question(id=question.id, text=text, choices=choices, answer=question.answer)
