"""Validation and scoring rules for submitted attempts."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from quizrank.constants.quiz_constants import MAX_PLAYER_NAME_LENGTH, TOTAL_TIME_PRECISION
from quizrank.core.errors import ValidationError
from quizrank.core.models import SubmittedAnswer
from quizrank.core.services.question_bank import QuestionBank

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_player_name(raw_name: str | None) -> str:
    """Collapse whitespace, trim and truncate a player name; reject empty names."""
    name = _WHITESPACE_RUN.sub(" ", raw_name or "").strip()[:MAX_PLAYER_NAME_LENGTH]
    if not name:
        raise ValidationError("Please enter a player name.")
    return name


def normalize_total_time(total_time: object) -> float | None:
    """Return a rounded, non-negative time in seconds, or None if unusable."""
    if isinstance(total_time, bool) or not isinstance(total_time, (int, float)):
        return None
    value = float(total_time)
    if not math.isfinite(value) or value < 0:
        return None
    return round(value, TOTAL_TIME_PRECISION)


def score_answers(bank: QuestionBank, answers: Sequence[SubmittedAnswer]) -> tuple[int, int]:
    """Score ``answers`` against ``bank`` and return ``(score, total)``.

    The whole submission is rejected if any entry references an unknown
    question or repeats a question id.
    """
    if not answers:
        raise ValidationError("No answers were submitted.")

    seen: set[int] = set()
    validated: list[SubmittedAnswer] = []
    for answer in answers:
        if answer.question_id in seen or not bank.has_question(answer.question_id):
            continue
        seen.add(answer.question_id)
        validated.append(answer)

    if len(validated) != len(answers):
        raise ValidationError("The submitted answers do not match the quiz questions.")

    score = 0
    for answer in validated:
        question = bank.get_question(answer.question_id)
        if question is not None and question.is_correct(answer.choice_index):
            score += 1
    return score, len(validated)
