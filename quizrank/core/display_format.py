"""Formatting helpers that turn session state into display values.

Kept free of Qt so the player's rendering decisions can be tested directly.
"""

from __future__ import annotations

import math

from quizrank.core.models import AnswerFeedback, LeaderboardEntry, Question


def format_clock(seconds: float) -> str:
    """Format elapsed seconds as ``MM:SS``."""
    total_seconds = max(0, math.floor(seconds))
    minutes, secs = divmod(total_seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_total_time(total_time: float | None) -> str:
    return "-" if total_time is None else f"{total_time:.2f}s"


def choice_roles(question: Question, selected: int | None, feedback: AnswerFeedback | None) -> list[str | None]:
    """Return the highlight role of every choice: selected, correct, incorrect or None.

    A wrong pick is marked incorrect and the revealed answer is marked correct.
    """
    roles: list[str | None] = [None] * len(question.choices)
    if selected is None:
        return roles
    if feedback is None:
        roles[selected] = "selected"
        return roles
    if feedback.is_correct:
        roles[selected] = "correct"
    else:
        roles[selected] = "incorrect"
        roles[feedback.revealed_answer_index] = "correct"
    return roles


def feedback_message(question: Question, feedback: AnswerFeedback | None) -> str:
    if feedback is None:
        return ""
    if feedback.is_correct:
        return "Correct!"
    correct_text = question.choices[feedback.revealed_answer_index]
    return f"Not quite. The correct answer is “{correct_text}”."


def leaderboard_rows(entries: list[LeaderboardEntry]) -> list[tuple[str, ...]]:
    """Rows of ``(rank, name, score, time, completed)`` for the leaderboard table."""
    rows: list[tuple[str, ...]] = []
    for rank, entry in enumerate(entries, start=1):
        total = str(entry.total_questions) if entry.total_questions > 0 else "-"
        rows.append(
            (
                str(rank),
                entry.name,
                f"{entry.score} / {total}",
                format_total_time(entry.total_time),
                entry.completed_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            )
        )
    return rows
