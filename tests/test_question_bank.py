from __future__ import annotations

import random

import pytest

from quizrank.core.errors import QuestionBankError
from quizrank.core.models import Question
from quizrank.core.services.question_bank import QuestionBank, clamp_question_count, draw_questions


def test_clamp_question_count_defaults_and_bounds() -> None:
    assert clamp_question_count(None, 20) == 10
    assert clamp_question_count(None, 4) == 4
    assert clamp_question_count(0, 4) == 1
    assert clamp_question_count(-3, 4) == 1
    assert clamp_question_count(99, 4) == 4
    assert clamp_question_count(3, 4) == 3


@pytest.mark.parametrize("count", [1, 2, 3, 4, 5])
def test_select_returns_distinct_questions_from_bank(bank: QuestionBank, count: int) -> None:
    selected = bank.select(count, random.Random(count))

    ids = [question.id for question in selected]
    assert len(ids) == count
    assert len(set(ids)) == count
    assert set(ids) <= {question.id for question in bank.get_questions()}


def test_draw_questions_is_a_permutation_when_count_is_full() -> None:
    items = list(range(10))

    drawn = draw_questions(items, len(items), random.Random(1))

    assert sorted(drawn) == items
    assert items == list(range(10))


def test_draw_questions_covers_every_ordering() -> None:
    rng = random.Random(3)
    orderings = {tuple(draw_questions("abc", 3, rng)) for _ in range(300)}

    assert len(orderings) == 6


def test_bank_lookup_by_id(bank: QuestionBank) -> None:
    assert bank.has_question(3)
    assert bank.get_question(3).answer == 0
    assert bank.get_question(42) is None
    assert len(bank) == 5


def test_bank_strips_text_and_choices() -> None:
    bank = QuestionBank([Question(id=1, text="  Why?  ", choices=(" x ", "y"), answer=0)])

    question = bank.get_question(1)
    assert question.text == "Why?"
    assert question.choices == ("x", "y")


@pytest.mark.parametrize(
    "question",
    [
        Question(id=1, text="Q", choices=("only",), answer=0),
        Question(id=1, text="Q", choices=("a", "b"), answer=2),
        Question(id=1, text="Q", choices=("a", "b"), answer=None),
        Question(id=1, text="   ", choices=("a", "b"), answer=0),
        Question(id=1, text="Q", choices=("a", " "), answer=0),
    ],
)
def test_bank_rejects_invalid_questions(question: Question) -> None:
    with pytest.raises(QuestionBankError):
        QuestionBank([question])


def test_bank_rejects_duplicate_ids_and_empty_input() -> None:
    duplicate = Question(id=1, text="Q", choices=("a", "b"), answer=0)
    with pytest.raises(QuestionBankError):
        QuestionBank([duplicate, duplicate])
    with pytest.raises(QuestionBankError):
        QuestionBank([])
