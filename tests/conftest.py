from __future__ import annotations

import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from quizrank.core.models import Question
from quizrank.core.quiz_manager import QuizManager
from quizrank.core.services.leaderboard_store import LeaderboardStore
from quizrank.core.services.question_bank import QuestionBank
from quizrank.server.api_server import create_api_app


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_questions(count: int = 5) -> list[Question]:
    return [
        Question(
            id=index,
            text=f"Question {index}?",
            choices=("a", "b", "c"),
            answer=index % 3,
        )
        for index in range(1, count + 1)
    ]


@pytest.fixture
def questions() -> list[Question]:
    return make_questions()


@pytest.fixture
def bank(questions: list[Question]) -> QuestionBank:
    return QuestionBank(questions)


@pytest.fixture
def leaderboard_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "leaderboard.json"


@pytest.fixture
def store(leaderboard_path: Path) -> LeaderboardStore:
    return LeaderboardStore(leaderboard_path)


@pytest.fixture
def manager(bank: QuestionBank, store: LeaderboardStore) -> QuizManager:
    return QuizManager(bank, store, rng=random.Random(7))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api_client(manager: QuizManager) -> TestClient:
    return TestClient(create_api_app(manager))
