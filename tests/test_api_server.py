from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from quizrank.core.quiz_manager import QuizManager
from quizrank.server.api_server import create_api_app

ALL_CORRECT = [{"questionId": qid, "choiceIndex": qid % 3} for qid in range(1, 6)]


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "questions": 5}


def test_quiz_default_returns_whole_small_bank(api_client: TestClient) -> None:
    response = api_client.get("/api/quiz")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    ids = [q["id"] for q in body["questions"]]
    assert sorted(ids) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize(("limit", "expected"), [(2, 2), (0, 1), (-4, 1), (99, 5)])
def test_quiz_limit_is_clamped(api_client: TestClient, limit: int, expected: int) -> None:
    body = api_client.get("/api/quiz", params={"limit": limit}).json()

    assert body["total"] == expected
    assert len(body["questions"]) == expected


def test_quiz_question_shape(api_client: TestClient) -> None:
    question = api_client.get("/api/quiz", params={"limit": 1}).json()["questions"][0]

    assert set(question) == {"id", "question", "questionHtml", "choices", "answer"}
    assert question["question"] == f"Question {question['id']}?"
    assert question["questionHtml"].startswith("<p>")
    assert question["choices"] == ["a", "b", "c"]
    assert question["answer"] == question["id"] % 3


def test_quiz_can_withhold_answers(manager: QuizManager) -> None:
    client = TestClient(create_api_app(manager, reveal_answers=False))

    questions = client.get("/api/quiz").json()["questions"]

    assert all("answer" not in q for q in questions)


def test_quiz_rejects_non_numeric_limit(api_client: TestClient) -> None:
    response = api_client.get("/api/quiz", params={"limit": "many"})

    assert response.status_code == 400
    assert response.json() == {"error": "The submitted data is not in the expected format."}


def test_empty_leaderboard(api_client: TestClient) -> None:
    response = api_client.get("/api/leaderboard")

    assert response.status_code == 200
    assert response.json() == {"leaderboard": []}


def test_submit_scores_and_returns_leaderboard(api_client: TestClient) -> None:
    answers = [dict(a) for a in ALL_CORRECT]
    answers[0]["choiceIndex"] = 0

    response = api_client.post(
        "/api/submit",
        json={"playerName": " Grace   Hopper ", "answers": answers, "totalTime": 61.006},
    )

    assert response.status_code == 200
    body = response.json()
    assert (body["score"], body["total"]) == (4, 5)
    (entry,) = body["leaderboard"]
    assert entry["name"] == "Grace Hopper"
    assert entry["score"] == 4
    assert entry["totalQuestions"] == 5
    assert entry["totalTime"] == 61.01
    assert "completedAt" in entry
    assert api_client.get("/api/leaderboard").json()["leaderboard"] == body["leaderboard"]


@pytest.mark.parametrize("total_time", [None, "soon", -3, True])
def test_submit_with_unusable_time_is_accepted(api_client: TestClient, total_time) -> None:
    response = api_client.post(
        "/api/submit",
        json={"playerName": "Ada", "answers": ALL_CORRECT, "totalTime": total_time},
    )

    assert response.status_code == 200
    assert response.json()["leaderboard"][0]["totalTime"] is None


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"playerName": "   ", "answers": ALL_CORRECT}, "Please enter a player name."),
        ({"answers": ALL_CORRECT}, "Please enter a player name."),
        ({"playerName": "Ada", "answers": []}, "No answers were submitted."),
        ({"playerName": "Ada"}, "No answers were submitted."),
        (
            {"playerName": "Ada", "answers": ALL_CORRECT + [{"questionId": 1, "choiceIndex": 1}]},
            "The submitted answers do not match the quiz questions.",
        ),
        (
            {"playerName": "Ada", "answers": [{"questionId": 404, "choiceIndex": 0}]},
            "The submitted answers do not match the quiz questions.",
        ),
        (
            {"playerName": "Ada", "answers": [{"questionId": "1", "choiceIndex": 0}]},
            "The submitted data is not in the expected format.",
        ),
        (
            {"playerName": "Ada", "answers": "all of them"},
            "The submitted data is not in the expected format.",
        ),
    ],
)
def test_submit_rejects_invalid_payload(
    api_client: TestClient, leaderboard_path: Path, payload: dict, message: str
) -> None:
    response = api_client.post("/api/submit", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert not leaderboard_path.exists() or json.loads(leaderboard_path.read_text(encoding="utf-8")) == []


def test_submit_rejects_malformed_json(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/submit",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_submit_rejects_oversized_body(api_client: TestClient, leaderboard_path: Path) -> None:
    payload = {"playerName": "x" * 1_100_000, "answers": ALL_CORRECT}

    response = api_client.post("/api/submit", json=payload)

    assert response.status_code == 413
    assert response.json() == {"error": "Request body is too large."}
    assert response.headers["connection"] == "close"
    assert not leaderboard_path.exists()


def test_resubmitting_same_attempt_keeps_one_entry(api_client: TestClient) -> None:
    payload = {"playerName": "Ada", "answers": ALL_CORRECT, "totalTime": 20}

    first = api_client.post("/api/submit", json=payload).json()
    second = api_client.post("/api/submit", json=payload).json()

    assert len(second["leaderboard"]) == 1
    assert second["leaderboard"] == first["leaderboard"]


def test_unknown_route_returns_error_body(api_client: TestClient) -> None:
    response = api_client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Nothing found at /api/nope."}


def test_corrupt_leaderboard_returns_500(api_client: TestClient, leaderboard_path: Path) -> None:
    leaderboard_path.parent.mkdir(parents=True)
    leaderboard_path.write_text("][", encoding="utf-8")

    response = api_client.post("/api/submit", json={"playerName": "Ada", "answers": ALL_CORRECT})

    assert response.status_code == 500
    assert response.json() == {"error": "The leaderboard could not be saved. Please try again."}
    assert leaderboard_path.read_text(encoding="utf-8") == "]["


def test_unexpected_error_returns_generic_500(manager: QuizManager, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode() -> list:
        raise RuntimeError("boom")

    monkeypatch.setattr(manager, "get_leaderboard", explode)
    client = TestClient(create_api_app(manager), raise_server_exceptions=False)

    response = client.get("/api/leaderboard")

    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong on the server. Please try again."}
