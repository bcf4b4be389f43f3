from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from quizrank.client.api_client import ApiError, QuizApiClient
from quizrank.core.models import AnswerSubmission, SubmittedAnswer


def _client(handler) -> QuizApiClient:
    return QuizApiClient(base_url="http://quiz.test", transport=httpx.MockTransport(handler))


def _forward_to(test_client: TestClient):
    """Route client requests through the in-process FastAPI app."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = test_client.request(
            request.method,
            request.url.raw_path.decode(),
            content=request.content,
            headers={"Content-Type": request.headers.get("Content-Type", "application/json")},
        )
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    return handler


def test_fetch_quiz_parses_questions() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "questions": [
                    {"id": 3, "question": "Sky?", "questionHtml": "<p>Sky?</p>", "choices": ["red", "blue"], "answer": 1},
                    {"id": 9, "question": "Sea?", "questionHtml": "<p>Sea?</p>", "choices": ["wet", "dry"]},
                ],
                "total": 2,
            },
        )

    with _client(handler) as client:
        questions = client.fetch_quiz(limit=2)

    assert seen[0].url.path == "/api/quiz"
    assert seen[0].url.params["limit"] == "2"
    assert [(q.id, q.text, q.choices, q.answer) for q in questions] == [
        (3, "Sky?", ("red", "blue"), 1),
        (9, "Sea?", ("wet", "dry"), None),
    ]


def test_fetch_quiz_without_questions_fails() -> None:
    with _client(lambda request: httpx.Response(200, json={"questions": [], "total": 0})) as client:
        with pytest.raises(ApiError, match="no questions"):
            client.fetch_quiz()


def test_server_error_message_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "Please enter a player name."})

    submission = AnswerSubmission(player_name="", answers=(SubmittedAnswer(1, 0),), total_time=None)
    with _client(handler) as client:
        with pytest.raises(ApiError) as excinfo:
            client.submit(submission)

    assert excinfo.value.message == "Please enter a player name."
    assert excinfo.value.status_code == 400


def test_error_without_body_uses_generic_message() -> None:
    with _client(lambda request: httpx.Response(502, text="Bad Gateway")) as client:
        with pytest.raises(ApiError) as excinfo:
            client.fetch_leaderboard()

    assert excinfo.value.status_code == 502
    assert excinfo.value.message == "Could not reach the quiz server. Please try again."


def test_transport_failure_becomes_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with _client(handler) as client:
        with pytest.raises(ApiError) as excinfo:
            client.fetch_leaderboard()

    assert excinfo.value.status_code is None


def test_non_object_body_is_rejected() -> None:
    with _client(lambda request: httpx.Response(200, json=[1, 2, 3])) as client:
        with pytest.raises(ApiError):
            client.fetch_leaderboard()


def test_malformed_leaderboard_rows_are_skipped() -> None:
    rows = [
        {"name": "Ada", "score": 3, "totalQuestions": 3, "totalTime": 9.5, "completedAt": "2024-05-01T12:00:00+00:00"},
        {"name": "Broken"},
    ]
    with _client(lambda request: httpx.Response(200, json={"leaderboard": rows})) as client:
        entries = client.fetch_leaderboard()

    assert [e.name for e in entries] == ["Ada"]


def test_submit_sends_camel_case_payload() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(json.loads(request.content))
        return httpx.Response(200, json={"score": 1, "total": 2, "leaderboard": []})

    submission = AnswerSubmission(
        player_name="Ada",
        answers=(SubmittedAnswer(1, 1), SubmittedAnswer(2, 0)),
        total_time=12.5,
    )
    with _client(handler) as client:
        result = client.submit(submission)

    assert captured == {
        "playerName": "Ada",
        "answers": [{"questionId": 1, "choiceIndex": 1}, {"questionId": 2, "choiceIndex": 0}],
        "totalTime": 12.5,
    }
    assert (result.score, result.total, result.leaderboard) == (1, 2, [])


def test_full_round_trip_against_app(api_client: TestClient) -> None:
    with _client(_forward_to(api_client)) as client:
        questions = client.fetch_quiz(limit=3)
        submission = AnswerSubmission(
            player_name="Ada",
            answers=tuple(SubmittedAnswer(q.id, q.answer) for q in questions),
            total_time=7.25,
        )
        result = client.submit(submission)
        board = client.fetch_leaderboard()

    assert (result.score, result.total) == (3, 3)
    assert board == result.leaderboard
    assert board[0].name == "Ada"
    assert board[0].total_time == 7.25
