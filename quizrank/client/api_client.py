"""HTTP client used by the player to talk to the quiz server."""

from __future__ import annotations

import logging

import httpx

from quizrank.constants.network_constants import CLIENT_TIMEOUT_SECONDS, DEFAULT_SERVER_URL
from quizrank.core.models import AnswerSubmission, LeaderboardEntry, Question, SubmissionResult

logger = logging.getLogger(__name__)

_GENERIC_FAILURE_MESSAGE = "Could not reach the quiz server. Please try again."


class ApiError(Exception):
    """Raised for transport failures, error responses and unreadable bodies."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class QuizApiClient:
    """Thin wrapper over ``httpx.Client`` for the quiz endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        timeout: float = CLIENT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> QuizApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch_quiz(self, limit: int | None = None) -> list[Question]:
        params = {"limit": limit} if limit is not None else None
        data = self._request("GET", "/api/quiz", params=params)
        raw_questions = data.get("questions")
        if not isinstance(raw_questions, list) or not raw_questions:
            raise ApiError("The server returned no questions.")
        try:
            return [_parse_question(item) for item in raw_questions]
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError("The server returned malformed questions.") from exc

    def fetch_leaderboard(self) -> list[LeaderboardEntry]:
        data = self._request("GET", "/api/leaderboard")
        return _parse_leaderboard(data.get("leaderboard"))

    def submit(self, submission: AnswerSubmission) -> SubmissionResult:
        data = self._request("POST", "/api/submit", json=submission.to_payload())
        try:
            return SubmissionResult(
                score=int(data["score"]),
                total=int(data["total"]),
                leaderboard=_parse_leaderboard(data.get("leaderboard")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError("The server returned a malformed result.") from exc

    def _request(self, method: str, url: str, **kwargs: object) -> dict[str, object]:
        try:
            response = self._client.request(method, url, **kwargs)  # type: ignore[arg-type]
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(_GENERIC_FAILURE_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = _GENERIC_FAILURE_MESSAGE
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                message = data["error"]
            logger.warning("%s %s returned %d: %s", method, url, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        if not isinstance(data, dict):
            raise ApiError("The server returned an unreadable response.", status_code=response.status_code)
        return data


def _parse_question(item: dict[str, object]) -> Question:
    answer = item.get("answer")
    return Question(
        id=int(item["id"]),  # type: ignore[arg-type]
        text=str(item["question"]),
        choices=tuple(str(choice) for choice in item["choices"]),  # type: ignore[union-attr]
        answer=int(answer) if answer is not None else None,  # type: ignore[arg-type]
    )


def _parse_leaderboard(raw_entries: object) -> list[LeaderboardEntry]:
    if not isinstance(raw_entries, list):
        return []
    entries: list[LeaderboardEntry] = []
    for item in raw_entries:
        try:
            entries.append(LeaderboardEntry.from_dict(item))
        except (ValueError, TypeError, AttributeError):
            logger.warning("Skipping malformed leaderboard row: %r", item)
    return entries
