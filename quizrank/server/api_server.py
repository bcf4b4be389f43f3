"""FastAPI server that exposes the quiz, leaderboard and submission endpoints."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send
import uvicorn

from quizrank.constants.about import APP_NAME, APP_VERSION
from quizrank.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizrank.constants.quiz_constants import MAX_REQUEST_BODY_BYTES
from quizrank.core.errors import InternalError, NotFoundError, QuizError
from quizrank.core.markdown_renderer import renderer
from quizrank.core.models import LeaderboardEntry, Question, SubmittedAnswer
from quizrank.core.quiz_manager import QuizManager
from quizrank.core.services.scoring import normalize_total_time

logger = logging.getLogger(__name__)

_MALFORMED_PAYLOAD_MESSAGE = "The submitted data is not in the expected format."
_PAYLOAD_TOO_LARGE_MESSAGE = "Request body is too large."
_INTERNAL_ERROR_MESSAGE = "Something went wrong on the server. Please try again."


class AnswerItem(BaseModel):
    """One answered question inside a submission."""

    model_config = ConfigDict(populate_by_name=True)

    question_id: StrictInt = Field(alias="questionId")
    choice_index: StrictInt = Field(alias="choiceIndex")


class SubmitPayload(BaseModel):
    """Payload schema for a finished attempt."""

    model_config = ConfigDict(populate_by_name=True)

    player_name: str | None = Field(default=None, alias="playerName")
    answers: list[AnswerItem] = Field(default_factory=list)
    total_time: float | None = Field(default=None, alias="totalTime")

    @field_validator("total_time", mode="before")
    @classmethod
    def _coerce_total_time(cls, value: object) -> float | None:
        # Unusable times are recorded as missing instead of failing the submission.
        return normalize_total_time(value)


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_bytes`` and close the connection."""

    def __init__(self, app: ASGIApp, max_bytes: int = MAX_REQUEST_BODY_BYTES) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        declared = headers.get(b"content-length", b"")
        if declared.isdigit() and int(declared) > self.max_bytes:
            logger.warning("Rejected request with %s byte body", declared.decode())
            response = _too_large_response()
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise HTTPException(status_code=413, detail=_PAYLOAD_TOO_LARGE_MESSAGE)
            return message

        await self.app(scope, limited_receive, send)


def _too_large_response() -> JSONResponse:
    return JSONResponse(
        {"error": _PAYLOAD_TOO_LARGE_MESSAGE},
        status_code=413,
        headers={"Connection": "close"},
    )


def serialize_question(question: Question, *, reveal_answer: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "question": question.text,
        "questionHtml": renderer.render_fragment(question.text),
        "choices": list(question.choices),
    }
    if reveal_answer:
        payload["answer"] = question.answer
    return payload


def serialize_leaderboard(entries: list[LeaderboardEntry]) -> list[dict[str, object]]:
    return [entry.to_dict() for entry in entries]


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizError)
    async def handle_quiz_error(request: Request, exc: QuizError) -> JSONResponse:
        if isinstance(exc, InternalError):
            logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.__cause__)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse({"error": _MALFORMED_PAYLOAD_MESSAGE}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            not_found = NotFoundError(f"Nothing found at {request.url.path}.")
            return JSONResponse({"error": not_found.message}, status_code=not_found.status_code)
        headers = {"Connection": "close"} if exc.status_code == 413 else None
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": _INTERNAL_ERROR_MESSAGE}, status_code=500)


def create_api_app(quiz_manager: QuizManager, reveal_answers: bool = True) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=MAX_REQUEST_BODY_BYTES)
    _install_exception_handlers(app)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/api/health")
    def health(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {"status": "ok", "questions": manager.get_question_count()}

    @app.get("/api/quiz")
    def get_quiz(
        limit: int | None = Query(default=None),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        questions = manager.draw_quiz(limit)
        return {
            "questions": [serialize_question(q, reveal_answer=reveal_answers) for q in questions],
            "total": len(questions),
        }

    @app.get("/api/leaderboard")
    def get_leaderboard(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {"leaderboard": serialize_leaderboard(manager.get_leaderboard())}

    @app.post("/api/submit")
    def submit(
        payload: SubmitPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        answers = [
            SubmittedAnswer(question_id=item.question_id, choice_index=item.choice_index)
            for item in payload.answers
        ]
        result = manager.submit(payload.player_name, answers, payload.total_time)
        return {
            "score": result.score,
            "total": result.total,
            "leaderboard": serialize_leaderboard(result.leaderboard),
        }

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    reveal_answers: bool = True,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(quiz_manager, reveal_answers=reveal_answers)
    uvicorn.run(app, host=host, port=port, log_level="info")


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    reveal_answers: bool = True,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager, reveal_answers=reveal_answers)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread
