"""Exceptions raised by the quiz services and translated to HTTP errors by the API."""

from __future__ import annotations


class QuizError(Exception):
    """Base error carrying a message that is safe to show to the player."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuizError):
    """Raised when a request carries a bad name, answers or parameters."""

    status_code = 400


class NotFoundError(QuizError):
    status_code = 404


class InternalError(QuizError):
    """Raised when storage fails; the message is generic and details are logged."""

    status_code = 500


class QuestionBankError(QuizError):
    """Raised when a question bank cannot be loaded or fails validation."""
