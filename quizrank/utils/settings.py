"""Runtime settings read from the environment (prefix ``QUIZRANK_``) or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quizrank.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SERVER_URL

_PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_QUESTION_BANK_PATH = _PACKAGE_DIR / "data" / "questions.json"
DEFAULT_LEADERBOARD_PATH = Path("data") / "leaderboard.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIZRANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, validation_alias=AliasChoices("QUIZRANK_PORT", "PORT"))
    log_level: str = "INFO"

    question_bank_path: Path = DEFAULT_QUESTION_BANK_PATH
    leaderboard_path: Path = DEFAULT_LEADERBOARD_PATH
    # Sending the answer key lets the client show per-question feedback; scores
    # are recomputed server-side either way.
    reveal_answers: bool = True

    server_url: str = DEFAULT_SERVER_URL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
