"""Application entry point for QuizRank."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from quizrank.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quizrank.core.errors import QuestionBankError
from quizrank.core.quiz_manager import QuizManager
from quizrank.server.api_server import run_api_server, start_api_server
from quizrank.utils.logging_config import configure_logging
from quizrank.utils.settings import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="quizrank", description=APP_ABOUT_TEXT)
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--headless", action="store_true", help="Run only the HTTP server.")
    parser.add_argument(
        "--player-only",
        action="store_true",
        help="Run only the player against --server-url.",
    )
    parser.add_argument("--server-url", default=settings.server_url)
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--bank", type=Path, default=settings.question_bank_path, help="Question bank file.")
    parser.add_argument("--leaderboard", type=Path, default=settings.leaderboard_path)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, load the question bank, start the API server and the player."""
    settings = get_settings()
    args = _parse_args(argv)
    logger = configure_logging(settings.log_level)
    logger.info("Starting QuizRank…")

    try:
        quiz_manager = QuizManager.from_paths(args.bank, args.leaderboard)
    except QuestionBankError as exc:
        logger.error("Cannot start: %s", exc.message)
        sys.exit(1)

    if args.headless:
        run_api_server(quiz_manager, host=args.host, port=args.port, reveal_answers=settings.reveal_answers)
        return

    from PySide6.QtWidgets import QApplication

    from quizrank.client.api_client import QuizApiClient
    from quizrank.ui.player_window import PlayerWindow

    server_url = args.server_url
    if not args.player_only:
        start_api_server(quiz_manager, host=args.host, port=args.port, reveal_answers=settings.reveal_answers)
        server_url = f"http://127.0.0.1:{args.port}"
    logger.info("Player connecting to %s", server_url)

    app = QApplication(sys.argv)
    window = PlayerWindow(client=QuizApiClient(base_url=server_url))
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
