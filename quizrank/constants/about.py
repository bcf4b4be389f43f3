"""Static metadata describing QuizRank."""

APP_NAME = "QuizRank"
APP_VERSION = "0.1.0"
APP_ABOUT_TEXT = (
    "QuizRank serves multiple-choice quizzes over HTTP, scores submitted attempts "
    "on the server and keeps a ranked leaderboard of each player's best run."
)
