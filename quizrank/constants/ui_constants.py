"""Qt UI constants used across the player window."""

WINDOW_TITLE: str = "QuizRank"

INTRO_HEADING: str = "Ready for the quiz?"
NAME_PLACEHOLDER: str = "Your name"
QUESTION_COUNT_LABEL: str = "Questions:"
START_BUTTON: str = "Start Quiz"

PREV_BUTTON: str = "Previous"
NEXT_BUTTON: str = "Next Question"
FINISH_BUTTON: str = "See Results"
RETRY_BUTTON: str = "Play Again"
RESUBMIT_BUTTON: str = "Submit Again"
REFRESH_BUTTON: str = "Refresh Leaderboard"

LEADERBOARD_HEADING: str = "Leaderboard"
LEADERBOARD_COLUMNS: tuple[str, ...] = ("#", "Name", "Score", "Time", "Completed")
LEADERBOARD_EMPTY: str = "No results yet."

NAME_REQUIRED_MESSAGE: str = "Please enter your name to start."
QUIZ_LOAD_FAILED_MESSAGE: str = "Could not load the quiz. Check the server and try again."
SUBMIT_FAILED_TEMPLATE: str = "Submission failed: {message}"
RESULT_SCORE_TEMPLATE: str = "Score: {score} / {total}"
RESULT_TIME_TEMPLATE: str = "Time: {time}"
