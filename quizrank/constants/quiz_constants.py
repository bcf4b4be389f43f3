"""Quiz-related constants shared across client, server and storage layers."""

DEFAULT_QUESTION_COUNT: int = 10
LEADERBOARD_LIMIT: int = 25
MAX_PLAYER_NAME_LENGTH: int = 32
MAX_REQUEST_BODY_BYTES: int = 1_000_000
TIMER_TICK_INTERVAL_MS: int = 500
TOTAL_TIME_PRECISION: int = 2
