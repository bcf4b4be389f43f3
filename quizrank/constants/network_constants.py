"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 3000
DEFAULT_SERVER_URL: str = "http://127.0.0.1:3000"
CLIENT_TIMEOUT_SECONDS: float = 10.0
