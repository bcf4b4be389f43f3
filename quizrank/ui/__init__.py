"""Qt UI components for the quiz player."""

from .player_window import PlayerWindow

__all__ = ["PlayerWindow"]
