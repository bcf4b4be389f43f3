"""Color palette for the QuizRank player supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the player window."""

    TEXT_PRIMARY = ThemeColors(light="#0F172A", dark="#F5F7FF")
    TEXT_MUTED = ThemeColors(light="#64748B", dark="#94A3B8")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#0B1120")
    BACKGROUND_CARD = ThemeColors(light="#F1F5F9", dark="#111A30")

    BORDER_PRIMARY = ThemeColors(light="#CBD5E1", dark="#334155")

    BUTTON_PRIMARY_BG = ThemeColors(light="#1F9AA5", dark="#1F9AA5")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    BUTTON_HOVER_BG = ThemeColors(light="#16808A", dark="#16808A")

    # Choice feedback
    CHOICE_SELECTED = ThemeColors(light="#BFDBFE", dark="#1E3A8A")
    CHOICE_CORRECT = ThemeColors(light="#BBF7D0", dark="#166534")
    CHOICE_INCORRECT = ThemeColors(light="#FECACA", dark="#991B1B")

    SUCCESS = ThemeColors(light="#107C10", dark="#6FCF6F")
    ERROR = ThemeColors(light="#D13438", dark="#FF6B6B")
