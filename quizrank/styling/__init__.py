"""Styling module for the QuizRank player."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
