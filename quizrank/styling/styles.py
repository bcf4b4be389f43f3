"""Centralized styles for the player window."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: none;
                border-radius: 6px;
                padding: 8px 14px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.BORDER_PRIMARY.get(theme)};
            }}
            QLineEdit, QSpinBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QTableWidget {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
            }}
        """

    @staticmethod
    def get_choice_style(role: str | None, theme: Theme = Theme.LIGHT) -> str:
        """Stylesheet for a choice button; ``role`` is selected, correct, incorrect or None."""
        colors = {
            "selected": ColorPalette.CHOICE_SELECTED,
            "correct": ColorPalette.CHOICE_CORRECT,
            "incorrect": ColorPalette.CHOICE_INCORRECT,
        }
        background = colors[role].get(theme) if role in colors else ColorPalette.BACKGROUND_CARD.get(theme)
        return (
            f"background-color: {background}; color: {ColorPalette.TEXT_PRIMARY.get(theme)};"
            f" border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)}; text-align: left;"
        )

    @staticmethod
    def get_feedback_style(is_correct: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.SUCCESS if is_correct else ColorPalette.ERROR
        return f"color: {color.get(theme)}; font-weight: bold;"

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"
