"""Markdown rendering for question text shared by the API and the Qt player.

Question text is authored as Markdown. The server renders it once per request
into an HTML fragment (``questionHtml``) so every client shows the same
markup; the Qt player displays the fragment in a rich-text ``QLabel``. Raw
HTML in question text is escaped rather than passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts Markdown question text into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)


# Shared by the API thread pool and the Qt thread; renders are read-only.
renderer = MarkdownRenderer()
