"""Terminal styling for report output, switched off for plain text."""

from __future__ import annotations

import click


class Style:
    def __init__(self, use_color: bool = False):
        self.use_color = use_color

    def _style(self, text: object, **styles) -> str:
        if not self.use_color:
            return str(text)
        return click.style(str(text), **styles)

    def bold(self, text: object) -> str:
        return self._style(text, bold=True)

    def red(self, text: object) -> str:
        return self._style(text, fg="red")

    def red_bold(self, text: object) -> str:
        return self._style(text, fg="red", bold=True)

    def gray(self, text: object) -> str:
        return self._style(text, fg="bright_black")

    def italic(self, text: object) -> str:
        return self._style(text, italic=True)

    def italic_gray(self, text: object) -> str:
        return self._style(text, fg="bright_black", italic=True)


PLAIN = Style(use_color=False)
