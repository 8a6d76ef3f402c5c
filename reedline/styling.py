"""Terminal colours, text styles, styled text and the highlighter interface."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field, replace
from typing import Iterator


class Color(enum.Enum):
    """Named terminal colours."""

    BLACK = "Black"
    DARK_GRAY = "DarkGray"
    RED = "Red"
    LIGHT_RED = "LightRed"
    GREEN = "Green"
    LIGHT_GREEN = "LightGreen"
    YELLOW = "Yellow"
    LIGHT_YELLOW = "LightYellow"
    BLUE = "Blue"
    LIGHT_BLUE = "LightBlue"
    PURPLE = "Purple"
    LIGHT_PURPLE = "LightPurple"
    MAGENTA = "Magenta"
    LIGHT_MAGENTA = "LightMagenta"
    CYAN = "Cyan"
    LIGHT_CYAN = "LightCyan"
    WHITE = "White"
    LIGHT_GRAY = "LightGray"
    DEFAULT = "Default"

    @property
    def foreground_code(self) -> str:
        """The SGR parameter that selects this colour as foreground."""
        return _FOREGROUND_CODES[self]


_FOREGROUND_CODES = {
    Color.BLACK: "30",
    Color.DARK_GRAY: "90",
    Color.RED: "31",
    Color.LIGHT_RED: "91",
    Color.GREEN: "32",
    Color.LIGHT_GREEN: "92",
    Color.YELLOW: "33",
    Color.LIGHT_YELLOW: "93",
    Color.BLUE: "34",
    Color.LIGHT_BLUE: "94",
    Color.PURPLE: "35",
    Color.LIGHT_PURPLE: "95",
    Color.MAGENTA: "35",
    Color.LIGHT_MAGENTA: "95",
    Color.CYAN: "36",
    Color.LIGHT_CYAN: "96",
    Color.WHITE: "37",
    Color.LIGHT_GRAY: "97",
    Color.DEFAULT: "39",
}

_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Style:
    """An immutable text style; the builder methods return new styles."""

    foreground: Color | None = None
    is_bold: bool = False
    is_italic: bool = False

    def fg(self, color: Color) -> Style:
        """Return this style with ``color`` as foreground."""
        return replace(self, foreground=color)

    def bold(self) -> Style:
        """Return this style in bold."""
        return replace(self, is_bold=True)

    def italic(self) -> Style:
        """Return this style in italics."""
        return replace(self, is_italic=True)

    @property
    def is_plain(self) -> bool:
        return self.foreground is None and not self.is_bold and not self.is_italic

    def paint(self, text: str) -> str:
        """Wrap ``text`` in the escape sequences for this style."""
        if self.is_plain:
            return text
        params = []
        if self.is_bold:
            params.append("1")
        if self.is_italic:
            params.append("3")
        if self.foreground is not None:
            params.append(self.foreground.foreground_code)
        return f"\x1b[{';'.join(params)}m{text}{_RESET}"


@dataclass
class StyledText:
    """A line split into segments, each with its own style."""

    buffer: list[tuple[Style, str]] = field(default_factory=list)

    def push(self, segment: tuple[Style, str]) -> None:
        """Append a (style, text) segment."""
        style, text = segment
        self.buffer.append((style, text))

    def raw_string(self) -> str:
        """The text of all segments without styling."""
        return "".join(text for _, text in self.buffer)

    def render(self) -> str:
        """The text of all segments with their escape sequences."""
        return "".join(style.paint(text) for style, text in self.buffer)

    def __iter__(self) -> Iterator[tuple[Style, str]]:
        return iter(self.buffer)

    def __len__(self) -> int:
        return len(self.buffer)


class Highlighter(abc.ABC):
    """Turns the current line into styled text."""

    @abc.abstractmethod
    def highlight(self, line: str, cursor: int) -> StyledText:
        """Style ``line``; ``cursor`` is the insertion point."""