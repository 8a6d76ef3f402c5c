"""Hinters that suggest the rest of the line from the history."""

from __future__ import annotations

import abc
import re

from reedline.history_base import (
    History,
    HistoryError,
    HistoryFeatureUnsupported,
    SearchQuery,
)
from reedline.history_item import HistoryItem
from reedline.styling import Color, Style

_NON_UNICODE_SPACE = frozenset("\x1c\x1d\x1e\x1f")

# Approximates Unicode word-boundary segmentation: CRLF, runs of space
# separators, words (allowing inner apostrophes, dots and colons) and any
# other single character.
_SEGMENT = re.compile(
    r"\r\n"
    r"|[^\S\t\n\x0b\x0c\r\x1c-\x1f\x85\u2028\u2029]+"
    r"|\w+(?:['.:\u2019\u00b7]\w+)*"
    r"|.",
    re.DOTALL,
)


def _is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in _NON_UNICODE_SPACE


def is_whitespace_str(s: str) -> bool:
    """True when every character of ``s`` is whitespace (also for "")."""
    return all(_is_whitespace(ch) for ch in s)


def get_first_token(string: str) -> str:
    """Leading whitespace plus the first word-bounded segment of ``string``."""
    parts = []
    for match in _SEGMENT.finditer(string):
        segment = match.group()
        parts.append(segment)
        if not is_whitespace_str(segment):
            break
    return "".join(parts)


class Hinter(abc.ABC):
    """Works out the hint shown after the line being edited."""

    @abc.abstractmethod
    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        """Compute the hint for ``line`` and return it ready for display."""

    @abc.abstractmethod
    def complete_hint(self) -> str:
        """The current hint without formatting."""

    @abc.abstractmethod
    def next_hint_token(self) -> str:
        """The first token of the current hint."""


def _rest_after(item: HistoryItem | None, line: str) -> str:
    if item is None:
        return ""
    return item.command_line[len(line) :]


def _display(style: Style, hint: str, use_ansi_coloring: bool) -> str:
    if use_ansi_coloring and hint:
        return style.paint(hint)
    return hint


def _prefix_search(line: str, history: History) -> list[HistoryItem]:
    try:
        return history.search(SearchQuery.last_with_prefix(line, history.session()))
    except HistoryError:
        return []


class DefaultHinter(Hinter):
    """Hints the most recent history entry starting with the line."""

    def __init__(self) -> None:
        self.style = Style().fg(Color.LIGHT_GRAY)
        self.current_hint = ""
        self.min_chars = 1

    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        if len(line) >= self.min_chars:
            found = history.search(
                SearchQuery.last_with_prefix(line, history.session())
            )
            self.current_hint = _rest_after(found[0] if found else None, line)
        else:
            self.current_hint = ""
        return _display(self.style, self.current_hint, use_ansi_coloring)

    def complete_hint(self) -> str:
        return self.current_hint

    def next_hint_token(self) -> str:
        return get_first_token(self.current_hint)

    def with_style(self, style: Style) -> DefaultHinter:
        """Set the style the hint is painted in; returns self."""
        self.style = style
        return self

    def with_min_chars(self, min_chars: int) -> DefaultHinter:
        """Set how many characters enable hints; returns self."""
        self.min_chars = min_chars
        return self


class CwdAwareHinter(Hinter):
    """Prefers history entries run in the current directory, like fish."""

    def __init__(self) -> None:
        self.style = Style().fg(Color.LIGHT_GRAY)
        self.current_hint = ""
        self.min_chars = 1

    def _lookup(self, line: str, history: History, cwd: str) -> str:
        try:
            with_cwd = history.search(
                SearchQuery.last_with_prefix_and_cwd(line, cwd, history.session())
            )
        except HistoryFeatureUnsupported:
            with_cwd = _prefix_search(line, history)
        except HistoryError:
            with_cwd = []
        if with_cwd:
            return _rest_after(with_cwd[0], line)
        found = _prefix_search(line, history)
        return _rest_after(found[0] if found else None, line)

    def handle(
        self, line: str, pos: int, history: History, use_ansi_coloring: bool, cwd: str
    ) -> str:
        if len(line) >= self.min_chars:
            self.current_hint = self._lookup(line, history, cwd)
        else:
            self.current_hint = ""
        return _display(self.style, self.current_hint, use_ansi_coloring)

    def complete_hint(self) -> str:
        return self.current_hint

    def next_hint_token(self) -> str:
        return get_first_token(self.current_hint)

    def with_style(self, style: Style) -> CwdAwareHinter:
        """Set the style the hint is painted in; returns self."""
        self.style = style
        return self

    def with_min_chars(self, min_chars: int) -> CwdAwareHinter:
        """Set how many characters enable hints; returns self."""
        self.min_chars = min_chars
        return self