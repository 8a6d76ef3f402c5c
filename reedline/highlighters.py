"""Ready-made highlighters: keyword matching and query matching."""

from __future__ import annotations

from reedline.styling import Color, Highlighter, Style, StyledText

DEFAULT_BUFFER_MATCH_COLOR = Color.GREEN
DEFAULT_BUFFER_NEUTRAL_COLOR = Color.WHITE
DEFAULT_BUFFER_NOT_MATCH_COLOR = Color.RED


def _byte_len(s: str) -> int:
    return len(s.encode("utf-8"))


class ExampleHighlighter(Highlighter):
    """Highlights the longest known command found in the line."""

    def __init__(self, external_commands: list[str] | None = None) -> None:
        self.external_commands = list(external_commands or [])
        self.match_color = DEFAULT_BUFFER_MATCH_COLOR
        self.not_match_color = DEFAULT_BUFFER_NOT_MATCH_COLOR
        self.neutral_color = DEFAULT_BUFFER_NEUTRAL_COLOR

    def highlight(self, line: str, cursor: int) -> StyledText:
        styled = StyledText()
        matches = [c for c in self.external_commands if c in line]
        if matches:
            longest = ""
            for item in matches:
                if _byte_len(item) > _byte_len(longest):
                    longest = item
            if longest:
                before, after = line.split(longest, 1)
            else:
                before, after = "", line
            styled.push((Style().fg(self.neutral_color), before))
            styled.push((Style().fg(self.match_color), longest))
            styled.push((Style().bold().fg(self.neutral_color), after))
        elif not self.external_commands:
            styled.push((Style().fg(self.neutral_color), line))
        else:
            styled.push((Style().fg(self.not_match_color), line))
        return styled

    def change_colors(
        self, match_color: Color, notmatch_color: Color, neutral_color: Color
    ) -> None:
        """Use different colours for matches, non-matches and neutral text."""
        self.match_color = match_color
        self.not_match_color = notmatch_color
        self.neutral_color = neutral_color


class SimpleMatchHighlighter(Highlighter):
    """Highlights every exact, non-overlapping occurrence of a query."""

    def __init__(self, query: str = "") -> None:
        self.query = query
        self.neutral_style = Style()
        self.match_style = Style().fg(Color.GREEN)

    def highlight(self, line: str, cursor: int) -> StyledText:
        styled = StyledText()
        if not self.query:
            styled.push((self.neutral_style, line))
            return styled
        next_idx = 0
        idx = line.find(self.query)
        while idx != -1:
            if idx != next_idx:
                styled.push((self.neutral_style, line[next_idx:idx]))
            styled.push((self.match_style, self.query))
            next_idx = idx + len(self.query)
            idx = line.find(self.query, next_idx)
        if next_idx != len(line):
            styled.push((self.neutral_style, line[next_idx:]))
        return styled

    def with_query(self, query: str) -> SimpleMatchHighlighter:
        """Set the string to match; returns self for chaining."""
        self.query = query
        return self

    def with_match_style(self, match_style: Style) -> SimpleMatchHighlighter:
        """Set the style of matches; returns self for chaining."""
        self.match_style = match_style
        return self

    def with_neutral_style(self, neutral_style: Style) -> SimpleMatchHighlighter:
        """Set the style of non-matching text; returns self for chaining."""
        self.neutral_style = neutral_style
        return self