"""Stateful up/down navigation through a history."""

from __future__ import annotations

from dataclasses import replace

from reedline.history_base import (
    CommandLineSearch,
    History,
    HistoryNavigationQuery,
    NavigationKind,
    SearchDirection,
    SearchFilter,
    SearchKind,
    SearchQuery,
)
from reedline.history_item import HistoryItem, HistorySessionId


class HistoryCursor:
    """Walks a history one entry at a time according to a navigation query.

    Consecutive entries with the same command line are skipped.
    """

    def __init__(
        self, query: HistoryNavigationQuery, session: HistorySessionId | None = None
    ) -> None:
        self.query = query
        self.session = session
        self.skip_dupes = True
        self._current: HistoryItem | None = None

    def back(self, history: History) -> None:
        """Move to the previous matching entry; stays put at the oldest one."""
        self._navigate(history, SearchDirection.BACKWARD)

    def forward(self, history: History) -> None:
        """Move to the next matching entry; past the newest the cursor is empty."""
        self._navigate(history, SearchDirection.FORWARD)

    def _search_filter(self) -> SearchFilter:
        kind = self.query.kind
        if kind is NavigationKind.PREFIX_SEARCH:
            flt = SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.PREFIX, self.query.text), self.session
            )
        elif kind is NavigationKind.SUBSTRING_SEARCH:
            flt = SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.SUBSTRING, self.query.text), self.session
            )
        else:
            flt = SearchFilter.anything(self.session)
        if self.skip_dupes and self._current is not None:
            flt = replace(flt, not_command_line=self._current.command_line)
        return flt

    def _navigate(self, history: History, direction: SearchDirection) -> None:
        if direction is SearchDirection.FORWARD and self._current is None:
            # Without a starting point going forward, we are already at the end.
            return
        start_id = self._current.id if self._current is not None else None
        found = history.search(
            SearchQuery(
                direction=direction,
                start_id=start_id,
                limit=1,
                filter=self._search_filter(),
            )
        )
        if len(found) == 1:
            self._current = found[0]
        elif direction is SearchDirection.FORWARD:
            self._current = None

    def string_at_cursor(self) -> str | None:
        """The command line under the cursor, if any."""
        if self._current is None:
            return None
        return self._current.command_line

    def get_navigation(self) -> HistoryNavigationQuery:
        """The navigation query in use."""
        return self.query