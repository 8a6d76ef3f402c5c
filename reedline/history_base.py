"""Queries, filters and the interface every history store implements."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from reedline.history_item import HistoryItem, HistoryItemId, HistorySessionId


class HistoryError(Exception):
    """A history store could not carry out a request."""


class HistoryFeatureUnsupported(HistoryError):
    """The history store does not offer the requested feature."""

    def __init__(self, history: str, feature: str) -> None:
        super().__init__(f"{history} does not support {feature}")
        self.history = history
        self.feature = feature


class NavigationKind(enum.Enum):
    """Ways of browsing through a history."""

    NORMAL = "Normal"
    PREFIX_SEARCH = "PrefixSearch"
    SUBSTRING_SEARCH = "SubstringSearch"


@dataclass(frozen=True)
class HistoryNavigationQuery:
    """A browsing mode.

    ``buffer`` keeps the state of manual entry for NORMAL browsing; ``text``
    is the prefix or substring searched for by the search modes.
    """

    kind: NavigationKind
    text: str | None = None
    buffer: Any = None

    def __post_init__(self) -> None:
        if self.kind is NavigationKind.NORMAL:
            if self.text is not None:
                raise ValueError("normal navigation takes no search text")
        elif not isinstance(self.text, str):
            raise ValueError(f"{self.kind.value} needs a search string")


class SearchKind(enum.Enum):
    """How a command line is compared with the searched text."""

    PREFIX = "Prefix"
    SUBSTRING = "Substring"
    EXACT = "Exact"


@dataclass(frozen=True)
class CommandLineSearch:
    """Search on the command line content."""

    kind: SearchKind
    text: str


class SearchDirection(enum.Enum):
    """Order in which a query walks the history."""

    BACKWARD = "Backward"
    FORWARD = "Forward"


@dataclass
class SearchFilter:
    """Additional conditions an item must meet to be returned.

    ``not_command_line`` skips items equal to the value currently shown.
    """

    command_line: CommandLineSearch | None = None
    not_command_line: str | None = None
    hostname: str | None = None
    cwd_exact: str | None = None
    cwd_prefix: str | None = None
    exit_successful: bool | None = None
    session: HistorySessionId | None = None

    @classmethod
    def from_text_search(
        cls, cmd: CommandLineSearch, session: HistorySessionId | None = None
    ) -> SearchFilter:
        """Filter on the command line only."""
        return cls(command_line=cmd, session=session)

    @classmethod
    def from_text_search_cwd(
        cls,
        cwd: str,
        cmd: CommandLineSearch,
        session: HistorySessionId | None = None,
    ) -> SearchFilter:
        """Filter on the command line and the exact working directory."""
        return cls(command_line=cmd, cwd_exact=cwd, session=session)

    @classmethod
    def anything(cls, session: HistorySessionId | None = None) -> SearchFilter:
        """Filter that lets every item of the session through."""
        return cls(session=session)


@dataclass
class SearchQuery:
    """A query against a history.

    Time and id bounds are exclusive starts and inclusive ends, taken in the
    query's direction.
    """

    direction: SearchDirection
    start_time: datetime | None = None
    end_time: datetime | None = None
    start_id: HistoryItemId | None = None
    end_id: HistoryItemId | None = None
    limit: int | None = None
    filter: SearchFilter = field(default_factory=SearchFilter)

    @classmethod
    def all_that_contain_rev(cls, contains: str) -> SearchQuery:
        """All items containing ``contains``, newest first."""
        return cls(
            direction=SearchDirection.BACKWARD,
            filter=SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.SUBSTRING, contains), None
            ),
        )

    @classmethod
    def last_with_search(cls, filter: SearchFilter) -> SearchQuery:
        """The most recent item matching ``filter``."""
        return cls(direction=SearchDirection.BACKWARD, limit=1, filter=filter)

    @classmethod
    def last_with_prefix(
        cls, prefix: str, session: HistorySessionId | None = None
    ) -> SearchQuery:
        """The most recent item starting with ``prefix``."""
        return cls.last_with_search(
            SearchFilter.from_text_search(
                CommandLineSearch(SearchKind.PREFIX, prefix), session
            )
        )

    @classmethod
    def last_with_prefix_and_cwd(
        cls, prefix: str, cwd: str, session: HistorySessionId | None = None
    ) -> SearchQuery:
        """The most recent item starting with ``prefix`` run in ``cwd``."""
        return cls.last_with_search(
            SearchFilter.from_text_search_cwd(
                cwd, CommandLineSearch(SearchKind.PREFIX, prefix), session
            )
        )

    @classmethod
    def everything(
        cls, direction: SearchDirection, session: HistorySessionId | None = None
    ) -> SearchQuery:
        """Every item, walked in ``direction``."""
        return cls(direction=direction, filter=SearchFilter.anything(session))


class History(abc.ABC):
    """A store of run commands: a text file, a database or memory."""

    @abc.abstractmethod
    def save(self, item: HistoryItem) -> HistoryItem:
        """Store ``item``; a new id is assigned when it has none."""

    @abc.abstractmethod
    def load(self, item_id: HistoryItemId) -> HistoryItem:
        """Return the item with ``item_id``."""

    @abc.abstractmethod
    def count(self, query: SearchQuery) -> int:
        """Number of items matching ``query``."""

    def count_all(self) -> int:
        """Total number of items."""
        return self.count(SearchQuery.everything(SearchDirection.FORWARD, None))

    @abc.abstractmethod
    def search(self, query: SearchQuery) -> list[HistoryItem]:
        """Items matching ``query`` in the query's order."""

    @abc.abstractmethod
    def update(
        self, item_id: HistoryItemId, updater: Callable[[HistoryItem], HistoryItem]
    ) -> None:
        """Replace an item with what ``updater`` makes of it."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Delete every item."""

    @abc.abstractmethod
    def delete(self, item_id: HistoryItemId) -> None:
        """Remove one item."""

    @abc.abstractmethod
    def sync(self) -> None:
        """Make sure the history is written to its backing store."""

    @abc.abstractmethod
    def session(self) -> HistorySessionId | None:
        """The id of the current session, if any."""