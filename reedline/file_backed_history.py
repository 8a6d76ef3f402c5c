"""A history kept in memory and, optionally, in a newline separated text file."""

from __future__ import annotations

import itertools
import os
from collections import deque
from pathlib import Path
from typing import Callable, Iterable, Iterator

from filelock import FileLock

from reedline.history_base import (
    History,
    HistoryError,
    HistoryFeatureUnsupported,
    SearchDirection,
    SearchKind,
    SearchQuery,
)
from reedline.history_item import HistoryItem, HistoryItemId, HistorySessionId

HISTORY_SIZE = 1000
"""Default capacity of a :class:`FileBackedHistory`."""

NEWLINE_ESCAPE = "<\\n>"

_USIZE_MAX = 2**64 - 1
_NAME = "FileBackedHistory"


def _encode_entry(entry: str) -> str:
    return entry.replace("\n", NEWLINE_ESCAPE)


def _decode_entry(line: str) -> str:
    return line.replace(NEWLINE_ESCAPE, "\n")


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _construct_entry(item_id: HistoryItemId | None, command_line: str) -> HistoryItem:
    return HistoryItem(command_line=command_line, id=item_id)


class FileBackedHistory(History):
    """History of command lines only, with an optional backing file.

    The file holds one command per line; newlines inside commands are escaped.
    New entries are written when :meth:`sync` or :meth:`close` is called, or
    when the object is garbage collected, and the file never grows beyond the
    capacity.
    """

    def __init__(self, capacity: int = HISTORY_SIZE) -> None:
        if capacity < 0:
            raise ValueError("History capacity cannot be negative")
        if capacity >= _USIZE_MAX:
            raise HistoryError("History capacity too large to be addressed safely")
        self.capacity = capacity
        self._entries: deque[str] = deque()
        self._file: Path | None = None
        self._len_on_disk = 0
        self._session: HistorySessionId | None = None
        self._closed = False

    @classmethod
    def with_file(cls, capacity: int, file: str | os.PathLike[str]) -> FileBackedHistory:
        """Create a history bound to ``file``, reading it if it exists.

        Creates the file and any missing parent directories.
        """
        history = cls(capacity)
        path = Path(file)
        path.parent.mkdir(parents=True, exist_ok=True)
        history._file = path
        history.sync()
        return history

    @property
    def file(self) -> Path | None:
        """The backing file, if any."""
        return self._file

    def save(self, item: HistoryItem) -> HistoryItem:
        """Append the command unless it is empty or repeats the last entry."""
        entry = item.command_line
        last = self._entries[-1] if self._entries else None
        entry_id = None
        if last != entry and entry and self.capacity > 0:
            if len(self._entries) == self.capacity:
                self._entries.popleft()
                self._len_on_disk = max(0, self._len_on_disk - 1)
            self._entries.append(entry)
            entry_id = HistoryItemId(len(self._entries) - 1)
        return _construct_entry(entry_id, entry)

    def load(self, item_id: HistoryItemId) -> HistoryItem:
        index = item_id.value
        if not 0 <= index < len(self._entries):
            raise HistoryError("Item does not exist")
        return _construct_entry(item_id, self._entries[index])

    def count(self, query: SearchQuery) -> int:
        return len(self.search(query))

    def search(self, query: SearchQuery) -> list[HistoryItem]:
        if query.start_time is not None or query.end_time is not None:
            raise HistoryFeatureUnsupported(_NAME, "filtering by time")
        flt = query.filter
        if any(
            value is not None
            for value in (flt.hostname, flt.cwd_exact, flt.cwd_prefix, flt.exit_successful)
        ):
            raise HistoryFeatureUnsupported(_NAME, "filtering by extra info")

        start = query.start_id.value if query.start_id is not None else None
        end = query.end_id.value if query.end_id is not None else None
        backward = query.direction is SearchDirection.BACKWARD
        min_id, max_id = (end, start) if backward else (start, end)

        total = len(self._entries)
        lowest = min_id + 1 if min_id is not None else 0
        highest = max_id - 1 if max_id is not None else total - 1
        if highest < 0 or lowest > total - 1 or lowest < 0:
            return []

        span = highest - lowest + 1
        limit = span if query.limit is None else min(span, query.limit)
        window_end = lowest + span if span >= 0 else None
        window = list(enumerate(self._entries))[lowest:window_end]
        if backward:
            window.reverse()

        matches = self._matching(query, window)
        if limit < 0:
            return list(matches)
        return list(itertools.islice(matches, limit))

    @staticmethod
    def _matching(
        query: SearchQuery, window: Iterable[tuple[int, str]]
    ) -> Iterator[HistoryItem]:
        search = query.filter.command_line
        skip = query.filter.not_command_line
        for index, cmd in window:
            if search is not None:
                if search.kind is SearchKind.PREFIX and not cmd.startswith(search.text):
                    continue
                if search.kind is SearchKind.SUBSTRING and search.text not in cmd:
                    continue
                if search.kind is SearchKind.EXACT and cmd != search.text:
                    continue
            if skip is not None and cmd == skip:
                continue
            yield _construct_entry(HistoryItemId(index), cmd)

    def update(
        self, item_id: HistoryItemId, updater: Callable[[HistoryItem], HistoryItem]
    ) -> None:
        raise HistoryFeatureUnsupported(_NAME, "updating entries")

    def clear(self) -> None:
        """Forget every entry and remove the backing file."""
        self._entries.clear()
        self._len_on_disk = 0
        if self._file is not None:
            try:
                self._file.unlink()
            except OSError as err:
                raise HistoryError(f"could not remove history file: {err}") from err

    def delete(self, item_id: HistoryItemId) -> None:
        raise HistoryFeatureUnsupported(_NAME, "removing entries")

    def sync(self) -> None:
        """Write unwritten entries to the file, merging what others wrote.

        When the file would exceed the capacity the oldest entries are dropped.
        """
        path = self._file
        if path is None:
            return
        own_entries = list(self._entries)[self._len_on_disk :]
        path.parent.mkdir(parents=True, exist_ok=True)

        with FileLock(f"{path}.lock"):
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
            with open(fd, "r+b") as handle:
                from_file = [
                    _decode_entry(line)
                    for line in _split_lines(handle.read().decode("utf-8"))
                ]
                truncate = len(from_file) + len(own_entries) > self.capacity
                if truncate:
                    keep = max(0, self.capacity - len(own_entries))
                    foreign = from_file[len(from_file) - keep :]
                    handle.seek(0)
                    to_write = foreign + own_entries
                else:
                    foreign = from_file
                    handle.seek(0, os.SEEK_END)
                    to_write = own_entries
                handle.write(
                    b"".join(_encode_entry(line).encode("utf-8") + b"\n" for line in to_write)
                )
                handle.flush()
                if truncate:
                    handle.truncate(handle.tell())

        self._entries = deque(foreign + own_entries)
        self._len_on_disk = len(self._entries)

    def session(self) -> HistorySessionId | None:
        return self._session

    def close(self) -> None:
        """Write pending entries to the backing file."""
        self.sync()
        self._closed = True

    def __enter__(self) -> FileBackedHistory:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        try:
            self.sync()
        except Exception:
            pass