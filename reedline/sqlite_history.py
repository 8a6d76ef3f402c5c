"""A history stored in an SQLite database, with context for every command."""

from __future__ import annotations

import contextlib
import json
import os
import sqlite3
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Iterator

from reedline.history_base import (
    History,
    HistoryError,
    SearchDirection,
    SearchKind,
    SearchQuery,
)
from reedline.history_item import HistoryItem, HistoryItemId, HistorySessionId

SQLITE_APPLICATION_ID = 1151497937

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)

_STRICT = " strict" if sqlite3.sqlite_version_info >= (3, 37, 0) else ""

_SCHEMA = f"""
create table if not exists history (
    id integer primary key autoincrement,
    command_line text not null,
    start_timestamp integer,
    session_id integer,
    hostname text,
    cwd text,
    duration_ms integer,
    exit_status integer,
    more_info text
){_STRICT};
create index if not exists idx_history_time on history(start_timestamp);
create index if not exists idx_history_cwd on history(cwd);
create index if not exists idx_history_exit_status on history(exit_status);
create index if not exists idx_history_cmd on history(command_line);
create index if not exists idx_history_cmd on history(session_id);
"""

_SAVE = """
insert into history
       (id, start_timestamp, command_line, session_id, hostname, cwd,
        duration_ms, exit_status, more_info)
values (:id, :start_timestamp, :command_line, :session_id, :hostname, :cwd,
        :duration_ms, :exit_status, :more_info)
on conflict (id) do update set
    start_timestamp = excluded.start_timestamp,
    command_line = excluded.command_line,
    session_id = excluded.session_id,
    hostname = excluded.hostname,
    cwd = excluded.cwd,
    duration_ms = excluded.duration_ms,
    exit_status = excluded.exit_status,
    more_info = excluded.more_info
"""


@contextlib.contextmanager
def _db_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as err:
        raise HistoryError(f"history database error: {err!r}") from err


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // _MILLISECOND


def _from_millis(millis: int) -> datetime:
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        return datetime.now(timezone.utc)


def _row_to_item(row: sqlite3.Row) -> HistoryItem:
    more_info = row["more_info"]
    if more_info is not None:
        try:
            more_info = json.loads(more_info)
        except ValueError as err:
            raise HistoryError(f"could not deserialize more_info: {err}") from err
    timestamp = row["start_timestamp"]
    session = row["session_id"]
    duration = row["duration_ms"]
    return HistoryItem(
        command_line=row["command_line"],
        id=HistoryItemId(row["id"]),
        start_timestamp=None if timestamp is None else _from_millis(timestamp),
        session_id=None if session is None else HistorySessionId(session),
        hostname=row["hostname"],
        cwd=row["cwd"],
        duration=None if duration is None else timedelta(milliseconds=duration),
        exit_status=row["exit_status"],
        more_info=more_info,
    )


class SqliteBackedHistory(History):
    """History kept in an SQLite database.

    Besides the command line it stores timestamp, session, hostname, working
    directory, duration, exit status and arbitrary JSON-serialisable data.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        session: HistorySessionId | None = None,
        session_timestamp: datetime | None = None,
    ) -> None:
        """Take over ``connection``, initialising the database if needed."""
        connection.isolation_level = None
        connection.row_factory = sqlite3.Row
        with _db_errors():
            connection.execute("pragma journal_mode = wal")
            connection.execute("pragma synchronous = normal")
            connection.execute("pragma mmap_size = 1000000000")
            connection.execute("pragma foreign_keys = on")
            connection.execute(f"pragma application_id = {SQLITE_APPLICATION_ID}")
            version = connection.execute("pragma user_version").fetchone()[0]
        if version != 0:
            raise HistoryError(f"Unknown database version {version}")
        with _db_errors():
            connection.executescript(_SCHEMA)
        self._db = connection
        self._session = session
        self._session_timestamp = session_timestamp

    @classmethod
    def with_file(
        cls,
        file: str | os.PathLike[str],
        session: HistorySessionId | None = None,
        session_timestamp: datetime | None = None,
    ) -> SqliteBackedHistory:
        """Open or create the database at ``file``, creating parent directories."""
        path = Path(file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise HistoryError(str(err)) from err
        with _db_errors():
            connection = sqlite3.connect(path)
        return cls(connection, session, session_timestamp)

    @classmethod
    def in_memory(cls) -> SqliteBackedHistory:
        """A history held in an in-memory database."""
        with _db_errors():
            connection = sqlite3.connect(":memory:")
        return cls(connection, None, None)

    def save(self, item: HistoryItem) -> HistoryItem:
        """Insert ``item``, or update the row with its id if it has one."""
        params = {
            "id": None if item.id is None else item.id.value,
            "start_timestamp": None
            if item.start_timestamp is None
            else _to_millis(item.start_timestamp),
            "command_line": item.command_line,
            "session_id": None if item.session_id is None else item.session_id.value,
            "hostname": item.hostname,
            "cwd": item.cwd,
            "duration_ms": None
            if item.duration is None
            else item.duration // _MILLISECOND,
            "exit_status": item.exit_status,
            "more_info": None if item.more_info is None else json.dumps(item.more_info),
        }
        with _db_errors():
            cursor = self._db.execute(_SAVE, params)
        new_id = item.id.value if item.id is not None else cursor.lastrowid
        return replace(item, id=HistoryItemId(new_id))

    def load(self, item_id: HistoryItemId) -> HistoryItem:
        with _db_errors():
            row = self._db.execute(
                "select * from history where id = :id", {"id": item_id.value}
            ).fetchone()
        if row is None:
            raise HistoryError(f"history item {item_id} does not exist")
        return _row_to_item(row)

    def count(self, query: SearchQuery) -> int:
        sql, params = self._construct_query(query, "coalesce(count(*), 0)")
        with _db_errors():
            return self._db.execute(sql, params).fetchone()[0]

    def search(self, query: SearchQuery) -> list[HistoryItem]:
        sql, params = self._construct_query(query, "*")
        with _db_errors():
            rows = self._db.execute(sql, params).fetchall()
        return [_row_to_item(row) for row in rows]

    def update(
        self, item_id: HistoryItemId, updater: Callable[[HistoryItem], HistoryItem]
    ) -> None:
        self.save(updater(self.load(item_id)))

    def clear(self) -> None:
        """Delete every item and vacuum so the data is really gone."""
        with _db_errors():
            self._db.execute("delete from history")
            self._db.execute("VACUUM")

    def delete(self, item_id: HistoryItemId) -> None:
        with _db_errors():
            cursor = self._db.execute(
                "delete from history where id = ?", (item_id.value,)
            )
        if cursor.rowcount == 0:
            raise HistoryError("Could not find item")

    def sync(self) -> None:
        """Nothing to do: every change is written immediately."""

    def session(self) -> HistorySessionId | None:
        return self._session

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def __enter__(self) -> SqliteBackedHistory:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _construct_query(
        self, query: SearchQuery, select_expression: str
    ) -> tuple[str, dict[str, Any]]:
        ascending = query.direction is SearchDirection.FORWARD
        order = "asc" if ascending else "desc"
        wheres: list[str] = []
        params: dict[str, Any] = {}

        if query.start_time is not None:
            wheres.append(
                "start_timestamp > :start_time"
                if ascending
                else "start_timestamp < :start_time"
            )
            params["start_time"] = _to_millis(query.start_time)
        if query.end_time is not None:
            wheres.append(
                ":end_time >= start_timestamp"
                if ascending
                else ":end_time <= start_timestamp"
            )
            params["end_time"] = _to_millis(query.end_time)
        if query.start_id is not None:
            wheres.append("id > :start_id" if ascending else "id < :start_id")
            params["start_id"] = query.start_id.value
        if query.end_id is not None:
            wheres.append(":end_id >= id" if ascending else ":end_id <= id")
            params["end_id"] = query.end_id.value

        limit = ""
        if query.limit is not None:
            params["limit"] = query.limit
            limit = "limit :limit"

        flt = query.filter
        if flt.command_line is not None:
            search = flt.command_line
            if search.kind is SearchKind.EXACT:
                wheres.append("command_line == :command_line")
            elif search.kind is SearchKind.PREFIX:
                wheres.append("instr(command_line, :command_line) == 1")
            else:
                wheres.append("instr(command_line, :command_line) >= 1")
            params["command_line"] = search.text
        if flt.not_command_line is not None:
            wheres.append("command_line != :not_cmd")
            params["not_cmd"] = flt.not_command_line
        if flt.hostname is not None:
            wheres.append("hostname = :hostname")
            params["hostname"] = flt.hostname
        if flt.cwd_exact is not None:
            wheres.append("cwd = :cwd")
            params["cwd"] = flt.cwd_exact
        if flt.cwd_prefix is not None:
            wheres.append("cwd like :cwd_like")
            params["cwd_like"] = f"{flt.cwd_prefix}%"
        if flt.exit_successful is not None:
            wheres.append("exit_status = 0" if flt.exit_successful else "exit_status != 0")
        if flt.session is not None and self._session_timestamp is not None:
            # Rows of our own session, or run before our session started.
            wheres.append(
                "(session_id = :session_id OR start_timestamp < :session_timestamp)"
            )
            params["session_id"] = flt.session.value
            params["session_timestamp"] = _to_millis(self._session_timestamp)

        where = " and ".join(wheres) if wheres else "1"
        sql = (
            f"SELECT {select_expression} FROM history "
            f"WHERE ({where}) ORDER BY id {order} {limit}"
        )
        return sql, params