import threading
from datetime import datetime, timedelta, timezone

import pytest

from reedline.file_backed_history import HISTORY_SIZE, FileBackedHistory
from reedline.history_base import (
    CommandLineSearch,
    HistoryError,
    HistoryFeatureUnsupported,
    SearchDirection,
    SearchFilter,
    SearchKind,
    SearchQuery,
)
from reedline.history_item import HistoryItem, HistoryItemId, HistorySessionId


def create_item(session, cwd, cmd, exit_status):
    return HistoryItem(
        command_line=cmd,
        session_id=HistorySessionId(session),
        hostname="foohost",
        cwd=cwd,
        duration=timedelta(milliseconds=1000),
        exit_status=exit_status,
    )


def create_filled_example_history():
    history = FileBackedHistory()
    history.save(create_item(1, "/", "dummy", 0))
    history.save(create_item(1, "/home/me", "cd ~/Downloads", 0))
    history.save(create_item(1, "/home/me/Downloads", "unzp foo.zip", 1))
    history.save(create_item(1, "/home/me/Downloads", "unzip foo.zip", 0))
    history.save(create_item(1, "/home/me/Downloads", "cd foo", 0))
    history.save(create_item(1, "/home/me/Downloads/foo", "ls", 0))
    history.save(create_item(1, "/home/me/Downloads/foo", "ls -alh", 0))
    history.save(create_item(1, "/home/me/Downloads/foo", "cat x.txt", 0))
    history.save(create_item(1, "/home/me", "cd /etc/nginx", 0))
    history.save(create_item(1, "/etc/nginx", "ls -l", 0))
    history.save(create_item(1, "/etc/nginx", "vim nginx.conf", 0))
    history.save(create_item(1, "/etc/nginx", "vim htpasswd", 0))
    history.save(create_item(1, "/etc/nginx", "cat nginx.conf", 0))
    return history


def assert_search_returned(history, res, wanted):
    assert res == [history.load(HistoryItemId(i)) for i in wanted]


def text_search(kind, text):
    return SearchFilter.from_text_search(CommandLineSearch(kind, text), None)


def all_texts(history):
    return [
        e.command_line
        for e in history.search(SearchQuery.everything(SearchDirection.FORWARD, None))
    ]


def add_entries(history, entries):
    for entry in entries:
        history.save(HistoryItem.from_command_line(entry))


def test_count_all():
    assert create_filled_example_history().count_all() == 13


def test_get_latest():
    history = create_filled_example_history()
    res = history.search(SearchQuery.last_with_search(SearchFilter.anything(None)))
    assert_search_returned(history, res, [12])


def test_get_earliest():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.FORWARD, None)
    query.limit = 1
    assert_search_returned(history, history.search(query), [0])


def test_search_prefix():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.BACKWARD, None)
    query.filter = text_search(SearchKind.PREFIX, "ls ")
    assert_search_returned(history, history.search(query), [9, 6])


def test_search_prefix_is_case_sensitive():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.BACKWARD, None)
    query.filter = text_search(SearchKind.PREFIX, "LS ")
    assert history.search(query) == []


def test_search_includes():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.FORWARD, None)
    query.filter = text_search(SearchKind.SUBSTRING, "foo.zip")
    assert_search_returned(history, history.search(query), [2, 3])


def test_search_includes_limit():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.FORWARD, None)
    query.filter = text_search(SearchKind.SUBSTRING, "c")
    query.limit = 2
    assert_search_returned(history, history.search(query), [1, 4])


def test_search_exact():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.FORWARD, None)
    query.filter = text_search(SearchKind.EXACT, "ls")
    assert_search_returned(history, history.search(query), [5])


def test_search_with_start_id_backward():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.BACKWARD, None)
    query.start_id = HistoryItemId(3)
    query.limit = 1
    assert_search_returned(history, history.search(query), [2])


def test_clear_history():
    history = create_filled_example_history()
    assert history.count_all() != 0
    history.clear()
    assert history.count_all() == 0


def test_clear_history_with_backing_file(tmp_path):
    path = tmp_path / "test-history.txt"
    with FileBackedHistory.with_file(100, path) as history:
        history.save(create_item(1, "/home/me", "cd ~/Downloads", 0))
        history.save(create_item(1, "/home/me/Downloads", "unzp foo.zip", 1))
        assert history.count_all() == 2

    with FileBackedHistory.with_file(100, path) as history:
        assert history.count_all() == 2
        history.clear()
        assert history.count_all() == 0

    with FileBackedHistory.with_file(100, path) as history:
        assert history.count_all() == 0


def test_history_size_zero():
    history = FileBackedHistory(0)
    saved = history.save(create_item(1, "/home/me", "cd ~/Downloads", 0))
    assert saved.id is None
    assert history.count_all() == 0
    history.sync()
    history.clear()
    assert history.count_all() == 0


def test_create_file_backed_history():
    with pytest.raises(HistoryError):
        FileBackedHistory(2**64 - 1)
    assert FileBackedHistory(HISTORY_SIZE).capacity == HISTORY_SIZE


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        FileBackedHistory(-1)


def test_appends_only_unique():
    history = FileBackedHistory()
    add_entries(history, ["unique_old", "test", "test", "unique"])
    assert history.count_all() == 3


def test_empty_entries_are_not_saved():
    history = FileBackedHistory()
    assert history.save(HistoryItem.from_command_line("")).id is None
    assert history.count_all() == 0


def test_save_assigns_ids_and_load_returns_them():
    history = FileBackedHistory()
    first = history.save(HistoryItem.from_command_line("a"))
    second = history.save(HistoryItem.from_command_line("b"))
    assert first.id == HistoryItemId(0)
    assert second.id == HistoryItemId(1)
    assert history.load(HistoryItemId(1)).command_line == "b"


def test_load_missing_item_raises():
    history = FileBackedHistory()
    with pytest.raises(HistoryError):
        history.load(HistoryItemId(0))


def test_capacity_drops_oldest():
    history = FileBackedHistory(2)
    add_entries(history, ["one", "two", "three"])
    assert all_texts(history) == ["two", "three"]


def test_time_filter_unsupported():
    history = create_filled_example_history()
    query = SearchQuery.everything(SearchDirection.FORWARD, None)
    query.start_time = datetime(2020, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(HistoryFeatureUnsupported) as info:
        history.search(query)
    assert info.value.feature == "filtering by time"


def test_cwd_filter_unsupported():
    history = create_filled_example_history()
    with pytest.raises(HistoryFeatureUnsupported) as info:
        history.search(SearchQuery.last_with_prefix_and_cwd("ls", "/etc/nginx", None))
    assert info.value.feature == "filtering by extra info"


def test_update_and_delete_unsupported():
    history = create_filled_example_history()
    with pytest.raises(HistoryFeatureUnsupported):
        history.update(HistoryItemId(1), lambda item: item)
    with pytest.raises(HistoryFeatureUnsupported):
        history.delete(HistoryItemId(1))


def test_session_is_none():
    assert FileBackedHistory().session() is None


def test_writes_to_new_file(tmp_path):
    path = tmp_path / "nested_path" / ".history"
    entries = ["test", "text", "more test text"]
    with FileBackedHistory.with_file(5, path) as history:
        add_entries(history, entries)
    with FileBackedHistory.with_file(5, path) as reading:
        assert all_texts(reading) == entries


def test_persists_newlines_in_entries(tmp_path):
    path = tmp_path / ".history"
    entries = [
        "test",
        "multiline\nentry\nunix",
        "multiline\r\nentry\r\nwindows",
        "more test text",
    ]
    with FileBackedHistory.with_file(5, path) as history:
        add_entries(history, entries)
    with FileBackedHistory.with_file(5, path) as reading:
        assert all_texts(reading) == entries
    assert path.read_text(encoding="utf-8").count("\n") == len(entries)


def test_truncates_file_to_capacity(tmp_path):
    path = tmp_path / ".history"
    capacity = 5
    with FileBackedHistory.with_file(capacity, path) as history:
        add_entries(history, ["test 1", "test 2"])
    with FileBackedHistory.with_file(capacity, path) as history:
        add_entries(history, ["test 3", "test 4"])
        assert all_texts(history) == ["test 1", "test 2", "test 3", "test 4"]
    expected = ["test 4", "test 5", "test 6", "test 7", "test 8"]
    with FileBackedHistory.with_file(capacity, path) as history:
        add_entries(history, ["test 5", "test 6", "test 7", "test 8"])
        assert all_texts(history) == expected
    with FileBackedHistory.with_file(capacity, path) as reading:
        assert all_texts(reading) == expected


def test_truncates_too_large_file(tmp_path):
    path = tmp_path / ".history"
    with FileBackedHistory.with_file(10, path) as history:
        add_entries(history, [f"test {i}" for i in range(1, 9)])
    expected = ["test 4", "test 5", "test 6", "test 7", "test 8"]
    with FileBackedHistory.with_file(5, path) as history:
        assert all_texts(history) == expected
    with FileBackedHistory.with_file(5, path) as reading:
        assert all_texts(reading) == expected


def test_concurrent_histories_do_not_erase_each_other(tmp_path):
    path = tmp_path / ".history"
    capacity = 7
    with FileBackedHistory.with_file(capacity, path) as history:
        add_entries(history, ["test 1", "test 2", "test 3", "test 4", "test 5"])
    with FileBackedHistory.with_file(capacity, path) as hist_a:
        with FileBackedHistory.with_file(capacity, path) as hist_b:
            add_entries(hist_b, ["B1", "B2", "B3"])
        add_entries(hist_a, ["A1", "A2", "A3"])
    with FileBackedHistory.with_file(capacity, path) as reading:
        assert all_texts(reading) == ["test 5", "B1", "B2", "B3", "A1", "A2", "A3"]


def test_concurrent_histories_are_threadsafe(tmp_path):
    path = tmp_path / ".history"
    num_threads = 8
    capacity = 2 * num_threads + 1
    with FileBackedHistory.with_file(capacity, path) as history:
        add_entries(history, [f"initial {i}" for i in range(capacity)])

    errors = []

    def work(i):
        try:
            with FileBackedHistory.with_file(capacity, path) as hist:
                hist.save(HistoryItem.from_command_line(f"A{i}"))
                hist.sync()
                hist.save(HistoryItem.from_command_line(f"B{i}"))
        except Exception as err:  # collected and asserted on below
            errors.append(err)

    threads = [threading.Thread(target=work, args=(i,)) for i in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    with FileBackedHistory.with_file(capacity, path) as reading:
        actual = all_texts(reading)
    assert f"initial {capacity - 1}" in actual
    for i in range(num_threads):
        assert f"A{i}" in actual
        assert f"B{i}" in actual