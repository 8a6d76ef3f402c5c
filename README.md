# reedline

Building blocks for an interactive line editor: editing commands and their
undo grouping, editor events and signals, history stores with search and
up/down navigation, fish-style history hints, and simple syntax
highlighting. The only third-party dependency is `filelock`, used to guard
a shared history file.

## What this package does not do

It contains no line editor that reads from a terminal. There is no key
handling, no keybinding tables, no prompt, no completion menu, no painter
and no command-line program. The types here describe edits, events and
history and compute hints and highlighting; driving a terminal with them is
left to the code that uses them.

## History

`reedline.file_backed_history.FileBackedHistory` keeps a bounded list of
command lines in memory (default capacity `HISTORY_SIZE`, 1000) and can be
tied to a text file with one command per line; newlines inside a command are
stored as `<\n>`. Pending entries are written by `sync()`, by `close()` or
on leaving a `with` block. Writing takes a lock (`<file>.lock`), merges what
other processes wrote meanwhile, and trims the file to the capacity.

```python
from reedline.file_backed_history import FileBackedHistory
from reedline.history_item import HistoryItem
from reedline.history_base import SearchQuery, SearchDirection

with FileBackedHistory.with_file(1000, "history.txt") as history:
    history.save(HistoryItem.from_command_line("ls -l"))
    history.save(HistoryItem.from_command_line("cd /tmp"))
    for item in history.search(SearchQuery.everything(SearchDirection.BACKWARD, None)):
        print(item.id, item.command_line)
```

Empty command lines and repeats of the last entry are not stored. Searches
match the command line by prefix, substring or exact text
(`CommandLineSearch` with a `SearchKind`). Filters the plain file cannot
answer (time, hostname, working directory, exit status) raise
`HistoryFeatureUnsupported`; `update` and `delete` raise it too. Other
failures raise `HistoryError`.

`reedline.sqlite_history.SqliteBackedHistory` stores richer entries —
start timestamp, session id, hostname, working directory, duration, exit
status and JSON-serialisable `more_info` — in an SQLite database, and
supports every filter as well as `update` and `delete`:

```python
from reedline.sqlite_history import SqliteBackedHistory

with SqliteBackedHistory.in_memory() as history:
    saved = history.save(HistoryItem.from_command_line("make test"))
    print(history.load(saved.id).command_line)
```

`SqliteBackedHistory.with_file(path, session, session_timestamp)` opens or
creates a database file. When both a session id and a session timestamp are
given, session-filtered queries return the session's own entries and those
started before the session began.

## Navigating history

`reedline.history_cursor.HistoryCursor` walks a history backwards and
forwards, optionally restricted to a prefix or substring, skipping repeats
of the entry currently shown. Going back stops at the oldest match; going
forward past the newest leaves the cursor empty.

```python
from reedline.history_cursor import HistoryCursor
from reedline.history_base import HistoryNavigationQuery, NavigationKind

cursor = HistoryCursor(HistoryNavigationQuery(NavigationKind.PREFIX_SEARCH, "cd"), None)
cursor.back(history)
print(cursor.string_at_cursor())
```

## Hints

`reedline.hinters.DefaultHinter` suggests the rest of the most recent
history entry that starts with the current line. `CwdAwareHinter` first
looks for such an entry run in the given working directory and falls back to
any entry when none is found or the history cannot filter by directory.
Both can be configured with `with_style` and `with_min_chars`.

```python
from reedline.hinters import DefaultHinter

hinter = DefaultHinter()
shown = hinter.handle("ls", 2, history, False, "/tmp")
full = hinter.complete_hint()
word = hinter.next_hint_token()
```

With `use_ansi_coloring` true the returned hint is wrapped in the escape
sequences of the hinter's style.

## Highlighting

`reedline.styling` provides `Color`, an immutable `Style` (`fg`, `bold`,
`italic`, `paint`), `StyledText` (a list of `(Style, text)` segments with
`raw_string()` and `render()`), and the abstract `Highlighter`.

`reedline.highlighters.ExampleHighlighter` colours the longest known
command found in a line; `SimpleMatchHighlighter` colours every
non-overlapping occurrence of a query.

```python
from reedline.highlighters import SimpleMatchHighlighter

styled = SimpleMatchHighlighter("foo").highlight("foo bar foo", 0)
print(styled.raw_string())
print(styled.render())
```

## Editing commands and events

`reedline.edit_commands` defines `EditCommand` values (an `EditCommandKind`
plus arguments such as `select`, `c` or `text`), `EditCommand.edit_type()`
returning an `EditType`, and `UndoBehavior.create_undo_point_after`, which
decides how consecutive edits are grouped into undo steps.

`reedline.events` defines `ReedlineEvent` (an editor action, possibly
carrying edit commands or nested events) and the `Signal` that ends a line
read: `SUCCESS` with the entered text, `CTRL_C` or `CTRL_D`.

`reedline.external_printer.ExternalPrinter` is a bounded, thread-safe queue
(default capacity 20) for lines printed from other threads while a line is
being edited: `print` blocks when full, `get_line` returns `None` when empty.

## Tests

The test suite uses pytest; install the `test` extra to get it.