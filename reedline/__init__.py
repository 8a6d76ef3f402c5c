"""Line-editor building blocks: edit commands, events, history stores, hints and highlighting."""

__version__ = "0.39.0"

__all__ = [
    "edit_commands",
    "events",
    "external_printer",
    "styling",
    "highlighters",
    "history_item",
    "history_base",
    "file_backed_history",
    "hinters",
    "history_cursor",
    "sqlite_history",
]