"""Signals returned by a line read and the events that drive the editor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from reedline.edit_commands import EditCommand


class SignalKind(enum.Enum):
    """Ways a line read can end."""

    SUCCESS = "Success"
    CTRL_C = "CtrlC"
    CTRL_D = "CtrlD"


@dataclass(frozen=True)
class Signal:
    """Outcome of reading a line; ``content`` is set only for SUCCESS."""

    kind: SignalKind
    content: str | None = None

    def __post_init__(self) -> None:
        if self.kind is SignalKind.SUCCESS:
            if not isinstance(self.content, str):
                raise ValueError("a successful signal needs the entered text")
        elif self.content is not None:
            raise ValueError(f"{self.kind.value} carries no content")


class ReedlineEventKind(enum.Enum):
    """Every action the editor can be asked to perform."""

    NONE = "None"
    HISTORY_HINT_COMPLETE = "HistoryHintComplete"
    HISTORY_HINT_WORD_COMPLETE = "HistoryHintWordComplete"
    CTRL_D = "CtrlD"
    CTRL_C = "CtrlC"
    CLEAR_SCREEN = "ClearScreen"
    CLEAR_SCROLLBACK = "ClearScrollback"
    ENTER = "Enter"
    SUBMIT = "Submit"
    SUBMIT_OR_NEWLINE = "SubmitOrNewline"
    ESC = "Esc"
    MOUSE = "Mouse"
    RESIZE = "Resize"
    EDIT = "Edit"
    REPAINT = "Repaint"
    PREVIOUS_HISTORY = "PreviousHistory"
    UP = "Up"
    DOWN = "Down"
    RIGHT = "Right"
    LEFT = "Left"
    NEXT_HISTORY = "NextHistory"
    SEARCH_HISTORY = "SearchHistory"
    MULTIPLE = "Multiple"
    UNTIL_FOUND = "UntilFound"
    MENU = "Menu"
    MENU_NEXT = "MenuNext"
    MENU_PREVIOUS = "MenuPrevious"
    MENU_UP = "MenuUp"
    MENU_DOWN = "MenuDown"
    MENU_LEFT = "MenuLeft"
    MENU_RIGHT = "MenuRight"
    MENU_PAGE_NEXT = "MenuPageNext"
    MENU_PAGE_PREVIOUS = "MenuPagePrevious"
    EXECUTE_HOST_COMMAND = "ExecuteHostCommand"
    OPEN_EDITOR = "OpenEditor"


_E = ReedlineEventKind

_DESCRIPTIONS = {
    _E.RESIZE: "Resize <int> <int>",
    _E.EDIT: "Edit: <EditCommand> or Edit: <EditCommand> value: <string>",
    _E.MULTIPLE: "Multiple[ { ReedLineEvents, } ]",
    _E.UNTIL_FOUND: "UntilFound [ { ReedLineEvents, } ]",
    _E.MENU: "Menu Name: <string>",
}

_U16_MAX = 0xFFFF


def _is_u16(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U16_MAX


@dataclass(frozen=True)
class ReedlineEvent:
    """An editor action with its arguments.

    ``width``/``height`` belong to RESIZE, ``commands`` to EDIT, ``events`` to
    MULTIPLE and UNTIL_FOUND, and ``name`` to MENU and EXECUTE_HOST_COMMAND.
    """

    kind: ReedlineEventKind
    width: int | None = None
    height: int | None = None
    commands: tuple[EditCommand, ...] = field(default=())
    events: tuple[ReedlineEvent, ...] = field(default=())
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "commands", tuple(self.commands))
        object.__setattr__(self, "events", tuple(self.events))
        kind = self.kind
        if kind is _E.RESIZE and not (_is_u16(self.width) and _is_u16(self.height)):
            raise ValueError("Resize needs a width and a height between 0 and 65535")
        if any(not isinstance(c, EditCommand) for c in self.commands):
            raise TypeError("Edit takes only EditCommand values")
        if self.commands and kind is not _E.EDIT:
            raise ValueError(f"{kind.value} takes no edit commands")
        if any(not isinstance(e, ReedlineEvent) for e in self.events):
            raise TypeError("Multiple and UntilFound take only ReedlineEvent values")
        if self.events and kind not in (_E.MULTIPLE, _E.UNTIL_FOUND):
            raise ValueError(f"{kind.value} takes no nested events")
        if kind in (_E.MENU, _E.EXECUTE_HOST_COMMAND) and not isinstance(self.name, str):
            raise ValueError(f"{kind.value} needs a name")

    def __str__(self) -> str:
        return _DESCRIPTIONS.get(self.kind, self.kind.value)