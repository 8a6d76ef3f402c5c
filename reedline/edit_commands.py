"""Editing commands, their undo classification and undo grouping rules."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class EditCommandKind(enum.Enum):
    """Every editing action that can be bound to a key."""

    MOVE_TO_START = "MoveToStart"
    MOVE_TO_LINE_START = "MoveToLineStart"
    MOVE_TO_END = "MoveToEnd"
    MOVE_TO_LINE_END = "MoveToLineEnd"
    MOVE_LEFT = "MoveLeft"
    MOVE_RIGHT = "MoveRight"
    MOVE_WORD_LEFT = "MoveWordLeft"
    MOVE_BIG_WORD_LEFT = "MoveBigWordLeft"
    MOVE_WORD_RIGHT = "MoveWordRight"
    MOVE_WORD_RIGHT_START = "MoveWordRightStart"
    MOVE_BIG_WORD_RIGHT_START = "MoveBigWordRightStart"
    MOVE_WORD_RIGHT_END = "MoveWordRightEnd"
    MOVE_BIG_WORD_RIGHT_END = "MoveBigWordRightEnd"
    MOVE_TO_POSITION = "MoveToPosition"
    INSERT_CHAR = "InsertChar"
    INSERT_STRING = "InsertString"
    INSERT_NEWLINE = "InsertNewline"
    REPLACE_CHAR = "ReplaceChar"
    REPLACE_CHARS = "ReplaceChars"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    CUT_CHAR = "CutChar"
    BACKSPACE_WORD = "BackspaceWord"
    DELETE_WORD = "DeleteWord"
    CLEAR = "Clear"
    CLEAR_TO_LINE_END = "ClearToLineEnd"
    COMPLETE = "Complete"
    CUT_CURRENT_LINE = "CutCurrentLine"
    CUT_FROM_START = "CutFromStart"
    CUT_FROM_LINE_START = "CutFromLineStart"
    CUT_TO_END = "CutToEnd"
    CUT_TO_LINE_END = "CutToLineEnd"
    CUT_WORD_LEFT = "CutWordLeft"
    CUT_BIG_WORD_LEFT = "CutBigWordLeft"
    CUT_WORD_RIGHT = "CutWordRight"
    CUT_BIG_WORD_RIGHT = "CutBigWordRight"
    CUT_WORD_RIGHT_TO_NEXT = "CutWordRightToNext"
    CUT_BIG_WORD_RIGHT_TO_NEXT = "CutBigWordRightToNext"
    PASTE_CUT_BUFFER_BEFORE = "PasteCutBufferBefore"
    PASTE_CUT_BUFFER_AFTER = "PasteCutBufferAfter"
    UPPERCASE_WORD = "UppercaseWord"
    LOWERCASE_WORD = "LowercaseWord"
    CAPITALIZE_CHAR = "CapitalizeChar"
    SWITCHCASE_CHAR = "SwitchcaseChar"
    SWAP_WORDS = "SwapWords"
    SWAP_GRAPHEMES = "SwapGraphemes"
    UNDO = "Undo"
    REDO = "Redo"
    CUT_RIGHT_UNTIL = "CutRightUntil"
    CUT_RIGHT_BEFORE = "CutRightBefore"
    MOVE_RIGHT_UNTIL = "MoveRightUntil"
    MOVE_RIGHT_BEFORE = "MoveRightBefore"
    CUT_LEFT_UNTIL = "CutLeftUntil"
    CUT_LEFT_BEFORE = "CutLeftBefore"
    MOVE_LEFT_UNTIL = "MoveLeftUntil"
    MOVE_LEFT_BEFORE = "MoveLeftBefore"
    SELECT_ALL = "SelectAll"
    CUT_SELECTION = "CutSelection"
    COPY_SELECTION = "CopySelection"
    PASTE = "Paste"
    COPY_FROM_START = "CopyFromStart"
    COPY_FROM_LINE_START = "CopyFromLineStart"
    COPY_TO_END = "CopyToEnd"
    COPY_TO_LINE_END = "CopyToLineEnd"
    COPY_CURRENT_LINE = "CopyCurrentLine"
    COPY_WORD_LEFT = "CopyWordLeft"
    COPY_BIG_WORD_LEFT = "CopyBigWordLeft"
    COPY_WORD_RIGHT = "CopyWordRight"
    COPY_BIG_WORD_RIGHT = "CopyBigWordRight"
    COPY_WORD_RIGHT_TO_NEXT = "CopyWordRightToNext"
    COPY_BIG_WORD_RIGHT_TO_NEXT = "CopyBigWordRightToNext"
    COPY_LEFT = "CopyLeft"
    COPY_RIGHT = "CopyRight"
    COPY_RIGHT_UNTIL = "CopyRightUntil"
    COPY_RIGHT_BEFORE = "CopyRightBefore"
    COPY_LEFT_UNTIL = "CopyLeftUntil"
    COPY_LEFT_BEFORE = "CopyLeftBefore"
    SWAP_CURSOR_AND_ANCHOR = "SwapCursorAndAnchor"
    CUT_SELECTION_SYSTEM = "CutSelectionSystem"
    COPY_SELECTION_SYSTEM = "CopySelectionSystem"
    PASTE_SYSTEM = "PasteSystem"
    CUT_INSIDE = "CutInside"
    YANK_INSIDE = "YankInside"


K = EditCommandKind

_SELECTING_MOVES = frozenset(
    {
        K.MOVE_TO_START,
        K.MOVE_TO_LINE_START,
        K.MOVE_TO_END,
        K.MOVE_TO_LINE_END,
        K.MOVE_LEFT,
        K.MOVE_RIGHT,
        K.MOVE_WORD_LEFT,
        K.MOVE_BIG_WORD_LEFT,
        K.MOVE_WORD_RIGHT,
        K.MOVE_WORD_RIGHT_START,
        K.MOVE_BIG_WORD_RIGHT_START,
        K.MOVE_WORD_RIGHT_END,
        K.MOVE_BIG_WORD_RIGHT_END,
        K.MOVE_TO_POSITION,
        K.MOVE_RIGHT_UNTIL,
        K.MOVE_RIGHT_BEFORE,
        K.MOVE_LEFT_UNTIL,
        K.MOVE_LEFT_BEFORE,
    }
)

_CHAR_KINDS = frozenset(
    {
        K.INSERT_CHAR,
        K.REPLACE_CHAR,
        K.CUT_RIGHT_UNTIL,
        K.CUT_RIGHT_BEFORE,
        K.MOVE_RIGHT_UNTIL,
        K.MOVE_RIGHT_BEFORE,
        K.CUT_LEFT_UNTIL,
        K.CUT_LEFT_BEFORE,
        K.MOVE_LEFT_UNTIL,
        K.MOVE_LEFT_BEFORE,
        K.COPY_RIGHT_UNTIL,
        K.COPY_RIGHT_BEFORE,
        K.COPY_LEFT_UNTIL,
        K.COPY_LEFT_BEFORE,
    }
)

_TEXT_KINDS = frozenset({K.INSERT_STRING, K.REPLACE_CHARS})
_PAIR_KINDS = frozenset({K.CUT_INSIDE, K.YANK_INSIDE})

_SELECTING_ALWAYS = frozenset({K.SWAP_CURSOR_AND_ANCHOR, K.SELECT_ALL})
_UNDO_REDO = frozenset({K.UNDO, K.REDO})
_NO_OP = frozenset(
    {
        K.COPY_SELECTION,
        K.COPY_SELECTION_SYSTEM,
        K.COPY_FROM_START,
        K.COPY_FROM_LINE_START,
        K.COPY_TO_END,
        K.COPY_TO_LINE_END,
        K.COPY_CURRENT_LINE,
        K.COPY_WORD_LEFT,
        K.COPY_BIG_WORD_LEFT,
        K.COPY_WORD_RIGHT,
        K.COPY_BIG_WORD_RIGHT,
        K.COPY_WORD_RIGHT_TO_NEXT,
        K.COPY_BIG_WORD_RIGHT_TO_NEXT,
        K.COPY_LEFT,
        K.COPY_RIGHT,
        K.COPY_RIGHT_UNTIL,
        K.COPY_RIGHT_BEFORE,
        K.COPY_LEFT_UNTIL,
        K.COPY_LEFT_BEFORE,
    }
)

_SELECT_SUFFIX = " Optional[select: <bool>]"
_DESCRIPTIONS = {
    K.MOVE_TO_POSITION: "MoveToPosition  Value: <int>, Optional[select: <bool>]",
    K.MOVE_LEFT_UNTIL: "MoveLeftUntil Value: <char>, Optional[select: <bool>]",
    K.MOVE_LEFT_BEFORE: "MoveLeftBefore Value: <char>, Optional[select: <bool>]",
    K.INSERT_CHAR: "InsertChar  Value: <char>",
    K.INSERT_STRING: "InsertString Value: <string>",
    K.REPLACE_CHAR: "ReplaceChar <char>",
    K.REPLACE_CHARS: "ReplaceChars <int> <string>",
    K.CUT_RIGHT_UNTIL: "CutRightUntil Value: <char>",
    K.CUT_RIGHT_BEFORE: "CutRightBefore Value: <char>",
    K.MOVE_RIGHT_UNTIL: "MoveRightUntil Value: <char>",
    K.MOVE_RIGHT_BEFORE: "MoveRightBefore Value: <char>",
    K.CUT_LEFT_UNTIL: "CutLeftUntil Value: <char>",
    K.CUT_LEFT_BEFORE: "CutLeftBefore Value: <char>",
    K.COPY_RIGHT_UNTIL: "CopyRightUntil Value: <char>",
    K.COPY_RIGHT_BEFORE: "CopyRightBefore Value: <char>",
    K.COPY_LEFT_UNTIL: "CopyLeftUntil Value: <char>",
    K.COPY_LEFT_BEFORE: "CopyLeftBefore Value: <char>",
    K.CUT_INSIDE: "CutInside Value: <char> <char>",
    K.YANK_INSIDE: "YankInside Value: <char> <char>",
}
for _kind in (
    K.MOVE_TO_START,
    K.MOVE_TO_LINE_START,
    K.MOVE_TO_END,
    K.MOVE_TO_LINE_END,
    K.MOVE_LEFT,
    K.MOVE_RIGHT,
    K.MOVE_WORD_LEFT,
    K.MOVE_BIG_WORD_LEFT,
    K.MOVE_WORD_RIGHT,
    K.MOVE_WORD_RIGHT_END,
    K.MOVE_BIG_WORD_RIGHT_END,
    K.MOVE_WORD_RIGHT_START,
    K.MOVE_BIG_WORD_RIGHT_START,
):
    _DESCRIPTIONS[_kind] = _kind.value + _SELECT_SUFFIX


def _is_single_char(value: object) -> bool:
    return isinstance(value, str) and len(value) == 1


class EditTypeKind(enum.Enum):
    """Broad classes of edit commands used to group undo steps."""

    MOVE_CURSOR = "MoveCursor"
    UNDO_REDO = "UndoRedo"
    EDIT_TEXT = "EditText"
    NO_OP = "NoOp"


@dataclass(frozen=True)
class EditType:
    """The class of an edit command; cursor moves also record selection."""

    kind: EditTypeKind
    select: bool = False


@dataclass(frozen=True)
class EditCommand:
    """An editing action together with its arguments.

    ``c`` holds the character of character-based commands, ``text`` the string
    of InsertString and ReplaceChars, ``count`` the number of characters
    ReplaceChars replaces, ``position`` the target of MoveToPosition and
    ``left``/``right`` the delimiters of CutInside and YankInside.
    """

    kind: EditCommandKind
    select: bool = False
    position: int | None = None
    c: str | None = None
    text: str | None = None
    count: int | None = None
    left: str | None = None
    right: str | None = None

    def __post_init__(self) -> None:
        kind = self.kind
        if kind in _CHAR_KINDS and not _is_single_char(self.c):
            raise ValueError(f"{kind.value} needs a single character, got {self.c!r}")
        if kind in _TEXT_KINDS and not isinstance(self.text, str):
            raise ValueError(f"{kind.value} needs a string, got {self.text!r}")
        if kind is K.REPLACE_CHARS and not (
            isinstance(self.count, int) and self.count >= 0
        ):
            raise ValueError(f"ReplaceChars needs a non-negative count, got {self.count!r}")
        if kind is K.MOVE_TO_POSITION and not (
            isinstance(self.position, int) and self.position >= 0
        ):
            raise ValueError(
                f"MoveToPosition needs a non-negative position, got {self.position!r}"
            )
        if kind in _PAIR_KINDS and not (
            _is_single_char(self.left) and _is_single_char(self.right)
        ):
            raise ValueError(f"{kind.value} needs a left and a right character")

    def edit_type(self) -> EditType:
        """Classify the command for undo grouping."""
        kind = self.kind
        if kind in _SELECTING_MOVES:
            return EditType(EditTypeKind.MOVE_CURSOR, select=self.select)
        if kind in _SELECTING_ALWAYS:
            return EditType(EditTypeKind.MOVE_CURSOR, select=True)
        if kind in _UNDO_REDO:
            return EditType(EditTypeKind.UNDO_REDO)
        if kind in _NO_OP:
            return EditType(EditTypeKind.NO_OP)
        return EditType(EditTypeKind.EDIT_TEXT)

    def __str__(self) -> str:
        return _DESCRIPTIONS.get(self.kind, self.kind.value)


class UndoBehaviorKind(enum.Enum):
    """How a change to the line should be reflected on the undo stack."""

    INSERT_CHARACTER = "InsertCharacter"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    MOVE_CURSOR = "MoveCursor"
    HISTORY_NAVIGATION = "HistoryNavigation"
    CREATE_UNDO_POINT = "CreateUndoPoint"
    UNDO_REDO = "UndoRedo"


_NON_UNICODE_SPACE = frozenset("\x1c\x1d\x1e\x1f")


def _is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in _NON_UNICODE_SPACE


def _is_line_break(ch: str) -> bool:
    return ch in ("\n", "\r")


@dataclass(frozen=True)
class UndoBehavior:
    """Tag attached to each line change; ``char`` is the affected character.

    For INSERT_CHARACTER the character is required; for BACKSPACE and DELETE it
    may be ``None`` when nothing was removed.
    """

    kind: UndoBehaviorKind
    char: str | None = None

    def __post_init__(self) -> None:
        if self.kind is UndoBehaviorKind.INSERT_CHARACTER and not _is_single_char(
            self.char
        ):
            raise ValueError("InsertCharacter needs a single character")
        if self.char is not None and not _is_single_char(self.char):
            raise ValueError(f"expected a single character, got {self.char!r}")

    def create_undo_point_after(self, previous: UndoBehavior) -> bool:
        """Whether this change starts a new undo set after ``previous``."""
        ub = UndoBehaviorKind
        prev_kind, new_kind = previous.kind, self.kind
        if new_kind is ub.MOVE_CURSOR:
            return False
        if prev_kind is ub.HISTORY_NAVIGATION and new_kind is ub.HISTORY_NAVIGATION:
            return False
        if prev_kind is ub.INSERT_CHARACTER and new_kind is ub.INSERT_CHARACTER:
            c_prev, c_new = previous.char, self.char
            return _is_line_break(c_prev) or (
                not _is_whitespace(c_prev) and _is_whitespace(c_new)
            )
        if prev_kind is new_kind and new_kind in (ub.BACKSPACE, ub.DELETE):
            c_prev, c_new = previous.char, self.char
            if c_prev is None or c_new is None:
                return False
            return _is_line_break(c_new) or (
                _is_whitespace(c_prev) and not _is_whitespace(c_new)
            )
        return True