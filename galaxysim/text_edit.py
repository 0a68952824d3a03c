"""Keyboard and mouse editing of a text buffer with selection and undo."""

from __future__ import annotations

import enum
from typing import Iterable, Union

from .text_layout import TextBuffer, find_charpos, locate_coord
from .text_undo import UndoState


class Key(enum.IntEnum):
    """Editing keys; combine with ``Key.SHIFT`` to extend the selection."""

    LEFT = 0x10000
    RIGHT = 0x10001
    UP = 0x10002
    DOWN = 0x10003
    PGUP = 0x10004
    PGDOWN = 0x10005
    LINESTART = 0x10006
    LINEEND = 0x10007
    TEXTSTART = 0x10008
    TEXTEND = 0x10009
    DELETE = 0x1000A
    BACKSPACE = 0x1000B
    UNDO = 0x1000C
    REDO = 0x1000D
    INSERT = 0x1000E
    WORDLEFT = 0x1000F
    WORDRIGHT = 0x10010
    SHIFT = 0x400000


KeyInput = Union[Key, int, str]


def _is_word_boundary(buffer: TextBuffer, idx: int) -> bool:
    if idx <= 0:
        return True
    return buffer.get_char(idx - 1).isspace() and not buffer.get_char(idx).isspace()


def _move_word_previous(buffer: TextBuffer, c: int) -> int:
    c -= 1
    while c >= 0 and not _is_word_boundary(buffer, c):
        c -= 1
    return max(c, 0)


def _move_word_next(buffer: TextBuffer, c: int) -> int:
    n = len(buffer)
    c += 1
    while c < n and not _is_word_boundary(buffer, c):
        c += 1
    return min(c, n)


class TextEditState:
    """Cursor, selection, insert mode and undo history of one text field."""

    def __init__(self, single_line: bool = False) -> None:
        self.clear(single_line)

    def clear(self, single_line: bool) -> None:
        """Reset to the default state, discarding all history."""
        self.undostate = UndoState()
        self.select_start = 0
        self.select_end = 0
        self.cursor = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.cursor_at_end_of_line = False
        self.initialized = True
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    def has_selection(self) -> bool:
        return self.select_start != self.select_end

    # -- internal helpers -------------------------------------------------

    def _clamp(self, buffer: TextBuffer) -> None:
        n = len(buffer)
        if self.has_selection():
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        self.cursor = min(self.cursor, n)

    def _delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        self.undostate.make_delete(buffer, where, length)
        buffer.delete_chars(where, length)
        self.has_preferred_x = False

    def _delete_selection(self, buffer: TextBuffer) -> None:
        self._clamp(buffer)
        if not self.has_selection():
            return
        if self.select_start < self.select_end:
            self._delete(buffer, self.select_start, self.select_end - self.select_start)
            self.select_end = self.cursor = self.select_start
        else:
            self._delete(buffer, self.select_end, self.select_start - self.select_end)
            self.select_start = self.cursor = self.select_end
        self.has_preferred_x = False

    def _sort_selection(self) -> None:
        if self.select_end < self.select_start:
            self.select_start, self.select_end = self.select_end, self.select_start

    def _move_to_first(self) -> None:
        if self.has_selection():
            self._sort_selection()
            self.cursor = self.select_start
            self.select_end = self.select_start
            self.has_preferred_x = False

    def _move_to_last(self, buffer: TextBuffer) -> None:
        if self.has_selection():
            self._sort_selection()
            self._clamp(buffer)
            self.cursor = self.select_end
            self.select_start = self.select_end
            self.has_preferred_x = False

    def _prep_selection_at_cursor(self) -> None:
        if not self.has_selection():
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    def _line_start(self, buffer: TextBuffer) -> int:
        if self.single_line:
            return 0
        c = self.cursor
        while c > 0 and buffer.get_char(c - 1) != buffer.newline:
            c -= 1
        return c

    def _line_end(self, buffer: TextBuffer) -> int:
        n = len(buffer)
        if self.single_line:
            return n
        c = self.cursor
        while c < n and buffer.get_char(c) != buffer.newline:
            c += 1
        return c

    def _scan_row(self, buffer: TextBuffer, start: int, goal_x: float) -> None:
        self.cursor = start
        row = buffer.layout_row(start)
        x = row.x0
        for i in range(row.num_chars):
            dx = buffer.get_width(start, i)
            if buffer.width_newline is not None and dx == buffer.width_newline:
                break
            x += dx
            if x > goal_x:
                break
            self.cursor += 1
        self._clamp(buffer)
        self.has_preferred_x = True
        self.preferred_x = goal_x

    # -- mouse --------------------------------------------------------------

    def _mouse_y(self, buffer: TextBuffer, y: float) -> float:
        if self.single_line:
            return buffer.layout_row(0).ymin
        return y

    def click(self, buffer: TextBuffer, x: float, y: float) -> None:
        """Move the cursor to the clicked point and drop the selection."""
        y = self._mouse_y(buffer, y)
        self.cursor = locate_coord(buffer, x, y)
        self.select_start = self.cursor
        self.select_end = self.cursor
        self.has_preferred_x = False

    def drag(self, buffer: TextBuffer, x: float, y: float) -> None:
        """Move the cursor and selection end to the dragged point."""
        y = self._mouse_y(buffer, y)
        if self.select_start == self.select_end:
            self.select_start = self.cursor
        p = locate_coord(buffer, x, y)
        self.cursor = self.select_end = p

    # -- clipboard ----------------------------------------------------------

    def cut(self, buffer: TextBuffer) -> bool:
        """Delete the selection; True if there was one."""
        if self.has_selection():
            self._delete_selection(buffer)
            self.has_preferred_x = False
            return True
        return False

    def paste(self, buffer: TextBuffer, text: Iterable[str]) -> bool:
        """Replace the selection with ``text``; False if it could not be inserted.

        A failed paste still leaves the selection deleted; undo restores it.
        """
        chars = list(text)
        self._clamp(buffer)
        self._delete_selection(buffer)
        if buffer.insert_chars(self.cursor, chars):
            self.undostate.make_insert(self.cursor, len(chars))
            self.cursor += len(chars)
            self.has_preferred_x = False
            return True
        return False

    # -- keyboard -----------------------------------------------------------

    def _type_char(self, buffer: TextBuffer, ch: str) -> None:
        if ch == "\n" and self.single_line:
            return
        if self.insert_mode and not self.has_selection() and self.cursor < len(buffer):
            self.undostate.make_replace(buffer, self.cursor, 1, 1)
            buffer.delete_chars(self.cursor, 1)
            if buffer.insert_chars(self.cursor, [ch]):
                self.cursor += 1
                self.has_preferred_x = False
        else:
            self._delete_selection(buffer)
            if buffer.insert_chars(self.cursor, [ch]):
                self.undostate.make_insert(self.cursor, 1)
                self.cursor += 1
                self.has_preferred_x = False

    def key(self, buffer: TextBuffer, key: KeyInput) -> None:
        """Apply one keyboard input: a character to type or a ``Key`` value."""
        if isinstance(key, str):
            for ch in key[:1]:
                self._type_char(buffer, ch)
            return

        shift = bool(key & Key.SHIFT)
        try:
            base = Key(key & ~Key.SHIFT)
        except ValueError:
            return

        if base is Key.INSERT and not shift:
            self.insert_mode = not self.insert_mode
        elif base is Key.UNDO and not shift:
            cursor = self.undostate.undo(buffer)
            if cursor is not None:
                self.cursor = cursor
            self.has_preferred_x = False
        elif base is Key.REDO and not shift:
            cursor = self.undostate.redo(buffer)
            if cursor is not None:
                self.cursor = cursor
            self.has_preferred_x = False
        elif base is Key.LEFT:
            self._key_left(buffer, shift)
        elif base is Key.RIGHT:
            self._key_right(buffer, shift)
        elif base is Key.WORDLEFT:
            self._key_word(buffer, shift, _move_word_previous, forward=False)
        elif base is Key.WORDRIGHT:
            self._key_word(buffer, shift, _move_word_next, forward=True)
        elif base in (Key.DOWN, Key.PGDOWN):
            self._key_down(buffer, shift, base is Key.PGDOWN)
        elif base in (Key.UP, Key.PGUP):
            self._key_up(buffer, shift, base is Key.PGUP)
        elif base is Key.DELETE:
            if self.has_selection():
                self._delete_selection(buffer)
            elif self.cursor < len(buffer):
                self._delete(buffer, self.cursor, 1)
            self.has_preferred_x = False
        elif base is Key.BACKSPACE:
            if self.has_selection():
                self._delete_selection(buffer)
            else:
                self._clamp(buffer)
                if self.cursor > 0:
                    self._delete(buffer, self.cursor - 1, 1)
                    self.cursor -= 1
            self.has_preferred_x = False
        elif base is Key.TEXTSTART:
            if shift:
                self._prep_selection_at_cursor()
                self.cursor = self.select_end = 0
            else:
                self.cursor = self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif base is Key.TEXTEND:
            if shift:
                self._prep_selection_at_cursor()
                self.cursor = self.select_end = len(buffer)
            else:
                self.cursor = len(buffer)
                self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif base is Key.LINESTART:
            self._clamp(buffer)
            if shift:
                self._prep_selection_at_cursor()
                self.cursor = self._line_start(buffer)
                self.select_end = self.cursor
            else:
                self._move_to_first()
                self.cursor = self._line_start(buffer)
            self.has_preferred_x = False
        elif base is Key.LINEEND:
            self._clamp(buffer)
            if shift:
                self._prep_selection_at_cursor()
                self.cursor = self._line_end(buffer)
                self.select_end = self.cursor
            else:
                self._move_to_first()
                self.cursor = self._line_end(buffer)
            self.has_preferred_x = False

    def _key_left(self, buffer: TextBuffer, shift: bool) -> None:
        if shift:
            self._clamp(buffer)
            self._prep_selection_at_cursor()
            if self.select_end > 0:
                self.select_end -= 1
            self.cursor = self.select_end
        elif self.has_selection():
            self._move_to_first()
        elif self.cursor > 0:
            self.cursor -= 1
        self.has_preferred_x = False

    def _key_right(self, buffer: TextBuffer, shift: bool) -> None:
        if shift:
            self._prep_selection_at_cursor()
            self.select_end += 1
            self._clamp(buffer)
            self.cursor = self.select_end
        else:
            if self.has_selection():
                self._move_to_last(buffer)
            else:
                self.cursor += 1
            self._clamp(buffer)
        self.has_preferred_x = False

    def _key_word(self, buffer: TextBuffer, shift: bool, move, forward: bool) -> None:
        if shift:
            if not self.has_selection():
                self._prep_selection_at_cursor()
            self.cursor = move(buffer, self.cursor)
            self.select_end = self.cursor
            self._clamp(buffer)
        elif self.has_selection():
            if forward:
                self._move_to_last(buffer)
            else:
                self._move_to_first()
        else:
            self.cursor = move(buffer, self.cursor)
            self._clamp(buffer)

    def _key_down(self, buffer: TextBuffer, sel: bool, is_page: bool) -> None:
        if not is_page and self.single_line:
            self.key(buffer, Key.RIGHT | (Key.SHIFT if sel else 0))
            return
        row_count = self.row_count_per_page if is_page else 1

        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_last(buffer)

        self._clamp(buffer)
        find = find_charpos(buffer, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            start = find.first_char + find.length
            if find.length == 0:
                break
            # On the last line, moving down does not jump to the line end.
            if buffer.get_char(find.first_char + find.length - 1) != buffer.newline:
                break
            self._scan_row(buffer, start, goal_x)
            if sel:
                self.select_end = self.cursor
            find.first_char = find.first_char + find.length
            find.length = buffer.layout_row(start).num_chars

    def _key_up(self, buffer: TextBuffer, sel: bool, is_page: bool) -> None:
        if not is_page and self.single_line:
            self.key(buffer, Key.LEFT | (Key.SHIFT if sel else 0))
            return
        row_count = self.row_count_per_page if is_page else 1

        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_first()

        self._clamp(buffer)
        find = find_charpos(buffer, self.cursor, self.single_line)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            if find.prev_first == find.first_char:
                break
            self._scan_row(buffer, find.prev_first, goal_x)
            if sel:
                self.select_end = self.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and buffer.get_char(prev_scan - 1) != buffer.newline:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan