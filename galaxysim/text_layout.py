"""Text buffers, row layout and coordinate lookup for a text editing widget."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

WIDTH_NEWLINE = -1.0


@dataclass
class TextRow:
    """Layout of one displayed row of characters."""

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


@dataclass
class FindState:
    """Where a character sits in the layout, plus the previous row's start."""

    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


class TextBuffer(ABC):
    """A string being edited, together with how it is laid out."""

    newline: str = "\n"
    # Width reported for a newline character, if the buffer uses a marker.
    width_newline: Optional[float] = None

    @abstractmethod
    def __len__(self) -> int:
        """Number of characters in the buffer."""

    @abstractmethod
    def get_char(self, index: int) -> str:
        """The character at ``index``."""

    @abstractmethod
    def layout_row(self, start: int) -> TextRow:
        """Lay out the row of characters that begins at ``start``."""

    @abstractmethod
    def get_width(self, line_start: int, index: int) -> float:
        """Width of character ``index`` of the row starting at ``line_start``."""

    @abstractmethod
    def insert_chars(self, pos: int, chars: Iterable[str]) -> bool:
        """Insert ``chars`` at ``pos``; False if they could not be inserted."""

    @abstractmethod
    def delete_chars(self, pos: int, count: int) -> None:
        """Delete ``count`` characters starting at ``pos``."""


class MonospaceBuffer(TextBuffer):
    """Buffer in which every character has the same width and rows end at newlines."""

    width_newline = WIDTH_NEWLINE

    def __init__(
        self,
        text: str = "",
        char_width: float = 1.0,
        line_height: float = 1.0,
        max_length: Optional[int] = None,
    ) -> None:
        if char_width <= 0 or line_height <= 0:
            raise ValueError("character width and line height must be positive")
        if max_length is not None and len(text) > max_length:
            raise ValueError("text is longer than the maximum length")
        self._chars = list(text)
        self.char_width = float(char_width)
        self.line_height = float(line_height)
        self.max_length = max_length

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self._chars)

    def get_char(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            raise IndexError("character index out of range")
        return self._chars[index]

    def layout_row(self, start: int) -> TextRow:
        if not 0 <= start <= len(self._chars):
            raise ValueError("row start out of range")
        end = start
        visible = 0
        while end < len(self._chars):
            char = self._chars[end]
            end += 1
            if char == self.newline:
                break
            visible += 1
        return TextRow(
            x0=0.0,
            x1=visible * self.char_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=end - start,
        )

    def get_width(self, line_start: int, index: int) -> float:
        if self.get_char(line_start + index) == self.newline:
            return WIDTH_NEWLINE
        return self.char_width

    def insert_chars(self, pos: int, chars: Iterable[str]) -> bool:
        if not 0 <= pos <= len(self._chars):
            raise ValueError("insert position out of range")
        new = list(chars)
        if self.max_length is not None and len(self._chars) + len(new) > self.max_length:
            return False
        self._chars[pos:pos] = new
        return True

    def delete_chars(self, pos: int, count: int) -> None:
        if count < 0 or pos < 0 or pos + count > len(self._chars):
            raise ValueError("delete range out of bounds")
        del self._chars[pos:pos + count]


def _checked_row(buffer: TextBuffer, start: int) -> TextRow:
    row = buffer.layout_row(start)
    if row.num_chars <= 0:
        raise ValueError(f"layout makes no progress at character {start}")
    return row


def locate_coord(buffer: TextBuffer, x: float, y: float) -> int:
    """Index of the character position nearest to display point ``(x, y)``."""
    n = len(buffer)
    base_y = 0.0
    i = 0
    row = TextRow()

    while i < n:
        row = buffer.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            w = buffer.get_width(i, k)
            if x < prev_x + w:
                return k + i if x < prev_x + w / 2 else k + i + 1
            prev_x += w

    last = i + row.num_chars - 1
    if buffer.get_char(last) == buffer.newline:
        return last
    return i + row.num_chars


def find_charpos(buffer: TextBuffer, n: int, single_line: bool) -> FindState:
    """Locate character ``n`` in the layout and remember the previous row."""
    z = len(buffer)
    if not 0 <= n <= z:
        raise ValueError("character position out of range")
    find = FindState()

    if n == z:
        if single_line:
            row = buffer.layout_row(0)
            find.y = 0.0
            find.first_char = 0
            find.length = z
            find.height = row.ymax - row.ymin
            find.x = row.x1
        else:
            find.y = 0.0
            find.x = 0.0
            find.height = 1.0
            i = 0
            prev_start = 0
            while i < z:
                row = _checked_row(buffer, i)
                prev_start = i
                i += row.num_chars
            find.first_char = i
            find.length = 0
            find.prev_first = prev_start
        return find

    i = 0
    prev_start = 0
    find.y = 0.0
    while True:
        row = _checked_row(buffer, i)
        if n < i + row.num_chars:
            break
        prev_start = i
        i += row.num_chars
        find.y += row.baseline_y_delta

    first = i
    find.first_char = first
    find.length = row.num_chars
    find.height = row.ymax - row.ymin
    find.prev_first = prev_start

    find.x = row.x0
    for k in range(n - first):
        find.x += buffer.get_width(first, k)
    return find