"""Bounded undo/redo history for a text editing widget.

Undo records grow upward from the start of a shared record table and redo
records grow downward from its end. Deleted characters that an undo or redo
must restore live in a shared character store that is split the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from .text_layout import TextBuffer

UNDO_STATE_COUNT = 99
UNDO_CHAR_COUNT = 999


@dataclass
class UndoRecord:
    """One step of history: delete ``delete_length`` chars at ``where``, then
    insert ``insert_length`` chars kept at ``char_storage`` (-1 if none)."""

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = -1


class UndoState:
    """Undo and redo history with fixed record and character capacities."""

    def __init__(
        self, state_count: int = UNDO_STATE_COUNT, char_count: int = UNDO_CHAR_COUNT
    ) -> None:
        if state_count < 1 or char_count < 1:
            raise ValueError("undo capacities must be positive")
        self.state_count = state_count
        self.char_count = char_count
        self.records: List[UndoRecord] = [UndoRecord() for _ in range(state_count)]
        self.chars: List[str] = [""] * char_count
        self.undo_point = 0
        self.redo_point = state_count
        self.undo_char_point = 0
        self.redo_char_point = char_count

    def flush_redo(self) -> None:
        """Forget every redo record."""
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def discard_undo(self) -> None:
        """Drop the oldest undo record and the characters it holds."""
        if self.undo_point <= 0:
            return
        first = self.records[0]
        if first.char_storage >= 0:
            n = first.insert_length
            self.undo_char_point -= n
            self.chars[: self.undo_char_point] = self.chars[n : n + self.undo_char_point]
            for record in self.records[: self.undo_point]:
                if record.char_storage >= 0:
                    record.char_storage -= n
        self.undo_point -= 1
        self.records[: self.undo_point] = [
            replace(record) for record in self.records[1 : self.undo_point + 1]
        ]

    def discard_redo(self) -> None:
        """Drop the oldest redo record and the characters it holds."""
        k = self.state_count - 1
        if self.redo_point > k:
            return
        last = self.records[k]
        if last.char_storage >= 0:
            n = last.insert_length
            self.redo_char_point += n
            start = self.redo_char_point
            self.chars[start : self.char_count] = self.chars[start - n : self.char_count - n]
            for record in self.records[self.redo_point : k]:
                if record.char_storage >= 0:
                    record.char_storage += n
        move = self.state_count - self.redo_point - 1
        rp = self.redo_point
        self.records[rp + 1 : rp + 1 + move] = [
            replace(record) for record in self.records[rp : rp + move]
        ]
        self.redo_point += 1

    def _create_undo_record(self, numchars: int) -> Optional[UndoRecord]:
        self.flush_redo()
        if self.undo_point == self.state_count:
            self.discard_undo()
        if numchars > self.char_count:
            # Too large to ever fit: the whole history is lost.
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.char_count:
            self.discard_undo()
        record = self.records[self.undo_point]
        self.undo_point += 1
        return record

    def create_undo(self, pos: int, insert_len: int, delete_len: int) -> Optional[int]:
        """Push an undo record; return where its characters go, if it keeps any."""
        record = self._create_undo_record(insert_len)
        if record is None:
            return None
        record.where = pos
        record.insert_length = insert_len
        record.delete_length = delete_len
        if insert_len == 0:
            record.char_storage = -1
            return None
        record.char_storage = self.undo_char_point
        self.undo_char_point += insert_len
        return record.char_storage

    def _store(self, buffer: TextBuffer, storage: Optional[int], where: int, length: int) -> None:
        if storage is not None:
            self.chars[storage : storage + length] = [
                buffer.get_char(where + i) for i in range(length)
            ]

    def make_insert(self, where: int, length: int) -> None:
        """Record that ``length`` characters were inserted at ``where``."""
        self.create_undo(where, 0, length)

    def make_delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        """Record ``length`` characters at ``where`` that are about to be deleted."""
        storage = self.create_undo(where, length, 0)
        self._store(buffer, storage, where, length)

    def make_replace(
        self, buffer: TextBuffer, where: int, old_length: int, new_length: int
    ) -> None:
        """Record that ``old_length`` characters at ``where`` become ``new_length``."""
        storage = self.create_undo(where, old_length, new_length)
        self._store(buffer, storage, where, old_length)

    def undo(self, buffer: TextBuffer) -> Optional[int]:
        """Revert the latest change in ``buffer``; return the new cursor, or None."""
        if self.undo_point == 0:
            return None
        u = replace(self.records[self.undo_point - 1])
        r = self.records[self.redo_point - 1]
        r.char_storage = -1
        r.insert_length = u.delete_length
        r.delete_length = u.insert_length
        r.where = u.where

        if u.delete_length:
            if self.undo_char_point + u.delete_length >= self.char_count:
                # No room to keep the characters needed for redo.
                r.insert_length = 0
            else:
                while self.undo_char_point + u.delete_length > self.redo_char_point:
                    if self.redo_point == self.state_count:
                        return None
                    self.discard_redo()
                r = self.records[self.redo_point - 1]
                r.char_storage = self.redo_char_point - u.delete_length
                self.redo_char_point -= u.delete_length
                self._store(buffer, r.char_storage, u.where, u.delete_length)
            buffer.delete_chars(u.where, u.delete_length)

        if u.insert_length:
            start = u.char_storage
            buffer.insert_chars(u.where, self.chars[start : start + u.insert_length])
            self.undo_char_point -= u.insert_length

        self.undo_point -= 1
        self.redo_point -= 1
        return u.where + u.insert_length

    def redo(self, buffer: TextBuffer) -> Optional[int]:
        """Reapply the latest undone change; return the new cursor, or None."""
        if self.redo_point == self.state_count:
            return None
        u = self.records[self.undo_point]
        r = replace(self.records[self.redo_point])

        u.delete_length = r.insert_length
        u.insert_length = r.delete_length
        u.where = r.where
        u.char_storage = -1

        if r.delete_length:
            if self.undo_char_point + u.insert_length > self.redo_char_point:
                u.insert_length = 0
                u.delete_length = 0
            else:
                u.char_storage = self.undo_char_point
                self.undo_char_point += u.insert_length
                self._store(buffer, u.char_storage, u.where, u.insert_length)
            buffer.delete_chars(r.where, r.delete_length)

        if r.insert_length:
            start = r.char_storage
            buffer.insert_chars(r.where, self.chars[start : start + r.insert_length])
            self.redo_char_point += r.insert_length

        self.undo_point += 1
        self.redo_point += 1
        return r.where + r.insert_length