"""Skyline bottom-left rectangle packing into a fixed-size target."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

MAX_COORD = 0xFFFF
_BIG = 1 << 30


class Heuristic(enum.IntEnum):
    """Packing heuristic used to choose where each rectangle goes."""

    SKYLINE_BL_SORT_HEIGHT = 0
    SKYLINE_BF_SORT_HEIGHT = 1
    SKYLINE_DEFAULT = 0


@dataclass
class Rect:
    """A rectangle to pack; ``x``, ``y`` and ``was_packed`` are outputs."""

    w: int
    h: int
    id: int = 0
    x: int = 0
    y: int = 0
    was_packed: bool = False


class _Node:
    __slots__ = ("x", "y", "next")

    def __init__(self, x: int = 0, y: int = 0, next: Optional["_Node"] = None) -> None:
        self.x = x
        self.y = y
        self.next = next


class RectPacker:
    """Packs rectangles into a ``width`` by ``height`` target.

    ``num_nodes`` bounds the skyline's working storage. Unless running out of
    it is allowed, rectangle widths are rounded up so that it always suffices.
    """

    def __init__(self, width: int, height: int, num_nodes: int) -> None:
        if not 0 < width <= MAX_COORD or not 0 <= height <= MAX_COORD:
            raise ValueError("target dimensions must lie within 1..65535 by 0..65535")
        if num_nodes < 1:
            raise ValueError("at least one node is required")
        self.width = width
        self.height = height
        self.num_nodes = num_nodes
        self.heuristic = Heuristic.SKYLINE_DEFAULT

        nodes = [_Node() for _ in range(num_nodes)]
        for node, following in zip(nodes, nodes[1:]):
            node.next = following
        self._free_head: Optional[_Node] = nodes[0]

        sentinel = _Node(width, MAX_COORD, None)
        # The holder's ``next`` is the head of the active skyline, so that
        # every link in the list can be addressed as ``some_node.next``.
        self._holder = _Node(0, 0, _Node(0, 0, sentinel))
        self.align = 1
        self.setup_allow_out_of_mem(False)

    def setup_allow_out_of_mem(self, allow_out_of_mem: bool) -> None:
        """Choose between exact widths (may run out of nodes) and quantised ones."""
        if allow_out_of_mem:
            self.align = 1
        else:
            self.align = (self.width + self.num_nodes - 1) // self.num_nodes

    def setup_heuristic(self, heuristic) -> None:
        """Select the packing heuristic."""
        try:
            self.heuristic = Heuristic(heuristic)
        except ValueError:
            raise ValueError(f"unknown heuristic: {heuristic!r}") from None

    def _find_min_y(self, first: _Node, x0: int, width: int) -> Tuple[int, int]:
        node = first
        x1 = x0 + width
        min_y = 0
        waste_area = 0
        visited_width = 0
        while node.x < x1:
            if node.y > min_y:
                waste_area += visited_width * (node.y - min_y)
                min_y = node.y
                if node.x < x0:
                    visited_width += node.next.x - x0
                else:
                    visited_width += node.next.x - node.x
            else:
                under_width = node.next.x - node.x
                if under_width + visited_width > width:
                    under_width = width - visited_width
                waste_area += under_width * (min_y - node.y)
                visited_width += under_width
            node = node.next
        return min_y, waste_area

    def _find_best_pos(self, width: int, height: int) -> Tuple[Optional[_Node], int, int]:
        best_waste = _BIG
        best_y = _BIG
        best: Optional[_Node] = None

        width = width + self.align - 1
        width -= width % self.align

        if width > self.width or height > self.height:
            return None, 0, 0

        prev = self._holder
        node = prev.next
        while node.x + width <= self.width:
            y, waste = self._find_min_y(node, node.x, width)
            if self.heuristic == Heuristic.SKYLINE_BL_SORT_HEIGHT:
                if y < best_y:
                    best_y = y
                    best = prev
            elif y + height <= self.height:
                if y < best_y or (y == best_y and waste < best_waste):
                    best_y = y
                    best_waste = waste
                    best = prev
            prev = node
            node = node.next

        best_x = 0 if best is None else best.next.x

        if self.heuristic == Heuristic.SKYLINE_BF_SORT_HEIGHT:
            prev = self._holder
            node = prev.next
            tail = node
            while tail.x < width:
                tail = tail.next
            while tail is not None:
                xpos = tail.x - width
                while node.next.x <= xpos:
                    prev = node
                    node = node.next
                y, waste = self._find_min_y(node, xpos, width)
                if y + height <= self.height and y <= best_y:
                    if y < best_y or waste < best_waste or (
                        waste == best_waste and xpos < best_x
                    ):
                        best_x = xpos
                        best_y = y
                        best_waste = waste
                        best = prev
                tail = tail.next

        return best, best_x, best_y

    def _pack_rectangle(self, width: int, height: int) -> Optional[Tuple[int, int]]:
        prev, x, y = self._find_best_pos(width, height)
        if prev is None or y + height > self.height or self._free_head is None:
            return None

        node = self._free_head
        node.x = x
        node.y = y + height
        self._free_head = node.next

        cur = prev.next
        if cur.x < x:
            following = cur.next
            cur.next = node
            cur = following
        else:
            prev.next = node

        while cur.next is not None and cur.next.x <= x + width:
            following = cur.next
            cur.next = self._free_head
            self._free_head = cur
            cur = following

        node.next = cur
        if cur.x < x + width:
            cur.x = x + width
        return x, y

    def pack_rects(self, rects: Iterable[Rect]) -> bool:
        """Assign positions to ``rects`` in place; True if every one was packed."""
        rect_list: List[Rect] = list(rects)
        for rect in rect_list:
            if not (0 <= rect.w <= MAX_COORD and 0 <= rect.h <= MAX_COORD):
                raise ValueError("rectangle dimensions must lie within 0..65535")

        for rect in sorted(rect_list, key=lambda r: (-r.h, -r.w)):
            if rect.w == 0 or rect.h == 0:
                rect.x = rect.y = 0
                continue
            placed = self._pack_rectangle(rect.w, rect.h)
            if placed is None:
                rect.x = rect.y = MAX_COORD
            else:
                rect.x, rect.y = placed

        all_packed = True
        for rect in rect_list:
            rect.was_packed = not (rect.x == MAX_COORD and rect.y == MAX_COORD)
            all_packed = all_packed and rect.was_packed
        return all_packed