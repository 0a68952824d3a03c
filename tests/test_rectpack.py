import random

import pytest

from galaxysim.rectpack import MAX_COORD, Heuristic, Rect, RectPacker


def _overlap(a, b):
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h


def _check_layout(rects, width, height):
    packed = [r for r in rects if r.was_packed and r.w and r.h]
    for r in packed:
        assert 0 <= r.x and r.x + r.w <= width
        assert 0 <= r.y and r.y + r.h <= height
    for i, a in enumerate(packed):
        for b in packed[i + 1:]:
            assert not _overlap(a, b)


def test_single_rect_goes_to_origin():
    packer = RectPacker(64, 64, 64)
    rect = Rect(10, 20)
    assert packer.pack_rects([rect]) is True
    assert (rect.x, rect.y, rect.was_packed) == (0, 0, True)


def test_oversized_rect_is_not_packed():
    packer = RectPacker(16, 16, 16)
    rect = Rect(17, 4)
    assert packer.pack_rects([rect]) is False
    assert rect.was_packed is False
    assert (rect.x, rect.y) == (MAX_COORD, MAX_COORD)


def test_empty_rect_needs_no_space():
    packer = RectPacker(8, 8, 8)
    rect = Rect(0, 5)
    assert packer.pack_rects([rect]) is True
    assert (rect.x, rect.y, rect.was_packed) == (0, 0, True)


def test_original_order_preserved():
    packer = RectPacker(100, 100, 100)
    rects = [Rect(5, 3, id=0), Rect(7, 9, id=1), Rect(2, 20, id=2)]
    packer.pack_rects(rects)
    assert [r.id for r in rects] == [0, 1, 2]
    assert [r.h for r in rects] == [3, 9, 20]


def test_side_by_side():
    packer = RectPacker(10, 5, 10)
    rects = [Rect(5, 5), Rect(5, 5)]
    assert packer.pack_rects(rects) is True
    assert sorted(r.x for r in rects) == [0, 5]
    assert all(r.y == 0 for r in rects)


def test_height_overflow_fails_one():
    packer = RectPacker(4, 4, 4)
    rects = [Rect(4, 3), Rect(4, 3)]
    assert packer.pack_rects(rects) is False
    assert sorted(r.was_packed for r in rects) == [False, True]


def test_repeated_calls_continue_in_same_target():
    packer = RectPacker(4, 4, 4)
    first, second = Rect(4, 2), Rect(4, 2)
    assert packer.pack_rects([first]) is True
    assert packer.pack_rects([second]) is True
    assert (first.y, second.y) == (0, 2)


def test_allow_out_of_mem_uses_exact_widths():
    packer = RectPacker(10, 10, 10)
    packer.setup_allow_out_of_mem(True)
    rects = [Rect(1, 1), Rect(1, 1)]
    assert packer.pack_rects(rects) is True
    assert sorted(r.x for r in rects) == [0, 1]


def test_quantised_widths_stay_within_target():
    packer = RectPacker(10, 10, 3)
    rects = [Rect(1, 1) for _ in range(3)]
    packer.pack_rects(rects)
    assert packer.align * packer.num_nodes >= packer.width
    _check_layout(rects, 10, 10)
    xs = sorted(r.x for r in rects if r.was_packed)
    assert all(x % packer.align == 0 for x in xs)


def test_running_out_of_nodes():
    packer = RectPacker(10, 10, 1)
    packer.setup_allow_out_of_mem(True)
    rects = [Rect(1, 1), Rect(1, 1)]
    assert packer.pack_rects(rects) is False
    assert sum(r.was_packed for r in rects) == 1


@pytest.mark.parametrize(
    "heuristic", [Heuristic.SKYLINE_BL_SORT_HEIGHT, Heuristic.SKYLINE_BF_SORT_HEIGHT]
)
@pytest.mark.parametrize("allow_oom", [False, True])
@pytest.mark.parametrize("seed", [1, 2, 3])
def test_random_layouts_do_not_overlap(heuristic, allow_oom, seed):
    rng = random.Random(seed)
    width, height = 128, 96
    packer = RectPacker(width, height, width)
    packer.setup_allow_out_of_mem(allow_oom)
    packer.setup_heuristic(heuristic)
    rects = [Rect(rng.randint(0, 30), rng.randint(0, 30), id=i) for i in range(40)]
    result = packer.pack_rects(rects)
    assert result == all(r.was_packed for r in rects)
    assert [r.id for r in rects] == list(range(40))
    _check_layout(rects, width, height)
    for r in rects:
        if not r.was_packed:
            assert (r.x, r.y) == (MAX_COORD, MAX_COORD)


def test_default_heuristic_is_bottom_left():
    packer = RectPacker(8, 8, 8)
    assert packer.heuristic is Heuristic.SKYLINE_BL_SORT_HEIGHT
    assert Heuristic.SKYLINE_DEFAULT is Heuristic.SKYLINE_BL_SORT_HEIGHT


def test_invalid_heuristic_rejected():
    packer = RectPacker(8, 8, 8)
    with pytest.raises(ValueError):
        packer.setup_heuristic(7)


def test_invalid_target_rejected():
    with pytest.raises(ValueError):
        RectPacker(MAX_COORD + 1, 10, 10)
    with pytest.raises(ValueError):
        RectPacker(10, 10, 0)


def test_invalid_rect_rejected():
    packer = RectPacker(8, 8, 8)
    with pytest.raises(ValueError):
        packer.pack_rects([Rect(-1, 2)])