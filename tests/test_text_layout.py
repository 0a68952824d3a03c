import pytest

from galaxysim.text_layout import (
    WIDTH_NEWLINE,
    FindState,
    MonospaceBuffer,
    TextRow,
    find_charpos,
    locate_coord,
)

TEXT = "ab\ncd"


@pytest.fixture
def buf():
    return MonospaceBuffer(TEXT, char_width=10.0, line_height=20.0)


def _row_starts(buffer):
    starts = []
    i = 0
    while i < len(buffer):
        starts.append(i)
        i += buffer.layout_row(i).num_chars
    return starts


def test_rows_cover_whole_text(buf):
    starts = _row_starts(buf)
    total = sum(buf.layout_row(s).num_chars for s in starts)
    assert total == len(buf)
    assert starts[1] == TEXT.index("\n") + 1


def test_row_geometry(buf):
    row = buf.layout_row(0)
    assert isinstance(row, TextRow)
    assert row.x0 == 0.0
    assert row.x1 == 2 * buf.char_width
    assert row.ymax - row.ymin == buf.line_height
    assert row.baseline_y_delta == buf.line_height


def test_get_width(buf):
    assert buf.get_width(0, 0) == buf.char_width
    assert buf.get_width(0, TEXT.index("\n")) == WIDTH_NEWLINE
    assert buf.width_newline == WIDTH_NEWLINE


def test_locate_above_and_below(buf):
    assert locate_coord(buf, 15.0, -1.0) == 0
    assert locate_coord(buf, 0.0, 1000.0) == len(buf)


def test_locate_line_edges(buf):
    second = TEXT.index("\n") + 1
    assert locate_coord(buf, -5.0, buf.line_height + 1) == second
    assert locate_coord(buf, 500.0, 1.0) == TEXT.index("\n")
    assert locate_coord(buf, 500.0, buf.line_height + 1) == len(buf)


def test_locate_rounds_to_nearest_boundary(buf):
    cw = buf.char_width
    assert locate_coord(buf, 0.4 * cw, 1.0) == 0
    assert locate_coord(buf, 0.6 * cw, 1.0) == 1


def test_charpos_locate_round_trip(buf):
    for k in range(len(buf)):
        fs = find_charpos(buf, k, False)
        assert locate_coord(buf, fs.x + 1.0, fs.y + 1.0) == k


def test_charpos_second_row(buf):
    n = len(buf) - 1
    fs = find_charpos(buf, n, False)
    first = TEXT.index("\n") + 1
    assert fs.first_char == first
    assert fs.prev_first == 0
    assert fs.y == buf.line_height
    assert fs.height == buf.line_height
    assert fs.length == len(TEXT) - first
    assert fs.x == (n - first) * buf.char_width


def test_charpos_end_multiline(buf):
    fs = find_charpos(buf, len(buf), False)
    assert fs.first_char == len(buf)
    assert fs.length == 0
    assert fs.prev_first == TEXT.index("\n") + 1
    assert fs.height == 1.0


def test_charpos_end_single_line():
    text = "hello"
    b = MonospaceBuffer(text, char_width=3.0, line_height=7.0)
    fs = find_charpos(b, len(text), True)
    assert fs.x == len(text) * b.char_width
    assert fs.length == len(text)
    assert fs.first_char == 0
    assert fs.height == b.line_height


def test_charpos_out_of_range(buf):
    with pytest.raises(ValueError):
        find_charpos(buf, len(buf) + 1, False)
    with pytest.raises(ValueError):
        find_charpos(buf, -1, False)


def test_empty_buffer():
    b = MonospaceBuffer("")
    assert locate_coord(b, 3.0, 3.0) == 0
    fs = find_charpos(b, 0, False)
    assert fs == FindState(x=0.0, y=0.0, height=1.0, first_char=0, length=0, prev_first=0)


def test_insert_and_delete(buf):
    assert buf.insert_chars(1, "XY") is True
    assert str(buf) == TEXT[:1] + "XY" + TEXT[1:]
    buf.delete_chars(1, 2)
    assert str(buf) == TEXT
    buf.delete_chars(0, 2)
    assert buf.text == TEXT[2:]


def test_insert_respects_max_length():
    b = MonospaceBuffer("abc", max_length=4)
    assert b.insert_chars(0, "xy") is False
    assert b.text == "abc"
    assert b.insert_chars(3, "z") is True
    assert b.text == "abcz"


def test_range_errors(buf):
    with pytest.raises(ValueError):
        buf.delete_chars(len(buf) - 1, 2)
    with pytest.raises(ValueError):
        buf.insert_chars(len(buf) + 1, "x")
    with pytest.raises(IndexError):
        buf.get_char(len(buf))


def test_invalid_construction():
    with pytest.raises(ValueError):
        MonospaceBuffer("abc", char_width=0)
    with pytest.raises(ValueError):
        MonospaceBuffer("abcdef", max_length=2)