import pytest

from rindent.core.indenter import Position
from rindent.core.indenter import TextBuffer


@pytest.fixture
def buffer():
    return TextBuffer('abc\n\tde\n', tab_width=4)


def test_positions_are_values():
    pos = Position(2, 3)

    assert pos.with_column(0) == Position(2, 0)
    assert pos.previous_line() == Position(1, 0)
    assert pos == Position(2, 3)
    with pytest.raises(AttributeError):
        pos.line = 4


def test_char_at_reports_line_breaks(buffer):
    assert buffer.char_at(Position(0, 2)) == 'c'
    assert buffer.char_at(Position(0, 3)) == '\n'
    assert buffer.char_at(Position(1, 0)) == '\t'
    assert buffer.char_at(Position(2, 0)) == ''


@pytest.mark.parametrize('pos', [Position(-1, 0), Position(9, 0), Position(0, 7), Position(0, -1)])
def test_char_at_out_of_range(buffer, pos):
    assert buffer.char_at(pos) == ''
    assert not buffer.is_valid(pos)


def test_advance_crosses_lines(buffer):
    assert buffer.advance(Position(0, 1), 3) == Position(1, 0)
    assert buffer.advance(Position(0, 3)) == Position(1, 0)
    assert buffer.advance(Position(1, 2), 100) == Position(2, 0)


def test_retreat_crosses_lines(buffer):
    assert buffer.retreat(Position(1, 0)) == Position(0, 3)
    assert buffer.retreat(Position(1, 1), 3) == Position(0, 2)
    assert buffer.retreat(Position(1, 1), 100) == Position(0, 0)


def test_negative_moves_reverse_direction(buffer):
    assert buffer.advance(Position(1, 0), -1) == Position(0, 3)
    assert buffer.retreat(Position(0, 3), -1) == Position(1, 0)


def test_visual_column_expands_tabs(buffer):
    assert buffer.visual_column(Position(1, 0)) == 0
    assert buffer.visual_column(Position(1, 1)) == 4
    assert buffer.visual_column(Position(1, 2)) == 5


def test_visual_column_tab_stops():
    buffer = TextBuffer('ab\tc', tab_width=4)

    assert buffer.visual_column(Position(0, 3)) == 4


def test_offsets_round_trip(buffer):
    assert buffer.offset_of(Position(1, 1)) == 5
    assert buffer.position_of(5) == Position(1, 1)


def test_replace_returns_end_of_insertion(buffer):
    end = buffer.replace(Position(1, 0), Position(1, 1), '  \n  ')

    assert buffer.text == 'abc\n  \n  de\n'
    assert end == Position(2, 2)


def test_string_and_comment_detection_spans_lines():
    buffer = TextBuffer('x = "one\nend"\n# end\nend')

    assert buffer.is_in_string_or_comment(Position(1, 0))
    assert buffer.is_in_string_or_comment(Position(2, 2))
    assert not buffer.is_in_string_or_comment(Position(3, 0))
    assert not buffer.is_in_string_or_comment(Position(7, 0))


def test_string_detection_follows_edits():
    buffer = TextBuffer('x = 1\nif y\nend')

    assert not buffer.is_in_string_or_comment(Position(1, 0))

    buffer.replace(Position(0, 4), Position(0, 4), '"')

    assert buffer.is_in_string_or_comment(Position(1, 0))

    buffer.replace(Position(1, 4), Position(1, 4), '"')

    assert not buffer.is_in_string_or_comment(Position(2, 0))
