"""
Positions and the text buffer the indentation engine reads from.

The engine never owns text. It asks a ``Buffer`` for lines, characters,
visual columns, string/comment contexts and the current indentation settings,
and hands back an edit for the host to apply.

``TextBuffer`` is a plain in-memory buffer for headless use and tests. The
editor wraps its ``QTextDocument`` in ``DocumentBuffer`` instead.
"""


import abc
from dataclasses import dataclass
from dataclasses import replace
from typing import Optional

from rindent.core.indenter import lexer


DEFAULT_TAB_WIDTH = 8


@dataclass(frozen=True, order=True)
class Position(object):
    """
    A zero based line and raw character column.

    Positions are values. Every move returns a new one, so a position can be
    handed around and kept without anything changing it underneath.
    """
    line: int
    column: int = 0

    def with_column(self, column: int) -> 'Position':
        return replace(self, column=column)

    def line_start(self) -> 'Position':
        return replace(self, column=0)

    def previous_line(self) -> 'Position':
        return Position(self.line - 1, 0)


class Buffer(abc.ABC):
    """
    The host text buffer, as seen by the indentation engine.

    Implementations only supply line access, string/comment classification and
    the indentation settings. Character access, moves and visual columns are
    derived from those.

    Every query is total: lines or columns outside of the document produce
    empty text, ``False`` or a clamped position rather than an error.
    """

    # -----Collaborator Interface----------------------------------------------

    @abc.abstractmethod
    def line_count(self) -> int:
        """Return the number of lines, always at least 1."""

    @abc.abstractmethod
    def get_line_text(self, line: int) -> str:
        """Return the text of a line without its line break, '' if invalid."""

    @abc.abstractmethod
    def is_in_string_or_comment(self, position: Position) -> bool:
        """Return True if the position lies inside a string or comment."""

    @abc.abstractmethod
    def current_tab_width(self) -> int:
        ...

    @abc.abstractmethod
    def current_indent_width(self) -> int:
        ...

    @abc.abstractmethod
    def insert_spaces_not_tabs(self) -> bool:
        ...

    # -----Derived Queries-----------------------------------------------------

    def is_valid(self, position: Position) -> bool:
        if not 0 <= position.line < self.line_count():
            return False
        return 0 <= position.column <= len(self.get_line_text(position.line))

    def char_at(self, position: Position) -> str:
        """
        Return the character at a position.

        The column just past the end of a line holds its line break, ``'\\n'``,
        except on the last line. Invalid positions hold ``''``.
        """
        if not self.is_valid(position):
            return ''

        text = self.get_line_text(position.line)
        if position.column < len(text):
            return text[position.column]
        if position.line < self.line_count() - 1:
            return '\n'
        return ''

    def advance(self, position: Position, n: int = 1) -> Position:
        """Move forward ``n`` characters, line breaks included."""
        if n < 0:
            return self.retreat(position, -n)

        line, column = self._clamp(position)
        last_line = self.line_count() - 1
        while n > 0:
            line_length = len(self.get_line_text(line))
            if column + n <= line_length:
                column += n
                break
            if line >= last_line:
                column = line_length
                break
            n -= line_length - column + 1
            line += 1
            column = 0

        return Position(line, column)

    def retreat(self, position: Position, n: int = 1) -> Position:
        """Move backward ``n`` characters, line breaks included."""
        if n < 0:
            return self.advance(position, -n)

        line, column = self._clamp(position)
        while n > 0:
            if column - n >= 0:
                column -= n
                break
            if line == 0:
                column = 0
                break
            n -= column + 1
            line -= 1
            column = len(self.get_line_text(line))

        return Position(line, column)

    def visual_column(self, position: Position) -> int:
        """Return the display column of a position, expanding tabs."""
        tab_width = self.current_tab_width()
        if tab_width <= 0:
            tab_width = DEFAULT_TAB_WIDTH

        text = self.get_line_text(position.line)
        visual = 0
        for ch in text[:max(position.column, 0)]:
            if ch == '\t':
                visual += tab_width - (visual % tab_width)
            else:
                visual += 1
        return visual

    def _clamp(self, position: Position) -> tuple[int, int]:
        line = min(max(position.line, 0), self.line_count() - 1)
        column = min(max(position.column, 0), len(self.get_line_text(line)))
        return line, column


class TextBuffer(Buffer):
    """
    An in-memory buffer over a plain string.

    String and comment contexts are found with the Ruby line scanner. The whole
    document is scanned once, on the first query after an edit, and the spans
    of every line are kept until the next edit. Edit through ``replace()``
    only.

    Args:
        text (str): The document text, lines separated by ``'\\n'``.
        tab_width (int): Width of a tab stop.
        indent_width (int): Width of one indent level, ``-1`` for tab width.
        insert_spaces (bool): Indent with spaces instead of tabs.
    """

    def __init__(
            self,
            text: str = '',
            tab_width: int = DEFAULT_TAB_WIDTH,
            indent_width: int = 2,
            insert_spaces: bool = True
    ) -> None:
        self._lines = text.split('\n')
        self._spans: Optional[list[list[lexer.Span]]] = None
        self.tab_width = tab_width
        self.indent_width = indent_width
        self.insert_spaces = insert_spaces

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def text(self) -> str:
        return '\n'.join(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def get_line_text(self, line: int) -> str:
        if 0 <= line < len(self._lines):
            return self._lines[line]
        return ''

    def _line_spans(self, line: int) -> list[lexer.Span]:
        if self._spans is None:
            self._spans = []
            state = lexer.STATE_NORMAL
            for text in self._lines:
                spans, state = lexer.scan_line(text, state)
                self._spans.append(spans)
        return self._spans[line]

    def is_in_string_or_comment(self, position: Position) -> bool:
        if not self.is_valid(position):
            return False

        return bool(lexer.kind_at(self._line_spans(position.line), position.column))

    def current_tab_width(self) -> int:
        return self.tab_width

    def current_indent_width(self) -> int:
        return self.indent_width

    def insert_spaces_not_tabs(self) -> bool:
        return self.insert_spaces

    # -----Editing-------------------------------------------------------------

    def offset_of(self, position: Position) -> int:
        """Return the absolute character offset of a position."""
        line, column = self._clamp(position)
        return sum(len(text) + 1 for text in self._lines[:line]) + column

    def position_of(self, offset: int) -> Position:
        return self.advance(Position(0, 0), offset)

    def replace(self, start: Position, end: Position, text: str) -> Position:
        """
        Replace the ``[start, end)`` range with text.

        Returns:
            Position: The position right after the inserted text.
        """
        start_offset = self.offset_of(start)
        end_offset = self.offset_of(end)
        document = self.text
        document = document[:start_offset] + text + document[end_offset:]
        self._lines = document.split('\n')
        self._spans = None
        return self.position_of(start_offset + len(text))

    def insert(self, position: Position, text: str) -> Position:
        return self.replace(position, position, text)
