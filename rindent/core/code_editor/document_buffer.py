"""
Exposes a ``QTextDocument`` to the indentation engine as a ``Buffer``.
"""


from typing import Optional

from PySide6 import QtGui

from rindent.core import appdata
from rindent.core.indenter import Buffer
from rindent.core.indenter import Position
from rindent.core.indenter import lexer


class DocumentBuffer(Buffer):
    """
    A read-only ``Buffer`` view of a ``QTextDocument``. Lines are blocks.

    Indentation settings are read from the preferences on every call, unless
    fixed ones are given.

    String and comment detection resumes from the block state the
    ``RubyHighlighter`` leaves on the previous block. Blocks the highlighter
    has not seen fall back to one scan of the whole document. Both the scan
    and the spans of each queried line are kept until the document changes.

    Args:
        document (QtGui.QTextDocument): The document to read.
        code_preferences (appdata.CodePreferences): Fixed settings. Optional.
    """

    def __init__(
            self,
            document: QtGui.QTextDocument,
            code_preferences: Optional[appdata.CodePreferences] = None
    ) -> None:
        self.document = document
        self._code_preferences = code_preferences

        self._revision = -1
        self._start_states: Optional[list[int]] = None
        self._spans: dict[int, list[lexer.Span]] = {}

    @property
    def code_preferences(self) -> appdata.CodePreferences:
        if self._code_preferences is not None:
            return self._code_preferences
        return appdata.Preferences().code_preferences

    def _block(self, line: int) -> QtGui.QTextBlock:
        return self.document.findBlockByNumber(line)

    def line_count(self) -> int:
        return max(1, self.document.blockCount())

    def get_line_text(self, line: int) -> str:
        block = self._block(line)
        if not block.isValid():
            return ''
        return block.text()

    def _check_revision(self) -> None:
        revision = self.document.revision()
        if revision != self._revision:
            self._revision = revision
            self._start_states = None
            self._spans.clear()

    def _state_before(self, block: QtGui.QTextBlock) -> int:
        previous = block.previous()
        if not previous.isValid():
            return lexer.STATE_NORMAL
        if previous.userState() >= 0:
            return previous.userState()

        if self._start_states is None:
            lines = []
            current = self.document.firstBlock()
            while current.isValid():
                lines.append(current.text())
                current = current.next()
            self._start_states = lexer.scan_lines(lines)
        return self._start_states[block.blockNumber()]

    def _line_spans(self, block: QtGui.QTextBlock) -> list[lexer.Span]:
        self._check_revision()
        line = block.blockNumber()
        if line not in self._spans:
            spans, _ = lexer.scan_line(block.text(), self._state_before(block))
            self._spans[line] = spans
        return self._spans[line]

    def is_in_string_or_comment(self, position: Position) -> bool:
        block = self._block(position.line)
        if not block.isValid():
            return False
        return bool(lexer.kind_at(self._line_spans(block), position.column))

    def current_tab_width(self) -> int:
        return self.code_preferences.tab_space_width

    def current_indent_width(self) -> int:
        return self.code_preferences.indent_width

    def insert_spaces_not_tabs(self) -> bool:
        return self.code_preferences.insert_spaces

    # -----Cursor Conversion---------------------------------------------------

    @staticmethod
    def position_from_cursor(cursor: QtGui.QTextCursor) -> Position:
        return Position(cursor.blockNumber(), cursor.positionInBlock())

    def document_offset(self, position: Position) -> int:
        """Return the absolute document position of a ``Position``."""
        block = self._block(position.line)
        if not block.isValid():
            return max(0, self.document.characterCount() - 1)
        return block.position() + min(max(position.column, 0), len(block.text()))
