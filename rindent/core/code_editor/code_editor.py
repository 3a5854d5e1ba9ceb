"""
A QPlainTextEdit wrapper with numbered lines, syntax highlighting and
per-keystroke auto-indentation.

Indentation decisions are made by an indenter from ``rindent.core.indenter``,
which only reads the document through a ``DocumentBuffer``. This widget feeds
it key presses and applies the edits it returns.
"""


from typing import Iterator
from typing import Optional
from typing import Type

import PySide6TK.text
from PySide6 import QtCore
from PySide6 import QtGui
from PySide6 import QtWidgets

from rindent.core import appdata
from rindent.core import broker
from rindent.core import languages
from rindent.core import log
from rindent.core.code_editor import line_number
from rindent.core.code_editor.document_buffer import DocumentBuffer
from rindent.core.indenter import EditResult
from rindent.core.indenter import IndentConfiguration
from rindent.core.indenter import KeyEvent
from rindent.core.indenter import RubyIndenter
from rindent.core.indenter import TriggerContext
from rindent.core.indenter import dispatch
from rindent.core.languages.ruby_syntax import RubyHighlighter
from rindent.core.languages.ruby_syntax import reload_color_scheme


logger = log.get_logger(__name__)

optional_highlighter = Optional[languages.SyntaxHighlighter]


def key_event_from_qt(event: QtGui.QKeyEvent) -> Optional[KeyEvent]:
    """
    Translate a Qt key press into the indenter's ``KeyEvent``.

    Returns:
        Optional[KeyEvent]: None for shortcuts and keys that type nothing.
    """
    modifiers = event.modifiers()
    if modifiers & (
            QtCore.Qt.KeyboardModifier.ControlModifier
            | QtCore.Qt.KeyboardModifier.AltModifier
            | QtCore.Qt.KeyboardModifier.MetaModifier
    ):
        return None

    if event.key() == QtCore.Qt.Key.Key_Return:
        return KeyEvent(dispatch.KEY_RETURN)
    if event.key() == QtCore.Qt.Key.Key_Enter:
        return KeyEvent(dispatch.KEY_KP_ENTER)

    text = event.text()
    if len(text) != 1:
        return None
    return KeyEvent(text)


def unindent_length(text: str, config: IndentConfiguration) -> int:
    """
    Count the leading whitespace characters of ``text`` that make up at most
    one indent level, tabs expanding to the next tab stop.
    """
    width = 0
    count = 0
    for ch in text:
        if width >= config.indent_width:
            break
        if ch == ' ':
            width += 1
        elif ch == '\t':
            width += config.tab_width - width % config.tab_width
        else:
            break
        count += 1
    return count


class CodeEditor(QtWidgets.QPlainTextEdit):
    """
    Plain text editing for Ruby: line numbers, syntax highlighting and
    indentation handling.

    Tab and Shift+Tab indent and unindent the selected lines. The
    ``indented`` and ``unindented`` signals carry the ``range`` of affected
    line numbers so external tools can hook into them.

    When an indenter is set, trigger keys are first typed as usual, then the
    indenter is asked how the line should look and its edit is applied in the
    same undo step. Every applied edit is emitted through the broker as
    ``code_editor/indent_applied`` with the ``EditResult`` as data.

    Attributes:
        line_number_area (LineNumberArea): The gutter.
        indenter (RubyIndenter):
            The auto-indenter, None to only carry indentation over on Enter.
        indented (Signal(range)): Lines to push one level right.
        unindented (Signal(range)): Lines to pull one level left.

    Args:
        syntax_highlighter_cls (SyntaxHighlighter): Instantiated on the
            document, None for no highlighting. Defaults to
            ``RubyHighlighter``.
        indenter_cls (type[RubyIndenter]): Instantiated for this editor, None
            to only carry indentation over on Enter. Defaults to
            ``RubyIndenter``.
    """

    indented = QtCore.Signal(range)
    unindented = QtCore.Signal(range)

    current_line_color = QtGui.QColor(40, 40, 40)

    def __init__(
            self,
            parent: Optional[QtWidgets.QWidget] = None,
            syntax_highlighter_cls: optional_highlighter = RubyHighlighter,
            indenter_cls: Optional[Type[RubyIndenter]] = RubyIndenter
    ) -> None:
        super(CodeEditor, self).__init__(parent)
        broker.register_source('code_editor')

        self.setFont(QtGui.QFont('Courier', 12))
        self.setLineWrapMode(QtWidgets.QPlainTextEdit.LineWrapMode.NoWrap)
        self._update_tab_stop_distance()

        self.indenter: Optional[RubyIndenter] = None
        if indenter_cls is not None:
            self.indenter = indenter_cls()
        self.line_number_area = line_number.LineNumberArea(self)

        self._connect_signals()
        self._create_subscriptions()
        self.update_line_number_area_width(0)

        self.syntax_highlighter_cls = syntax_highlighter_cls
        self._highlighter: Optional[QtGui.QSyntaxHighlighter] = None
        if self.syntax_highlighter_cls is not None:
            self._highlighter = self.syntax_highlighter_cls(self.document())
        self.highlight_current_line()

    def _connect_signals(self) -> None:
        self.indented.connect(self.indent)
        self.unindented.connect(self.unindent)
        self.blockCountChanged.connect(self.update_line_number_area_width)
        self.updateRequest.connect(self.update_line_number_area)
        self.cursorPositionChanged.connect(self._emit_cursor_position)

    def _create_subscriptions(self) -> None:
        on_preferences_updated = self._on_preferences_updated
        broker.register_subscriber(
            'SYSTEM',
            'PREFERENCES_UPDATED',
            on_preferences_updated
        )
        # Runs once the C++ editor is deleted, self must not be touched.
        self.destroyed.connect(
            lambda: broker.unregister_subscriber(
                'SYSTEM',
                'PREFERENCES_UPDATED',
                on_preferences_updated
            )
        )

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        super().resizeEvent(event)
        cr = self.contentsRect()
        self.line_number_area.setGeometry(
            QtCore.QRect(
                cr.left(),
                cr.top(),
                self.line_number_area.required_width,
                cr.height()
            )
        )

    def _on_preferences_updated(self, _: broker.Event) -> None:
        self._update_tab_stop_distance()
        reload_color_scheme()
        self.rebuild_highlighter()

    def _update_tab_stop_distance(self) -> None:
        tab_width = appdata.Preferences().code_preferences.tab_space_width
        self.setTabStopDistance(
            QtGui.QFontMetricsF(self.font()).horizontalAdvance(' ') * tab_width
        )

    def rebuild_highlighter(self) -> None:
        """Drop the current highlighter and build a new one from
        ``syntax_highlighter_cls``, picking up new colors or a new language."""
        if self._highlighter is not None:
            self._highlighter.setDocument(None)
            self._highlighter.deleteLater()
            self._highlighter = None

        if self.syntax_highlighter_cls is None:
            return

        self._highlighter = self.syntax_highlighter_cls(self.document())

    # -----Line Numbers--------------------------------------------------------

    def update_line_number_area_width(self, _) -> None:
        self.setViewportMargins(self.line_number_area.required_width, 0, 0, 0)

    def update_line_number_area(
            self,
            rect: QtCore.QRect,
            vertical_scroll: int
    ) -> None:
        if vertical_scroll:
            self.line_number_area.scroll(0, vertical_scroll)
        else:
            self.line_number_area.update(
                0,
                rect.y(),
                self.line_number_area.width(),
                rect.height()
            )

        if rect.contains(self.viewport().rect()):
            self.update_line_number_area_width(0)

    def visible_block_tops(self) -> Iterator[tuple[int, float]]:
        """Yield ``(block_number, top)`` for each visible block, top to bottom."""
        block = self.firstVisibleBlock()
        top = self.blockBoundingGeometry(block).translated(self.contentOffset()).top()
        while block.isValid():
            if block.isVisible():
                yield block.blockNumber(), top
            top += self.blockBoundingRect(block).height()
            block = block.next()

    # -----Cursor--------------------------------------------------------------

    def _emit_cursor_position(self) -> None:
        """Move the line highlight and publish the 1-based line and column as
        ``code_editor/cursor_position``."""
        self.highlight_current_line()

        cursor = self.textCursor()
        event = broker.Event(
            'code_editor',
            'cursor_position',
            (cursor.blockNumber() + 1, cursor.positionInBlock() + 1)
        )
        broker.emit(event)

    def highlight_current_line(self) -> None:
        """Paint the cursor line with ``current_line_color``."""
        if self.isReadOnly():
            self.setExtraSelections([])
            return

        selection = QtWidgets.QTextEdit.ExtraSelection()

        fmt = QtGui.QTextCharFormat()
        fmt.setBackground(self.current_line_color)
        fmt.setProperty(QtGui.QTextFormat.Property.FullWidthSelection, True)
        selection.format = fmt

        selection.cursor = self.textCursor()
        selection.cursor.clearSelection()
        self.setExtraSelections([selection])

    # -----Indentation---------------------------------------------------------

    def _indent_configuration(self) -> IndentConfiguration:
        return IndentConfiguration.from_buffer(self.buffer())

    @property
    def _indent(self) -> str:
        """One indent level, the same whitespace auto-indentation inserts."""
        return self._indent_configuration().unit

    def _get_selection_range(self) -> tuple[int, int]:
        """
        Block numbers of the selection start and end, equal without a
        selection.
        """
        cursor = self.textCursor()
        document = self.document()
        return (
            document.findBlock(cursor.selectionStart()).blockNumber(),
            document.findBlock(cursor.selectionEnd()).blockNumber()
        )

    def indent(self, lines: range) -> None:
        """Insert one indent level at the start of each line in ``lines``."""
        with PySide6TK.text.PlainTextUndoBlock(self):
            for i in lines:
                cursor = QtGui.QTextCursor(self.document().findBlockByNumber(i))
                cursor.insertText(self._indent)

    def unindent(self, lines: range) -> None:
        """Remove up to one indent level from the lines within the given range."""
        config = self._indent_configuration()
        with PySide6TK.text.PlainTextUndoBlock(self):
            for i in lines:
                block = self.document().findBlockByNumber(i)
                count = unindent_length(block.text(), config)
                if not count:
                    continue

                cursor = QtGui.QTextCursor(block)
                cursor.movePosition(
                    QtGui.QTextCursor.MoveOperation.Right,
                    QtGui.QTextCursor.MoveMode.KeepAnchor,
                    count
                )
                cursor.removeSelectedText()

    @property
    def auto_indent_enabled(self) -> bool:
        if self.indenter is None:
            return False
        return appdata.Preferences().code_preferences.enable_auto_indent

    def buffer(self) -> DocumentBuffer:
        return DocumentBuffer(self.document())

    def auto_indent(self, key_event: KeyEvent) -> EditResult:
        """
        Ask the indenter about the key just typed and apply its answer.

        Args:
            key_event (KeyEvent): The key, already inserted in the document.
        Returns:
            EditResult: What was applied.
        """
        buffer = self.buffer()
        position = buffer.position_from_cursor(self.textCursor())
        context = TriggerContext(buffer, position, position, key_event)
        result = self.indenter.format(context)
        self.apply_edit_result(buffer, result)
        return result

    def apply_edit_result(self, buffer: DocumentBuffer, result: EditResult) -> None:
        """Replace the result's range and move the cursor accordingly."""
        if not result.changed:
            return

        cursor = self.textCursor()
        cursor_pos = cursor.position()
        start = buffer.document_offset(result.start)
        end = buffer.document_offset(result.end)

        edit_cursor = QtGui.QTextCursor(self.document())
        edit_cursor.setPosition(start)
        edit_cursor.setPosition(end, QtGui.QTextCursor.MoveMode.KeepAnchor)
        edit_cursor.insertText(result.text)

        if cursor_pos >= end:
            cursor_pos += len(result.text) - (end - start)
        else:
            cursor_pos = start + len(result.text)
        cursor.setPosition(cursor_pos + result.cursor_offset)
        self.setTextCursor(cursor)

        logger.debug('Applied indentation edit %s', result)
        broker.emit(broker.Event('code_editor', 'indent_applied', result))

    def _carry_indent_over(self) -> None:
        """Enter without an indenter: keep the previous line's indentation."""
        previous = self.textCursor().block().previous().text()
        self.insertPlainText(previous[:len(previous) - len(previous.lstrip())])

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:
        """Block indentation shortcuts and auto-indentation triggers."""
        first_line, last_line = self._get_selection_range()

        # Tab over several lines
        if event.key() == QtCore.Qt.Key.Key_Tab and last_line - first_line:
            self.indented.emit(range(first_line, last_line + 1))
            return None

        # Shift+Tab, selection or not
        if event.key() == QtCore.Qt.Key.Key_Backtab:
            self.unindented.emit(range(first_line, last_line + 1))
            return None

        # Tab in a single line
        if event.key() == QtCore.Qt.Key.Key_Tab:
            self.insertPlainText(self._indent)
            return None

        key_event = key_event_from_qt(event)
        if key_event is None:
            return super(CodeEditor, self).keyPressEvent(event)

        if not self.auto_indent_enabled:
            super(CodeEditor, self).keyPressEvent(event)
            if key_event.key in dispatch.NEWLINE_KEYS:
                self._carry_indent_over()
            return None

        if not self.indenter.is_trigger(key_event):
            return super(CodeEditor, self).keyPressEvent(event)

        with PySide6TK.text.PlainTextUndoBlock(self):
            super(CodeEditor, self).keyPressEvent(event)
            self.auto_indent(key_event)
        return None
