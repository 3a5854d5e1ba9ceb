import time

import pytest

QtGui = pytest.importorskip('PySide6.QtGui')

from rindent.core import appdata
from rindent.core.code_editor.document_buffer import DocumentBuffer
from rindent.core.indenter import KeyEvent
from rindent.core.indenter import NO_CHANGE
from rindent.core.indenter import Position
from rindent.core.indenter import RubyIndenter
from rindent.core.indenter import TriggerContext
from rindent.core.indenter import lexer
from rindent.core.indenter import policy
from rindent.core.languages.ruby_syntax import RubyHighlighter


@pytest.fixture
def document(qapp):
    def make(text: str, highlighted: bool = False) -> QtGui.QTextDocument:
        doc = QtGui.QTextDocument()
        if highlighted:
            doc._highlighter = RubyHighlighter(doc)
        doc.setPlainText(text)
        if highlighted:
            doc._highlighter.rehighlight()
        return doc

    return make


def test_lines(document):
    buffer = DocumentBuffer(document('def foo\n  bar'))

    assert buffer.line_count() == 2
    assert buffer.get_line_text(1) == '  bar'
    assert buffer.get_line_text(7) == ''


def test_empty_document_has_one_line(document):
    assert DocumentBuffer(document('')).line_count() == 1


@pytest.mark.parametrize('highlighted', [False, True])
def test_strings_spanning_lines(document, highlighted):
    buffer = DocumentBuffer(document('x = "\nif y\n"\nif z', highlighted))

    assert not buffer.is_in_string_or_comment(Position(0, 0))
    assert buffer.is_in_string_or_comment(Position(1, 0))
    assert not buffer.is_in_string_or_comment(Position(3, 0))


def test_highlighter_stores_scanner_state(document):
    doc = document('x = "\ny"', highlighted=True)

    assert doc.findBlockByNumber(0).userState() == lexer.STATE_DOUBLE
    assert doc.findBlockByNumber(1).userState() == lexer.STATE_NORMAL


@pytest.mark.parametrize('highlighted', [False, True])
def test_block_comment(document, highlighted):
    buffer = DocumentBuffer(document('=begin\nif x\n=end\nif y', highlighted))

    assert buffer.is_in_string_or_comment(Position(1, 0))
    assert not buffer.is_in_string_or_comment(Position(3, 0))


def test_settings_follow_preferences(document):
    buffer = DocumentBuffer(document(''))
    prefs = appdata.Preferences().code_preferences

    assert buffer.current_indent_width() == 2
    assert buffer.insert_spaces_not_tabs()

    prefs.indent_width = 4
    prefs.tab_type = appdata.TAB_TYPE_TAB

    assert buffer.current_indent_width() == 4
    assert not buffer.insert_spaces_not_tabs()


def test_fixed_settings(document):
    prefs = appdata.CodePreferences(tab_type=appdata.TAB_TYPE_TAB, tab_space_width=4, indent_width=4)
    buffer = DocumentBuffer(document(''), prefs)

    assert buffer.current_tab_width() == 4
    assert not buffer.insert_spaces_not_tabs()


def test_document_offset(document):
    buffer = DocumentBuffer(document('ab\ncd'))

    assert buffer.document_offset(Position(1, 1)) == 4
    assert buffer.document_offset(Position(1, 10)) == 5
    assert buffer.document_offset(Position(9, 0)) == 5


def test_indenter_reads_document(document):
    buffer = DocumentBuffer(document('  def foo\n', highlighted=True))
    cursor = Position(1, 0)
    result = RubyIndenter().format(TriggerContext(buffer, cursor, cursor, KeyEvent('Return')))

    assert result.text == '    '


@pytest.mark.parametrize('highlighted', [False, True])
def test_regex_holding_a_quote(document, highlighted):
    buffer = DocumentBuffer(document('s = line.gsub(/"/, "")\nif x', highlighted))

    assert buffer.is_in_string_or_comment(Position(0, 15))
    assert not buffer.is_in_string_or_comment(Position(1, 0))


@pytest.mark.parametrize('highlighted', [False, True])
def test_string_detection_follows_edits(document, highlighted):
    doc = document('x = 1\nif y', highlighted)
    buffer = DocumentBuffer(doc)

    assert not buffer.is_in_string_or_comment(Position(1, 0))

    cursor = QtGui.QTextCursor(doc)
    cursor.setPosition(4)
    cursor.insertText('"')

    assert buffer.is_in_string_or_comment(Position(1, 0))


def test_large_document_scanned_once(document):
    text = '\n'.join(['x = foo(1, 2).bar do_it "s" # c'] * 3000 + ['    end'])
    buffer = DocumentBuffer(document(text))

    start = time.perf_counter()
    result = policy.realign_end(buffer, Position(3000, len('    end')))
    elapsed = time.perf_counter() - start

    assert result is NO_CHANGE
    assert elapsed < 2.0
