import pytest

from rindent.core.indenter import KeyEvent
from rindent.core.indenter import NO_CHANGE
from rindent.core.indenter import Position
from rindent.core.indenter import RubyIndenter
from rindent.core.indenter import TextBuffer
from rindent.core.indenter import TriggerContext
from rindent.core.indenter import policy


@pytest.mark.parametrize('key', ['Return', 'KP_Enter', 'd', 'e', 'f', 'n'])
def test_triggers(key):
    assert RubyIndenter.is_trigger(KeyEvent(key))


@pytest.mark.parametrize('key', ['Tab', 'x', 'D', ' ', '}'])
def test_non_triggers(key):
    assert not RubyIndenter.is_trigger(KeyEvent(key))


def test_non_trigger_does_nothing():
    buffer = TextBuffer('def foo\n')
    cursor = Position(1, 0)
    context = TriggerContext(buffer, cursor, cursor, KeyEvent('x'))

    assert RubyIndenter().format(context) is NO_CHANGE


def test_settings_read_on_every_call():
    indenter = RubyIndenter()
    buffer = TextBuffer('def foo\n')
    cursor = Position(1, 0)
    context = TriggerContext(buffer, cursor, cursor, KeyEvent('Return'))

    assert indenter.format(context).text == '  '
    buffer.indent_width = 4
    assert indenter.format(context).text == '    '


# -----New Line----------------------------------------------------------------

@pytest.mark.parametrize('text, expected', [
    ('def foo^', 'def foo\n  ^'),
    ('  class Foo^', '  class Foo\n    ^'),
    ('module Bar^', 'module Bar\n  ^'),
    ('while x < 3^', 'while x < 3\n  ^'),
    ('5.times do |i|^', '5.times do |i|\n  ^'),
    ('do_something^', 'do_something\n^'),
    ('    puts 1^', '    puts 1\n    ^'),
    ('\t  foo^', '\t  foo\n\t  ^'),
    ('  else^', '  else\n  ^'),
    ('x = "if"^', 'x = "if"\n^'),
    ('# def foo^', '# def foo\n^'),
])
def test_enter(typist, text, expected):
    assert typist(text, '\n') == expected


def test_enter_on_keypad(make_buffer):
    buffer, cursor = make_buffer('if x\n^')
    context = TriggerContext(buffer, cursor, cursor, KeyEvent('KP_Enter'))

    assert RubyIndenter().format(context).text == '  '


def test_enter_with_tabs(typist):
    result = typist('def foo^', '\n', tab_width=4, indent_width=4, insert_spaces=False)

    assert result == 'def foo\n\t^'


def test_enter_indent_width_falls_back_to_tab_width(typist):
    result = typist('def foo^', '\n', tab_width=3, indent_width=-1)

    assert result == 'def foo\n   ^'


@pytest.mark.parametrize('text, expected', [
    ('x = {^}', 'x = {\n  ^\n}'),
    ('  x = [^]', '  x = [\n    ^\n  ]'),
    ('x = {^]', 'x = {\n^]'),
    ('x = (^)', 'x = (\n^)'),
])
def test_enter_between_braces(typist, text, expected):
    assert typist(text, '\n') == expected


# -----Keywords----------------------------------------------------------------

def test_typing_end_realigns(typist):
    assert typist('def foo\n  bar\n  ^', 'end') == 'def foo\n  bar\nend^'


def test_typing_end_without_opener(typist):
    assert typist('x = 1\n    ^', 'end') == 'x = 1\n    end^'


def test_typing_end_inside_word(typist):
    assert typist('def foo\n    en^ing', 'd') == 'def foo\n    end^ing'


def test_typing_send(typist):
    assert typist('def foo\n    sen^', 'd') == 'def foo\n    send^'


def test_typing_end_after_code(typist):
    assert typist('if x\n  foo.^', 'end') == 'if x\n  foo.end^'


def test_typing_end_in_comment(typist):
    assert typist('if x\n  # ^', 'end') == 'if x\n  # end^'


def test_typing_end_in_block(typist):
    assert typist('[1].each do |i|\n  p i\n  ^', 'end') == '[1].each do |i|\n  p i\nend^'


@pytest.mark.parametrize('opener, keyword', [
    ('if x', 'else'),
    ('if x', 'elsif'),
    ('case x', 'when'),
    ('begin', 'rescue'),
    ('begin', 'ensure'),
    ('def foo', 'rescue'),
    ('unless x', 'else'),
])
def test_typing_mid_scope_keyword_realigns(typist, opener, keyword):
    text = f'  {opener}\n    body\n      ^'

    assert typist(text, keyword) == f'  {opener}\n    body\n  {keyword}^'


def test_typing_else_from_deeper_indentation(typist):
    assert typist('if x\n    ^', 'else') == 'if x\nelse^'


def test_typing_else_already_aligned(typist):
    assert typist('if x\n^', 'else') == 'if x\nelse^'


def test_typing_mid_scope_keyword_without_opener(typist):
    assert typist('x = 1\n  ^', 'else') == 'x = 1\n  else^'


# -----Sessions----------------------------------------------------------------

@pytest.mark.parametrize('depth', [1, 2, 3, 5])
def test_nested_blocks_close_in_order(typist, depth):
    keys = ''.join(f'if a{i}\n' for i in range(depth))
    keys += 'x\n'
    keys += '\n'.join(['end'] * depth)

    lines = ['  ' * i + f'if a{i}' for i in range(depth)]
    lines.append('  ' * depth + 'x')
    lines.extend('  ' * i + 'end' for i in reversed(range(depth)))

    assert typist('^', keys) == '\n'.join(lines) + '^'


def test_realigned_document_is_stable():
    buffer = TextBuffer('class Foo\n  def bar\n    if x\n      y\n    end\n  end\nend')

    for line, text in enumerate(buffer.lines):
        if text.strip() == 'end':
            assert policy.realign_end(buffer, Position(line, len(text))) is NO_CHANGE


def test_typing_a_method(typist):
    keys = 'def foo(x)\nif x\nbar\nelse\nbaz\nend\nend\n'
    expected = (
        'def foo(x)\n'
        '  if x\n'
        '    bar\n'
        '  else\n'
        '  baz\n'
        '  end\n'
        'end\n'
        '^'
    )

    assert typist('^', keys) == expected


# -----Literals----------------------------------------------------------------

@pytest.mark.parametrize('line', [
    's = line.gsub(/"/, "")',
    "words = %w(don't stop)",
    "name = %q(it's)",
])
def test_enter_after_literal_holding_a_quote(typist, line):
    assert typist(f'{line}\ndef foo^', '\n') == f'{line}\ndef foo\n  ^'


def test_typing_end_after_regex_holding_a_quote(typist):
    text = "def foo\n  x =~ /'/\n  en^"

    assert typist(text, 'd') == "def foo\n  x =~ /'/\nend^"


def test_typing_end_inside_regex(typist):
    assert typist('def foo\n  x = /\n  ^', 'end') == 'def foo\n  x = /\n  end^'
