"""
A small line scanner locating string and comment contexts in Ruby source.

This is not a tokenizer. It only knows enough about quoting and comments to
tell whether a column sits inside a literal, so keywords appearing in
``"if you want"``, ``/end/``, ``%w(do end)`` or ``# end of loop`` are not
mistaken for code.

Scanning is line based and resumable: each line returns the state it leaves
open, which seeds the next line. The syntax highlighter stores that state as
the block state.

A literal state packs the closing delimiter and the nesting depth of paired
delimiters into one non-negative int, so ``%w(a (b) c)`` closes on the last
parenthesis only.
"""


from dataclasses import dataclass
from typing import Optional


STATE_NORMAL = 0
STATE_BLOCK_COMMENT = 1

CONTEXT_STRING = 'string'
CONTEXT_COMMENT = 'comment'

_QUOTES = ('"', "'", '`')

_PAIRS = {
    '(': ')',
    '[': ']',
    '{': '}',
    '<': '>',
}
_OPENERS = {close: open_ for open_, close in _PAIRS.items()}

_PERCENT_TYPES = 'qQwWiIrsx'

# A ``/`` or ``%`` after these starts a literal rather than dividing.
_VALUE_PUNCTUATION = frozenset('(,=~!|&{[;?:+-*/%<>^')
_VALUE_KEYWORDS = frozenset((
    'and', 'case', 'do', 'else', 'elsif', 'if', 'in', 'not', 'or', 'return',
    'then', 'unless', 'until', 'when', 'while', 'yield',
))

_BLOCK_COMMENT_OPEN = '=begin'
_BLOCK_COMMENT_CLOSE = '=end'


def literal_state(close: str, depth: int = 1) -> int:
    """The state inside a literal closed by ``close``."""
    return ord(close) << 8 | min(depth, 0xff)


def _closing(state: int) -> str:
    return chr(state >> 8)


def _depth(state: int) -> int:
    return state & 0xff


STATE_DOUBLE = literal_state('"')
STATE_SINGLE = literal_state("'")
STATE_BACKTICK = literal_state('`')
STATE_REGEX = literal_state('/')


@dataclass(frozen=True)
class Span(object):
    """A half open ``[start, end)`` column range of one context kind."""
    start: int
    end: int
    kind: str

    def __contains__(self, column: int) -> bool:
        return self.start <= column < self.end


def _is_block_comment_marker(text: str, marker: str) -> bool:
    if not text.startswith(marker):
        return False
    rest = text[len(marker):]
    return not rest or rest[0].isspace()


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


def _previous_word(text: str, end: int) -> str:
    start = end
    while start > 0 and _is_word_char(text[start - 1]):
        start -= 1
    return text[start:end]


def _expects_value(text: str, i: int, close: str) -> bool:
    """
    Guess whether an operand, rather than an operator, starts at ``i``.

    ``x = /a/`` and ``if /a/`` hold a regex, ``a / b`` and ``a /b`` divide.
    A method call written without parentheses, as in ``split /,/``, counts as
    an operand when ``close`` follows on the same line.
    """
    j = i - 1
    while j >= 0 and text[j] in ' \t':
        j -= 1
    if j < 0:
        return True

    prev = text[j]
    if prev in _VALUE_PUNCTUATION:
        return True
    if not _is_word_char(prev):
        return False

    word = _previous_word(text, j + 1)
    if word in _VALUE_KEYWORDS:
        return True

    spaced_before = j < i - 1
    next_ch = text[i + 1:i + 2]
    if not spaced_before or not next_ch or next_ch.isspace():
        return False
    return text.find(close, i + 2) != -1


def _percent_literal(text: str, i: int) -> Optional[tuple[int, int]]:
    j = i + 1
    if j < len(text) and text[j] in _PERCENT_TYPES:
        j += 1
    if j >= len(text):
        return None

    delimiter = text[j]
    if _is_word_char(delimiter) or delimiter.isspace() or delimiter == '=':
        return None

    close = _PAIRS.get(delimiter, delimiter)
    if not _expects_value(text, i, close):
        return None
    return j - i + 1, literal_state(close)


def _literal_start(text: str, i: int) -> Optional[tuple[int, int]]:
    """
    Return how many characters open a literal at ``i`` and the state inside
    it, or None if no literal starts there.
    """
    ch = text[i]
    if ch in _QUOTES:
        return 1, literal_state(ch)
    if ch == '/' and _expects_value(text, i, '/'):
        return 1, STATE_REGEX
    if ch == '%':
        return _percent_literal(text, i)
    return None


def scan_line(text: str, state: int = STATE_NORMAL) -> tuple[list[Span], int]:
    """
    Find the string and comment spans of one line.

    Regex and percent literals count as strings. A literal left open at the
    end of the line extends one column past the text, covering the line
    break.

    Args:
        text (str): The line, without its line break.
        state (int): The state left open by the previous line.
    Returns:
        tuple[list[Span], int]: The spans in column order and the state left
            open for the next line.
    """
    line_end = len(text) + 1

    if state == STATE_BLOCK_COMMENT:
        if _is_block_comment_marker(text, _BLOCK_COMMENT_CLOSE):
            return [Span(0, len(text), CONTEXT_COMMENT)], STATE_NORMAL
        return [Span(0, line_end, CONTEXT_COMMENT)], STATE_BLOCK_COMMENT

    if state == STATE_NORMAL and _is_block_comment_marker(text, _BLOCK_COMMENT_OPEN):
        return [Span(0, line_end, CONTEXT_COMMENT)], STATE_BLOCK_COMMENT

    spans: list[Span] = []
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]

        if state == STATE_NORMAL:
            if ch == '#':
                spans.append(Span(i, len(text), CONTEXT_COMMENT))
                return spans, STATE_NORMAL

            opened = _literal_start(text, i)
            if opened is not None:
                length, state = opened
                start = i
                i += length
                continue

            if ch in '?$' and text[i + 1:i + 2] in _QUOTES:
                # ?" is a character, $' a global
                i += 1
            i += 1
            continue

        if ch == '\\':
            i += 2
            continue

        close = _closing(state)
        depth = _depth(state)
        if ch == close:
            if depth > 1:
                state = literal_state(close, depth - 1)
            else:
                spans.append(Span(start, i + 1, CONTEXT_STRING))
                state = STATE_NORMAL
        elif ch == _OPENERS.get(close):
            state = literal_state(close, depth + 1)

        i += 1

    if state != STATE_NORMAL:
        spans.append(Span(start, line_end, CONTEXT_STRING))

    return spans, state


def kind_at(spans: list[Span], column: int) -> str:
    """Return the kind of the span covering a column, or an empty string."""
    for span in spans:
        if column in span:
            return span.kind
    return ''


def context_at(text: str, column: int, state: int = STATE_NORMAL) -> str:
    """
    Return the context kind covering a column, or an empty string for code.
    """
    spans, _ = scan_line(text, state)
    return kind_at(spans, column)


def scan_lines(lines: list[str], state: int = STATE_NORMAL) -> list[int]:
    """
    Return the state each line starts in.

    Args:
        lines (list[str]): Consecutive lines.
        state (int): The state before the first line.
    """
    states = []
    for line in lines:
        states.append(state)
        _, state = scan_line(line, state)
    return states
