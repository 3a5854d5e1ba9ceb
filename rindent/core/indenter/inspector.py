"""
Pure queries over a single line of a buffer.

Nothing in here is cached. The buffer can change between two keystrokes, so
every answer is computed from the buffer at the time of the call.
"""


import re
from dataclasses import dataclass
from typing import Optional

from rindent.core.indenter import keywords
from rindent.core.indenter.position import Buffer
from rindent.core.indenter.position import Position


_TOKEN_PATTERN = re.compile(r'[A-Za-z_]\w*[?!]?|\d[\w.]*|[^\w\s]+')
_WORD_PATTERN = re.compile(r'\w')

BRACE_PAIRS = {
    '{': '}',
    '[': ']',
}


@dataclass(frozen=True)
class LineContext(object):
    """A snapshot of what the engine knows about one line."""
    trimmed_text: str
    first_token: str
    leading_whitespace: str
    visual_indent_column: int
    is_in_string_or_comment: bool


def _is_word_char(ch: str) -> bool:
    return bool(ch) and _WORD_PATTERN.match(ch) is not None


def tokenize(text: str) -> list[tuple[int, str]]:
    """
    Split a line into ``(column, token)`` pairs on word boundaries.

    Identifiers keep a trailing ``?`` or ``!``; runs of punctuation form a
    single token.

    >>> tokenize('5.times do |i|')
    [(0, '5.times'), (8, 'do'), (11, '|'), (12, 'i'), (13, '|')]
    """
    return [(m.start(), m.group()) for m in _TOKEN_PATTERN.finditer(text)]


def raw_line(buffer: Buffer, pos: Position) -> str:
    return buffer.get_line_text(pos.line)


def line_text(buffer: Buffer, pos: Position) -> str:
    """Return the line of ``pos`` with surrounding whitespace removed."""
    return raw_line(buffer, pos).strip()


def starts_with(buffer: Buffer, pos: Position, prefix: str) -> bool:
    return line_text(buffer, pos).startswith(prefix)


def starts_with_keyword(buffer: Buffer, pos: Position, keyword: str) -> bool:
    """
    Like ``starts_with()``, but the keyword must be a whole word, so a line
    holding ``ending = 1`` does not start with ``end``.
    """
    text = line_text(buffer, pos)
    if not text.startswith(keyword):
        return False
    return not _is_word_char(text[len(keyword):len(keyword) + 1])


def leading_whitespace(buffer: Buffer, pos: Position) -> str:
    text = raw_line(buffer, pos)
    return text[:len(text) - len(text.lstrip())]


def indent_width(buffer: Buffer, pos: Position) -> int:
    """Count the leading whitespace characters, tabs counting as one."""
    return len(leading_whitespace(buffer, pos))


def first_nonspace(buffer: Buffer, pos: Position) -> Position:
    """
    Return the position of the first non-whitespace character on the line of
    ``pos``. Blank lines give the end of the line.
    """
    text = raw_line(buffer, pos)
    stripped = text.lstrip()
    if not stripped:
        return Position(pos.line, len(text))
    return Position(pos.line, len(text) - len(stripped))


def first_token(buffer: Buffer, pos: Position) -> str:
    tokens = tokenize(line_text(buffer, pos))
    if not tokens:
        return ''
    return tokens[0][1]


def is_special(buffer: Buffer, pos: Position) -> bool:
    """Return True if ``pos`` is inside a string or comment literal."""
    if not buffer.is_valid(pos):
        return False
    return buffer.is_in_string_or_comment(pos)


def is_brace_pair_split(buffer: Buffer, pos: Position) -> bool:
    """
    Detect a newline typed between an empty brace or bracket pair.

    ``pos`` is the position of the line break just inserted. True when the
    character before it opens a pair and the character after it closes the
    same pair, as in ``{`` + Enter + ``}``.
    """
    if buffer.char_at(pos) != '\n':
        return False

    before = buffer.char_at(buffer.retreat(pos))
    if before not in BRACE_PAIRS:
        return False

    after = buffer.char_at(buffer.advance(pos))
    return after == BRACE_PAIRS[before]


def classify(buffer: Buffer, pos: Position) -> Optional[keywords.KeywordEntry]:
    """
    Classify the line of ``pos`` against the keyword table.

    Lines starting inside a string or comment never classify. For the
    trailing ``do`` fallback, tokens sitting inside a literal are ignored.

    Args:
        buffer (Buffer): The buffer to read from.
        pos (Position): Any position on the line.
    Returns:
        Optional[KeywordEntry]: The matching entry, or None.
    """
    start = first_nonspace(buffer, pos)
    if is_special(buffer, start):
        return None

    text = raw_line(buffer, pos)
    tokens = [
        token for column, token in tokenize(text)
        if not is_special(buffer, Position(pos.line, column))
    ]
    return keywords.classify_line(tokens)


def line_context(buffer: Buffer, pos: Position) -> LineContext:
    start = first_nonspace(buffer, pos)
    return LineContext(
        trimmed_text=line_text(buffer, pos),
        first_token=first_token(buffer, pos),
        leading_whitespace=leading_whitespace(buffer, pos),
        visual_indent_column=buffer.visual_column(start),
        is_in_string_or_comment=is_special(buffer, start)
    )


def word_before(buffer: Buffer, pos: Position) -> tuple[str, Position]:
    """
    Return the word ending right before ``pos`` and where it starts.

    A word followed by another word character at ``pos`` is still being
    typed, and gives an empty word.
    """
    text = raw_line(buffer, pos)
    column = min(max(pos.column, 0), len(text))
    if _is_word_char(text[column:column + 1]):
        return '', pos

    start = column
    while start > 0 and _is_word_char(text[start - 1]):
        start -= 1
    return text[start:column], Position(pos.line, start)


def is_first_word(buffer: Buffer, pos: Position, word: str) -> bool:
    """
    Return True if the word ending at ``pos`` is exactly ``word`` and is the
    first token of its line.
    """
    typed, start = word_before(buffer, pos)
    if typed != word:
        return False
    return first_nonspace(buffer, pos) == start
