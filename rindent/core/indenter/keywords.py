"""
Classification of the Ruby keywords that open or continue a block.

Pre-scope keywords open a block and push the following line one indent level
deeper. Mid-scope keywords continue a block that is already open and get
realigned with its opener instead.

``do`` is a modifier keyword: it only opens a block when it trails a line whose
first token is not a keyword itself, e.g. ``5.times do |i|``.
"""


from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
from typing import Optional
from typing import Sequence


END_KEYWORD = 'end'
"""The single keyword closing every block."""

DO_KEYWORD = 'do'

MID_SCOPE_KEYWORDS = ('rescue', 'ensure', 'when', 'elsif', 'else')
"""Keywords that get realigned with their opener once fully typed."""

MID_SCOPE_OPENERS = ('if', 'case', 'begin', 'unless', 'def')
"""Lines a mid-scope keyword can realign to."""


@dataclass(frozen=True)
class KeywordEntry(object):
    text: str
    opens_scope: bool = True
    closable_by_end: bool = True
    is_pre_scope: bool = True


def _pre_scope(text: str) -> KeywordEntry:
    return KeywordEntry(text)


def _mid_scope(text: str) -> KeywordEntry:
    return KeywordEntry(text, closable_by_end=False, is_pre_scope=False)


_ENTRIES = (
    _pre_scope('begin'),
    _pre_scope('class'),
    _pre_scope('def'),
    _mid_scope('else'),
    _mid_scope('elsif'),
    _mid_scope('ensure'),
    _mid_scope('for'),
    _pre_scope('if'),
    _pre_scope('module'),
    _mid_scope('rescue'),
    _pre_scope('unless'),
    _pre_scope('until'),
    _mid_scope('when'),
    _pre_scope('while'),
    _pre_scope('case'),
)

KEYWORDS: Mapping[str, KeywordEntry] = MappingProxyType(
    {entry.text: entry for entry in _ENTRIES}
)
"""First-token keyword table."""

DO_ENTRY = _pre_scope(DO_KEYWORD)


def classify(first_token: str) -> Optional[KeywordEntry]:
    """
    Look up the first token of a line in the keyword table.

    ``do`` never matches here, it is only recognized as a trailing token by
    ``classify_trailing_do()``.

    Args:
        first_token (str): The first token of a trimmed line.
    Returns:
        Optional[KeywordEntry]: The entry, or None if the token opens nothing.
    """
    return KEYWORDS.get(first_token)


def classify_trailing_do(line_tokens: Sequence[str]) -> bool:
    """
    Check for a block opened by a trailing ``do``.

    The first token must not be a keyword and no token between the first one
    and the ``do`` may be a keyword either.

    Args:
        line_tokens (Sequence[str]): The word tokens of the line, in order.
    Returns:
        bool: True if the line opens a ``do`` block.
    """
    if not line_tokens or line_tokens[0] in KEYWORDS:
        return False

    for token in line_tokens[1:]:
        if token == DO_KEYWORD:
            return True
        if token in KEYWORDS:
            return False

    return False


def classify_line(line_tokens: Sequence[str]) -> Optional[KeywordEntry]:
    """First-token lookup, falling back to the trailing ``do`` rule."""
    if not line_tokens:
        return None

    entry = classify(line_tokens[0])
    if entry is not None:
        return entry

    if classify_trailing_do(line_tokens):
        return DO_ENTRY

    return None
