"""
Backward search for the line opening the block a keyword closes or continues.

Two searches live here:

``find_opening_line()`` pairs an ``end`` with its opener. It walks up from the
``end`` line, ignoring lines indented deeper than the ``end`` itself, and
counts the ``end`` lines it passes so nested blocks of the same kind are
skipped as a whole::

    if a            <- match, depth 0
      if b          <- depth 1 -> 0
      end           <- depth 0 -> 1
    end|

``find_mid_scope_opener()`` realigns ``else``, ``rescue``, ``when`` and friends.
It only compares raw indent widths and keeps no depth.
"""


from typing import Callable
from typing import Optional

from rindent.core import log
from rindent.core.indenter import inspector
from rindent.core.indenter import keywords
from rindent.core.indenter.position import Buffer
from rindent.core.indenter.position import Position


logger = log.get_logger(__name__)

OpenerPredicate = Callable[[Buffer, Position], bool]
"""Decides whether a line's first non-space position opens the block."""


def _accepts(
        buffer: Buffer,
        candidate: Position,
        require_closable_by_end: bool,
        extra_predicate: Optional[OpenerPredicate]
) -> bool:
    if extra_predicate is not None:
        return extra_predicate(buffer, candidate)

    entry = inspector.classify(buffer, candidate)
    if entry is None or not entry.opens_scope:
        return False
    return entry.closable_by_end or not require_closable_by_end


def find_opening_line(
        buffer: Buffer,
        start_pos: Position,
        require_closable_by_end: bool = True,
        extra_predicate: Optional[OpenerPredicate] = None
) -> Optional[Position]:
    """
    Find the line opening the block closed on the line of ``start_pos``.

    Args:
        buffer (Buffer): The buffer to search.
        start_pos (Position): Any position on the closing line.
        require_closable_by_end (bool): Only accept openers that need an
            ``end``. Mid-scope keywords such as ``else`` are passed over.
            Defaults to True.
        extra_predicate (OpenerPredicate): Replaces the keyword table check
            for deciding what counts as an opener. Optional.
    Returns:
        Optional[Position]: The first non-space position of the opening line,
            or None when the top of the buffer is reached without a match.
    """
    start = inspector.first_nonspace(buffer, start_pos)
    target_column = buffer.visual_column(start)
    depth = 0

    line = start.line
    while line > 0:
        line -= 1
        candidate = inspector.first_nonspace(buffer, Position(line))

        if buffer.visual_column(candidate) > target_column:
            continue

        if inspector.is_special(buffer, candidate):
            continue

        if inspector.starts_with_keyword(buffer, candidate, keywords.END_KEYWORD):
            depth += 1
            continue

        if not _accepts(buffer, candidate, require_closable_by_end, extra_predicate):
            continue

        if depth == 0:
            logger.debug(
                'Line %d opens the block closed on line %d',
                candidate.line,
                start.line
            )
            return candidate

        depth -= 1

    logger.debug('No opener found for line %d', start.line)
    return None


def starts_with_mid_scope_opener(buffer: Buffer, pos: Position) -> bool:
    return any(
        inspector.starts_with_keyword(buffer, pos, opener)
        for opener in keywords.MID_SCOPE_OPENERS
    )


def find_mid_scope_opener(buffer: Buffer, start_pos: Position) -> Optional[Position]:
    """
    Find the line a mid-scope keyword on the line of ``start_pos`` belongs to.

    Lines indented deeper than the current one are skipped. The first line
    starting with ``if``, ``case``, ``begin``, ``unless`` or ``def`` at an equal
    or shallower indent is the match.
    """
    current_width = inspector.indent_width(buffer, start_pos)

    line = start_pos.line
    while line > 0:
        line -= 1
        candidate = inspector.first_nonspace(buffer, Position(line))

        if inspector.indent_width(buffer, candidate) > current_width:
            continue

        if inspector.is_special(buffer, candidate):
            continue

        if starts_with_mid_scope_opener(buffer, candidate):
            logger.debug(
                'Line %d is the opener for line %d',
                candidate.line,
                start_pos.line
            )
            return candidate

    return None
