"""
The indentation decisions, one per kind of trigger.

Each decision reads the buffer as it is right after the triggering character
was inserted and returns an ``EditResult`` describing what to replace. Nothing
here edits the buffer; the host applies the result.

- New line: carry the previous line's indentation over, one level deeper after
  a block opener, and split an empty ``{}``/``[]`` pair over three lines.
- ``end`` typed: realign with the line opening the block it closes.
- ``else``, ``elsif``, ``when``, ``rescue``, ``ensure`` typed: realign with the
  enclosing ``if``/``case``/``begin``/``unless``/``def``.
"""


from dataclasses import dataclass
from typing import Optional

from rindent.core import log
from rindent.core.indenter import inspector
from rindent.core.indenter import keywords
from rindent.core.indenter import resolver
from rindent.core.indenter.position import Buffer
from rindent.core.indenter.position import DEFAULT_TAB_WIDTH
from rindent.core.indenter.position import Position


logger = log.get_logger(__name__)


@dataclass(frozen=True)
class IndentConfiguration(object):
    """
    Indentation settings, read from the buffer for every decision.

    A non-positive ``indent_width`` falls back to ``tab_width``.
    """
    tab_width: int = DEFAULT_TAB_WIDTH
    indent_width: int = -1
    use_tabs: bool = False

    def __post_init__(self) -> None:
        if self.tab_width <= 0:
            object.__setattr__(self, 'tab_width', DEFAULT_TAB_WIDTH)
        if self.indent_width <= 0:
            object.__setattr__(self, 'indent_width', self.tab_width)

    @classmethod
    def from_buffer(cls, buffer: Buffer) -> 'IndentConfiguration':
        return cls(
            tab_width=buffer.current_tab_width(),
            indent_width=buffer.current_indent_width(),
            use_tabs=not buffer.insert_spaces_not_tabs()
        )

    @property
    def unit(self) -> str:
        """The whitespace making up one indent level."""
        if not self.use_tabs:
            return ' ' * self.indent_width

        tabs, spaces = divmod(self.indent_width, self.tab_width)
        return '\t' * tabs + ' ' * spaces


@dataclass(frozen=True)
class EditResult(object):
    """
    What the host should do to the buffer.

    Replace ``[start, end)`` with ``text``, leave the cursor after the inserted
    text, then move it by ``cursor_offset`` characters. A ``text`` of None means
    nothing changes, while an empty string deletes the range.
    """
    text: Optional[str] = None
    start: Optional[Position] = None
    end: Optional[Position] = None
    cursor_offset: int = 0

    @property
    def changed(self) -> bool:
        return self.text is not None


NO_CHANGE = EditResult()


# -----New Line----------------------------------------------------------------

def indent_new_line(
        buffer: Buffer,
        pos: Position,
        config: IndentConfiguration
) -> EditResult:
    """
    Compute the indentation of a freshly opened line.

    Args:
        buffer (Buffer): The buffer, with the line break already inserted.
        pos (Position): The cursor, at the start of the new line.
        config (IndentConfiguration): The indentation settings.
    Returns:
        EditResult: Whitespace to insert at the cursor.
    """
    if pos.line <= 0:
        return NO_CHANGE

    previous = pos.previous_line()
    inherited = inspector.leading_whitespace(buffer, previous)
    insert_at = pos.line_start()

    entry = inspector.classify(buffer, previous)
    if entry is not None and entry.is_pre_scope:
        logger.debug('Indenting after %r on line %d', entry.text, previous.line)
        return EditResult(inherited + config.unit, insert_at, insert_at)

    line_break = Position(previous.line, len(buffer.get_line_text(previous.line)))
    if inspector.is_brace_pair_split(buffer, line_break):
        text = inherited + config.unit + '\n' + inherited
        return EditResult(
            text,
            insert_at,
            insert_at,
            cursor_offset=-(len(inherited) + 1)
        )

    if not inherited:
        return NO_CHANGE
    return EditResult(inherited, insert_at, insert_at)


# -----Keyword Realignment-----------------------------------------------------

def _realign(buffer: Buffer, pos: Position, opener: Position) -> EditResult:
    target = inspector.leading_whitespace(buffer, opener)
    current = inspector.leading_whitespace(buffer, pos)
    if target == current:
        return NO_CHANGE

    return EditResult(
        target,
        pos.line_start(),
        Position(pos.line, len(current))
    )


def _typed_keyword(buffer: Buffer, pos: Position, keyword: str) -> bool:
    if not inspector.is_first_word(buffer, pos, keyword):
        return False

    _, start = inspector.word_before(buffer, pos)
    return not inspector.is_special(buffer, start)


def realign_end(buffer: Buffer, pos: Position) -> EditResult:
    """
    Realign a just typed ``end`` with the line opening its block.

    Args:
        buffer (Buffer): The buffer, with the ``d`` already inserted.
        pos (Position): The cursor, right after ``end``.
    Returns:
        EditResult: The leading whitespace replacement, or no change if
            ``end`` is not the first word of the line or has no opener.
    """
    if not _typed_keyword(buffer, pos, keywords.END_KEYWORD):
        return NO_CHANGE

    opener = resolver.find_opening_line(buffer, pos, require_closable_by_end=True)
    if opener is None:
        return NO_CHANGE

    return _realign(buffer, pos, opener)


def typed_mid_scope_keyword(buffer: Buffer, pos: Position) -> Optional[str]:
    for keyword in keywords.MID_SCOPE_KEYWORDS:
        if _typed_keyword(buffer, pos, keyword):
            return keyword
    return None


def realign_mid_scope(buffer: Buffer, pos: Position) -> EditResult:
    """Realign a just typed ``else``, ``elsif``, ``when``, ``rescue`` or
    ``ensure`` with the enclosing block opener."""
    keyword = typed_mid_scope_keyword(buffer, pos)
    if keyword is None:
        return NO_CHANGE

    opener = resolver.find_mid_scope_opener(buffer, pos)
    if opener is None:
        return NO_CHANGE

    logger.debug('Realigning %r on line %d', keyword, pos.line)
    return _realign(buffer, pos, opener)
