from rindent.core.indenter.dispatch import KeyEvent
from rindent.core.indenter.dispatch import RubyIndenter
from rindent.core.indenter.dispatch import TriggerContext
from rindent.core.indenter.policy import EditResult
from rindent.core.indenter.policy import IndentConfiguration
from rindent.core.indenter.policy import NO_CHANGE
from rindent.core.indenter.position import Buffer
from rindent.core.indenter.position import Position
from rindent.core.indenter.position import TextBuffer


def apply_edit(buffer: TextBuffer, cursor: Position, result: EditResult) -> Position:
    """
    Apply an ``EditResult`` to a ``TextBuffer`` the way an editor would.

    Args:
        buffer (TextBuffer): The buffer to edit in place.
        cursor (Position): The cursor before the edit.
    Returns:
        Position: The cursor after the edit.
    """
    if not result.changed:
        return cursor

    cursor_offset = buffer.offset_of(cursor)
    start_offset = buffer.offset_of(result.start)
    end_offset = buffer.offset_of(result.end)

    buffer.replace(result.start, result.end, result.text)
    if cursor_offset >= end_offset:
        cursor_offset += len(result.text) - (end_offset - start_offset)
    else:
        cursor_offset = start_offset + len(result.text)

    return buffer.position_of(cursor_offset + result.cursor_offset)
