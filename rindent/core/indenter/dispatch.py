"""
Entry point of the indentation engine for a host editor.

The host asks ``is_trigger()`` for every key press. For triggers, it lets the
key go through to the buffer first and then calls ``format()`` with the cursor,
applying the returned ``EditResult``.

Only the last typed character is seen, so ``d``, ``e``, ``f`` and ``n`` stand
in for ``end``, ``else``/``rescue``/``ensure``, ``elsif`` and ``when``. The
decision policy checks the whole word before doing anything.
"""


from dataclasses import dataclass

from rindent.core import log
from rindent.core.indenter import policy
from rindent.core.indenter.position import Buffer
from rindent.core.indenter.position import Position


logger = log.get_logger(__name__)

KEY_RETURN = 'Return'
KEY_KP_ENTER = 'KP_Enter'

NEWLINE_KEYS = frozenset((KEY_RETURN, KEY_KP_ENTER))
END_KEYS = frozenset('d')
MID_SCOPE_KEYS = frozenset('efn')


@dataclass(frozen=True)
class KeyEvent(object):
    key: str
    """``'Return'``, ``'KP_Enter'`` or the typed character."""


@dataclass(frozen=True)
class TriggerContext(object):
    """
    Everything ``format()`` needs to know about one key press.

    ``begin`` and ``end`` are the same position unless the host reports a
    selection. Decisions are taken at ``begin``.
    """
    buffer: Buffer
    begin: Position
    end: Position
    event: KeyEvent


class RubyIndenter(object):
    """Per-keystroke indentation for Ruby."""

    name = 'ruby'

    @staticmethod
    def is_trigger(event: KeyEvent) -> bool:
        key = event.key
        return key in NEWLINE_KEYS or key in END_KEYS or key in MID_SCOPE_KEYS

    def format(self, context: TriggerContext) -> policy.EditResult:
        """
        Decide how the current line(s) should be indented.

        Args:
            context (TriggerContext): The buffer, cursor and key just typed.
        Returns:
            EditResult: The edit to apply, ``policy.NO_CHANGE`` when nothing
                should happen.
        """
        event = context.event
        if not self.is_trigger(event):
            return policy.NO_CHANGE

        buffer = context.buffer
        config = policy.IndentConfiguration.from_buffer(buffer)
        logger.debug('Formatting for %r at %s with %s', event.key, context.begin, config)

        if event.key in NEWLINE_KEYS:
            return policy.indent_new_line(buffer, context.begin, config)
        if event.key in END_KEYS:
            return policy.realign_end(buffer, context.begin)
        return policy.realign_mid_scope(buffer, context.begin)
