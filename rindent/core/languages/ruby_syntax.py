import re

from PySide6 import QtGui
from PySide6TK import QtWrappers

from rindent.core import appdata
from rindent.core.indenter import lexer


class RubySyntaxColors(object):
    """Text formats built from a set of Ruby highlighting colors."""

    def __init__(self, colors: appdata.RubyCodeColor) -> None:
        self.keyword = QtWrappers.color_format(colors.keyword)
        self.operator = QtWrappers.color_format(colors.operator)
        self.brace = QtWrappers.color_format(colors.brace)
        self.string = QtWrappers.color_format(colors.string)
        self.comment = QtWrappers.color_format(colors.comment, 'italic')
        self.numbers = QtWrappers.color_format(colors.numbers)
        self.symbol = QtWrappers.color_format(colors.symbol)
        self.instance_variable = QtWrappers.color_format(colors.instance_variable)
        self.constant = QtWrappers.color_format(colors.constant)
        self.def_ = QtWrappers.color_format(colors.def_)


_color_scheme = RubySyntaxColors(appdata.RubyCodeColor())


def reload_color_scheme() -> None:
    """Rebuild the formats from the current preferences."""
    global _color_scheme
    _color_scheme = RubySyntaxColors(appdata.Preferences().ruby_code_color)


class RubyHighlighter(QtGui.QSyntaxHighlighter):
    """
    Syntax highlighter for the Ruby language that uses
    QtWrappers.HighlightRule for code and the indenter's line scanner for
    strings and comments.

    The scanner state at the end of each block is stored as the block state,
    which lets ``DocumentBuffer`` resume scanning at any line.
    """

    keywords = [
        'BEGIN', 'END', 'alias', 'and', 'begin', 'break', 'case', 'class',
        'def', 'defined?', 'do', 'else', 'elsif', 'end', 'ensure', 'false',
        'for', 'if', 'in', 'module', 'next', 'nil', 'not', 'or', 'redo',
        'rescue', 'retry', 'return', 'self', 'super', 'then', 'true',
        'undef', 'unless', 'until', 'when', 'while', 'yield'
    ]

    operators = [
        '=',
        # Comparison
        '==', '!=', '<', '<=', '>', '>=', '<=>', '===', '=~',
        # Arithmetic
        r'\+', '-', r'\*', '/', r'\%', r'\*\*',
        # In-place
        r'\+=', '-=', r'\*=', '/=', r'\|\|=',
        # Logic
        '&&', r'\|\|', '!'
    ]

    braces = [r'\{', r'\}', r'\(', r'\)', r'\[', r'\]']

    def __init__(self, parent: QtGui.QTextDocument | None = None) -> None:
        super().__init__(parent)

        rules: list[QtWrappers.HighlightRule] = []
        rules += [QtWrappers.HighlightRule(rf'\b{re.escape(w)}(?![\w?!])', _color_scheme.keyword, group=0) for w in RubyHighlighter.keywords]
        rules += [QtWrappers.HighlightRule(o, _color_scheme.operator, group=0) for o in RubyHighlighter.operators]
        rules += [QtWrappers.HighlightRule(b, _color_scheme.brace, group=0) for b in RubyHighlighter.braces]

        rules += [
            # 'def' followed by a method name, 'self.' included (capture group 1)
            QtWrappers.HighlightRule(r'\bdef\b\s*((?:self\.)?[\w?!=]+)', _color_scheme.def_, group=1),

            # Constants and class names
            QtWrappers.HighlightRule(r'\b[A-Z]\w*', _color_scheme.constant, group=0),

            # Instance and class variables
            QtWrappers.HighlightRule(r'@@?\w+', _color_scheme.instance_variable, group=0),

            # Symbols, :name but not a::b
            QtWrappers.HighlightRule(r'(?<![:\w]):\w+[?!]?', _color_scheme.symbol, group=0),

            # Numbers
            QtWrappers.HighlightRule(r'\b[+-]?[0-9][0-9_]*(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?\b', _color_scheme.numbers, group=0),
            QtWrappers.HighlightRule(r'\b0[xX][0-9A-Fa-f_]+\b', _color_scheme.numbers, group=0),
        ]

        self.rules: list[QtWrappers.HighlightRule] = rules

    def highlightBlock(self, text: str) -> None:
        """
        Apply syntax highlighting to one block (line) of text.

        Args:
            text: The text block to highlight.
        """
        for rule in self.rules:
            it = rule.pattern.globalMatch(text, 0)
            while it.hasNext():
                m = it.next()
                start = m.capturedStart(rule.group)
                length = m.capturedLength(rule.group)

                # Fallback to whole match if the capture group is missing
                if start < 0 or length <= 0:
                    start = m.capturedStart(0)
                    length = m.capturedLength(0)

                if start < 0 or length <= 0:
                    continue

                self.setFormat(start, length, rule.format)

        # Strings and comments go last and win over any rule above.
        previous_state = max(self.previousBlockState(), lexer.STATE_NORMAL)
        spans, state = lexer.scan_line(text, previous_state)
        for span in spans:
            fmt = _color_scheme.comment if span.kind == lexer.CONTEXT_COMMENT else _color_scheme.string
            length = min(span.end, len(text)) - span.start
            if length > 0:
                self.setFormat(span.start, length, fmt)

        self.setCurrentBlockState(state)
