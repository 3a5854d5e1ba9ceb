from pathlib import Path
from typing import Optional
from typing import Type
from typing import TypeVar

from PySide6 import QtGui

from rindent.core.indenter import RubyIndenter
from rindent.core.languages.ruby_syntax import RubyHighlighter

T_Highlighter = TypeVar('T_Highlighter', bound=QtGui.QSyntaxHighlighter)

SyntaxHighlighter = Type[T_Highlighter]
"""Any QSyntaxHighlighter class object or derived class object."""

_RUBY_SUFFIXES = ('.rb', '.rake', '.gemspec', '.ru')
_RUBY_FILENAMES = ('Rakefile', 'Gemfile', 'Guardfile', 'Vagrantfile')


def is_ruby_file(filepath: Path) -> bool:
    return filepath.suffix in _RUBY_SUFFIXES or filepath.name in _RUBY_FILENAMES


def generate_highlighter_from_file(filepath: Path) -> Optional[SyntaxHighlighter]:
    """Returns the corresponding highlighter from the file suffix."""
    if is_ruby_file(filepath):
        return RubyHighlighter
    return None


def generate_indenter_from_file(filepath: Path) -> Optional[RubyIndenter]:
    """Returns an indenter for the file, None for plain carry-over editing."""
    if is_ruby_file(filepath):
        return RubyIndenter()
    return None
