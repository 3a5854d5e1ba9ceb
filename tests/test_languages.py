from pathlib import Path

import pytest

pytest.importorskip('PySide6.QtGui')

from rindent.core import languages
from rindent.core.indenter import RubyIndenter
from rindent.core.languages.ruby_syntax import RubyHighlighter


@pytest.mark.parametrize('name', ['foo.rb', 'tasks.rake', 'x.gemspec', 'config.ru', 'Rakefile', 'Gemfile'])
def test_ruby_files(name):
    path = Path('project', name)

    assert languages.is_ruby_file(path)
    assert languages.generate_highlighter_from_file(path) is RubyHighlighter
    assert isinstance(languages.generate_indenter_from_file(path), RubyIndenter)


@pytest.mark.parametrize('name', ['foo.py', 'README', 'rb'])
def test_other_files(name):
    path = Path(name)

    assert not languages.is_ruby_file(path)
    assert languages.generate_highlighter_from_file(path) is None
    assert languages.generate_indenter_from_file(path) is None
