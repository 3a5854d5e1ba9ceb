"""Shared fixtures for the rindent test suite."""

import os
from collections import defaultdict
from typing import Callable

import pytest

from rindent.core import appdata
from rindent.core import broker
from rindent.core.indenter import KeyEvent
from rindent.core.indenter import Position
from rindent.core.indenter import RubyIndenter
from rindent.core.indenter import TextBuffer
from rindent.core.indenter import TriggerContext
from rindent.core.indenter import apply_edit
from rindent.core.indenter import dispatch

CURSOR = '^'
"""Marks the cursor in test documents."""


def split_cursor(text: str, **buffer_kwargs) -> tuple[TextBuffer, Position]:
    """Build a buffer from text holding one cursor marker."""
    buffer = TextBuffer(text.replace(CURSOR, ''), **buffer_kwargs)
    return buffer, buffer.position_of(text.index(CURSOR))


def join_cursor(buffer: TextBuffer, cursor: Position) -> str:
    offset = buffer.offset_of(cursor)
    text = buffer.text
    return text[:offset] + CURSOR + text[offset:]


@pytest.fixture(autouse=True)
def preferences_path(tmp_path, monkeypatch):
    """Keep preferences out of the user's home directory."""
    path = tmp_path / 'Rindent' / 'Preferences.json'
    monkeypatch.setattr(appdata, 'RINDENT_PREFERENCES_PATH', path)
    appdata.Preferences.reset()
    yield path
    appdata.Preferences.reset()


@pytest.fixture(autouse=True)
def broker_sources(monkeypatch):
    """Isolate broker subscriptions made during a test."""
    sources = {
        name: defaultdict(list, {event: list(subs) for event, subs in events.items()})
        for name, events in broker._SOURCES.items()
    }
    monkeypatch.setattr(broker, '_SOURCES', sources)
    return sources


@pytest.fixture
def make_buffer() -> Callable[..., tuple[TextBuffer, Position]]:
    return split_cursor


@pytest.fixture
def typist() -> Callable[..., str]:
    """
    Type keys into a document like an editor would: insert the character,
    then let the indenter adjust the line. Returns the document with the
    cursor marker.
    """

    def type_keys(text: str, keys: str, **buffer_kwargs) -> str:
        indenter = RubyIndenter()
        buffer, cursor = split_cursor(text, **buffer_kwargs)
        for ch in keys:
            event = KeyEvent(dispatch.KEY_RETURN if ch == '\n' else ch)
            cursor = buffer.insert(cursor, ch)
            if not indenter.is_trigger(event):
                continue
            result = indenter.format(TriggerContext(buffer, cursor, cursor, event))
            cursor = apply_edit(buffer, cursor, result)
        return join_cursor(buffer, cursor)

    return type_keys


@pytest.fixture(scope='session')
def qapp():
    """A Qt application on the offscreen platform."""
    os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
    QtWidgets = pytest.importorskip('PySide6.QtWidgets')
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app
