"""
# Rindent Application Client

A main window housing a single Ruby code editor and a status bar showing the
cursor position, the indentation settings and the last automatic indentation
edit.
"""


from pathlib import Path
from typing import Optional

from PySide6 import QtCore
from PySide6 import QtWidgets

from rindent.core import appdata
from rindent.core import broker
from rindent.core import languages
from rindent.core import log
from rindent.core.code_editor.code_editor import CodeEditor
from rindent.core.indenter import EditResult


logger = log.get_logger(__name__)


def describe_indentation(prefs: appdata.CodePreferences) -> str:
    """Status bar text for the indentation settings."""
    if prefs.insert_spaces:
        return f'{prefs.effective_indent_width} spaces'
    return f'Tab ({prefs.tab_space_width})'


def describe_edit(result: EditResult) -> str:
    """Status bar text for an applied indentation edit."""
    if result.start is None:
        return ''
    text = result.text.replace('\t', '\\t').replace('\n', '\\n')
    return f'Indented line {result.start.line + 1}: "{text}"'


class RindentClientWindow(QtWidgets.QMainWindow):
    """
    Initializes the preferences before building the editor, as the editor
    reads them on construction.

    ``startup_file`` is opened once the window is built, when set.
    """

    startup_file: Optional[Path] = None

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle('Rindent')
        self.resize(1200, 800)

        # -----Primary Systems Initialization-----
        appdata.initialize()

        # -----Window Layout-----
        self.editor = CodeEditor(self)
        self.setCentralWidget(self.editor)

        self.lbl_cursor = QtWidgets.QLabel('1:1')
        self.lbl_indent = QtWidgets.QLabel('')
        self.lbl_last_edit = QtWidgets.QLabel('')
        status_bar = self.statusBar()
        status_bar.addWidget(self.lbl_last_edit, 1)
        status_bar.addPermanentWidget(self.lbl_cursor)
        status_bar.addPermanentWidget(self.lbl_indent)

        self._register_subscribers()
        self.on_preferences_updated()

        if self.startup_file is not None:
            self.open_file(self.startup_file)

    def _register_subscribers(self) -> None:
        subscriptions = [
            ('code_editor', 'cursor_position', self.on_cursor_position),
            ('code_editor', 'indent_applied', self.on_indent_applied),
            ('SYSTEM', 'PREFERENCES_UPDATED', self.on_preferences_updated),
        ]
        for subscription in subscriptions:
            broker.register_subscriber(*subscription)

        # Runs once the C++ window is deleted, self must not be touched.
        self.destroyed.connect(
            lambda: [broker.unregister_subscriber(*s) for s in subscriptions]
        )

    def open_file(self, path: Path) -> None:
        """Load a file, picking the highlighter and indenter by its name."""
        try:
            text = path.read_text(encoding='utf-8')
        except OSError:
            logger.warning('Could not open %s', path, exc_info=True)
            return

        self.editor.syntax_highlighter_cls = languages.generate_highlighter_from_file(path)
        self.editor.indenter = languages.generate_indenter_from_file(path)
        self.editor.setPlainText(text)
        self.editor.rebuild_highlighter()
        self.setWindowTitle(f'Rindent - {path.name}')

    def on_cursor_position(self, event: broker.Event) -> None:
        line, col = event.data
        self.lbl_cursor.setText(f'{line}:{col}')

    def on_indent_applied(self, event: broker.Event) -> None:
        self.lbl_last_edit.setText(describe_edit(event.data))
        QtCore.QTimer.singleShot(3000, self.lbl_last_edit.clear)

    def on_preferences_updated(self, _: broker.Event = broker.DUMMY_EVENT) -> None:
        prefs = appdata.Preferences().code_preferences
        try:
            self.lbl_indent.setText(describe_indentation(prefs))
        except appdata.AppdataError:
            logger.warning('Unknown tab type %r in preferences', prefs.tab_type)
