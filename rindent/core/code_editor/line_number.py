"""
Gutter widget holding the line numbers of a ``CodeEditor``.
"""

from PySide6 import QtCore
from PySide6 import QtGui
from PySide6 import QtWidgets


GUTTER_BACKGROUND = QtGui.QColor(21, 21, 21)
GUTTER_FOREGROUND = QtGui.QColor('lightGray')


class LineNumberArea(QtWidgets.QWidget):
    """
    Paints the numbers of the visible blocks of its editor, right aligned.
    The width grows with the number of digits of the last line.
    """

    padding = 10

    def __init__(self, code_editor: 'CodeEditor') -> None:
        super().__init__(code_editor)
        self.editor = code_editor

    @property
    def required_width(self) -> int:
        digits = len(str(max(1, self.editor.blockCount())))
        return 2 * self.padding + self.editor.fontMetrics().horizontalAdvance('9') * digits

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(self.required_width, 0)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.fillRect(event.rect(), GUTTER_BACKGROUND)
        painter.setPen(GUTTER_FOREGROUND)

        height = self.editor.fontMetrics().height()
        width = self.width() - self.padding
        for block_number, top in self.editor.visible_block_tops():
            if top > event.rect().bottom():
                break
            painter.drawText(
                0,
                int(top),
                width,
                height,
                QtCore.Qt.AlignmentFlag.AlignRight,
                str(block_number + 1)
            )

        painter.end()
