"""Log view and dock widget for displaying in-memory log messages.

This module provides:
    - LogWidget: text view of the TankHandler's records with a minimum-level filter
    - LogDockWidget: dockable container for the LogWidget
"""
import logging

from PySide6 import QtCore, QtWidgets

from . import log
from ..ui import ui

LEVELS = (
    ('Debug', logging.DEBUG),
    ('Info', logging.INFO),
    ('Warning', logging.WARNING),
    ('Error', logging.ERROR),
)


class LogWidget(QtWidgets.QWidget):
    """Shows the formatted records stored in the root logger's TankHandler."""

    def __init__(self, parent=None, fetch_interval_ms: int = 1000):
        super().__init__(parent=parent)

        self.level_combo = None
        self.clear_button = None
        self.text_view = None

        self._create_ui()
        self._connect_signals()

        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self.refresh)
        self._timer.start(fetch_interval_ms)

        self.refresh()

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(0.5)
        self.layout().setContentsMargins(o, o, o, o)

        row = QtWidgets.QWidget(parent=self)
        QtWidgets.QHBoxLayout(row)
        row.layout().setContentsMargins(0, 0, 0, 0)

        self.level_combo = QtWidgets.QComboBox(parent=row)
        for name, level in LEVELS:
            self.level_combo.addItem(name, level)
        self.level_combo.setCurrentIndex(1)
        row.layout().addWidget(self.level_combo, 0)
        row.layout().addStretch(1)

        self.clear_button = QtWidgets.QPushButton('Clear', parent=row)
        row.layout().addWidget(self.clear_button, 0)

        self.layout().addWidget(row, 0)

        self.text_view = QtWidgets.QPlainTextEdit(parent=self)
        self.text_view.setObjectName('LogView')
        self.text_view.setReadOnly(True)
        self.text_view.setLineWrapMode(QtWidgets.QPlainTextEdit.NoWrap)
        self.layout().addWidget(self.text_view, 1)

    def _connect_signals(self):
        self.level_combo.currentIndexChanged.connect(self.refresh)
        self.clear_button.clicked.connect(self.clear)

    def level(self) -> int:
        return self.level_combo.currentData()

    @QtCore.Slot()
    def refresh(self):
        try:
            handler = log.get_handler()
        except RuntimeError as e:
            logging.debug(f'Log view cannot refresh: {e}')
            return

        text = '\n'.join(handler.get_logs(self.level()))
        if text == self.text_view.toPlainText():
            return
        self.text_view.setPlainText(text)
        self.text_view.verticalScrollBar().setValue(self.text_view.verticalScrollBar().maximum())

    @QtCore.Slot()
    def clear(self):
        try:
            log.get_handler().clear_logs()
        except RuntimeError as e:
            logging.debug(f'Log view cannot clear: {e}')
        self.text_view.clear()

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.0),
            ui.Size.DefaultHeight(0.4)
        )


class LogDockWidget(QtWidgets.QDockWidget):
    """Dock widget hosting the :class:`LogWidget`."""

    def __init__(self, parent=None):
        super().__init__('Logs', parent=parent)
        self.setObjectName('LogDockWidget')
        self.setAllowedAreas(QtCore.Qt.BottomDockWidgetArea | QtCore.Qt.RightDockWidgetArea)
        self.setWidget(LogWidget(parent=self))
