"""Clock page: the current time, refreshed once per second."""
import datetime
from typing import Optional

from PySide6 import QtCore, QtWidgets

from ..settings import locale

TICK_INTERVAL_MS: int = 1000


class ClockWidget(QtWidgets.QWidget):
    """Shows the system time in large monospace digits."""

    def __init__(self, parent=None):
        super().__init__(parent=parent)
        self.setObjectName('ClockWidget')

        self.locale = locale.get_locale()
        self.system_time: Optional[datetime.datetime] = None

        self.time_label = None

        self._create_ui()

        self.timer = QtCore.QTimer(self)
        self.timer.setInterval(TICK_INTERVAL_MS)
        self.timer.timeout.connect(self.tick)
        self.timer.start()

        self.render()

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        self.time_label = QtWidgets.QLabel(parent=self)
        self.time_label.setProperty('clock', True)
        self.time_label.setAlignment(QtCore.Qt.AlignCenter)
        self.layout().addWidget(self.time_label, 1)

    @QtCore.Slot()
    def tick(self):
        self.system_time = datetime.datetime.now()
        self.render()

    def render(self):
        self.time_label.setText(locale.format_system_time(self.system_time, self.locale))
