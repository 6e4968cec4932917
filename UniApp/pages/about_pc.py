"""About PC page: a welcome title, the host OS and CPU architecture, and the system time."""
from PySide6 import QtCore, QtWidgets

from .clock import ClockWidget


def get_platform_text() -> str:
    """Return 'os - arch', e.g. 'linux - x86_64'."""
    return f'{QtCore.QSysInfo.kernelType()} - {QtCore.QSysInfo.currentCpuArchitecture()}'


class AboutPcWidget(ClockWidget):
    """Welcome page with host information above a ticking clock."""

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        self.layout().setAlignment(QtCore.Qt.AlignCenter)

        title = QtWidgets.QLabel('Welcome', parent=self)
        title.setProperty('h1', True)
        title.setAlignment(QtCore.Qt.AlignCenter)
        self.layout().addWidget(title, 0)

        self.platform_label = QtWidgets.QLabel(get_platform_text(), parent=self)
        self.platform_label.setProperty('mono', True)
        self.platform_label.setAlignment(QtCore.Qt.AlignCenter)
        self.layout().addWidget(self.platform_label, 0)

        self.time_label = QtWidgets.QLabel(parent=self)
        self.time_label.setProperty('mono', True)
        self.time_label.setAlignment(QtCore.Qt.AlignCenter)
        self.layout().addWidget(self.time_label, 0)
