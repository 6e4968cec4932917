"""Application-wide Qt signals and utility slots for UniApp.

This module provides:
    - show_about slot: shows the application's name, version and license.
    - Signals: custom Qt signals for application start-up, configuration changes,
      page navigation, and UI actions (showLogs).
"""
from PySide6 import QtCore, QtWidgets


@QtCore.Slot()
def show_about() -> None:
    """
    Shows the about box.
    """
    from .. import __description__, __license__, __version__
    from ..settings import lib

    QtWidgets.QMessageBox.about(
        QtWidgets.QApplication.activeWindow(),
        f'About {lib.app_name}',
        f'{lib.app_name} {__version__}\n\n{__description__}\n\nLicense: {__license__}'
    )


class Signals(QtCore.QObject):
    """Centralized Qt signals for application config, navigation, and UI events."""
    initializationRequested = QtCore.Signal()

    configChanged = QtCore.Signal(object)  # UniConfig

    pageActivated = QtCore.Signal(str)  # Page

    showAbout = QtCore.Signal()
    showLogs = QtCore.Signal()

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        self.showAbout.connect(show_about)


signals = Signals()
