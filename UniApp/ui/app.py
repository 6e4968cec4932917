"""Application setup utilities and custom QApplication for UniApp.

This module provides:
    - Application: subclass of QApplication configuring application metadata and theme
"""
import sys
from typing import Optional, Sequence

from PySide6 import QtWidgets


class Application(QtWidgets.QApplication):
    """Custom QApplication setting application metadata and the style sheet."""

    def __init__(self, argv: Optional[Sequence[str]] = None) -> None:
        if argv is None:
            argv = sys.argv

        super().__init__(list(argv))

        from .. import __version__
        from ..settings import lib
        self.setApplicationName(lib.app_name)
        self.setOrganizationName('')
        self.setDesktopFileName(lib.app_id)
        self.setApplicationVersion(__version__)
        self.setQuitOnLastWindowClosed(True)

        from . import ui
        ui.apply_theme()
