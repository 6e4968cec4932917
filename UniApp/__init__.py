"""
UniApp: small desktop application with system info, clock, preferences and a paid-entries tracker.

This package provides:

- :mod:`UniApp.core` – JSON ledger ingestion, the remote price fetch, and the background worker that runs them.
- :mod:`UniApp.pages` – The navigable pages, including the paid-entries controller and its view.
- :mod:`UniApp.settings` – The durable, versioned configuration store and locale helpers.
- :mod:`UniApp.status` – Status codes and the exceptions raised by services.
- :mod:`UniApp.ui` – A PySide6-based application shell: main window, navigation, signals and styling.
- :mod:`UniApp.log` – In-app logging with a log viewer.

Use :func:`UniApp.exec_` to launch the application.
"""

import sys

from PySide6 import QtCore

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('UniApp requires Python 3.11 or higher.')

__version__ = '0.1.0'
__license__ = 'MPL-2.0'
__description__ = 'UniApp: desktop application with a paid-entries tracker backed by a remote pricing API.'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the UniApp GUI application and enter its event loop.

    Initializes the QApplication, shows the main window, and starts the Qt event loop.
    """
    from .ui import app
    from .ui import main
    from .ui.actions import signals
    application = app.Application(sys.argv)
    main.show()

    # Ask the active page to load its data
    QtCore.QTimer.singleShot(100, signals.initializationRequested)

    sys.exit(application.exec())


if __name__ == '__main__':
    exec_()
