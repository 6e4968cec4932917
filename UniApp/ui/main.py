"""Main window composition and UI entry points for UniApp.

This module defines:
    - show(): initialize and display the main window
    - MainWindow: navigation list, page stack, menus and the log dock
"""
import logging
from typing import Dict, Optional

from PySide6 import QtWidgets, QtCore, QtGui

from . import ui
from ..log.view import LogDockWidget
from ..pages import PAGE_TITLES, Page
from ..pages.about_pc import AboutPcWidget
from ..pages.clock import ClockWidget
from ..pages.paid_entries.controller import PaidEntriesController
from ..pages.paid_entries.view import PaidEntriesWidget
from ..pages.preferences import PreferencesWidget
from ..settings import lib
from ..settings.lib import app_name
from ..status import status
from ..ui.actions import signals

widget = None


def show():
    global widget

    if widget is None:
        store = lib.ConfigStore()
        store.watch()
        widget = MainWindow(store)

    widget.show()


class MainWindow(QtWidgets.QMainWindow):
    """Application window: a navigation list on the left and the active page on the right."""

    def __init__(self, store: Optional[lib.ConfigStore], runner=None, file_picker=None, parent=None) -> None:
        """
        Args:
            store: The config store. None runs with defaults and without persistence.
            runner: Scheduler handed to the paid-entries controller, see PaidEntriesController.
            file_picker: File picker handed to the paid-entries controller.
            parent: Parent widget.
        """
        super().__init__(parent=parent)
        self.setObjectName('UniAppMainWindow')

        self.store = store
        self.config: lib.UniConfig = self._load_config()

        self.nav = None
        self.stack = None
        self.log_view = None
        self.pages: Dict[Page, QtWidgets.QWidget] = {}

        self.paid_entries_controller = PaidEntriesController(
            self.config, store=store, runner=runner, file_picker=file_picker, parent=self
        )

        self._create_ui()
        self._init_actions()
        self._connect_signals()
        self._init_nav(self.config.last_active_page)

        self.update_title()
        self.load_window_settings()

    def _load_config(self) -> lib.UniConfig:
        if self.store is None:
            return lib.UniConfig()

        update = self.store.get()
        for why in update.errors:
            logging.error(f'Error loading app config: {why}')
        return update.config

    def _create_ui(self) -> None:
        central = QtWidgets.QWidget(parent=self)
        QtWidgets.QHBoxLayout(central)
        central.layout().setContentsMargins(0, 0, 0, 0)
        central.layout().setSpacing(0)
        self.setCentralWidget(central)

        self.nav = QtWidgets.QListWidget(parent=central)
        self.nav.setObjectName('NavigationList')
        self.nav.setFixedWidth(ui.Size.NavWidth(1.0))
        self.nav.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        central.layout().addWidget(self.nav, 0)

        self.stack = QtWidgets.QStackedWidget(parent=central)
        central.layout().addWidget(self.stack, 1)

        self.pages = {
            Page.AboutPc: AboutPcWidget(parent=self.stack),
            Page.Clock: ClockWidget(parent=self.stack),
            Page.Preferences: PreferencesWidget(self.config, store=self.store, parent=self.stack),
            Page.PaidEntries: PaidEntriesWidget(self.paid_entries_controller, parent=self.stack),
        }
        for page in Page:
            item = QtWidgets.QListWidgetItem(PAGE_TITLES[page])
            item.setData(QtCore.Qt.UserRole, page.value)
            self.nav.addItem(item)
            self.stack.addWidget(self.pages[page])

        self.log_view = LogDockWidget(parent=self)
        self.addDockWidget(QtCore.Qt.BottomDockWidgetArea, self.log_view)
        self.log_view.hide()

    def _init_actions(self) -> None:
        menu = self.menuBar().addMenu('View')

        action = QtGui.QAction('About', self)
        action.triggered.connect(signals.showAbout)
        menu.addAction(action)

        action = QtGui.QAction('Logs', self)
        action.setShortcut('Ctrl+L')
        action.triggered.connect(signals.showLogs)
        menu.addAction(action)

    def _connect_signals(self) -> None:
        self.nav.currentRowChanged.connect(self.on_nav_select)

        if self.store is not None:
            self.store.configChanged.connect(self.on_config_update)

        signals.initializationRequested.connect(self.on_page_init)
        signals.showLogs.connect(self.show_logs)

    def _init_nav(self, page: Page) -> None:
        """Activate the restored page without persisting it again."""
        self.nav.blockSignals(True)
        try:
            self.nav.setCurrentRow(list(Page).index(page))
            self.stack.setCurrentIndex(self.nav.currentRow())
        finally:
            self.nav.blockSignals(False)

    def active_page(self) -> Page:
        row = self.nav.currentRow()
        if row < 0:
            return Page.AboutPc
        return list(Page)[row]

    @QtCore.Slot(int)
    def on_nav_select(self, row: int) -> None:
        """Switch to the selected page, remember it, and let it initialize."""
        if row < 0:
            return

        page = list(Page)[row]
        self.stack.setCurrentIndex(row)
        signals.pageActivated.emit(page.value)

        if self.store is not None:
            try:
                self.store.set_last_active_page(page)
            except status.ConfigWriteException as ex:
                logging.error(f'Error setting active page {ex}')

        self.on_page_init()
        self.update_title()

    @QtCore.Slot()
    def on_page_init(self) -> None:
        if self.active_page() == Page.PaidEntries:
            self.paid_entries_controller.on_init()

    @QtCore.Slot()
    def show_logs(self) -> None:
        self.log_view.show()
        self.log_view.raise_()

    @QtCore.Slot(object)
    def on_config_update(self, update: lib.ConfigUpdate) -> None:
        for why in update.errors:
            logging.error(f'App config error: {why}')

        self.config = update.config
        self.pages[Page.Preferences].config_updated(update.config)
        self.paid_entries_controller.external_config_changed(update.config)
        signals.configChanged.emit(update.config)

    def update_title(self) -> None:
        """Updates the window title with the active page's name."""
        self.setWindowTitle(f'{app_name} - {PAGE_TITLES[self.active_page()]}')

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.5),
            ui.Size.DefaultHeight(1.2)
        )

    def closeEvent(self, event) -> None:
        """Persist window geometry and state on close."""
        settings = QtCore.QSettings(app_name, app_name)
        settings.setValue('MainWindow/geometry', self.saveGeometry())
        settings.setValue('MainWindow/windowState', self.saveState())
        super().closeEvent(event)

    def load_window_settings(self) -> None:
        settings = QtCore.QSettings(app_name, app_name)

        geom_data = settings.value('MainWindow/geometry')
        if isinstance(geom_data, QtCore.QByteArray):
            self.restoreGeometry(geom_data)
        else:
            self.resize(self.sizeHint())

        state = settings.value('MainWindow/windowState')
        if isinstance(state, QtCore.QByteArray):
            self.restoreState(state)
