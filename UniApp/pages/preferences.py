"""Preferences page: edits the user's display name through the config store."""
import logging
from typing import Optional

from PySide6 import QtCore, QtWidgets

from ..settings import lib
from ..status import status
from ..ui import ui


class PreferencesWidget(QtWidgets.QWidget):
    """Form bound to the persisted :class:`~UniApp.settings.lib.UniConfig`.

    Edits are written straight to the store; the field follows the store's change
    notifications so that edits made elsewhere show up here.
    """

    def __init__(self, config: lib.UniConfig, store: Optional[lib.ConfigStore] = None, parent=None):
        super().__init__(parent=parent)
        self.setObjectName('PreferencesWidget')

        self.config = config
        self.store = store

        self.username_editor = None

        self._create_ui()
        self._connect_signals()

        self.config_updated(config)

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setAlignment(QtCore.Qt.AlignTop)

        group = QtWidgets.QGroupBox('', parent=self)
        form = QtWidgets.QFormLayout(group)
        form.setRowWrapPolicy(QtWidgets.QFormLayout.WrapAllRows)

        self.username_editor = QtWidgets.QLineEdit(parent=group)
        self.username_editor.setPlaceholderText('Enter a display name')
        form.addRow('Username', self.username_editor)

        self.layout().addWidget(group, 0)

    def _connect_signals(self):
        self.username_editor.textEdited.connect(self.set_username)

    @QtCore.Slot(str)
    def set_username(self, username: str) -> None:
        if self.store is None:
            logging.warning('No config store available, the username will not be saved.')
            return
        try:
            self.store.set_username(username)
        except status.ConfigWriteException as ex:
            logging.error(f'Error setting username: {ex}')

    @QtCore.Slot(object)
    def config_updated(self, config: lib.UniConfig) -> None:
        self.config = config
        if self.username_editor.text() != config.username:
            self.username_editor.setText(config.username)
