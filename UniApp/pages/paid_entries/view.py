"""Paid-entries page: projection of controller state and the Qt widget rendering it.

This module provides:
    - project(): pure function from controller state to a :class:`ViewState`.
    - PaidEntriesWidget: widget re-rendering the ViewState on every controller change and
      showing the controller's pending dialog.
"""
import dataclasses
import enum
from typing import List, Optional, Tuple

from PySide6 import QtCore, QtWidgets

from .controller import DialogContent, DialogKind, IngestionState, PaidEntriesController
from ...core.models import QuoteRecord
from ...settings import locale
from ...ui import ui

MASKED_KEY: str = '••••••••'

INGESTION_STATE_TEXT = {
    IngestionState.NotLoaded: 'Not loaded',
    IngestionState.Loaded: 'Loaded',
    IngestionState.Errored: 'Failed to load',
}


class Columns(enum.IntEnum):
    Symbol = 0
    Name = 1
    Entries = 2
    Amount = 3
    Price = 4
    Value = 5


COLUMN_TITLES: Tuple[str, ...] = ('Symbol', 'Name', 'Entries', 'Amount', 'Price', 'Value')


@dataclasses.dataclass(frozen=True)
class AssetRow:
    symbol: str
    name: str
    entries: int
    amount: Optional[float]
    price: Optional[float]

    @property
    def value(self) -> Optional[float]:
        if self.amount is None or self.price is None:
            return None
        return self.amount * self.price


@dataclasses.dataclass(frozen=True)
class ViewState:
    """Everything the paid-entries widget needs to draw itself."""
    json_path: str
    ingestion_text: str
    editing_credential: bool
    credential_text: str
    can_submit_credential: bool
    rows: List[AssetRow]


def primary_quote(records: Optional[List[QuoteRecord]]) -> Optional[QuoteRecord]:
    """Pick the record to display for a symbol.

    A native coin (no parent platform) wins over tokens issued on another chain.
    """
    if not records:
        return None
    return next((r for r in records if r.platform is None), records[0])


def project(controller: PaidEntriesController) -> ViewState:
    path = controller.config.paid_entries_json_path

    if controller.is_editing_credential:
        credential_text = controller.credential_edit
    elif controller.config.api_key:
        credential_text = MASKED_KEY
    else:
        credential_text = ''

    rows: List[AssetRow] = []
    quotes = controller.quotes or {}
    for symbol, entries in (controller.ledger or {}).items():
        amounts = [e.amount for e in entries if e.amount is not None]
        record = primary_quote(quotes.get(symbol))
        rows.append(AssetRow(
            symbol=symbol,
            name=record.name if record else '',
            entries=len(entries),
            amount=sum(amounts) if amounts else None,
            price=record.price if record else None,
        ))

    return ViewState(
        json_path=path.as_posix() if path is not None else '',
        ingestion_text=INGESTION_STATE_TEXT[controller.ingestion_state],
        editing_credential=controller.is_editing_credential,
        credential_text=credential_text,
        can_submit_credential=bool(controller.credential_edit),
        rows=rows,
    )


class PaidEntriesWidget(QtWidgets.QWidget):
    """Page showing the ledger file, the API key and the assets with their latest prices."""

    def __init__(self, controller: PaidEntriesController, parent=None):
        super().__init__(parent=parent)
        self.setObjectName('PaidEntriesWidget')

        self.controller = controller
        self.locale = locale.get_locale()

        self.json_path_editor = None
        self.pick_button = None
        self.status_label = None
        self.credential_editor = None
        self.edit_button = None
        self.save_button = None
        self.cancel_button = None
        self.table = None
        self.message_box = None

        self._create_ui()
        self._connect_signals()

        self.render()

    def _create_ui(self):
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(ui.Size.Margin(0.5))

        group = QtWidgets.QGroupBox('', parent=self)
        form = QtWidgets.QFormLayout(group)
        form.setRowWrapPolicy(QtWidgets.QFormLayout.WrapAllRows)

        row = QtWidgets.QWidget(parent=group)
        QtWidgets.QHBoxLayout(row)
        row.layout().setContentsMargins(0, 0, 0, 0)
        self.json_path_editor = QtWidgets.QLineEdit(parent=row)
        self.json_path_editor.setReadOnly(True)
        self.json_path_editor.setPlaceholderText('No JSON file selected')
        row.layout().addWidget(self.json_path_editor, 1)
        self.pick_button = QtWidgets.QPushButton('Pick…', parent=row)
        row.layout().addWidget(self.pick_button, 0)
        form.addRow('JSON path', row)

        self.status_label = QtWidgets.QLabel(parent=group)
        form.addRow('Status', self.status_label)

        row = QtWidgets.QWidget(parent=group)
        QtWidgets.QHBoxLayout(row)
        row.layout().setContentsMargins(0, 0, 0, 0)
        self.credential_editor = QtWidgets.QLineEdit(parent=row)
        self.credential_editor.setPlaceholderText('Not set')
        row.layout().addWidget(self.credential_editor, 1)
        self.edit_button = QtWidgets.QPushButton('Edit', parent=row)
        row.layout().addWidget(self.edit_button, 0)
        self.save_button = QtWidgets.QPushButton('Save', parent=row)
        row.layout().addWidget(self.save_button, 0)
        self.cancel_button = QtWidgets.QPushButton('Cancel', parent=row)
        row.layout().addWidget(self.cancel_button, 0)
        form.addRow('API key', row)

        self.layout().addWidget(group, 0)

        self.table = QtWidgets.QTableWidget(0, len(COLUMN_TITLES), parent=self)
        self.table.setHorizontalHeaderLabels(COLUMN_TITLES)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.table.verticalHeader().setHidden(True)
        self.table.horizontalHeader().setSectionResizeMode(Columns.Name.value, QtWidgets.QHeaderView.Stretch)
        self.layout().addWidget(self.table, 1)

    def _connect_signals(self):
        self.pick_button.clicked.connect(self.controller.request_file_pick)
        self.edit_button.clicked.connect(self.controller.begin_credential_edit)
        self.save_button.clicked.connect(self.controller.submit_credential_edit)
        self.cancel_button.clicked.connect(self.controller.cancel_credential_edit)
        self.credential_editor.textEdited.connect(self.controller.edit_credential)
        self.credential_editor.returnPressed.connect(self.submit_if_possible)

        self.controller.stateChanged.connect(self.render)
        self.controller.dialogChanged.connect(self.show_dialog)

    @QtCore.Slot()
    def submit_if_possible(self):
        if self.controller.credential_edit:
            self.controller.submit_credential_edit()

    @QtCore.Slot()
    def render(self):
        state = project(self.controller)

        self.json_path_editor.setText(state.json_path)
        self.status_label.setText(state.ingestion_text)

        self.credential_editor.setReadOnly(not state.editing_credential)
        if self.credential_editor.text() != state.credential_text:
            self.credential_editor.setText(state.credential_text)
        self.edit_button.setHidden(state.editing_credential)
        self.save_button.setHidden(not state.editing_credential)
        self.cancel_button.setHidden(not state.editing_credential)
        self.save_button.setEnabled(state.can_submit_credential)

        self.table.setRowCount(len(state.rows))
        for idx, row in enumerate(state.rows):
            values = (
                row.symbol,
                row.name,
                str(row.entries),
                '' if row.amount is None else f'{row.amount:g}',
                locale.format_price(row.price, self.locale),
                locale.format_price(row.value, self.locale),
            )
            for column, text in enumerate(values):
                item = QtWidgets.QTableWidgetItem(text)
                if column >= Columns.Entries:
                    item.setTextAlignment(QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter)
                self.table.setItem(idx, column, item)

    @QtCore.Slot(object)
    def show_dialog(self, dialog: Optional[DialogContent]):
        if self.message_box is not None:
            box, self.message_box = self.message_box, None
            box.finished.disconnect()
            box.close()
            box.deleteLater()

        if dialog is None:
            return

        icon = QtWidgets.QMessageBox.Critical if dialog.kind == DialogKind.Error else QtWidgets.QMessageBox.Information
        self.message_box = QtWidgets.QMessageBox(icon, dialog.title, dialog.body, QtWidgets.QMessageBox.Ok, self)
        self.message_box.finished.connect(self.controller.dismiss_dialog)
        self.message_box.open()
