"""State machine behind the paid-entries page.

The controller owns the parsed ledger, the latest quotes, the ingestion state, a single
pending dialog and the draft of the API key while it is being edited. It schedules file
reads and price requests through an injected runner and applies their results when they
arrive on the GUI thread. Each operation runs to completion before the next one.

The config store is the writer of record: the controller never changes its cached
:class:`~UniApp.settings.lib.UniConfig` after calling a setter. The cache changes only
through :meth:`PaidEntriesController.external_config_changed`, fed by the store's
change notifications.
"""
import dataclasses
import enum
import logging
import pathlib
from typing import Callable, Iterable, Optional

from PySide6 import QtCore, QtWidgets

from ...core import ingestion, prices, worker
from ...core.models import Ledger, QuoteTable
from ...core.worker import TaskResult
from ...settings import lib
from ...status import status

PICK_JSON_TITLE: str = 'Pick a JSON file'
JSON_NAME_FILTER: str = 'JSON files (*.json)'

JSON_LOADED_TITLE: str = 'JSON loaded'
JSON_ERROR_TITLE: str = 'Error loading JSON file'
PRICES_ERROR_TITLE: str = 'Error fetching crypto prices'

Runner = Callable[..., object]
FilePicker = Callable[[str, str, str], Optional[pathlib.Path]]


class IngestionState(enum.StrEnum):
    NotLoaded = enum.auto()
    Loaded = enum.auto()
    Errored = enum.auto()


class DialogKind(enum.StrEnum):
    Error = enum.auto()
    Success = enum.auto()


@dataclasses.dataclass(frozen=True)
class DialogContent:
    """A modal notification waiting to be shown and dismissed."""
    kind: DialogKind
    title: str
    body: str


def pick_json_file(title: str, name_filter: str, start_dir: str) -> Optional[pathlib.Path]:
    """Show the native open-file dialog and return the chosen path, or None if cancelled."""
    path, _ = QtWidgets.QFileDialog.getOpenFileName(None, title, start_dir, name_filter)
    if not path:
        logging.debug('File dialog was canceled.')
        return None
    return pathlib.Path(path)


class PaidEntriesController(QtCore.QObject):
    """
    Drives ledger ingestion and price fetches for the paid-entries page.

    Signals:
        stateChanged (): Emitted after any operation that changed controller state.
        dialogChanged (object): Emitted with the new pending DialogContent, or None when cleared.
    """
    stateChanged = QtCore.Signal()
    dialogChanged = QtCore.Signal(object)

    def __init__(self, config: lib.UniConfig, store: Optional[lib.ConfigStore] = None,
                 runner: Optional[Runner] = None, file_picker: Optional[FilePicker] = None,
                 parent: Optional[QtCore.QObject] = None) -> None:
        """
        Args:
            config: The configuration as last announced by the store.
            store: Handle used to persist the JSON path and API key. None means config is read-only.
            runner: ``runner(func, *args, on_finished=callback)`` used to schedule work.
                Defaults to :func:`UniApp.core.worker.start_asynchronous`.
            file_picker: ``file_picker(title, name_filter, start_dir)`` returning the chosen path
                or None. Defaults to :func:`pick_json_file`.
            parent: Parent QObject.
        """
        super().__init__(parent=parent)

        self.config: lib.UniConfig = config
        self.store: Optional[lib.ConfigStore] = store
        self.runner: Runner = runner or worker.start_asynchronous
        self.file_picker: FilePicker = file_picker or pick_json_file

        self.dialog: Optional[DialogContent] = None
        self.ingestion_state: IngestionState = IngestionState.NotLoaded
        self.ledger: Optional[Ledger] = None
        self.quotes: Optional[QuoteTable] = None
        self.credential_edit: Optional[str] = None

        # Latest scheduled unit of work per kind; older results are dropped
        self.ingestion_generation: int = 0
        self.prices_generation: int = 0
        self.ingestion_pending: bool = False

    @property
    def is_editing_credential(self) -> bool:
        return self.credential_edit is not None

    def set_dialog(self, dialog: Optional[DialogContent]) -> None:
        self.dialog = dialog
        self.dialogChanged.emit(dialog)

    def schedule_ingestion(self, path: pathlib.Path, user_initiated: bool) -> int:
        """Schedule a ledger read and return its generation number."""
        self.ingestion_generation += 1
        generation = self.ingestion_generation
        self.ingestion_pending = True
        logging.debug(f'Scheduling ingestion #{generation} of "{path}" (user_initiated={user_initiated})')

        def on_finished(result: TaskResult) -> None:
            if generation != self.ingestion_generation:
                logging.debug(f'Discarding stale ingestion result #{generation}')
                return
            self.ingestion_pending = False
            self.receive_ingestion_result(result, user_initiated)

        self.runner(ingestion.read_ledger, path, on_finished=on_finished)
        return generation

    def schedule_price_fetch(self, api_key: str, symbols: Iterable[str]) -> int:
        """Schedule a quote request and return its generation number."""
        self.prices_generation += 1
        generation = self.prices_generation
        symbols = prices.normalize_symbols(symbols)
        logging.debug(f'Scheduling price fetch #{generation} for {len(symbols)} symbols')

        def on_finished(result: TaskResult) -> None:
            if generation != self.prices_generation:
                logging.debug(f'Discarding stale price fetch result #{generation}')
                return
            self.receive_price_fetch_result(result)

        self.runner(prices.fetch_quotes, api_key, symbols, on_finished=on_finished)
        return generation

    def start_directory(self) -> str:
        path = self.config.paid_entries_json_path
        if path is not None:
            return path.parent.as_posix()
        return QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.DownloadLocation)

    @QtCore.Slot()
    def request_file_pick(self) -> None:
        """Let the user choose a ledger file, persist its path and load it."""
        path = self.file_picker(PICK_JSON_TITLE, JSON_NAME_FILTER, self.start_directory())
        if path is None:
            return

        if self.store is None:
            logging.warning('No config store available, the JSON path will not be saved.')
        else:
            try:
                self.store.set_paid_entries_json_path(path)
            except status.ConfigWriteException as ex:
                logging.error(f'Error set_paid_entries_json_path: {ex}')

        # A new path starts a new ingestion cycle
        self.ingestion_state = IngestionState.NotLoaded
        self.schedule_ingestion(path, user_initiated=True)
        self.stateChanged.emit()

    def receive_ingestion_result(self, result: TaskResult, user_initiated: bool) -> None:
        """Apply the outcome of a ledger read."""
        if not result.ok:
            self.ingestion_state = IngestionState.Errored
            self.set_dialog(DialogContent(DialogKind.Error, JSON_ERROR_TITLE, result.description))
            self.stateChanged.emit()
            return

        ledger: Ledger = result.data
        self.ingestion_state = IngestionState.Loaded
        self.ledger = ledger

        if user_initiated:
            self.set_dialog(DialogContent(DialogKind.Success, JSON_LOADED_TITLE, f'Loaded: {len(ledger)} assets'))

        if self.config.api_key:
            self.schedule_price_fetch(self.config.api_key, ledger.keys())

        self.stateChanged.emit()

    def receive_price_fetch_result(self, result: TaskResult) -> None:
        """Apply the outcome of a quote request."""
        if result.ok:
            self.quotes = result.data
        else:
            self.set_dialog(DialogContent(DialogKind.Error, PRICES_ERROR_TITLE, result.description))
        self.stateChanged.emit()

    @QtCore.Slot()
    def on_init(self) -> None:
        """Load whatever is configured but not yet loaded. Called each time the page is shown."""
        path = self.config.paid_entries_json_path
        # A read already in flight, user-picked or not, owns the next result
        if self.ingestion_state == IngestionState.NotLoaded and path is not None and not self.ingestion_pending:
            self.schedule_ingestion(path, user_initiated=False)

        if self.config.api_key and self.ledger is not None:
            self.schedule_price_fetch(self.config.api_key, self.ledger.keys())

    @QtCore.Slot()
    def begin_credential_edit(self) -> None:
        self.credential_edit = self.config.api_key or ''
        self.stateChanged.emit()

    @QtCore.Slot(str)
    def edit_credential(self, text: str) -> None:
        self.credential_edit = text
        self.stateChanged.emit()

    @QtCore.Slot()
    def cancel_credential_edit(self) -> None:
        self.credential_edit = None
        self.stateChanged.emit()

    @QtCore.Slot()
    def submit_credential_edit(self) -> None:
        """Persist the drafted API key and leave edit mode.

        Raises:
            status.ContractViolationException: If there is no draft or it is empty.
        """
        if not self.credential_edit:
            raise status.ContractViolationException('Cannot submit an empty API key.')

        if self.store is None:
            logging.warning('No config store available, the API key will not be saved.')
            self.stateChanged.emit()
            return

        try:
            self.store.set_api_key(self.credential_edit)
        except status.ConfigWriteException as ex:
            logging.error(f'Error set_api_key: {ex}')
            return

        self.credential_edit = None
        self.stateChanged.emit()

    @QtCore.Slot()
    def dismiss_dialog(self) -> None:
        if self.dialog is None:
            return
        self.set_dialog(None)
        self.stateChanged.emit()

    @QtCore.Slot(object)
    def external_config_changed(self, config: lib.UniConfig) -> None:
        self.config = config
        self.stateChanged.emit()
