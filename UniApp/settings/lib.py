"""Settings library for the durable, versioned application configuration.

Provides:
    - The :class:`UniConfig` record and its field schema.
    - :class:`ConfigStore`, a key/value store keeping one JSON-encoded file per field
      under ``<config root>/<app id>/v<version>/``, with per-field setters and change
      notification for both in-process writes and out-of-band edits.
"""

import dataclasses
import json
import logging
import os
import pathlib
import tempfile
from typing import Any, Dict, List, NamedTuple, Optional

from PySide6 import QtCore

from ..pages import Page
from ..status import status

app_name: str = 'UniApp'
app_id: str = 'com.github.uniapp.UniApp'

CONFIG_VERSION: int = 1
CONFIG_DIR_ENV_KEY: str = 'UNIAPP_CONFIG_DIR'

REDACTED: str = '********'


@dataclasses.dataclass(frozen=True)
class UniConfig:
    """Configuration data that persists between application runs.

    Attributes:
        username: The user's display name.
        last_active_page: The page shown when the application was last used.
        paid_entries_json_path: Path of the ledger JSON file, or None when not configured.
        api_key: Credential for the price service, or None when not configured.
    """
    username: str = ''
    last_active_page: Page = Page.AboutPc
    paid_entries_json_path: Optional[pathlib.Path] = None
    api_key: Optional[str] = dataclasses.field(default=None, repr=False)


CONFIG_SCHEMA: Dict[str, Dict[str, Any]] = {
    'username': {'type': str, 'nullable': False},
    'last_active_page': {'type': Page, 'nullable': False},
    'paid_entries_json_path': {'type': pathlib.Path, 'nullable': True},
    'api_key': {'type': str, 'nullable': True, 'secret': True},
}


class ConfigUpdate(NamedTuple):
    """A configuration snapshot together with any errors met while loading it."""
    config: UniConfig
    errors: List[str]


def get_config_root() -> pathlib.Path:
    """Return the directory that holds per-application config directories.

    The ``UNIAPP_CONFIG_DIR`` environment variable takes precedence over the
    platform's generic config location.
    """
    v = os.environ.get(CONFIG_DIR_ENV_KEY, '')
    if v:
        return pathlib.Path(v)
    p = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.GenericConfigLocation)
    return pathlib.Path(p)


def _display_value(key: str, value: Any) -> str:
    if CONFIG_SCHEMA[key].get('secret') and value is not None:
        return REDACTED
    return repr(value)


def encode_value(key: str, value: Any) -> str:
    """Encode a field value as JSON text.

    Args:
        key: Field name from CONFIG_SCHEMA.
        value: Value to encode.

    Returns:
        str: JSON text written to the field file.

    Raises:
        KeyError: If key is not a config field.
        TypeError: If value does not match the field type.
    """
    if key not in CONFIG_SCHEMA:
        raise KeyError(f'Invalid config key: {key}, must be one of {list(CONFIG_SCHEMA)}')

    specs = CONFIG_SCHEMA[key]
    if value is None:
        if not specs['nullable']:
            raise TypeError(f'Config key "{key}" cannot be None.')
        return json.dumps(None)

    _type = specs['type']
    if _type is pathlib.Path:
        if not isinstance(value, (str, os.PathLike)):
            raise TypeError(f'Config key "{key}" must be a path, got {type(value)}.')
        return json.dumps(pathlib.Path(value).as_posix())
    if _type is Page:
        return json.dumps(Page(value).value)
    if not isinstance(value, _type):
        raise TypeError(f'Config key "{key}" must be {_type}, got {type(value)}.')
    return json.dumps(value)


def decode_value(key: str, text: str) -> Any:
    """Decode the JSON text of a field file.

    Raises:
        ValueError: If the text is not valid JSON or holds a value of the wrong type.
    """
    specs = CONFIG_SCHEMA[key]
    v = json.loads(text)

    if v is None:
        if specs['nullable']:
            return None
        raise ValueError(f'Config key "{key}" cannot be null.')

    _type = specs['type']
    if _type is pathlib.Path:
        if not isinstance(v, str) or not v:
            raise ValueError(f'Config key "{key}" must be a non-empty path string.')
        return pathlib.Path(v)
    if _type is Page:
        return Page(v)
    if not isinstance(v, _type):
        raise ValueError(f'Config key "{key}" must be {_type.__name__}, got {type(v).__name__}.')
    return v


class ConfigStore(QtCore.QObject):
    """
    Durable key/value store for :class:`UniConfig`.

    Each field lives in its own file, so fields can be written independently. Every
    change, whether written through this store or by another process, is announced
    through :attr:`configChanged` once :meth:`watch` has been called. Writes through
    the setters are announced immediately.

    Signals:
        configChanged (ConfigUpdate): Emitted with the new configuration when it differs
            from the last announced one.
    """
    configChanged = QtCore.Signal(object)

    def __init__(self, root: Optional[pathlib.Path] = None, app_id: str = app_id,
                 version: int = CONFIG_VERSION, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)

        root = pathlib.Path(root) if root else get_config_root()
        self.path: pathlib.Path = root / app_id / f'v{version}'
        self.version: int = version

        self._watcher: Optional[QtCore.QFileSystemWatcher] = None

        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            logging.error(f'Could not create config directory "{self.path}": {ex}')

        self._last: UniConfig = self.get().config

    def field_path(self, key: str) -> pathlib.Path:
        """Return the file backing a config field."""
        if key not in CONFIG_SCHEMA:
            raise KeyError(f'Invalid config key: {key}, must be one of {list(CONFIG_SCHEMA)}')
        return self.path / key

    def get(self) -> ConfigUpdate:
        """Load the configuration.

        Missing fields take their defaults. Fields that cannot be read or decoded also
        take their defaults and add a message to the returned errors.

        Returns:
            ConfigUpdate: The loaded configuration and the list of load errors.
        """
        values: Dict[str, Any] = {}
        errors: List[str] = []

        for key in CONFIG_SCHEMA:
            p = self.field_path(key)
            if not p.exists():
                continue
            try:
                values[key] = decode_value(key, p.read_text(encoding='utf-8'))
            except (OSError, UnicodeDecodeError, ValueError) as ex:
                errors.append(f'Failed to load config key "{key}": {ex}')

        return ConfigUpdate(UniConfig(**values), errors)

    def set(self, key: str, value: Any) -> None:
        """Persist a single field.

        Args:
            key: Field name from CONFIG_SCHEMA.
            value: New value.

        Raises:
            KeyError: If key is not a config field.
            status.ConfigWriteException: If the value cannot be encoded or written.
        """
        try:
            text = encode_value(key, value)
        except (TypeError, ValueError) as ex:
            raise status.ConfigWriteException(f'Invalid value for "{key}": {ex}') from ex

        p = self.field_path(key)
        logging.debug(f'Setting config "{key}" to {_display_value(key, value)}')

        tmp_path: Optional[pathlib.Path] = None
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                    'w', encoding='utf-8', dir=self.path, prefix=f'.{key}.', delete=False) as f:
                tmp_path = pathlib.Path(f.name)
                f.write(text)
            os.replace(tmp_path, p)
        except OSError as ex:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise status.ConfigWriteException(f'Failed to write "{key}": {ex}') from ex

        self._notify()

    def set_username(self, value: str) -> None:
        self.set('username', value)

    def set_last_active_page(self, value: Page) -> None:
        self.set('last_active_page', value)

    def set_paid_entries_json_path(self, value: Optional[pathlib.Path]) -> None:
        self.set('paid_entries_json_path', value)

    def set_api_key(self, value: Optional[str]) -> None:
        self.set('api_key', value)

    def watch(self) -> None:
        """Start watching the config directory for out-of-band changes."""
        if self._watcher is not None:
            return

        self._watcher = QtCore.QFileSystemWatcher(self)
        self._watcher.directoryChanged.connect(self.on_changed)
        self._watcher.fileChanged.connect(self.on_changed)
        self._update_watched_paths()
        logging.debug(f'Watching config directory "{self.path}"')

    def _update_watched_paths(self) -> None:
        if self._watcher is None:
            return

        paths = [self.path.as_posix()] + [
            self.field_path(k).as_posix() for k in CONFIG_SCHEMA if self.field_path(k).exists()
        ]
        watched = set(self._watcher.files() + self._watcher.directories())
        missing = [p for p in paths if p not in watched]
        if missing:
            self._watcher.addPaths(missing)

    @QtCore.Slot(str)
    def on_changed(self, path: str) -> None:
        # Files replaced on write drop out of the watch list
        self._update_watched_paths()
        self._notify()

    def _notify(self) -> None:
        update = self.get()
        if update.config == self._last and not update.errors:
            return
        self._last = update.config
        self.configChanged.emit(update)
