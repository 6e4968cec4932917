"""
Tests for UniApp.log: the TankHandler, the Qt message bridge, the setup helpers,
and the log viewer widget.

Run:
    python -m unittest tests.test_log
"""
import logging
from typing import List

from PySide6.QtCore import QtMsgType

from UniApp.log import log
from UniApp.log.log import (
    TankHandler,
    qt_message_handler,
    set_logging_level,
    setup_logging,
)
from UniApp.log.view import LogDockWidget, LogWidget
from UniApp.status import status
from UniApp.ui.actions import signals
from tests.base import BaseTestCase, mute_ui_signals


class LogModuleTests(BaseTestCase):
    """
    Each test starts with a fresh root logger configured by
    setup_logging(enable_stream_handler=False).
    """

    def setUp(self) -> None:
        super().setUp()

        logging.disable(logging.NOTSET)

        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)

        self.root_logger = logging.getLogger()
        self.tank: TankHandler = log.get_handler()
        self.tank.clear_logs()

    def test_setup_logging_installs_tank_handler_only(self):
        self.assertEqual(
            [type(h) for h in self.root_logger.handlers],
            [TankHandler],
        )

    def test_setup_logging_with_stream_handler(self):
        setup_logging(enable_stream_handler=True, enable_qt_handler=False)
        types = [type(h) for h in self.root_logger.handlers]
        self.assertIn(logging.StreamHandler, types)
        self.assertIn(TankHandler, types)

    def test_get_handler_requires_exactly_one(self):
        self.root_logger.addHandler(TankHandler())
        with self.assertRaises(RuntimeError):
            log.get_handler()

        self.root_logger.handlers.clear()
        with self.assertRaises(RuntimeError):
            log.get_handler()

    def test_set_logging_level_accepts_valid_levels(self):
        set_logging_level(logging.ERROR)
        self.assertEqual(self.root_logger.level, logging.ERROR)
        for h in self.root_logger.handlers:
            self.assertEqual(h.level, logging.ERROR)

    def test_set_logging_level_rejects_non_int(self):
        with self.assertRaises(ValueError):
            set_logging_level('INFO')  # type: ignore[arg-type]

    def test_set_logging_level_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_logging_level(1234)

    def test_tank_handler_stores_and_filters(self):
        logging.debug('dbg message')
        with mute_ui_signals():
            logging.error('err message')
        self.assertEqual(len(self.tank.tank), 2)
        errs: List[str] = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn('err message', errs[0])
        self.tank.clear_logs()
        self.assertEqual(len(self.tank.tank), 0)

    def test_emit_triggers_showLogs_on_error(self):
        triggered: list[bool] = []

        def _slot() -> None:
            triggered.append(True)

        signals.showLogs.connect(_slot)
        try:
            logging.warning('should not emit')
            self.assertFalse(triggered)
            logging.error('should emit signal')
            self.assertTrue(triggered)
        finally:
            signals.showLogs.disconnect(_slot)

    def test_status_exception_is_logged_on_construction(self):
        with mute_ui_signals():
            ex = status.ParseException('"ledger.json" is not valid JSON')
        errs = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn(str(ex), errs[0])
        self.assertTrue(str(ex).startswith(status.get_message(status.Status.ParseError)))

    def test_qt_message_handler_maps_to_logging(self):
        qt_message_handler(QtMsgType.QtInfoMsg, None, 'Qt info')
        qt_message_handler(QtMsgType.QtWarningMsg, None, '  Qt warn  ')
        msgs = self.tank.get_logs()
        self.assertTrue(any('Qt info' in m for m in msgs))
        self.assertTrue(any(m.endswith('Qt warn') for m in msgs))

    def test_qt_message_handler_fatal_exits(self):
        with mute_ui_signals():
            with self.assertRaises(SystemExit):
                qt_message_handler(QtMsgType.QtFatalMsg, None, 'fatal')


class LogWidgetTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)
        self.tank = log.get_handler()
        self.tank.clear_logs()

    def test_refresh_honours_level_filter(self):
        logging.debug('a debug line')
        logging.info('an info line')

        widget = LogWidget(fetch_interval_ms=60_000)
        text = widget.text_view.toPlainText()
        self.assertNotIn('a debug line', text)
        self.assertIn('an info line', text)

        widget.level_combo.setCurrentIndex(0)
        self.assertIn('a debug line', widget.text_view.toPlainText())

    def test_clear_empties_tank_and_view(self):
        logging.info('something')
        widget = LogWidget(fetch_interval_ms=60_000)
        widget.clear()
        self.assertEqual(widget.text_view.toPlainText(), '')
        self.assertEqual(self.tank.get_logs(), [])

    def test_dock_hosts_log_widget(self):
        dock = LogDockWidget()
        self.assertIsInstance(dock.widget(), LogWidget)
        self.assertEqual(dock.objectName(), 'LogDockWidget')
