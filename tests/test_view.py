"""
Tests for the paid-entries projection and widget.

Run:
    python -m unittest tests.test_view
"""
from PySide6 import QtWidgets

from UniApp.core import ingestion
from UniApp.core.models import Platform, Quote, QuoteRecord, UsdQuote
from UniApp.core.worker import TaskResult
from UniApp.pages.paid_entries.controller import DialogKind, PaidEntriesController
from UniApp.pages.paid_entries.view import (
    MASKED_KEY,
    Columns,
    PaidEntriesWidget,
    primary_quote,
    project,
)
from UniApp.settings.lib import UniConfig
from UniApp.status import status
from tests.base import BaseTestCase, RecordingRunner, mute_ui_signals


def record(name, price, platform=None):
    return QuoteRecord(id=1, name=name, symbol='ETH', platform=platform, quote=Quote(usd=UsdQuote(price=price)))


class ProjectTests(BaseTestCase):

    def make_controller(self, config=None) -> PaidEntriesController:
        return PaidEntriesController(config or UniConfig(), store=self.store, runner=RecordingRunner())

    def test_initial_state(self):
        state = project(self.make_controller())
        self.assertEqual(state.json_path, '')
        self.assertEqual(state.ingestion_text, 'Not loaded')
        self.assertFalse(state.editing_credential)
        self.assertEqual(state.credential_text, '')
        self.assertFalse(state.can_submit_credential)
        self.assertEqual(state.rows, [])

    def test_stored_key_is_masked(self):
        state = project(self.make_controller(UniConfig(api_key='secret')))
        self.assertEqual(state.credential_text, MASKED_KEY)

    def test_editing_shows_draft(self):
        c = self.make_controller(UniConfig(api_key='secret'))
        c.begin_credential_edit()
        c.edit_credential('')
        state = project(c)
        self.assertTrue(state.editing_credential)
        self.assertEqual(state.credential_text, '')
        self.assertFalse(state.can_submit_credential)

        c.edit_credential('new')
        self.assertTrue(project(c).can_submit_credential)

    def test_rows_combine_ledger_and_quotes(self):
        c = self.make_controller()
        c.receive_ingestion_result(TaskResult(data=ingestion.parse_ledger({
            'BTC': [{'amount': 0.5}, {'amount': 0.25}],
            'DOGE': [{'note': 'gift'}],
        })), user_initiated=False)
        c.receive_price_fetch_result(TaskResult(data={
            'BTC': [QuoteRecord(id=1, name='Bitcoin', symbol='BTC', platform=None,
                                quote=Quote(usd=UsdQuote(price=40000.0)))],
        }))

        btc, doge = project(c).rows
        self.assertEqual((btc.symbol, btc.name, btc.entries, btc.amount, btc.price), ('BTC', 'Bitcoin', 2, 0.75, 40000.0))
        self.assertEqual(btc.value, 30000.0)
        self.assertEqual((doge.name, doge.entries, doge.amount, doge.price, doge.value), ('', 1, None, None, None))

    def test_ingestion_text_follows_state(self):
        c = self.make_controller()
        with mute_ui_signals():
            c.receive_ingestion_result(TaskResult(error=status.IoException('gone')), user_initiated=False)
        self.assertEqual(project(c).ingestion_text, 'Failed to load')


class PrimaryQuoteTests(BaseTestCase):

    def test_native_record_wins(self):
        token = record('Bridged', 1.0, platform=Platform(id=2, name='Solana'))
        native = record('Ethereum', 3000.0)
        self.assertIs(primary_quote([token, native]), native)

    def test_first_record_without_native(self):
        token = record('Bridged', 1.0, platform=Platform(id=2, name='Solana'))
        self.assertIs(primary_quote([token]), token)

    def test_no_records(self):
        self.assertIsNone(primary_quote(None))
        self.assertIsNone(primary_quote([]))


class PaidEntriesWidgetTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.controller = PaidEntriesController(UniConfig(api_key='secret'), store=self.store,
                                                runner=RecordingRunner())
        self.widget = PaidEntriesWidget(self.controller)

    def test_renders_masked_key_read_only(self):
        self.assertEqual(self.widget.credential_editor.text(), MASKED_KEY)
        self.assertTrue(self.widget.credential_editor.isReadOnly())
        self.assertTrue(self.widget.save_button.isHidden())
        self.assertFalse(self.widget.edit_button.isHidden())

    def test_edit_mode_toggles_buttons(self):
        self.widget.edit_button.click()
        self.assertTrue(self.controller.is_editing_credential)
        self.assertFalse(self.widget.credential_editor.isReadOnly())
        self.assertEqual(self.widget.credential_editor.text(), 'secret')
        self.assertFalse(self.widget.save_button.isHidden())
        self.assertTrue(self.widget.edit_button.isHidden())

        self.widget.cancel_button.click()
        self.assertFalse(self.controller.is_editing_credential)
        self.assertEqual(self.widget.credential_editor.text(), MASKED_KEY)

    def test_save_submits_to_store(self):
        self.widget.edit_button.click()
        self.controller.edit_credential('another')
        self.assertTrue(self.widget.save_button.isEnabled())
        self.widget.save_button.click()
        self.assertEqual(self.store.get().config.api_key, 'another')
        self.assertFalse(self.controller.is_editing_credential)

    def test_return_with_empty_draft_is_ignored(self):
        self.widget.edit_button.click()
        self.controller.edit_credential('')
        self.assertFalse(self.widget.save_button.isEnabled())
        self.widget.submit_if_possible()
        self.assertTrue(self.controller.is_editing_credential)

    def test_table_rows(self):
        self.controller.receive_ingestion_result(
            TaskResult(data=ingestion.parse_ledger({'BTC': [{'amount': 2}], 'ETH': []})), user_initiated=False
        )
        self.assertEqual(self.widget.table.rowCount(), 2)
        self.assertEqual(self.widget.table.item(0, Columns.Symbol).text(), 'BTC')
        self.assertEqual(self.widget.table.item(0, Columns.Amount).text(), '2')
        self.assertEqual(self.widget.table.item(0, Columns.Price).text(), 'n/a')
        self.assertEqual(self.widget.status_label.text(), 'Loaded')

    def test_dialog_is_shown_and_dismissed(self):
        self.controller.receive_ingestion_result(TaskResult(data={}), user_initiated=True)
        box = self.widget.message_box
        self.assertIsInstance(box, QtWidgets.QMessageBox)
        self.assertEqual(box.windowTitle(), self.controller.dialog.title)
        self.assertEqual(self.controller.dialog.kind, DialogKind.Success)

        box.done(QtWidgets.QMessageBox.Ok)
        self.assertIsNone(self.controller.dialog)
        self.assertIsNone(self.widget.message_box)
