"""
Unit tests for UniApp.settings.lib (field encoding, ConfigStore persistence and
change notification) and UniApp.settings.locale.

Run with:
    python -m unittest tests.test_settings
"""
import datetime
import json
import os
from pathlib import Path
from unittest.mock import patch

from UniApp.pages import Page
from UniApp.settings import lib, locale
from UniApp.settings.lib import ConfigStore, ConfigUpdate, UniConfig
from UniApp.status import status
from tests.base import BaseTestCase, mute_ui_signals


class EncodingTests(BaseTestCase):

    def test_encode_path_as_posix_string(self):
        self.assertEqual(
            lib.encode_value('paid_entries_json_path', Path('/data/ledger.json')),
            json.dumps('/data/ledger.json'),
        )

    def test_encode_page_as_its_value(self):
        self.assertEqual(lib.encode_value('last_active_page', Page.PaidEntries), '"paid_entries"')

    def test_encode_rejects_unknown_key(self):
        with self.assertRaises(KeyError):
            lib.encode_value('nope', 'x')

    def test_encode_rejects_wrong_type(self):
        with self.assertRaises(TypeError):
            lib.encode_value('username', 42)
        with self.assertRaises(TypeError):
            lib.encode_value('username', None)

    def test_encode_nullable_none(self):
        self.assertEqual(lib.encode_value('api_key', None), 'null')

    def test_decode_values(self):
        self.assertEqual(lib.decode_value('username', '"alice"'), 'alice')
        self.assertEqual(lib.decode_value('last_active_page', '"clock"'), Page.Clock)
        self.assertEqual(lib.decode_value('paid_entries_json_path', '"/a/b.json"'), Path('/a/b.json'))
        self.assertIsNone(lib.decode_value('api_key', 'null'))

    def test_decode_rejects_bad_values(self):
        for key, text in (
                ('username', 'not json'),
                ('username', 'null'),
                ('username', '12'),
                ('last_active_page', '"no_such_page"'),
                ('paid_entries_json_path', '""'),
        ):
            with self.subTest(key=key, text=text):
                with self.assertRaises(ValueError):
                    lib.decode_value(key, text)


class ConfigStoreTests(BaseTestCase):

    def test_store_uses_env_root_and_versioned_dir(self):
        self.assertEqual(self.store.path, self.config_root / lib.app_id / f'v{lib.CONFIG_VERSION}')
        self.assertTrue(self.store.path.is_dir())

    def test_defaults_when_empty(self):
        self.assertEqual(self.store.get(), ConfigUpdate(UniConfig(), []))

    def test_set_and_get_every_field(self):
        p = Path(self.tmp_dir) / 'ledger.json'
        self.store.set_username('alice')
        self.store.set_last_active_page(Page.Preferences)
        self.store.set_paid_entries_json_path(p)
        self.store.set_api_key('k-123')

        update = self.store.get()
        self.assertEqual(update.errors, [])
        self.assertEqual(update.config, UniConfig(
            username='alice',
            last_active_page=Page.Preferences,
            paid_entries_json_path=p,
            api_key='k-123',
        ))

    def test_one_file_per_field(self):
        self.store.set_username('alice')
        p = self.store.field_path('username')
        self.assertEqual(p, self.store.path / 'username')
        self.assertEqual(json.loads(p.read_text(encoding='utf-8')), 'alice')
        self.assertFalse(self.store.field_path('api_key').exists())

    def test_values_survive_a_new_store(self):
        self.store.set_username('bob')
        other = ConfigStore()
        self.assertEqual(other.get().config.username, 'bob')

    def test_versions_are_isolated(self):
        self.store.set_username('bob')
        other = ConfigStore(root=self.config_root, version=2)
        self.assertEqual(other.get().config.username, '')

    def test_unreadable_field_falls_back_to_default(self):
        self.store.set_username('alice')
        self.store.field_path('last_active_page').write_text('{broken', encoding='utf-8')

        with mute_ui_signals():
            update = self.store.get()
        self.assertEqual(update.config.username, 'alice')
        self.assertEqual(update.config.last_active_page, Page.AboutPc)
        self.assertEqual(len(update.errors), 1)
        self.assertIn('last_active_page', update.errors[0])

    def test_set_invalid_value_raises_config_write_error(self):
        with mute_ui_signals():
            with self.assertRaises(status.ConfigWriteException):
                self.store.set_username(42)  # type: ignore[arg-type]
        self.assertFalse(self.store.field_path('username').exists())

    def test_set_unknown_key_raises_key_error(self):
        with self.assertRaises(KeyError):
            self.store.set('nope', 'x')

    def test_failed_write_raises_config_write_error(self):
        with patch('UniApp.settings.lib.os.replace', side_effect=OSError('disk full')):
            with mute_ui_signals():
                with self.assertRaises(status.ConfigWriteException) as cm:
                    self.store.set_username('alice')
        self.assertIn('disk full', str(cm.exception))
        self.assertEqual(self.store.get().config.username, '')

    def test_failed_write_leaves_no_temp_file(self):
        with patch('UniApp.settings.lib.os.replace', side_effect=OSError('disk full')):
            with mute_ui_signals():
                with self.assertRaises(status.ConfigWriteException):
                    self.store.set_username('alice')
        self.assertEqual(list(self.store.path.glob('.username.*')), [])
        self.assertFalse(self.store.field_path('username').exists())

    def test_config_changed_emitted_once_per_change(self):
        updates = []
        self.store.configChanged.connect(updates.append)

        self.store.set_username('alice')
        self.store.set_username('alice')
        self.store.set_username('bob')

        self.assertEqual([u.config.username for u in updates], ['alice', 'bob'])

    def test_out_of_band_change_is_announced(self):
        updates = []
        self.store.configChanged.connect(updates.append)
        self.store.watch()

        self.store.field_path('username').write_text('"edited elsewhere"', encoding='utf-8')
        # Deliver the watcher notification directly
        self.store.on_changed(self.store.path.as_posix())

        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0].config.username, 'edited elsewhere')

    def test_watcher_follows_new_field_files(self):
        self.store.watch()
        self.assertIn(self.store.path.as_posix(), self.store._watcher.directories())
        self.assertEqual(self.store._watcher.files(), [])

        self.store.set_username('alice')
        self.store.on_changed(self.store.path.as_posix())
        self.assertIn(self.store.field_path('username').as_posix(), self.store._watcher.files())

    def test_api_key_is_never_logged_or_shown(self):
        secret = 'sk-super-secret'
        with self.assertLogs(level='DEBUG') as cm:
            self.store.set_api_key(secret)
        self.assertTrue(cm.output)
        for line in cm.output:
            self.assertNotIn(secret, line)

        self.assertNotIn(secret, repr(UniConfig(api_key=secret)))
        self.assertNotIn(secret, repr(self.store.get().config))

    def test_uncreatable_root_is_logged_not_raised(self):
        blocker = Path(self.tmp_dir) / 'not_a_dir'
        blocker.write_text('', encoding='utf-8')
        with mute_ui_signals():
            store = ConfigStore(root=blocker)
            update = store.get()
        self.assertEqual(update.config, UniConfig())


class LocaleTests(BaseTestCase):

    def test_get_locale_strips_encoding(self):
        with patch.dict(os.environ, {'LC_TIME': 'de_DE.UTF-8'}):
            self.assertEqual(locale.get_locale(), 'de_DE')

    def test_get_locale_falls_back(self):
        for value in ('C', 'POSIX', 'xx_NOPE', ''):
            with self.subTest(value=value):
                with patch.dict(os.environ, {'LC_TIME': value, 'LANG': ''}):
                    self.assertEqual(locale.get_locale(), locale.DEFAULT_LOCALE)

    def test_format_price(self):
        self.assertEqual(locale.format_price(None, 'en_US'), 'n/a')
        self.assertEqual(locale.format_price(1234.5, 'en_US'), '$1,234.50')

    def test_format_system_time(self):
        self.assertEqual(locale.format_system_time(None, 'en_US'), 'System time N/A')
        text = locale.format_system_time(datetime.datetime(2024, 1, 1, 13, 5, 9), 'en_US')
        self.assertIn('1:05:09', text)
