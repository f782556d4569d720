"""Unit tests for persisted defaults."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from buildstamp.settings import SettingsKeys, SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(Path(self.temp_dir) / "config")

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_load_missing_file(self):
        self.assertEqual(self.persistence.load(), {})

    def test_save_and_load(self):
        settings = {SettingsKeys.FORMAT: "python", SettingsKeys.GIT_EXECUTABLE: "git2"}
        self.assertTrue(self.persistence.save(settings))

        fresh = SettingsPersistence(self.persistence.settings_file.parent)
        self.assertEqual(fresh.load(), settings)

    def test_save_merges_and_skips_none(self):
        self.persistence.save({SettingsKeys.FORMAT: "python"})
        self.persistence.save({SettingsKeys.FORMAT: None, SettingsKeys.GIT_EXECUTABLE: "git"})
        self.assertEqual(
            self.persistence.load(),
            {SettingsKeys.FORMAT: "python", SettingsKeys.GIT_EXECUTABLE: "git"},
        )

    def test_atomic_write(self):
        """Test that no temp file is left behind."""
        self.persistence.save({SettingsKeys.FORMAT: "swift"})
        temp_file = self.persistence.settings_file.with_suffix('.tmp')
        self.assertFalse(temp_file.exists())
        self.assertTrue(self.persistence.settings_file.exists())

    def test_invalid_values_are_dropped(self):
        self.persistence.settings_file.parent.mkdir(parents=True)
        with open(self.persistence.settings_file, 'w', encoding='utf-8') as f:
            json.dump({SettingsKeys.FORMAT: "cobol", SettingsKeys.GIT_EXECUTABLE: 3,
                       "future_key": True}, f)
        self.assertEqual(self.persistence.load(), {"future_key": True})

    def test_corrupt_file_is_ignored(self):
        self.persistence.settings_file.parent.mkdir(parents=True)
        self.persistence.settings_file.write_text("{not json", encoding='utf-8')
        self.assertEqual(self.persistence.load(), {})

    def test_non_dict_file_is_ignored(self):
        self.persistence.settings_file.parent.mkdir(parents=True)
        self.persistence.settings_file.write_text("[1, 2]", encoding='utf-8')
        self.assertEqual(self.persistence.load(), {})

    def test_validate_setting(self):
        self.assertTrue(self.persistence.validate_setting(SettingsKeys.FORMAT, "swift"))
        self.assertFalse(self.persistence.validate_setting(SettingsKeys.FORMAT, ["swift"]))
        self.assertFalse(self.persistence.validate_setting(SettingsKeys.GIT_EXECUTABLE, ""))

    def test_clear_cache(self):
        self.persistence.load()
        self.assertIsNotNone(self.persistence._settings_cache)
        self.persistence.clear_cache()
        self.assertIsNone(self.persistence._settings_cache)

    def test_global_instance(self):
        self.assertIs(get_persistence(), get_persistence())


if __name__ == '__main__':
    unittest.main()
