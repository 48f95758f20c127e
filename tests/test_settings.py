"""Unit tests for user settings."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from kite.constants import EditorConstants
from kite.settings import Settings, default_settings_path, load_settings, validate_setting


class TestLoadSettings(unittest.TestCase):
    """Test loading settings from the JSON file."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.settings_file = Path(self.temp_dir) / "settings.json"

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def write(self, data):
        with open(self.settings_file, 'w', encoding='utf-8') as f:
            f.write(data if isinstance(data, str) else json.dumps(data))

    def test_missing_file_gives_defaults(self):
        """Test that a missing settings file yields the defaults."""
        settings = load_settings(self.settings_file)
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.quit_times, EditorConstants.QUIT_TIMES)

    def test_load_quit_times(self):
        """Test a valid quit_times overrides the default."""
        self.write({"quit_times": 5})
        self.assertEqual(load_settings(self.settings_file).quit_times, 5)

    def test_invalid_values_are_ignored(self):
        """Test invalid values fall back to defaults with a warning."""
        for bad in (0, -2, "3", True, 1.5, None):
            self.write({"quit_times": bad})
            with self.assertLogs('kite.settings', level='WARNING'):
                settings = load_settings(self.settings_file)
            self.assertEqual(settings.quit_times, EditorConstants.QUIT_TIMES)

    def test_unknown_keys_are_ignored(self):
        """Test unknown keys do not break loading."""
        self.write({"colour_scheme": "dark", "quit_times": 2})
        self.assertEqual(load_settings(self.settings_file), Settings(quit_times=2))

    def test_malformed_json(self):
        """Test a corrupt file is logged and ignored."""
        self.write("{not json")
        with self.assertLogs('kite.settings', level='WARNING') as logs:
            settings = load_settings(self.settings_file)
        self.assertEqual(settings, Settings())
        self.assertIn("Could not load settings", logs.output[0])

    def test_not_a_dict(self):
        """Test a JSON document that is not an object is ignored."""
        self.write([1, 2, 3])
        with self.assertLogs('kite.settings', level='WARNING'):
            self.assertEqual(load_settings(self.settings_file), Settings())


class TestValidateSetting(unittest.TestCase):
    """Test per-key validation."""

    def test_quit_times(self):
        self.assertTrue(validate_setting("quit_times", 1))
        self.assertTrue(validate_setting("quit_times", 10))
        self.assertFalse(validate_setting("quit_times", 0))
        self.assertFalse(validate_setting("quit_times", False))

    def test_unknown_key_accepted(self):
        self.assertTrue(validate_setting("anything", object()))


class TestDefaultPath(unittest.TestCase):
    """Test the settings location."""

    @patch('kite.settings.platformdirs.user_config_dir')
    def test_uses_user_config_dir(self, mock_config_dir):
        mock_config_dir.return_value = "/home/u/.config/kite"
        self.assertEqual(default_settings_path(), Path("/home/u/.config/kite/settings.json"))
        mock_config_dir.assert_called_once_with("kite")


if __name__ == '__main__':
    unittest.main()
