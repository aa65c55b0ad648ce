import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from s3_file_manager.settings import LOG_LEVEL_ENV, AppSettings, SettingsStorage


class SettingsStorageTests(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        os.environ.pop(LOG_LEVEL_ENV, None)

    def test_load_returns_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            storage = SettingsStorage(Path(tmp) / "settings.json")

            self.assertEqual(AppSettings(), storage.load())

    def test_load_reads_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            payload = {
                "endpoint_url": " https://minio.local ",
                "url_expires_in": "600",
                "log_level": "debug",
            }
            path.write_text(json.dumps(payload), encoding="utf-8")

            settings = SettingsStorage(path).load()

            self.assertEqual("https://minio.local", settings.endpoint_url)
            self.assertEqual(600, settings.url_expires_in)
            self.assertEqual("DEBUG", settings.log_level)

    def test_load_sanitizes_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            payload = {"endpoint_url": 42, "url_expires_in": -5, "log_level": "loud"}
            path.write_text(json.dumps(payload), encoding="utf-8")

            settings = SettingsStorage(path).load()

            self.assertEqual(AppSettings(), settings)

    def test_load_ignores_unparseable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text("[1, 2", encoding="utf-8")

            self.assertEqual(AppSettings(), SettingsStorage(path).load())

    def test_environment_overrides_log_level(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text(json.dumps({"log_level": "ERROR"}), encoding="utf-8")
            os.environ[LOG_LEVEL_ENV] = "info"

            settings = SettingsStorage(path).load()

            self.assertEqual("INFO", settings.log_level)
            self.assertEqual(20, settings.logging_level)


if __name__ == "__main__":
    unittest.main()
