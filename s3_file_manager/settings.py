from __future__ import annotations
"""Application settings loading helpers."""

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path

LOG_LEVEL_ENV = "S3FM_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppSettings:
    """Simple container for user-editable app settings."""

    endpoint_url: str = ""
    url_expires_in: int = 3600
    log_level: str = "WARNING"

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


class SettingsStorage:
    """Reads :class:`AppSettings` from a JSON file the user maintains."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3fm_settings.json"
        self._path = Path(storage_path)

    def load(self) -> AppSettings:
        data: dict = {}
        if self._path.exists():
            try:
                loaded = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                loaded = {}
            if isinstance(loaded, dict):
                data = loaded

        endpoint_url = data.get("endpoint_url", AppSettings.endpoint_url)
        if not isinstance(endpoint_url, str):
            endpoint_url = AppSettings.endpoint_url

        expires_in = data.get("url_expires_in", AppSettings.url_expires_in)
        try:
            expires_value = int(expires_in)
        except (TypeError, ValueError):
            expires_value = AppSettings.url_expires_in
        if expires_value <= 0:
            expires_value = AppSettings.url_expires_in

        log_level = os.environ.get(LOG_LEVEL_ENV) or data.get("log_level", AppSettings.log_level)
        log_level = str(log_level).strip().upper()
        if log_level not in LOG_LEVELS:
            log_level = AppSettings.log_level

        return AppSettings(
            endpoint_url=endpoint_url.strip(),
            url_expires_in=expires_value,
            log_level=log_level,
        )
