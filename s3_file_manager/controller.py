from __future__ import annotations
"""Controller that owns the bucket credentials and guards backend calls."""

import json
import logging
from typing import Callable, Optional

from .credentials import FIELD_NAMES, CredentialStorage
from .models import Credentials, Entry
from .services import DEFAULT_URL_EXPIRY, S3StorageGateway

LOGGER = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for missing, incomplete or malformed credentials."""


def parse_credentials(text: str) -> Credentials:
    """Build :class:`Credentials` from the user-supplied JSON document.

    Absent fields become empty strings; completeness is checked before each
    backend call rather than here.
    """
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid credentials JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Credentials must be a JSON object")

    values: dict[str, str] = {}
    for attr, name in FIELD_NAMES.items():
        value = data.get(name, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigError(f"Credential field '{name}' must be a string")
        values[attr] = value.strip()
    return Credentials(**values)


class S3FileManagerController:
    """Coordinates credential handling with the :class:`S3StorageGateway`."""

    def __init__(
        self,
        gateway: S3StorageGateway | None = None,
        storage: CredentialStorage | None = None,
        *,
        url_expires_in: int = DEFAULT_URL_EXPIRY,
    ):
        self._gateway = gateway or S3StorageGateway()
        self._storage = storage or CredentialStorage()
        self._url_expires_in = url_expires_in
        self._credentials: Credentials = self._storage.load()

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def has_credentials(self) -> bool:
        return self._credentials.is_complete

    def load_credentials(self, text: str) -> Credentials:
        credentials = parse_credentials(text)
        self._storage.save(credentials)
        self._credentials = credentials
        LOGGER.debug("Loaded credentials for bucket '%s'", credentials.bucket_name)
        return credentials

    def reset_credentials(self) -> None:
        self._storage.save(Credentials())
        self._credentials = Credentials()

    def list_entries(self, prefix: str = "") -> list[Entry]:
        credentials = self._require_credentials()
        return self._gateway.list_entries(credentials, prefix)

    def get_download_url(self, key: str) -> str:
        credentials = self._require_credentials()
        return self._gateway.get_download_url(credentials, key, expires_in=self._url_expires_in)

    def upload(
        self,
        key: str,
        data: bytes,
        *,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> None:
        credentials = self._require_credentials()
        self._gateway.upload(credentials, key, data, progress_callback=progress_callback)

    def delete(self, key: str) -> None:
        credentials = self._require_credentials()
        self._gateway.delete(credentials, key)

    def create_folder(self, key: str) -> str:
        credentials = self._require_credentials()
        return self._gateway.create_folder(credentials, key)

    def _require_credentials(self) -> Credentials:
        if not self._credentials.is_complete:
            raise ConfigError("Please upload S3 configuration first.")
        return self._credentials
