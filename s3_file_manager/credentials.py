from __future__ import annotations
"""Local persistence for bucket credentials."""
import json
import logging
from pathlib import Path

import keyring
from keyring.errors import KeyringError

from .models import Credentials

LOGGER = logging.getLogger(__name__)

KEYCHAIN_SERVICE = "s3-file-manager"

# Field names used by the credentials JSON document.
FIELD_NAMES = {
    "bucket_name": "bucketName",
    "region": "region",
    "access_key_id": "accessKeyId",
    "secret_access_key": "secretAccessKey",
}


class KeychainStore:
    """Encapsulates OS keychain access for the secret access key."""

    def __init__(self, service_name: str = KEYCHAIN_SERVICE):
        self._service_name = service_name

    def get_secret(self, account: str) -> str:
        if not account:
            return ""
        try:
            return keyring.get_password(self._service_name, account) or ""
        except KeyringError:
            LOGGER.warning("Unable to read secret for '%s' from keychain", account)
            return ""

    def set_secret(self, account: str, secret: str) -> None:
        if not account:
            return
        if not secret:
            self.delete_secret(account)
            return
        try:
            keyring.set_password(self._service_name, account, secret)
        except KeyringError:
            LOGGER.warning("Unable to store secret for '%s' in keychain", account)

    def delete_secret(self, account: str) -> None:
        if not account:
            return
        try:
            keyring.delete_password(self._service_name, account)
        except KeyringError:
            return


class CredentialStorage:
    """JSON-backed store for the credentials blob.

    The secret access key never touches the JSON file; it lives in the OS
    keychain under the access key id.
    """

    def __init__(self, storage_path: str | Path | None = None, keychain: KeychainStore | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3fm_credentials.json"
        self._path = Path(storage_path)
        self._keychain = keychain or KeychainStore()

    def load(self) -> Credentials:
        if not self._path.exists():
            return Credentials()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable credentials file %s", self._path)
            return Credentials()
        if not isinstance(data, dict):
            return Credentials()

        values = {
            attr: data.get(name) if isinstance(data.get(name), str) else ""
            for attr, name in FIELD_NAMES.items()
        }
        access_key_id = values["access_key_id"]
        if values["secret_access_key"]:
            self._keychain.set_secret(access_key_id, values["secret_access_key"])
            self._write_data(self._sanitized(values))
        else:
            values["secret_access_key"] = self._keychain.get_secret(access_key_id)
        return Credentials(**values)

    def save(self, credentials: Credentials) -> None:
        previous = self._load_access_key_id()
        if previous and previous != credentials.access_key_id:
            self._keychain.delete_secret(previous)
        self._keychain.set_secret(credentials.access_key_id, credentials.secret_access_key)
        values = {attr: getattr(credentials, attr) for attr in FIELD_NAMES}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_data(self._sanitized(values))

    def _load_access_key_id(self) -> str:
        if not self._path.exists():
            return ""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return ""
        if not isinstance(data, dict):
            return ""
        value = data.get(FIELD_NAMES["access_key_id"])
        return value if isinstance(value, str) else ""

    @staticmethod
    def _sanitized(values: dict[str, str]) -> dict[str, str]:
        return {
            name: values[attr]
            for attr, name in FIELD_NAMES.items()
            if attr != "secret_access_key"
        }

    def _write_data(self, data: dict[str, str]) -> None:
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
