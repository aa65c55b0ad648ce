from __future__ import annotations
"""Stateless gateway to the object-storage backend."""
import io
import logging
from typing import Callable, Optional

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from .models import Credentials, Entry, EntryKind

LOGGER = logging.getLogger(__name__)

DELIMITER = "/"
DEFAULT_URL_EXPIRY = 3600


class BackendError(RuntimeError):
    """Raised when a storage backend call fails."""


class S3StorageGateway:
    """Performs bucket operations, building a fresh client for every call."""

    def __init__(
        self,
        client_factory: Callable[..., object] | None = None,
        *,
        endpoint_url: str | None = None,
    ):
        self._client_factory = client_factory or boto3.client
        self._endpoint_url = endpoint_url or None

    def list_entries(self, credentials: Credentials, prefix: str = "") -> list[Entry]:
        """Return the folders and files one level below ``prefix``.

        Folders come from the listing's common prefixes and precede files.

        Raises:
            BackendError: when the listing request fails.
        """
        client = self._create_client(credentials)
        folders: list[Entry] = []
        files: list[Entry] = []
        seen: set[str] = set()
        params = {"Bucket": credentials.bucket_name, "Delimiter": DELIMITER}
        if prefix:
            params["Prefix"] = prefix

        try:
            while True:
                response = client.list_objects_v2(**params)
                for common in response.get("CommonPrefixes", []):
                    key = common.get("Prefix")
                    if key and key not in seen:
                        seen.add(key)
                        folders.append(Entry(key=key, kind=EntryKind.FOLDER))
                for obj in response.get("Contents", []):
                    key = obj.get("Key")
                    # A zero-byte marker named after the prefix is the folder itself.
                    if not key or key == prefix or key in seen:
                        continue
                    seen.add(key)
                    files.append(
                        Entry(
                            key=key,
                            kind=EntryKind.FILE,
                            size=obj.get("Size"),
                            last_modified=obj.get("LastModified"),
                        )
                    )
                token = response.get("NextContinuationToken")
                if not response.get("IsTruncated") or not token:
                    break
                params["ContinuationToken"] = token
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(str(exc)) from exc

        LOGGER.debug(
            "Listed %d folder(s) and %d file(s) under '%s'", len(folders), len(files), prefix
        )
        return folders + files

    def get_download_url(
        self,
        credentials: Credentials,
        key: str,
        *,
        expires_in: int = DEFAULT_URL_EXPIRY,
    ) -> str:
        """Create a time-limited signed URL for reading ``key``."""

        if expires_in <= 0:
            raise ValueError("expires_in must be greater than zero")
        client = self._create_client(credentials)
        try:
            return client.generate_presigned_url(
                "get_object",
                Params={"Bucket": credentials.bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(str(exc)) from exc

    def upload(
        self,
        credentials: Credentials,
        key: str,
        data: bytes,
        *,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> None:
        """Write ``data`` to ``key``, replacing any existing object."""

        client = self._create_client(credentials)
        callback = self._build_transfer_callback(progress_callback)
        try:
            client.upload_fileobj(
                io.BytesIO(data),
                credentials.bucket_name,
                key,
                Callback=callback,
            )
        except (ClientError, BotoCoreError, S3UploadFailedError) as exc:
            raise BackendError(str(exc)) from exc

    def delete(self, credentials: Credentials, key: str) -> None:
        client = self._create_client(credentials)
        try:
            client.delete_object(Bucket=credentials.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(str(exc)) from exc

    def create_folder(self, credentials: Credentials, key: str) -> str:
        """Write an empty folder marker object and return its key."""

        cleaned = key.strip().lstrip("/")
        if not cleaned.strip("/"):
            raise ValueError("Folder name cannot be empty")
        if not cleaned.endswith(DELIMITER):
            cleaned += DELIMITER
        client = self._create_client(credentials)
        try:
            client.put_object(Bucket=credentials.bucket_name, Key=cleaned, Body=b"")
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(str(exc)) from exc
        return cleaned

    def _create_client(self, credentials: Credentials):
        config = Config(signature_version="s3v4")
        kwargs = {
            "region_name": credentials.region,
            "aws_access_key_id": credentials.access_key_id,
            "aws_secret_access_key": credentials.secret_access_key,
            "config": config,
        }
        if self._endpoint_url:
            kwargs["endpoint_url"] = self._endpoint_url
        return self._client_factory("s3", **kwargs)

    def _build_transfer_callback(
        self,
        progress_callback: Optional[Callable[[int], None]],
    ):
        if not progress_callback:
            return None

        transferred = 0

        def _callback(bytes_amount: int) -> None:
            nonlocal transferred
            transferred += bytes_amount
            progress_callback(transferred)

        return _callback
