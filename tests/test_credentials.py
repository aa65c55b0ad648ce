import json
import tempfile
import unittest
from pathlib import Path

from s3_file_manager.credentials import CredentialStorage
from s3_file_manager.models import Credentials


class FakeKeychain:
    def __init__(self):
        self.secrets = {}
        self.set_calls = []
        self.delete_calls = []

    def get_secret(self, account: str) -> str:
        return self.secrets.get(account, "")

    def set_secret(self, account: str, secret: str) -> None:
        self.set_calls.append((account, secret))
        self.secrets[account] = secret

    def delete_secret(self, account: str) -> None:
        self.delete_calls.append(account)
        self.secrets.pop(account, None)


class CredentialStorageTests(unittest.TestCase):
    def test_load_returns_empty_credentials_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            storage = CredentialStorage(Path(tmp) / "credentials.json", keychain=FakeKeychain())

            self.assertEqual(Credentials(), storage.load())

    def test_load_returns_empty_credentials_on_invalid_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            path.write_text("not json", encoding="utf-8")
            storage = CredentialStorage(path, keychain=FakeKeychain())

            self.assertEqual(Credentials(), storage.load())

    def test_save_keeps_secret_out_of_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "credentials.json"
            keychain = FakeKeychain()
            storage = CredentialStorage(path, keychain=keychain)
            credentials = Credentials("bucket-one", "us-east-1", "ak", "sk")

            storage.save(credentials)

            saved = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(
                {"bucketName": "bucket-one", "region": "us-east-1", "accessKeyId": "ak"},
                saved,
            )
            self.assertEqual([("ak", "sk")], keychain.set_calls)
            self.assertEqual(credentials, storage.load())

    def test_load_migrates_plaintext_secret(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            payload = {
                "bucketName": "bucket-one",
                "region": "us-east-1",
                "accessKeyId": "ak",
                "secretAccessKey": "sk",
            }
            path.write_text(json.dumps(payload), encoding="utf-8")
            keychain = FakeKeychain()
            storage = CredentialStorage(path, keychain=keychain)

            credentials = storage.load()

            self.assertEqual("sk", credentials.secret_access_key)
            self.assertEqual([("ak", "sk")], keychain.set_calls)
            self.assertNotIn("secretAccessKey", json.loads(path.read_text(encoding="utf-8")))

    def test_save_replaces_secret_of_previous_access_key(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            keychain = FakeKeychain()
            storage = CredentialStorage(path, keychain=keychain)
            storage.save(Credentials("bucket-one", "us-east-1", "old", "sk1"))

            storage.save(Credentials("bucket-two", "eu-west-1", "new", "sk2"))

            self.assertEqual(["old"], keychain.delete_calls)
            self.assertEqual({"new": "sk2"}, keychain.secrets)

    def test_non_string_fields_load_as_empty(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "credentials.json"
            path.write_text(json.dumps({"bucketName": 3, "region": "r"}), encoding="utf-8")
            storage = CredentialStorage(path, keychain=FakeKeychain())

            credentials = storage.load()

            self.assertEqual("", credentials.bucket_name)
            self.assertEqual("r", credentials.region)


if __name__ == "__main__":
    unittest.main()
