import tkinter as tk
import unittest

from s3_file_manager.models import Entry, EntryKind, PreviewState, TransferState, ViewMode
from s3_file_manager.tk_view import S3FileManagerApp
from s3_file_manager.ui_utils import load_package_info


class StubPresenter:
    def __init__(self):
        self.on_state_changed = None
        self.on_notification = None
        self.view_mode = ViewMode.LIST
        self.history = [""]
        self.entries = []
        self.transfer = TransferState()
        self.is_listing = False
        self.preview = PreviewState()
        self.package_info = load_package_info()

    def breadcrumbs(self):
        return [("bucket-one", index) for index, _ in enumerate(self.history)]

    def start(self):
        pass

    def reset_credentials(self):
        pass

    def navigate_back(self):
        pass

    def refresh(self):
        pass

    def toggle_view(self):
        pass

    def close_preview(self):
        self.preview = PreviewState()
        self.on_state_changed()

    def download_file(self, key):
        pass


class TkViewTests(unittest.TestCase):
    def setUp(self):
        try:
            self.root = tk.Tk()
        except tk.TclError as exc:
            self.skipTest(f"Tk display unavailable: {exc}")
        self.root.withdraw()
        self.addCleanup(self.root.destroy)
        self.presenter = StubPresenter()
        self.app = S3FileManagerApp(self.root, self.presenter)

    def test_status_clears_once_listing_finishes(self):
        self.presenter.is_listing = True
        self.presenter.on_state_changed()
        self.assertEqual("Loading...", self.app.status_var.get())

        self.presenter.is_listing = False
        self.presenter.entries = [
            Entry(key="photos/", kind=EntryKind.FOLDER),
            Entry(key="readme.txt", kind=EntryKind.FILE, size=120),
        ]
        self.presenter.on_state_changed()

        self.assertEqual("2 items", self.app.status_var.get())

    def test_preview_window_follows_new_url(self):
        first = Entry(key="a.png", kind=EntryKind.FILE)
        second = Entry(key="b.png", kind=EntryKind.FILE)
        self.presenter.preview = PreviewState(entry=first, url="https://signed/a.png")
        self.presenter.on_state_changed()
        first_window = self.app._preview_window

        self.presenter.preview = PreviewState(entry=second, url="https://signed/b.png")
        self.presenter.on_state_changed()

        self.assertIsNot(first_window, self.app._preview_window)
        self.assertEqual("b.png", self.app._preview_window.title())
        self.assertEqual("https://signed/b.png", self.app._preview_url)

        self.presenter.close_preview()

        self.assertIsNone(self.app._preview_window)
        self.assertIsNone(self.app._preview_url)


if __name__ == "__main__":
    unittest.main()
