import unittest

from s3_file_manager.models import (
    Credentials,
    Entry,
    EntryKind,
    NavigationState,
    PreviewState,
    TransferState,
    ViewMode,
)


class NavigationStateTests(unittest.TestCase):
    def test_starts_at_root(self):
        state = NavigationState()

        self.assertEqual("", state.current_prefix)
        self.assertEqual([""], state.history)

    def test_push_and_pop_keep_last_element_current(self):
        state = NavigationState()
        state.push("a/")
        state.push("a/b/")

        self.assertEqual("a/b/", state.current_prefix)
        self.assertTrue(state.pop())
        self.assertEqual("a/", state.current_prefix)
        self.assertTrue(state.pop())
        self.assertFalse(state.pop())
        self.assertEqual([""], state.history)

    def test_truncate_keeps_prefix_at_index(self):
        state = NavigationState()
        for prefix in ("a/", "a/b/", "a/b/c/"):
            state.push(prefix)

        self.assertEqual("a/", state.truncate(1))
        self.assertEqual(["", "a/"], state.history)

    def test_truncate_out_of_range(self):
        state = NavigationState()

        with self.assertRaises(IndexError):
            state.truncate(1)
        with self.assertRaises(IndexError):
            state.truncate(-1)

    def test_reset(self):
        state = NavigationState()
        state.push("a/")

        state.reset()

        self.assertEqual([""], state.history)


class ModelTests(unittest.TestCase):
    def test_credentials_completeness(self):
        self.assertTrue(Credentials("b", "r", "a", "s").is_complete)
        self.assertFalse(Credentials("b", "r", "a", "").is_complete)
        self.assertFalse(Credentials().is_complete)

    def test_entry_name(self):
        self.assertEqual("photos", Entry(key="photos/", kind=EntryKind.FOLDER).name)
        self.assertEqual("cat.png", Entry(key="photos/cat.png", kind=EntryKind.FILE).name)
        self.assertTrue(Entry(key="photos/", kind=EntryKind.FOLDER).is_folder)

    def test_view_mode_toggle(self):
        self.assertIs(ViewMode.LIST, ViewMode.GRID.toggled())
        self.assertIs(ViewMode.GRID, ViewMode.LIST.toggled())

    def test_transfer_and_preview_reset(self):
        transfer = TransferState(in_progress=True, progress=40)
        transfer.reset()
        self.assertEqual(TransferState(), transfer)

        preview = PreviewState(entry=Entry(key="a", kind=EntryKind.FILE), url="u")
        preview.clear()
        self.assertFalse(preview.is_open)
        self.assertIsNone(preview.entry)


if __name__ == "__main__":
    unittest.main()
