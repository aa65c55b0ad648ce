from __future__ import annotations
"""View-agnostic presenter holding the browsing session state."""
from dataclasses import replace
import logging
from pathlib import Path
import threading
from typing import Callable
import webbrowser

from .controller import ConfigError, S3FileManagerController
from .models import (
    Credentials,
    Entry,
    NavigationState,
    Notification,
    PreviewState,
    TransferState,
    ViewMode,
)
from .services import BackendError
from .ui_utils import PackageInfo, breadcrumb_label, compose_s3_key, load_package_info


DispatchFn = Callable[[Callable[[], None]], None]
RunnerFn = Callable[[Callable[[], None]], None]
OpenerFn = Callable[[str], object]
StateFn = Callable[[], None]
NotifyFn = Callable[[Notification], None]
SuccessFn = Callable[[object], None]
FailureFn = Callable[[Exception], None]

LOGGER = logging.getLogger(__name__)

MISSING_CONFIGURATION = "Missing Configuration"


def _run_in_thread(task: Callable[[], None]) -> None:
    threading.Thread(target=task, daemon=True).start()


class S3FileManagerPresenter:
    """Drives the controller in response to user intents.

    Backend calls run through ``runner`` (a daemon thread by default) and
    their results are applied through ``dispatch`` so that all state changes
    happen on the caller's event loop.
    """

    def __init__(
        self,
        *,
        controller: S3FileManagerController | None = None,
        dispatch: DispatchFn | None = None,
        runner: RunnerFn | None = None,
        opener: OpenerFn | None = None,
        on_state_changed: StateFn | None = None,
        on_notification: NotifyFn | None = None,
    ) -> None:
        self._controller = controller or S3FileManagerController()
        self._dispatch = dispatch or (lambda func: func())
        self._run = runner or _run_in_thread
        self._open_url = opener or webbrowser.open
        self.on_state_changed = on_state_changed
        self.on_notification = on_notification
        self._navigation = NavigationState()
        self._entries: list[Entry] = []
        self._transfer = TransferState()
        self._preview = PreviewState()
        self._view_mode = ViewMode.GRID
        self._list_generation = 0
        self._listing = False
        self._package_info = load_package_info()

    @property
    def credentials(self) -> Credentials:
        return self._controller.credentials

    @property
    def package_info(self) -> PackageInfo:
        return self._package_info

    @property
    def current_prefix(self) -> str:
        return self._navigation.current_prefix

    @property
    def history(self) -> list[str]:
        return list(self._navigation.history)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def transfer(self) -> TransferState:
        return replace(self._transfer)

    @property
    def preview(self) -> PreviewState:
        return replace(self._preview)

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def is_listing(self) -> bool:
        return self._listing

    def start(self) -> None:
        """List the root when persisted credentials are already usable."""
        if self._controller.has_credentials:
            self.refresh()

    def breadcrumbs(self) -> list[tuple[str, int]]:
        root_label = self.credentials.bucket_name or "Root"
        return [
            (breadcrumb_label(prefix, root_label), index)
            for index, prefix in enumerate(self._navigation.history)
        ]

    def load_credentials(self, text: str) -> bool:
        try:
            credentials = self._controller.load_credentials(text)
        except ConfigError as exc:
            LOGGER.warning("Rejected credentials file: %s", exc)
            self._notify("Error", "Failed to parse configuration file.", level="error")
            return False
        except OSError as exc:
            LOGGER.exception("Unable to persist credentials")
            self._notify("Error", f"Failed to save configuration: {exc}", level="error")
            return False
        LOGGER.debug("Credentials replaced for bucket '%s'", credentials.bucket_name)
        self._discard_pending_listing()
        self._navigation.reset()
        self._entries = []
        self._preview.clear()
        self._state_changed()
        self._notify("Configuration Uploaded", "S3 configuration has been successfully uploaded.")
        self.refresh()
        return True

    def reset_credentials(self) -> None:
        try:
            self._controller.reset_credentials()
        except OSError as exc:
            LOGGER.exception("Unable to persist credentials")
            self._notify("Error", f"Failed to save configuration: {exc}", level="error")
            return
        self._discard_pending_listing()
        self._navigation.reset()
        self._entries = []
        self._preview.clear()
        self._state_changed()
        self._notify("Configuration Reset", "S3 configuration has been reset to initial values.")

    def refresh(self) -> None:
        if not self._ensure_credentials():
            return
        self._list_generation += 1
        generation = self._list_generation
        prefix = self.current_prefix
        self._listing = True
        self._state_changed()
        LOGGER.debug("Listing prefix '%s' (request %d)", prefix, generation)
        self._submit(
            f"listing '{prefix}'",
            lambda: self._controller.list_entries(prefix),
            on_success=lambda entries: self._handle_listing(generation, prefix, entries),
            on_error=lambda exc: self._handle_listing_error(generation, prefix, exc),
        )

    def select_folder(self, key: str) -> None:
        self._navigation.push(key)
        self._state_changed()
        self.refresh()

    def navigate_to_breadcrumb(self, index: int) -> None:
        self._navigation.truncate(index)
        self._state_changed()
        self.refresh()

    def navigate_back(self) -> bool:
        if not self._navigation.pop():
            return False
        self._state_changed()
        self.refresh()
        return True

    def toggle_view(self) -> ViewMode:
        self._view_mode = self._view_mode.toggled()
        self._state_changed()
        return self._view_mode

    def upload_file(self, source_path: str | Path) -> None:
        source = Path(source_path)
        self._start_upload(source.name, source.read_bytes)

    def upload_bytes(self, name: str, data: bytes) -> None:
        self._start_upload(name, lambda: data)

    def download_file(self, key: str) -> None:
        if not self._ensure_credentials():
            return

        def _open(url: object) -> None:
            LOGGER.debug("Opening download URL for '%s'", key)
            self._open_url(str(url))

        self._submit(
            f"download of '{key}'",
            lambda: self._controller.get_download_url(key),
            on_success=_open,
            on_error=lambda exc: self._report_failure(
                exc, "Download Error", "Failed to get download URL"
            ),
        )

    def preview_file(self, entry: Entry) -> None:
        if not self._ensure_credentials():
            return

        def _show(url: object) -> None:
            self._preview.entry = entry
            self._preview.url = str(url)
            self._state_changed()

        self._submit(
            f"preview of '{entry.key}'",
            lambda: self._controller.get_download_url(entry.key),
            on_success=_show,
            on_error=lambda exc: self._report_failure(
                exc, "Preview Error", "Failed to get preview URL"
            ),
        )

    def close_preview(self) -> None:
        self._preview.clear()
        self._state_changed()

    def delete_file(self, key: str) -> None:
        if not self._ensure_credentials():
            return

        def _deleted(_result: object) -> None:
            self._notify("File Deleted", f"{key} has been successfully deleted.")

        def _failed(exc: Exception) -> None:
            self._report_failure(exc, "Delete Error", "Failed to delete file")

        self._submit(
            f"delete of '{key}'",
            lambda: self._controller.delete(key),
            on_success=_deleted,
            on_error=_failed,
            on_done=self.refresh,
        )

    def create_folder(self, name: str) -> None:
        if not self._ensure_credentials():
            return
        folder_name = name.strip().strip("/")
        if not folder_name:
            self._notify("Create Folder Error", "Folder name cannot be empty.", level="error")
            return
        key = compose_s3_key(self.current_prefix, folder_name)

        def _created(_result: object) -> None:
            self._notify("Folder Created", f"{folder_name} has been created.")
            self.refresh()

        self._submit(
            f"folder creation for '{key}'",
            lambda: self._controller.create_folder(key),
            on_success=_created,
            on_error=lambda exc: self._report_failure(
                exc, "Create Folder Error", "Failed to create folder"
            ),
        )

    def _start_upload(self, name: str, read_data: Callable[[], bytes]) -> None:
        if self._transfer.in_progress:
            self._notify("Upload Error", "Another upload is already in progress.", level="error")
            return
        if not self._ensure_credentials():
            return
        try:
            key = compose_s3_key(self.current_prefix, name)
        except ValueError:
            self._notify("No File Selected", "Please select a file to upload.", level="error")
            return

        self._transfer.in_progress = True
        self._transfer.progress = 0
        self._state_changed()
        LOGGER.debug("Uploading '%s' to '%s'", name, key)

        def _upload() -> None:
            data = read_data()
            total = len(data)

            def _progress(transferred: int) -> None:
                self._dispatch(lambda: self._handle_upload_progress(transferred, total))

            self._controller.upload(key, data, progress_callback=_progress)

        def _uploaded(_result: object) -> None:
            self._notify("File Uploaded", f"{name} has been successfully uploaded.")
            self.refresh()

        self._submit(
            f"upload of '{key}'",
            _upload,
            on_success=_uploaded,
            on_error=lambda exc: self._report_failure(
                exc, "Upload Error", "Failed to upload file"
            ),
            on_done=self._finish_upload,
        )

    def _handle_upload_progress(self, transferred: int, total: int) -> None:
        if not self._transfer.in_progress:
            return
        percent = 100 if total <= 0 else min(100, transferred * 100 // total)
        if percent != self._transfer.progress:
            self._transfer.progress = percent
            self._state_changed()

    def _finish_upload(self) -> None:
        self._transfer.reset()
        self._state_changed()

    def _handle_listing(self, generation: int, prefix: str, entries: object) -> None:
        if self._is_stale(generation, prefix):
            return
        self._entries = list(entries)  # type: ignore[arg-type]
        self._listing = False
        LOGGER.debug("Listed %d entries under '%s'", len(self._entries), prefix)
        self._state_changed()

    def _handle_listing_error(self, generation: int, prefix: str, exc: Exception) -> None:
        if self._is_stale(generation, prefix):
            return
        self._listing = False
        self._state_changed()
        self._report_failure(exc, "Error", "Failed to list objects")

    def _discard_pending_listing(self) -> None:
        self._list_generation += 1
        self._listing = False

    def _is_stale(self, generation: int, prefix: str) -> bool:
        if generation != self._list_generation or prefix != self.current_prefix:
            LOGGER.debug("Dropping stale listing for '%s' (request %d)", prefix, generation)
            return True
        return False

    def _submit(
        self,
        description: str,
        action: Callable[[], object],
        *,
        on_success: SuccessFn,
        on_error: FailureFn,
        on_done: StateFn | None = None,
    ) -> None:
        def task() -> None:
            try:
                result = action()
            except ConfigError as exc:
                LOGGER.debug("Skipped %s: %s", description, exc)
                self._dispatch(lambda error=exc: on_error(error))
            except (BackendError, OSError) as exc:
                LOGGER.exception("Error during %s", description)
                self._dispatch(lambda error=exc: on_error(error))
            except Exception as exc:
                LOGGER.exception("Unexpected error during %s", description)
                self._dispatch(lambda error=exc: on_error(error))
            else:
                self._dispatch(lambda: on_success(result))
            finally:
                if on_done:
                    self._dispatch(on_done)

        self._run(task)

    def _ensure_credentials(self) -> bool:
        if self._controller.has_credentials:
            return True
        self._notify(MISSING_CONFIGURATION, "Please upload S3 configuration first.", level="error")
        return False

    def _report_failure(self, exc: Exception, title: str, summary: str) -> None:
        if isinstance(exc, ConfigError):
            self._notify(MISSING_CONFIGURATION, str(exc), level="error")
            return
        self._notify(title, f"{summary}: {exc}", level="error")

    def _notify(self, title: str, message: str, *, level: str = "info") -> None:
        notification = Notification(title=title, message=message, level=level)
        LOGGER.debug("Notification [%s] %s: %s", level, title, message)
        if self.on_notification:
            self.on_notification(notification)

    def _state_changed(self) -> None:
        if self.on_state_changed:
            self.on_state_changed()
