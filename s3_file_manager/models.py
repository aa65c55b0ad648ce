from __future__ import annotations
"""Data models for bucket listings and browser session state."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    """Static credentials for a single bucket."""

    bucket_name: str = ""
    region: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""

    @property
    def is_complete(self) -> bool:
        return all(
            (self.bucket_name, self.region, self.access_key_id, self.secret_access_key)
        )


class EntryKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True)
class Entry:
    """A single listed object or virtual folder."""

    key: str
    kind: EntryKind
    size: Optional[int] = None
    last_modified: Optional[datetime] = None

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    @property
    def name(self) -> str:
        return self.key.rstrip("/").rsplit("/", 1)[-1]


@dataclass
class NavigationState:
    """Current prefix plus the breadcrumb history leading to it.

    ``history`` is never empty and its last element is always the current
    prefix.
    """

    history: list[str] = field(default_factory=lambda: [""])

    @property
    def current_prefix(self) -> str:
        return self.history[-1]

    def push(self, prefix: str) -> None:
        self.history.append(prefix)

    def truncate(self, index: int) -> str:
        if index < 0 or index >= len(self.history):
            raise IndexError(f"Breadcrumb index {index} out of range")
        del self.history[index + 1:]
        return self.current_prefix

    def pop(self) -> bool:
        if len(self.history) <= 1:
            return False
        self.history.pop()
        return True

    def reset(self) -> None:
        self.history[:] = [""]


@dataclass
class TransferState:
    in_progress: bool = False
    progress: int = 0

    def reset(self) -> None:
        self.in_progress = False
        self.progress = 0


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"

    def toggled(self) -> ViewMode:
        return ViewMode.LIST if self is ViewMode.GRID else ViewMode.GRID


@dataclass
class PreviewState:
    entry: Optional[Entry] = None
    url: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.url is not None

    def clear(self) -> None:
        self.entry = None
        self.url = None


@dataclass(frozen=True)
class Notification:
    """User-visible outcome of an action."""

    title: str
    message: str
    level: str = "info"

    @property
    def is_error(self) -> bool:
        return self.level == "error"
