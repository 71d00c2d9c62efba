"""Shared key/value storage with change notifications.

Plays the role browser-local storage plays for open tabs: writers set
string values under well-known keys and every subscriber is told about the
change. `FileStorage` shares state between processes through one JSON
file; other processes pick changes up by calling `poll()`.
"""

import fcntl
import json
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    """A change to one storage key."""
    key: str
    old_value: Optional[str]
    new_value: Optional[str]


StorageListener = Callable[[StorageEvent], None]


class StorageQuotaExceededError(Exception):
    """Write rejected because the storage is full."""
    pass


class KeyValueStorage(ABC):
    """String key/value storage that notifies subscribers on change."""

    def __init__(self) -> None:
        self._listeners: list[StorageListener] = []

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def _write(self, key: str, value: Optional[str]) -> Optional[str]:
        """Store (or remove, for None) a value; returns the previous value."""
        pass

    def set_item(self, key: str, value: str) -> None:
        old_value = self._write(key, str(value))
        self._notify(StorageEvent(key=key, old_value=old_value, new_value=str(value)))

    def remove_item(self, key: str) -> None:
        old_value = self._write(key, None)
        if old_value is not None:
            self._notify(StorageEvent(key=key, old_value=old_value, new_value=None))

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: StorageEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Storage listener failed", key=event.key)


class InMemoryStorage(KeyValueStorage):
    """Process-local storage, optionally bounded by total characters."""

    def __init__(self, quota_chars: Optional[int] = None) -> None:
        super().__init__()
        self.quota_chars = quota_chars
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def _write(self, key: str, value: Optional[str]) -> Optional[str]:
        with self._lock:
            old_value = self._data.get(key)
            if value is None:
                self._data.pop(key, None)
                return old_value

            if self.quota_chars is not None:
                used = sum(len(k) + len(v) for k, v in self._data.items() if k != key)
                if used + len(key) + len(value) > self.quota_chars:
                    raise StorageQuotaExceededError(
                        f"Storage quota of {self.quota_chars} characters exceeded"
                    )

            self._data[key] = value
            return old_value

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)


class FileStorage(KeyValueStorage):
    """Storage shared between processes through a locked JSON file."""

    def __init__(self, path: str, create_dirs: bool = True) -> None:
        super().__init__()
        self.path = Path(path)
        if create_dirs:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._snapshot = self._read_all()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            # Empty or half-written file reads as empty storage
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def _write(self, key: str, value: Optional[str]) -> Optional[str]:
        with open(self.path, "a+") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            f.seek(0)
            try:
                data = json.loads(f.read() or "{}")
            except json.JSONDecodeError:
                data = {}

            old_value = data.get(key)
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value

            f.seek(0)
            f.truncate()
            json.dump(data, f)
            f.flush()

        self._snapshot = dict(data)
        return old_value

    def poll(self) -> list[StorageEvent]:
        """Emit events for keys changed by other processes since the last poll."""
        current = self._read_all()
        events = [
            StorageEvent(key=key, old_value=self._snapshot.get(key), new_value=current.get(key))
            for key in sorted(set(current) | set(self._snapshot))
            if current.get(key) != self._snapshot.get(key)
        ]
        self._snapshot = current

        for event in events:
            self._notify(event)
        return events

    def health_check(self) -> bool:
        """Check that the storage file can be written; called before every broadcast."""
        target = self.path if self.path.exists() else self.path.parent
        if os.access(target, os.W_OK):
            return True
        logger.warning("Storage not writable", path=str(self.path))
        return False
