# Role: Key/value storage scopes used by the identity provider.
# MemoryStorage is session-scoped (lives as long as its backing mapping); JsonFileStorage is durable (a file on disk).

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Protocol, Union


class StorageUnavailableError(RuntimeError):
    """The storage backend cannot be read or written right now."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self, backing: Optional[MutableMapping[str, object]] = None) -> None:
        # Key line: any mutable mapping works (a plain dict, or a UI framework's per-session state).
        self._data: MutableMapping[str, object] = backing if backing is not None else {}

    def get_item(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStorage:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self.path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError):
            # Corrupt file: start over rather than lock the user out.
            return {}
        if not isinstance(raw, dict):
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self.path.with_suffix(self.path.suffix + ".tmp")
                tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
                tmp.replace(self.path)
            except OSError as e:
                raise StorageUnavailableError(f"Cannot write {self.path}: {e}") from e
