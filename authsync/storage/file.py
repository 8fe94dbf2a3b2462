"""JSON-file backed key-value store."""

import json
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock

from ..exceptions import StorageError
from .base import KeyValueStore

logger = logging.getLogger(__name__)


class FileKeyValueStore(KeyValueStore):
    """Key-value store persisted as a single JSON object on disk.

    Every write rewrites the whole file atomically (temp file plus
    ``os.replace``), so a crash never leaves a half-written store behind.
    There is no cross-process locking.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = RLock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"Cannot read store file {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise StorageError(f"Store file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Store file {self.path} must contain a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write store file {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Values must be strings, got {type(value).__name__}")
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
                logger.debug(f"Removed key {key!r} from {self.path}")
