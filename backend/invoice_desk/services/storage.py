import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Any

from invoice_desk.exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


def _encode_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonStore:
    """
    Maps a collection name to a JSON document in the data directory.

    Every write replaces the whole document. Non-integer numbers are read back
    as Decimal so money values round-trip without binary float drift.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    @contextmanager
    def locked(self, name: str) -> Iterator[None]:
        """Hold the collection's lock for a whole read-modify-write."""
        with self._locks_guard:
            lock = self._locks.setdefault(name, threading.RLock())
        with lock:
            yield

    def read(self, name: str) -> Any:
        """
        Load and parse the full document.

        Raises:
            StorageReadError: the file is missing, unreadable or malformed.
        """
        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
            return json.loads(text, parse_float=Decimal)
        except (OSError, ValueError) as exc:
            logger.error("Error reading %s: %s", path, exc)
            raise StorageReadError(name, str(exc)) from exc

    def write(self, name: str, value: Any) -> None:
        """
        Serialize the full document and atomically replace the stored file.

        The data is written to a temp file in the same directory first, so a
        concurrent reader sees either the old document or the new one.

        Raises:
            StorageWriteError: serialization or any filesystem step failed.
        """
        path = self.path_for(name)
        tmp_name: str | None = None
        try:
            payload = json.dumps(value, indent=2, default=_encode_default)
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error writing %s: %s", path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageWriteError(name, str(exc)) from exc
        logger.debug("Wrote %s", path)
