"""Whole-document JSON key-value store with exclusive read-modify-write."""

import asyncio
import json
import os
import tempfile
import threading
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Union

from cv_portfolio.errors import StoreError
from cv_portfolio.utils.logger import get_logger

logger = get_logger(__name__)

LOCK_POLL_SECONDS = 0.01

_path_locks: Dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    """One lock per resolved store file, shared by every JsonStore on that file."""
    key = str(path.resolve())
    with _registry_lock:
        return _path_locks.setdefault(key, threading.Lock())


class JsonStore:
    """
    One JSON object on disk. Reads and writes always move the whole document.
    `transaction()` holds the file's lock from read to write, so check-then-write
    sequences on the same file are serialized across instances, threads and
    event loops of this process.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def _read(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreError(f"Could not read store {self.path.name}") from e
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StoreError(f"Store {self.path.name} is not valid JSON") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store {self.path.name} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        # Temp file in the same directory so os.replace stays atomic
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreError(f"Could not write store {self.path.name}") from e

    async def load(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._read)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield the current document; it is written back only if the block succeeds."""
        # Non-blocking acquire: a cancelled waiter never holds the lock
        while not self._lock.acquire(blocking=False):
            await asyncio.sleep(LOCK_POLL_SECONDS)
        try:
            data = await asyncio.to_thread(self._read)
            yield data
            await asyncio.to_thread(self._write, data)
        finally:
            self._lock.release()
