# app/lib/storage.py
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Dict, Optional

from app.errors import MalformedPersistedState, StorageCapacityExceeded, StorageUnavailable
from app.logger import get_logger

log = get_logger(__name__)


class JsonStorage:
    """
    Key/value string store backed by one JSON file, with a byte quota.
    Behaves like the browser's localStorage: values are opaque strings and
    a write that would grow the file past the quota is refused.
    """

    def __init__(self, path: Path | str, *, quota_bytes: int):
        self.path = Path(path)
        self.quota_bytes = quota_bytes

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise MalformedPersistedState(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise MalformedPersistedState(f"{self.path} does not hold a key/value object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        blob = json.dumps(data, ensure_ascii=False)
        size = len(blob.encode("utf-8"))
        if size > self.quota_bytes:
            raise StorageCapacityExceeded(
                f"blob of {size} bytes exceeds storage quota of {self.quota_bytes} bytes"
            )
        tmp = self.path.with_name(self.path.name + ".part")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(blob)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp.exists():
                tmp.unlink()
            if e.errno in (errno.ENOSPC, errno.EDQUOT):
                raise StorageCapacityExceeded(f"no space left for {self.path}: {e}") from e
            raise StorageUnavailable(f"cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except MalformedPersistedState as e:
            # a corrupt file is replaced by the next successful write
            log.warning(f"overwriting unreadable storage file: {e}")
            data = {}
        data[key] = value
        self._write_all(data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
