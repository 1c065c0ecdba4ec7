"""Local durable storage for the shopper's cart"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-memory key/value storage"""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """
    Key/value storage backed by a JSON file.

    Survives process restarts the way browser local storage survives a
    reload. Writes go to a temporary file which then replaces the target.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring malformed storage file {self.path}")
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
