# -*- coding: utf-8 -*-
"""
LocForge Key/Value Storage

A small persistent string store backed by one JSON file, used the way a web
app uses its local storage: values are strings, callers serialize themselves.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from locforge_exceptions import StorageLoadError, StorageSaveError
from locforge_logger import get_logger

logger = get_logger("core.kv_storage")


class KeyValueStorage:
    """
    {key: string} pairs persisted to `path`.

    Reads tolerate a missing or corrupt file (treated as empty, corruption is
    logged). Before the first write over a corrupt file it is moved aside to
    `<name>.bak`. Writes go through a temp file and os.replace so a failed write
    never leaves a truncated store behind; failures raise StorageSaveError.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    # =========================================================================
    # FILE ACCESS
    # =========================================================================

    def _load(self) -> Dict[str, Any]:
        """Decoded file contents; raises StorageLoadError when unreadable."""
        if not self.path.is_file():
            return {}

        try:
            with self.path.open('r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageLoadError(f"Storage file unreadable: {self.path}", details=str(e)) from e

        if not isinstance(loaded, dict):
            raise StorageLoadError(f"Storage file format invalid: {self.path}")
        return loaded

    def _read_all(self) -> Dict[str, str]:
        try:
            loaded = self._load()
        except StorageLoadError as e:
            logger.error(f"{e}, treating as empty")
            return {}
        return {str(k): v for k, v in loaded.items() if isinstance(v, str)}

    def _read_for_write(self) -> Dict[str, Any]:
        # Non-string values are carried over untouched
        try:
            return dict(self._load())
        except StorageLoadError as e:
            backup = self._move_aside()
            logger.error(f"{e}, moved to {backup} before writing")
            return {}

    def _move_aside(self) -> Path:
        backup = self.path.with_name(f"{self.path.name}.bak")
        n = 1
        while backup.exists():
            backup = self.path.with_name(f"{self.path.name}.{n}.bak")
            n += 1
        try:
            os.replace(self.path, backup)
        except OSError as e:
            raise StorageSaveError(
                f"Could not move unreadable storage file aside: {self.path}", details=str(e)
            ) from e
        return backup

    def _write_all(self, data: Dict[str, Any]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
                raise
        except OSError as e:
            raise StorageSaveError(f"Failed to write storage file: {self.path}", details=str(e)) from e

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str):
        if not isinstance(value, str):
            raise TypeError(f"Storage values must be str, got {type(value).__name__}")
        data = self._read_for_write()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Storage key '{key}' written ({len(value)} chars)")

    def remove_item(self, key: str) -> bool:
        data = self._read_for_write()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    def keys(self) -> List[str]:
        return list(self._read_all().keys())

    def clear(self):
        # An unreadable file is still moved aside rather than overwritten
        self._read_for_write()
        self._write_all({})

    def verify(self) -> bool:
        """True when the storage file is absent or readable; logs and returns False otherwise."""
        try:
            self._load()
            return True
        except StorageLoadError as e:
            logger.error(str(e))
            return False
