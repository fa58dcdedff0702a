# parseconfig/storage/file.py
import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional

import structlog

from parseconfig.config import get_config

logger = structlog.get_logger(__name__)

class FileStorageController:
    """
    Stores every item in one JSON document on disk.

    The file is re-read on each access so several processes (e.g. the CLI
    and an application) see each other's writes.
    """
    is_async = False

    def __init__(self, path: Optional[str] = None):
        self.path = Path(os.path.expanduser(path or get_config().get("storage.path")))

    # --- util -----------------------------------------------------------
    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            items = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Storage file is not valid JSON, starting empty", path=str(self.path))
            return {}
        if not isinstance(items, dict):
            logger.warning("Storage file does not hold a JSON object, starting empty", path=str(self.path))
            return {}
        return items

    def _dump(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    # --- controller interface --------------------------------------------
    def get_item(self, path: str) -> Optional[str]:
        return self._load().get(path)

    def set_item(self, path: str, value: str) -> None:
        items = self._load()
        items[path] = value
        self._dump(items)
        logger.debug("Stored item", key=path, file=str(self.path))

    def remove_item(self, path: str) -> None:
        items = self._load()
        if items.pop(path, None) is not None:
            self._dump(items)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class AsyncFileStorageController:
    """Same on-disk format as ``FileStorageController``, file I/O runs in the default executor."""
    is_async = True

    def __init__(self, path: Optional[str] = None):
        self._files = FileStorageController(path)

    @property
    def path(self) -> Path:
        return self._files.path

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    async def get_item_async(self, path: str) -> Optional[str]:
        return await self._run(self._files.get_item, path)

    async def set_item_async(self, path: str, value: str) -> None:
        await self._run(self._files.set_item, path, value)

    async def remove_item_async(self, path: str) -> None:
        await self._run(self._files.remove_item, path)

    async def clear(self) -> None:
        await self._run(self._files.clear)
