# parseconfig/storage/memory.py
from typing import Dict, Optional

class MemoryStorageController:
    """Process-local storage; nothing survives a restart."""
    is_async = False

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, path: str) -> Optional[str]:
        return self._items.get(path)

    def set_item(self, path: str, value: str) -> None:
        self._items[path] = value

    def remove_item(self, path: str) -> None:
        self._items.pop(path, None)

    def clear(self) -> None:
        self._items.clear()
