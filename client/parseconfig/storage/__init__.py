from typing import Any, Optional, Protocol

import structlog

from parseconfig import core_manager
from parseconfig.config import get_config

logger = structlog.get_logger(__name__)

class StorageController(Protocol):
    is_async: bool           # selects which of the two method sets is used

    def clear(self) -> Any: ...

class SyncStorageController(StorageController, Protocol):
    def get_item(self, path: str) -> Optional[str]:           ...
    def set_item(self, path: str, value: str) -> None:        ...
    def remove_item(self, path: str) -> None:                 ...

class AsyncStorageController(StorageController, Protocol):
    async def get_item_async(self, path: str) -> Optional[str]:    ...
    async def set_item_async(self, path: str, value: str) -> None: ...
    async def remove_item_async(self, path: str) -> None:          ...


class Storage:
    """
    Key/value persistence on top of a storage controller.

    With no controller given, the one registered in ``core_manager`` is used,
    looked up on every call.
    """

    def __init__(self, controller: Optional[StorageController] = None):
        self._controller = controller

    @property
    def controller(self) -> StorageController:
        if self._controller is not None:
            return self._controller
        return core_manager.get_storage_controller()

    def is_async(self) -> bool:
        return bool(self.controller.is_async)

    # --- sync ------------------------------------------------------------
    def get_item(self, path: str) -> Optional[str]:
        controller = self.controller
        if controller.is_async:
            raise RuntimeError("Synchronous storage is not supported by the current storage controller")
        return controller.get_item(path)

    def set_item(self, path: str, value: str) -> None:
        controller = self.controller
        if controller.is_async:
            raise RuntimeError("Synchronous storage is not supported by the current storage controller")
        controller.set_item(path, value)

    def remove_item(self, path: str) -> None:
        controller = self.controller
        if controller.is_async:
            raise RuntimeError("Synchronous storage is not supported by the current storage controller")
        controller.remove_item(path)

    # --- async (works with either kind of controller) --------------------
    async def get_item_async(self, path: str) -> Optional[str]:
        controller = self.controller
        if controller.is_async:
            return await controller.get_item_async(path)
        return controller.get_item(path)

    async def set_item_async(self, path: str, value: str) -> None:
        controller = self.controller
        if controller.is_async:
            await controller.set_item_async(path, value)
        else:
            controller.set_item(path, value)

    async def remove_item_async(self, path: str) -> None:
        controller = self.controller
        if controller.is_async:
            await controller.remove_item_async(path)
        else:
            controller.remove_item(path)

    def generate_path(self, path: str) -> str:
        app_id = get_config().get("app.id")
        if not app_id:
            logger.warning("Storage path requested before initialize()")
            raise ValueError("You need to call parseconfig.initialize(application_id) before using storage")
        if path.startswith("/"):
            path = path[1:]
        return f"Parse/{app_id}/{path}"

    def clear(self) -> Any:
        return self.controller.clear()


default_storage = Storage()
