# parseconfig/core_manager.py
"""
Registry of the pluggable controllers.

Controllers are looked up at call time, so swapping one (in tests, or to
use file storage from the CLI) affects every caller immediately.
"""
from typing import Any, Iterable

import structlog
logger = structlog.get_logger(__name__)

_REQUIRED: dict[str, tuple[str, ...]] = {
    "config": ("current", "get"),
    "rest": ("request",),
    "storage": ("clear",),
}
_SYNC_STORAGE = ("get_item", "set_item", "remove_item")
_ASYNC_STORAGE = ("get_item_async", "set_item_async", "remove_item_async")

_registry: dict[str, Any] = {}

def _require(name: str, controller: Any, methods: Iterable[str]) -> None:
    missing = [m for m in methods if not callable(getattr(controller, m, None))]
    if missing:
        raise TypeError(f"{name} controller must implement {', '.join(missing)}")

def _set(name: str, controller: Any) -> None:
    _require(name, controller, _REQUIRED[name])
    _registry[name] = controller
    logger.debug("Controller registered", kind=name, controller=type(controller).__name__)

def _get(name: str) -> Any:
    if name not in _registry:
        _install_default(name)
    return _registry[name]

def _install_default(name: str) -> None:
    # imported lazily, the default controllers import this module
    if name == "config":
        from parseconfig.parse_config import DefaultConfigController
        _registry[name] = DefaultConfigController()
    elif name == "rest":
        from parseconfig.rest import RESTController
        _registry[name] = RESTController()
    elif name == "storage":
        from parseconfig.storage.memory import MemoryStorageController
        _registry[name] = MemoryStorageController()

def set_config_controller(controller: Any) -> None:
    _set("config", controller)

def get_config_controller() -> Any:
    return _get("config")

def set_rest_controller(controller: Any) -> None:
    _set("rest", controller)

def get_rest_controller() -> Any:
    return _get("rest")

def set_storage_controller(controller: Any) -> None:
    is_async = getattr(controller, "is_async", None)
    if not isinstance(is_async, bool):
        raise TypeError("storage controller must declare is_async as a bool")
    _require("storage", controller, _ASYNC_STORAGE if is_async else _SYNC_STORAGE)
    _set("storage", controller)

def get_storage_controller() -> Any:
    return _get("storage")

def reset() -> None:
    """Forget every registered controller; defaults are reinstalled on next use."""
    _registry.clear()
