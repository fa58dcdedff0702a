from typing import Dict, Optional

import pytest

import parseconfig
from parseconfig import core_manager
from parseconfig.config import reset_config
from parseconfig.logging import setup_logging
from parseconfig.storage.memory import MemoryStorageController

APP_ID = "test-app"
SERVER_URL = "http://parse.test/1"

# route structlog through stdlib logging so nothing is printed to stdout
setup_logging({"log.level": "debug"})


class AsyncMemoryStorageController:
    """Async counterpart of MemoryStorageController, like a mobile key/value store."""
    is_async = True

    def __init__(self):
        self.items: Dict[str, str] = {}

    async def get_item_async(self, path: str) -> Optional[str]:
        return self.items.get(path)

    async def set_item_async(self, path: str, value: str) -> None:
        self.items[path] = value

    async def remove_item_async(self, path: str) -> None:
        self.items.pop(path, None)

    async def clear(self) -> None:
        self.items.clear()


class FailingStorageController(MemoryStorageController):
    def set_item(self, path: str, value: str) -> None:
        raise OSError("disk full")


@pytest.fixture(autouse=True)
def initialized(monkeypatch, tmp_path):
    monkeypatch.setenv("PARSECONFIG_CONFIG", str(tmp_path / "config.json"))
    reset_config()
    core_manager.reset()
    parseconfig.initialize(APP_ID, rest_key="rest-key", server_url=SERVER_URL)
    yield
    core_manager.reset()
    reset_config()


@pytest.fixture
def memory_storage():
    controller = MemoryStorageController()
    core_manager.set_storage_controller(controller)
    return controller


@pytest.fixture
def async_storage():
    controller = AsyncMemoryStorageController()
    core_manager.set_storage_controller(controller)
    return controller


@pytest.fixture
def config_path() -> str:
    return f"Parse/{APP_ID}/currentConfig"
