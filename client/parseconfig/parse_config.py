# parseconfig/parse_config.py
import json
from typing import Any, Awaitable, Dict, Optional, Union

import structlog
from pydantic import ValidationError

from parseconfig import core_manager
from parseconfig.decode import decode
from parseconfig.errors import ParseError
from parseconfig.escape import escape, to_string
from parseconfig.models import ConfigResponse
from parseconfig.storage import Storage, default_storage

logger = structlog.get_logger(__name__)

CURRENT_CONFIG_KEY = "currentConfig"


class ParseConfig:
    """
    Local copy of the application configuration set on the server.

    Instances are built once from a fetched (or stored) payload and never
    changed afterwards; a newer configuration is a new instance.
    """

    def __init__(self, attributes: Optional[Dict[str, Any]] = None):
        self.attributes: Dict[str, Any] = attributes or {}
        self._escaped_attributes: Dict[str, str] = {}

    def get(self, attr: str) -> Any:
        """Value of ``attr``, or None when the config does not define it."""
        return self.attributes.get(attr)

    def escape(self, attr: str) -> str:
        """HTML-escaped string form of ``attr``; empty string for missing/None values."""
        if attr in self._escaped_attributes:
            return self._escaped_attributes[attr]
        val = self.attributes.get(attr)
        escaped = ""
        if val is not None:
            escaped = escape(to_string(val))
        self._escaped_attributes[attr] = escaped
        return escaped

    def __repr__(self) -> str:
        return f"ParseConfig({self.attributes!r})"

    @staticmethod
    def current() -> Union["ParseConfig", Awaitable["ParseConfig"]]:
        """
        Most recently fetched config, from memory or else from storage.

        Returns the config directly when it is cached in memory or the
        storage controller is synchronous, an awaitable otherwise. Falls
        back to an empty config when nothing usable is stored.
        """
        return core_manager.get_config_controller().current()

    @staticmethod
    async def fetch() -> "ParseConfig":
        """Get a new config from the server, cache and persist it."""
        return await core_manager.get_config_controller().get()


class ConfigCache:
    """
    Holds the latest config.

    Empty until a fetch or a storage load succeeds, then only ever replaced.
    """

    def __init__(self):
        self.config: Optional[ParseConfig] = None

    def set(self, config: ParseConfig) -> None:
        self.config = config

    def clear(self) -> None:
        self.config = None


def decode_payload(data: str) -> Optional[Dict[str, Any]]:
    # a broken snapshot reads as "nothing stored", never as an error
    try:
        payload = json.loads(data)
        if isinstance(payload, dict):
            return decode(payload)
    except Exception as e:
        logger.debug("Ignoring unreadable stored config", error=repr(e))
    return None


class DefaultConfigController:
    def __init__(self, cache: Optional[ConfigCache] = None, storage: Optional[Storage] = None,
                 rest_controller: Optional[Any] = None):
        self.cache = cache or ConfigCache()
        self.storage = storage or default_storage
        self._rest_controller = rest_controller

    @property
    def rest_controller(self):
        if self._rest_controller is not None:
            return self._rest_controller
        return core_manager.get_rest_controller()

    def _hydrate(self, config: ParseConfig, config_data: Optional[str]) -> ParseConfig:
        if config_data:
            attributes = decode_payload(config_data)
            if attributes is not None:
                config.attributes = attributes
                self.cache.set(config)
                logger.debug("Loaded config from storage", keys=len(attributes))
        return config

    def current(self) -> Union[ParseConfig, Awaitable[ParseConfig]]:
        if self.cache.config is not None:
            return self.cache.config

        config = ParseConfig()
        storage_path = self.storage.generate_path(CURRENT_CONFIG_KEY)
        if not self.storage.is_async():
            return self._hydrate(config, self.storage.get_item(storage_path))

        async def _load() -> ParseConfig:
            return self._hydrate(config, await self.storage.get_item_async(storage_path))

        return _load()

    async def get(self) -> ParseConfig:
        response = await self.rest_controller.request("GET", "config", {}, {})
        try:
            params = ConfigResponse.model_validate(response).params
        except ValidationError:
            logger.error("Config response without params", response=response)
            raise ParseError(ParseError.INVALID_JSON, "Config JSON response invalid.")

        config = ParseConfig({attr: decode(value) for attr, value in params.items()})
        self.cache.set(config)
        logger.info("Fetched config", keys=sorted(params))
        await self.storage.set_item_async(
            self.storage.generate_path(CURRENT_CONFIG_KEY),
            json.dumps(params, separators=(",", ":")),
        )
        return config
