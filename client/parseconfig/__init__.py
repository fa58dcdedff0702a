from typing import Optional

import structlog

from parseconfig import core_manager
from parseconfig.config import update_config
from parseconfig.errors import ParseError
from parseconfig.parse_config import ConfigCache, DefaultConfigController, ParseConfig

logger = structlog.get_logger(__name__)

__all__ = ["ParseConfig", "ParseError", "initialize", "ConfigCache", "DefaultConfigController"]

def initialize(application_id: str, rest_key: Optional[str] = None, server_url: Optional[str] = None) -> None:
    """Point the client at an application; forgets any config cached in memory."""
    values = {"app.id": application_id, "rest.key": rest_key}
    if server_url:
        values["server.url"] = server_url
    update_config(values)
    controller = core_manager.get_config_controller()
    cache = getattr(controller, "cache", None)
    if cache is not None:
        cache.clear()
    logger.debug("Initialized", app_id=application_id, server_url=server_url)
