# parseconfig/config.py
import json
import os
from typing import Any

import structlog
logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "~/.parseconfig/config.json"

DEFAULTS: dict[str, Any] = {
    "app.id": None,
    "rest.key": None,
    "server.url": "https://api.parse.com/1",
    "request.attempts": 5,
    "request.timeout": 30.0,
    "storage.path": "~/.parseconfig/storage.json",
    "log.level": None,
}

_cfg: dict[str, Any] = dict(DEFAULTS)

def config_path() -> str:
    return os.path.expanduser(os.getenv("PARSECONFIG_CONFIG", DEFAULT_CONFIG_PATH))

def get_config() -> dict[str, Any]:
    return _cfg

def set_config(path: str | None = None) -> None:
    """(Re)load settings from the JSON config file on top of the defaults."""
    global _cfg
    cfg_path = os.path.expanduser(path) if path else config_path()
    cfg = dict(DEFAULTS)
    if os.path.exists(cfg_path):
        with open(cfg_path, "r") as f:
            cfg.update(json.load(f))
    else:
        logger.warning("No config file found", path=cfg_path)
    _cfg = cfg

def update_config(values: dict[str, Any]) -> None:
    _cfg.update(values)

def reset_config() -> None:
    global _cfg
    _cfg = dict(DEFAULTS)
