import asyncio
import json
import os
import click
from parseconfig import core_manager, initialize
from parseconfig.config import config_path, get_config, set_config
from parseconfig.errors import ParseError
from parseconfig.logging import setup_logging
from parseconfig.parse_config import ParseConfig
from parseconfig.storage.file import FileStorageController
import structlog
logger = structlog.get_logger(__name__)

def _prepare() -> None:
    set_config()
    cfg = get_config()
    setup_logging(cfg)
    if not cfg.get("app.id"):
        raise click.ClickException("No application id configured, call parseconfig settings set app.id <id>")
    initialize(cfg["app.id"], cfg.get("rest.key"), cfg.get("server.url"))
    core_manager.set_storage_controller(FileStorageController())

def _echo_attributes(config: ParseConfig) -> None:
    click.echo(json.dumps(config.attributes, indent=2, default=str, sort_keys=True))

@click.group()
def main():
    """Parse application config CLI"""
    pass

@main.group()
def settings():
    """Get or set client settings."""
    pass

@settings.command("set")
@click.argument("key")
@click.argument("value")
def set_setting(key: str, value: str):
    """Set a client setting (app.id, rest.key, server.url, ...)"""
    cfg_path = config_path()
    os.makedirs(os.path.dirname(cfg_path), exist_ok=True)
    cfg = {}
    if os.path.exists(cfg_path):
        with open(cfg_path, "r") as f:
            cfg = json.load(f)
    cfg[key] = value
    with open(cfg_path, "w") as f:
        json.dump(cfg, f, indent=2)
    click.echo(f"Set {key}.")

@settings.command("show")
def show_settings():
    """Print the effective settings, with the REST key masked"""
    set_config()
    cfg = dict(get_config())
    if cfg.get("rest.key"):
        cfg["rest.key"] = "****"
    click.echo(json.dumps(cfg, indent=2, sort_keys=True))

@main.command()
def fetch():
    """Fetch the config from the server and store it locally"""
    _prepare()
    try:
        config = asyncio.run(ParseConfig.fetch())
    except ParseError as e:
        logger.error("Fetching config failed", code=e.code, detail=e.message)
        raise click.ClickException(str(e))
    _echo_attributes(config)

@main.command()
def current():
    """Print the locally stored config"""
    _prepare()
    _echo_attributes(ParseConfig.current())

@main.command()
@click.argument("attr")
def escape(attr: str):
    """Print the HTML-escaped value of ATTR from the stored config"""
    _prepare()
    click.echo(ParseConfig.current().escape(attr))


if __name__ == '__main__':
    main()
