# parseconfig/logging.py

import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator

import structlog
from structlog.contextvars import bind_contextvars, merge_contextvars, unbind_contextvars

# chatty below WARNING: one line per connection and retry
HTTP_LOGGERS = ("urllib3", "requests")

def _level(cfg: dict) -> int:
    # config overrides ENV
    lvl = cfg.get("log.level") or os.getenv("PARSECONFIG_LOG_LEVEL", "info")
    if not isinstance(lvl, str):
        return logging.INFO
    return getattr(logging, lvl.upper(), logging.INFO)

def setup_logging(cfg: dict, standalone: bool = True):
    """
    Route structlog events through stdlib logging as JSON lines.

    ``standalone`` is for the CLI, which owns the process: it installs a
    root handler. An application embedding the client keeps its own
    handlers and only gets the ``parseconfig`` logger level set.
    """
    level = _level(cfg)
    if standalone:
        logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("parseconfig").setLevel(level)
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

@contextmanager
def request_context(method: str, path: str, request_id: str | None = None) -> Iterator[str]:
    """Bind a request id (and method/path) to every log line emitted inside the block."""
    req_id = request_id or str(uuid.uuid4())
    bind_contextvars(request_id=req_id, method=method, path=path)
    try:
        yield req_id
    finally:
        unbind_contextvars("request_id", "method", "path")
