# parseconfig/rest.py
import asyncio
import functools
import random
from typing import Any, Optional

import requests
import structlog

from parseconfig.config import get_config
from parseconfig.errors import ParseError, error_from_response
from parseconfig.logging import request_context

logger = structlog.get_logger(__name__)

BASE_RETRY_DELAY = 0.125

class RESTController:
    """
    Talks to the server's REST API.

    ``session`` can be anything with the call signature of
    ``requests.Session.request``; requests are sent from the default
    executor so the event loop never blocks on the network.
    """

    def __init__(self, session: Optional[Any] = None):
        self._session = session

    # --- util -----------------------------------------------------------
    def _client(self):
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _url(self, path: str) -> str:
        server_url = get_config().get("server.url")
        if not server_url:
            raise ValueError("Server URL not configured, call parseconfig.initialize(..., server_url=...)")
        return f"{server_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers(self, request_id: str, options: dict) -> dict:
        cfg = get_config()
        app_id = cfg.get("app.id")
        if not app_id:
            raise ValueError("Application id not configured, call parseconfig.initialize(application_id)")
        headers = {
            "X-Parse-Application-Id": app_id,
            "X-Parse-Request-Id": request_id,
            "Content-Type": "application/json",
        }
        if cfg.get("rest.key"):
            headers["X-Parse-REST-API-Key"] = cfg["rest.key"]
        if options.get("session_token"):
            headers["X-Parse-Session-Token"] = options["session_token"]
        return headers

    def _send(self, method: str, url: str, headers: dict, data: dict):
        kwargs: dict[str, Any] = {"headers": headers, "timeout": float(get_config().get("request.timeout") or 30)}
        if method == "GET":
            if data:
                kwargs["params"] = data
        else:
            kwargs["json"] = data
        return self._client().request(method, url, **kwargs)

    @staticmethod
    def _json(response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    # --- required interface ----------------------------------------------
    async def request(self, method: str, path: str, data: Optional[dict] = None,
                      options: Optional[dict] = None) -> Any:
        options = options or {}
        data = data or {}
        attempts = max(1, int(get_config().get("request.attempts") or 1))
        loop = asyncio.get_running_loop()

        with request_context(method, path) as request_id:
            url = self._url(path)
            headers = self._headers(request_id, options)
            send = functools.partial(self._send, method, url, headers, data)

            attempt = 0
            while True:
                attempt += 1
                try:
                    response = await loop.run_in_executor(None, send)
                except requests.exceptions.RequestException as e:
                    if attempt < attempts:
                        await self._backoff(attempt, reason=str(e))
                        continue
                    logger.error("Request failed", attempts=attempt, error=str(e))
                    raise ParseError(
                        ParseError.CONNECTION_FAILED,
                        f"Could not reach the server: {e}",
                    ) from e

                status = response.status_code
                if status >= 500 and attempt < attempts:
                    await self._backoff(attempt, reason=f"HTTP {status}")
                    continue
                break

            payload = self._json(response)
            if 200 <= status < 300:
                if payload is None and response.text.strip():
                    raise ParseError(
                        ParseError.INVALID_JSON,
                        f"Received invalid JSON from Parse: {response.text}",
                    )
                logger.debug("Request completed", status=status, attempts=attempt)
                return payload

            error = error_from_response(payload, response.text)
            logger.warning("Request rejected", status=status, code=error.code, detail=error.message)
            raise error

    async def _backoff(self, attempt: int, reason: str) -> None:
        delay = BASE_RETRY_DELAY * (2 ** attempt) * random.uniform(0.5, 1.0)
        logger.info("Retrying request", attempt=attempt, delay=round(delay, 3), reason=reason)
        await asyncio.sleep(delay)
