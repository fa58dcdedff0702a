# tests/unit/test_rest.py
from unittest.mock import MagicMock

import pytest
import requests

from parseconfig import rest
from parseconfig.config import update_config
from parseconfig.errors import ParseError
from parseconfig.rest import RESTController


class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else repr(payload))

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(rest, "BASE_RETRY_DELAY", 0)

@pytest.fixture
def session():
    return MagicMock()

@pytest.fixture
def controller(session):
    return RESTController(session=session)


@pytest.mark.asyncio
async def test_get_returns_json(controller, session):
    session.request.return_value = FakeResponse(200, {"params": {"a": 1}})

    result = await controller.request("GET", "config", {}, {})

    assert result == {"params": {"a": 1}}
    args, kwargs = session.request.call_args
    assert args == ("GET", "http://parse.test/1/config")
    assert "json" not in kwargs and "params" not in kwargs
    assert kwargs["timeout"] == 30.0

@pytest.mark.asyncio
async def test_headers(controller, session):
    session.request.return_value = FakeResponse(200, {})

    await controller.request("GET", "config", {}, {"session_token": "r:abc"})

    headers = session.request.call_args.kwargs["headers"]
    assert headers["X-Parse-Application-Id"] == "test-app"
    assert headers["X-Parse-REST-API-Key"] == "rest-key"
    assert headers["X-Parse-Session-Token"] == "r:abc"
    assert headers["X-Parse-Request-Id"]

@pytest.mark.asyncio
async def test_rest_key_optional(controller, session):
    update_config({"rest.key": None})
    session.request.return_value = FakeResponse(200, {})

    await controller.request("GET", "config")

    assert "X-Parse-REST-API-Key" not in session.request.call_args.kwargs["headers"]

@pytest.mark.asyncio
async def test_get_data_sent_as_query(controller, session):
    session.request.return_value = FakeResponse(200, {})
    await controller.request("GET", "classes/Item", {"limit": 1})
    assert session.request.call_args.kwargs["params"] == {"limit": 1}

@pytest.mark.asyncio
async def test_post_data_sent_as_json(controller, session):
    session.request.return_value = FakeResponse(201, {"objectId": "x"})
    result = await controller.request("POST", "classes/Item", {"a": 1})
    assert session.request.call_args.kwargs["json"] == {"a": 1}
    assert result == {"objectId": "x"}

@pytest.mark.asyncio
async def test_error_envelope(controller, session):
    session.request.return_value = FakeResponse(403, {"code": 119, "error": "unauthorized"})

    with pytest.raises(ParseError) as exc_info:
        await controller.request("GET", "config")

    assert exc_info.value.code == ParseError.OPERATION_FORBIDDEN
    assert exc_info.value.message == "unauthorized"
    assert session.request.call_count == 1

@pytest.mark.asyncio
async def test_error_without_envelope(controller, session):
    session.request.return_value = FakeResponse(404, None, text="<html>nope</html>")

    with pytest.raises(ParseError) as exc_info:
        await controller.request("GET", "config")

    assert exc_info.value.code == ParseError.INVALID_JSON
    assert "<html>nope</html>" in exc_info.value.message

@pytest.mark.asyncio
async def test_success_with_invalid_json(controller, session):
    session.request.return_value = FakeResponse(200, None, text="not json")

    with pytest.raises(ParseError) as exc_info:
        await controller.request("GET", "config")
    assert exc_info.value.code == ParseError.INVALID_JSON

@pytest.mark.asyncio
async def test_server_error_retried(controller, session):
    session.request.side_effect = [
        FakeResponse(503, None, text="busy"),
        FakeResponse(500, {"code": 1, "error": "internal"}),
        FakeResponse(200, {"params": {}}),
    ]

    assert await controller.request("GET", "config") == {"params": {}}
    assert session.request.call_count == 3

@pytest.mark.asyncio
async def test_server_error_after_last_attempt(controller, session):
    update_config({"request.attempts": 2})
    session.request.return_value = FakeResponse(500, {"code": 1, "error": "internal"})

    with pytest.raises(ParseError) as exc_info:
        await controller.request("GET", "config")

    assert exc_info.value.code == ParseError.INTERNAL_SERVER_ERROR
    assert session.request.call_count == 2

@pytest.mark.asyncio
async def test_connection_error(controller, session):
    update_config({"request.attempts": 3})
    session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(ParseError) as exc_info:
        await controller.request("GET", "config")

    assert exc_info.value.code == ParseError.CONNECTION_FAILED
    assert session.request.call_count == 3

@pytest.mark.asyncio
async def test_connection_error_then_success(controller, session):
    session.request.side_effect = [requests.exceptions.Timeout("slow"), FakeResponse(200, {"ok": True})]
    assert await controller.request("GET", "config") == {"ok": True}

@pytest.mark.asyncio
async def test_requires_application_id(controller, session):
    update_config({"app.id": None})
    with pytest.raises(ValueError, match="Application id"):
        await controller.request("GET", "config")
    session.request.assert_not_called()

def test_parse_error_str():
    err = ParseError(ParseError.INVALID_JSON, "bad")
    assert str(err) == "ParseError: 107 bad"
    assert err.code == 107
