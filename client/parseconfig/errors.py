# parseconfig/errors.py
from typing import Any

from pydantic import BaseModel, ValidationError
import structlog

logger = structlog.get_logger(__name__)

class ParseError(Exception):
    """Error raised for failed requests and invalid server payloads."""

    OTHER_CAUSE = -1
    INTERNAL_SERVER_ERROR = 1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101
    INVALID_QUERY = 102
    INVALID_CLASS_NAME = 103
    MISSING_OBJECT_ID = 104
    INVALID_KEY_NAME = 105
    INVALID_POINTER = 106
    INVALID_JSON = 107
    COMMAND_UNAVAILABLE = 108
    NOT_INITIALIZED = 109
    INCORRECT_TYPE = 111
    TIMEOUT = 124
    OPERATION_FORBIDDEN = 119
    REQUEST_LIMIT_EXCEEDED = 155
    INVALID_SESSION_TOKEN = 209

    def __init__(self, code: int, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"ParseError: {self.code} {self.message}"

    def __repr__(self) -> str:
        return f"ParseError(code={self.code!r}, message={self.message!r})"

class ErrorEnvelope(BaseModel):
    """Error body returned by the server: ``{"code": 101, "error": "..."}``."""
    code: int
    error: str

    def to_exception(self) -> ParseError:
        return ParseError(self.code, self.error)

def error_from_response(payload: Any, raw_text: str) -> ParseError:
    try:
        envelope = ErrorEnvelope.model_validate(payload)
    except ValidationError:
        logger.warning("Server error response without an error envelope", body=raw_text)
        return ParseError(
            ParseError.INVALID_JSON,
            f"Received an error with invalid JSON from Parse: {raw_text}",
        )
    return envelope.to_exception()
