# parseconfig/decode.py
import base64
from typing import Any

from parseconfig.models import (
    BytesValue, DateValue, GeoPoint, ObjectRef, ParseFile, ParseType, RelationRef,
)

_RESERVED_OBJECT_KEYS = {"__type", "className", "objectId"}

def decode(value: Any) -> Any:
    """
    Turn a JSON value as sent by the server into its Python form.

    Typed dicts (``{"__type": ...}``) become datetimes, bytes, GeoPoints,
    files and object references. Lists and plain dicts are decoded
    recursively; every other value is returned as-is. Malformed typed
    values raise ``pydantic.ValidationError``.
    """
    if isinstance(value, list):
        return [decode(v) for v in value]
    if not isinstance(value, dict):
        return value

    kind = value.get("__type")
    if kind == ParseType.DATE.value:
        return DateValue.model_validate(value).iso
    if kind == ParseType.BYTES.value:
        return base64.b64decode(BytesValue.model_validate(value).base64)
    if kind == ParseType.GEOPOINT.value:
        return GeoPoint.model_validate(value)
    if kind == ParseType.FILE.value:
        return ParseFile.model_validate(value)
    if kind == ParseType.RELATION.value:
        return RelationRef.model_validate(value)
    if kind in (ParseType.POINTER.value, ParseType.OBJECT.value):
        data = {}
        if kind == ParseType.OBJECT.value:
            data = {k: decode(v) for k, v in value.items() if k not in _RESERVED_OBJECT_KEYS}
        return ObjectRef.model_validate({**value, "data": data})

    return {k: decode(v) for k, v in value.items()}
