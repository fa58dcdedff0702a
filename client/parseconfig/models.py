from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

class ParseType(str, Enum):
    DATE     = "Date"
    BYTES    = "Bytes"
    GEOPOINT = "GeoPoint"
    FILE     = "File"
    POINTER  = "Pointer"
    OBJECT   = "Object"
    RELATION = "Relation"

class DateValue(BaseModel):
    iso: datetime = Field(..., description="ISO-8601 timestamp, UTC")

class BytesValue(BaseModel):
    base64: str = Field(..., description="Base64-encoded payload")

class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"

class ParseFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Server-side file name")
    url: Optional[str] = Field(default=None, description="Public URL of the file")

    def __str__(self) -> str:
        return self.url or self.name

class ObjectRef(BaseModel):
    """A pointer to (or a full encoding of) a stored object."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    class_name: str = Field(..., alias="className")
    object_id: str = Field(..., alias="objectId")
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Decoded fields of a full object encoding; empty for pointers"
    )

    def __str__(self) -> str:
        return f"{self.class_name}:{self.object_id}"

class RelationRef(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    class_name: str = Field(..., alias="className")

class ConfigResponse(BaseModel):
    """Body of ``GET config``."""
    params: Dict[str, Any] = Field(..., description="Raw, still encoded config values")
