"""Base entity shared by every document stored in MongoDB."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from repo_radar.utils.datetime import utc_now


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


def _object_id_to_str(value: Any) -> str:
    if isinstance(value, ObjectId):
        return str(value)
    return str(_validate_object_id(value))


# ObjectId kept as ObjectId in entities (what pymongo expects) ...
PyObjectId = Annotated[ObjectId, BeforeValidator(_validate_object_id)]

# ... and rendered as a plain string in API responses.
PyObjectIdStr = Annotated[
    str,
    BeforeValidator(_object_id_to_str),
    PlainSerializer(lambda v: str(v), return_type=str),
]


class BaseEntity(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_mongo(self) -> Dict[str, Any]:
        """Dump the entity as a MongoDB document (``_id`` omitted until assigned)."""
        document = self.model_dump(by_alias=True)
        if document.get("_id") is None:
            document.pop("_id", None)
        return document
