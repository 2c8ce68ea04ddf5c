"""Base Pydantic schemas with CamelCase conversion."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from humps import camelize


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    return camelize(string)


def coerce_key(value: Any) -> Optional[str]:
    """
    Normalize a loosely typed identifier to a string key.

    The backend emits ids as UUID strings or integers depending on the table.
    Anything else (objects, lists, booleans) is treated as absent, as are the
    empty string and ``0``: the portal's serial ids start at 1, and the web
    client has always skipped falsy ids.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    if isinstance(value, str):
        return value or None
    return None


class CamelModel(BaseModel):
    """
    Base model that converts snake_case fields to camelCase in JSON responses.

    Usage:
        class MyResponse(CamelModel):
            activity_type: str  # JSON: activityType
            user_id: str        # JSON: userId
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
