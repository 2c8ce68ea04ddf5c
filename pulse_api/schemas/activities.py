"""Pydantic schemas for usage activity log records."""

from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from .base import CamelModel, coerce_key


class PersonRef(CamelModel):
    """A user joined onto an activity by the backend (actor or applicant)."""

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[str]:
        return coerce_key(value)

    @field_validator("name", "email", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None


class ActivityRecord(CamelModel):
    """
    One entry of the usage activity log.

    Records come from heterogeneous writers, so every field is optional and
    malformed values are coerced to "absent" instead of failing validation.
    The ``details`` bag is kept as a plain dict; lookups into it go through
    the rollup service.
    """

    id: Optional[str] = None
    user_id: Optional[str] = None
    activity_type: Optional[str] = None
    application_id: Optional[str] = None
    details: dict[str, Any] = {}
    user: Optional[PersonRef] = None
    applicant: Optional[PersonRef] = None
    timestamp: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "createdAt", "created_at"),
    )

    @field_validator("id", "user_id", "application_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Optional[str]:
        return coerce_key(value)

    @field_validator("activity_type", "timestamp", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, (dict, list)):
            return None
        return str(value)

    @field_validator("details", mode="before")
    @classmethod
    def _coerce_details(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("user", "applicant", mode="before")
    @classmethod
    def _coerce_person(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def actor_id(self) -> Optional[str]:
        """Id of the recruiter who performed the activity."""
        if self.user_id:
            return self.user_id
        return self.user.id if self.user else None
