"""Collection DTOs for the Service Layer.

Pydantic v2 frozen models; the view builds them from ``request.data``
and the service never sees raw request payloads.

- ``CreateCollectionDTO``: input for collection creation.
- ``UpdateCollectionDTO``: partial update (only supplied fields change).
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, field_validator

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Collection name is required.")
    if len(v) < NAME_MIN_LENGTH:
        raise ValueError(
            f"Collection name must be at least {NAME_MIN_LENGTH} characters long."
        )
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(
            f"Collection name must be less than {NAME_MAX_LENGTH} characters."
        )
    return v


def _check_description(v: str) -> str:
    if len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"Collection description must be less than "
            f"{DESCRIPTION_MAX_LENGTH} characters."
        )
    return v


class CreateCollectionDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    description: str = ""
    slug: str | None = None
    is_active: bool = True
    metadata: Dict[str, Any] = {}

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str) -> str:
        return _check_description(v)


class UpdateCollectionDTO(BaseModel):
    """All fields optional; read the patch with ``model_dump(exclude_unset=True)``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    description: str | None = None
    slug: str | None = None
    is_active: bool | None = None
    metadata: Dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_name(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_description(v)
