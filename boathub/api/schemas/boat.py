"""Boat request/response schemas.

Request bodies carry raw strings; field rules are enforced by BoatService.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from boathub.models.boat import BoatType

# ``boatType`` is accepted for clients written against the v1 field name
_TYPE_ALIASES = AliasChoices("type", "boatType")


class CreateBoatRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    boat_type: str | None = Field(None, validation_alias=_TYPE_ALIASES)


class UpdateBoatNameRequest(BaseModel):
    name: str | None = None


class UpdateBoatDescriptionRequest(BaseModel):
    description: str | None = None


class UpdateBoatTypeRequest(BaseModel):
    boat_type: str | None = Field(None, validation_alias=_TYPE_ALIASES)


class BoatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    type: str = Field(validation_alias=AliasChoices("boat_type", "type"))
    created_at: datetime
    updated_at: datetime

    @field_validator("type", mode="before")
    @classmethod
    def _enum_name(cls, v: object) -> object:
        return v.name if isinstance(v, BoatType) else v
