"""BoatService — boat catalog CRUD with field-level partial updates."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from boathub.core.validators import (
    SORT_FIELDS,
    coerce_boat_type,
    is_valid_sort_direction,
    is_valid_sort_field,
)
from boathub.dao.base import Page
from boathub.dao.boat_dao import BoatDAO, BoatNameConflictError
from boathub.models.boat import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH, Boat
from boathub.services import ConflictError, ValidationError

log = structlog.get_logger(__name__)

PAGE_SIZE_MIN = 1
PAGE_SIZE_MAX = 50
PAGE_SIZE_DEFAULT = 10
SORT_BY_DEFAULT = "name"
SORT_DIRECTION_DEFAULT = "asc"
# Largest row offset a signed 64-bit OFFSET clause accepts
OFFSET_MAX = 2**63 - 1

BoatPage = Page[Boat]

_ALL_FIELDS = ("name", "description", "boat_type")


@dataclass
class BoatInput:
    """Raw, untrusted boat fields as submitted by a client."""

    name: str | None = None
    description: str | None = None
    boat_type: str | None = None


def validate_boat_input(data: BoatInput, fields: Iterable[str] = _ALL_FIELDS) -> dict[str, Any]:
    """Validate and normalize the requested *fields* of *data*.

    Returns a mapping of model attribute -> clean value for exactly those
    fields. Every failing field is reported in one :class:`ValidationError`.
    """
    clean: dict[str, Any] = {}
    errors: list[str] = []

    for field_name in fields:
        if field_name == "name":
            name = data.name.strip() if data.name is not None else ""
            if not name:
                errors.append("name: Boat name is required")
            elif len(name) > NAME_MAX_LENGTH:
                errors.append(f"name: Boat name must not exceed {NAME_MAX_LENGTH} characters")
            else:
                clean["name"] = name
        elif field_name == "description":
            description = data.description or None
            if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
                errors.append(
                    f"description: Description must not exceed {DESCRIPTION_MAX_LENGTH} characters"
                )
            else:
                clean["description"] = description
        elif field_name == "boat_type":
            try:
                clean["boat_type"] = coerce_boat_type(data.boat_type)
            except ValidationError as exc:
                errors.append(str(exc))
        else:
            raise ValueError(f"unknown boat field {field_name!r}")

    if errors:
        raise ValidationError("; ".join(errors))
    return clean


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _next_timestamp(previous: datetime | None) -> datetime:
    """Return now, nudged past *previous* so updated_at strictly increases."""
    now = _utcnow()
    if previous is not None and now <= _as_utc(previous):
        return _as_utc(previous) + timedelta(microseconds=1)
    return now


class BoatService:
    """Stateless service for the boat catalog."""

    def __init__(self, boat_dao: BoatDAO) -> None:
        self._boat_dao = boat_dao

    # -- Read --------------------------------------------------------------

    async def list(
        self,
        session: AsyncSession,
        *,
        page: int = 0,
        page_size: int = PAGE_SIZE_DEFAULT,
        sort_by: str = SORT_BY_DEFAULT,
        sort_direction: str = SORT_DIRECTION_DEFAULT,
    ) -> BoatPage:
        """Return one page of boats ordered by *sort_by* / *sort_direction*.

        All parameters are checked before the store is queried; any
        violation raises :class:`ValidationError`.
        """
        errors: list[str] = []
        if page < 0:
            errors.append("page: must be greater than or equal to 0")
        if not PAGE_SIZE_MIN <= page_size <= PAGE_SIZE_MAX:
            errors.append(f"size: must be between {PAGE_SIZE_MIN} and {PAGE_SIZE_MAX}")
        elif page > 0 and page * page_size > OFFSET_MAX:
            errors.append(f"page: must not exceed {OFFSET_MAX // page_size} for size {page_size}")
        if sort_by is None or not is_valid_sort_field(sort_by):
            allowed = ", ".join(SORT_FIELDS)
            errors.append(f"sortBy: Invalid sort field {sort_by!r}. Allowed values: {allowed}")
        if sort_direction is None or not is_valid_sort_direction(sort_direction):
            errors.append(
                f"sortDirection: Invalid sort direction {sort_direction!r}. Allowed values: asc, desc"
            )
        if errors:
            raise ValidationError("; ".join(errors))

        return await self._boat_dao.list_paginated(
            session,
            page=page,
            page_size=page_size,
            sort_attr=SORT_FIELDS[sort_by],
            descending=sort_direction.lower() == "desc",
        )

    async def get(self, session: AsyncSession, boat_id: uuid.UUID) -> Boat | None:
        """Return the boat, or None if it does not exist."""
        return await self._boat_dao.get_by_id(session, boat_id)

    # -- Write -------------------------------------------------------------

    async def create(self, session: AsyncSession, data: BoatInput) -> Boat:
        """Validate *data* and persist a new boat.

        Raises :class:`ValidationError` for missing, oversized or unknown
        values and :class:`ConflictError` if the name is already taken.
        """
        values = validate_boat_input(data)
        now = _utcnow()
        try:
            boat = await self._boat_dao.create(session, **values, created_at=now, updated_at=now)
        except BoatNameConflictError as exc:
            raise ConflictError(str(exc)) from exc
        log.info("boat.created", boat_id=str(boat.id), boat_type=boat.boat_type.name)
        return boat

    async def update_name(
        self, session: AsyncSession, boat_id: uuid.UUID, name: str | None
    ) -> Boat | None:
        """Rename a boat. Returns None if it does not exist."""
        values = validate_boat_input(BoatInput(name=name), ("name",))
        return await self._apply(session, boat_id, values)

    async def update_description(
        self, session: AsyncSession, boat_id: uuid.UUID, description: str | None
    ) -> Boat | None:
        """Replace (or clear) a boat's description. Returns None if it does not exist."""
        values = validate_boat_input(BoatInput(description=description), ("description",))
        return await self._apply(session, boat_id, values)

    async def update_type(
        self, session: AsyncSession, boat_id: uuid.UUID, boat_type: str | None
    ) -> Boat | None:
        """Change a boat's type after trim + uppercase coercion.

        An unrecognized type always raises :class:`ValidationError` and the
        record is left untouched. Returns None if the boat does not exist.
        """
        values = validate_boat_input(BoatInput(boat_type=boat_type), ("boat_type",))
        return await self._apply(session, boat_id, values)

    async def delete(self, session: AsyncSession, boat_id: uuid.UUID) -> bool:
        """Delete a boat. Returns False if it did not exist."""
        if not await self._boat_dao.exists(session, boat_id):
            return False
        deleted = await self._boat_dao.delete(session, boat_id)
        if deleted:
            log.info("boat.deleted", boat_id=str(boat_id))
        return deleted

    # -- Internal ----------------------------------------------------------

    async def _apply(
        self, session: AsyncSession, boat_id: uuid.UUID, values: dict[str, Any]
    ) -> Boat | None:
        """Set *values* on the stored boat, bump updated_at and save."""
        boat = await self._boat_dao.get_by_id(session, boat_id)
        if boat is None:
            return None
        for key, value in values.items():
            setattr(boat, key, value)
        boat.updated_at = _next_timestamp(boat.updated_at)
        try:
            boat = await self._boat_dao.save(session, boat)
        except BoatNameConflictError as exc:
            raise ConflictError(str(exc)) from exc
        log.info("boat.updated", boat_id=str(boat.id), fields=sorted(values))
        return boat
