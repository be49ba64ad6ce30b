"""BoatDAO — boats table operations."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boathub.dao.base import BaseDAO, Page
from boathub.models.boat import Boat

# Markers of the name uniqueness violation in PostgreSQL / SQLite messages
_NAME_CONSTRAINT_MARKERS = ("uq_boats_name", "boats.name")


class BoatNameConflictError(ValueError):
    """Raised when a write collides with an existing boat name."""


def _is_name_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return any(marker in message for marker in _NAME_CONSTRAINT_MARKERS)


class BoatDAO(BaseDAO[Boat]):
    model = Boat

    async def list_paginated(
        self,
        session: AsyncSession,
        *,
        page: int,
        page_size: int,
        sort_attr: str = "name",
        descending: bool = False,
    ) -> Page[Boat]:
        """Offset-paginated boat list ordered by *sort_attr*, ties broken by id."""
        column = getattr(Boat, sort_attr)
        order_by = [column.desc() if descending else column.asc()]
        if sort_attr != "id":
            order_by.append(Boat.id.asc())
        return await self.paginate(
            session, select(Boat), page=page, page_size=page_size, order_by=order_by
        )

    async def create(self, session: AsyncSession, **values: Any) -> Boat:
        """Insert a boat. Raises :class:`BoatNameConflictError` on a duplicate name."""
        try:
            return await super().create(session, **values)
        except IntegrityError as exc:
            if _is_name_conflict(exc):
                raise BoatNameConflictError(
                    f"boat with name {values.get('name')!r} already exists"
                ) from exc
            raise

    async def save(self, session: AsyncSession, obj: Boat) -> Boat:
        """Flush changes to *obj*. Raises :class:`BoatNameConflictError` on a duplicate name."""
        try:
            return await super().save(session, obj)
        except IntegrityError as exc:
            if _is_name_conflict(exc):
                raise BoatNameConflictError(
                    f"boat with name {obj.name!r} already exists"
                ) from exc
            raise
