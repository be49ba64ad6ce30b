"""Generic base DAO — CRUD (ORM) + offset pagination (Core)."""

import uuid
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from boathub.core.database import Base

ModelT = TypeVar("ModelT", bound=Base)


@dataclass
class Page(Generic[ModelT]):
    """One offset page of a result set."""

    data: list[ModelT]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size if self.total else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages - 1


class BaseDAO(Generic[ModelT]):
    """Data access for one mapped table, named by the ``model`` class attribute.

    Methods flush but never commit; the caller owns the transaction.
    """

    model: type[ModelT]

    # ── ORM methods ──────────────────────────────────────────────────────

    @staticmethod
    def _require_pk(pk: uuid.UUID | None) -> None:
        if pk is None:
            raise ValueError("pk must not be None")

    async def get_by_id(self, session: AsyncSession, pk: uuid.UUID) -> ModelT | None:
        self._require_pk(pk)
        return await session.get(self.model, pk)

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """Insert a row and reload it so server defaults are populated."""
        obj = self.model(**values)
        session.add(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def save(self, session: AsyncSession, obj: ModelT) -> ModelT:
        """Write pending attribute changes on *obj* and return the reloaded row."""
        obj = await session.merge(obj)
        await session.flush()
        await session.refresh(obj)
        return obj

    async def delete(self, session: AsyncSession, pk: uuid.UUID) -> bool:
        """Remove the row; False when nothing matched *pk*."""
        self._require_pk(pk)
        obj = await session.get(self.model, pk)
        if obj is None:
            return False
        await session.delete(obj)
        await session.flush()
        return True

    async def exists(self, session: AsyncSession, pk: uuid.UUID) -> bool:
        self._require_pk(pk)
        stmt = select(select(self.model.id).where(self.model.id == pk).exists())
        return (await session.execute(stmt)).scalar_one()

    async def get_by_field(self, session: AsyncSession, **filters: Any) -> ModelT | None:
        """First row whose columns equal every keyword in *filters*.

        ``dao.get_by_field(session, username="alice")``
        """
        if not filters:
            raise ValueError("get_by_field() requires at least one filter")
        stmt = select(self.model).filter_by(**filters).limit(1)
        return (await session.execute(stmt)).scalars().first()

    # ── Core methods ─────────────────────────────────────────────────────

    async def paginate(
        self,
        session: AsyncSession,
        query: Select,
        *,
        page: int,
        page_size: int,
        order_by: list[ColumnElement],
    ) -> Page[ModelT]:
        """Run *query* for one page window and count the unpaged result set.

        Only windows SQL cannot express are rejected here; business bounds on
        *page_size* belong to the service.
        """
        if page < 0 or page_size < 1:
            raise ValueError(f"invalid page window: page={page} page_size={page_size}")

        total = await self.count(session, query)
        window = query.order_by(*order_by).offset(page * page_size).limit(page_size)
        rows = (await session.execute(window)).scalars().all()
        return Page(data=list(rows), total=total, page=page, page_size=page_size)

    async def count(self, session: AsyncSession, query: Select | None = None) -> int:
        """Rows matched by *query*, or every row of the table when omitted."""
        source = query.subquery() if query is not None else self.model.__table__
        stmt = select(func.count()).select_from(source)
        return (await session.execute(stmt)).scalar_one()
