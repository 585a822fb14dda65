"""
Generic data access for a single mapped entity.

Services hold one Repository per table they touch (composition); anything
beyond simple CRUD (joins, aggregates, availability) lives in the service
that needs it as an explicit select().
"""

from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from airline.core.errors import NotFoundError
from airline.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    def __init__(self, model: type[ModelT], resource: Optional[str] = None):
        self.model = model
        self.resource = resource or model.__name__
        self.pk = inspect(model).primary_key[0]

    def _filtered(self, stmt, conditions: dict[str, Any]):
        for field, value in conditions.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return stmt

    async def get(self, db: AsyncSession, pk: Any) -> Optional[ModelT]:
        return await db.get(self.model, pk)

    async def get_or_404(self, db: AsyncSession, pk: Any, code: Optional[str] = None) -> ModelT:
        instance = await self.get(db, pk)
        if instance is None:
            raise NotFoundError(self.resource, code=code)
        return instance

    async def find_one(self, db: AsyncSession, **conditions: Any) -> Optional[ModelT]:
        result = await db.execute(self._filtered(select(self.model), conditions).limit(1))
        return result.scalars().first()

    async def find_all(
        self,
        db: AsyncSession,
        *,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        **conditions: Any,
    ) -> list[ModelT]:
        stmt = self._filtered(select(self.model), conditions)
        stmt = stmt.order_by(*(order_by or (self.pk,)))
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def count(self, db: AsyncSession, **conditions: Any) -> int:
        stmt = self._filtered(select(func.count()).select_from(self.model), conditions)
        return (await db.execute(stmt)).scalar_one()

    async def exists(self, db: AsyncSession, **conditions: Any) -> bool:
        return await self.find_one(db, **conditions) is not None

    async def paginate(
        self,
        db: AsyncSession,
        page: int,
        limit: int,
        *,
        order_by: Sequence[Any] = (),
        **conditions: Any,
    ) -> tuple[list[ModelT], int]:
        total = await self.count(db, **conditions)
        items = await self.find_all(db, order_by=order_by, limit=limit, offset=(page - 1) * limit, **conditions)
        return items, total

    async def create(self, db: AsyncSession, **values: Any) -> ModelT:
        instance = self.model(**values)
        db.add(instance)
        await db.flush()
        return instance

    async def update(self, db: AsyncSession, instance: ModelT, **values: Any) -> ModelT:
        for field, value in values.items():
            setattr(instance, field, value)
        await db.flush()
        return instance

    async def delete(self, db: AsyncSession, instance: ModelT) -> None:
        await db.delete(instance)
        await db.flush()
