from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from lesson_market.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Lookup and write helpers shared by the lesson, slot and booking repositories."""

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get a single record by ID."""
        return await self.session.get(self.model, id)

    async def create(self, obj_data: dict) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_data)
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def create_many(self, rows: list[dict]) -> list[ModelType]:
        """Create several records in one flush."""
        db_objs = [self.model(**row) for row in rows]
        self.session.add_all(db_objs)
        await self.session.flush()
        for db_obj in db_objs:
            await self.session.refresh(db_obj)
        return db_objs

    async def update(self, db_obj: ModelType, update_data: dict) -> ModelType:
        """Update an existing record."""
        for field, value in update_data.items():
            if value is not None:
                setattr(db_obj, field, value)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj
