"""
Base CRUD operations for SQLAlchemy models.

Provides generic create, read and update operations that can be
inherited and extended by model-specific CRUD classes. Nothing here
commits; callers own the transaction.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from support_desk.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Insert a new row and flush so generated keys are populated.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: Any) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: Primary key value

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: Any,
        **kwargs,
    ) -> ModelT | None:
        """
        Update a record by primary key.

        Values may be SQL expressions (e.g. `Model.counter + 1`); the
        returned instance reflects the stored result.

        Args:
            session: Async database session
            id: Primary key value
            **kwargs: Fields to update with new values

        Returns:
            Updated model instance if found, None otherwise
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
            .returning(self.model)
            .execution_options(populate_existing=True, synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, session: AsyncSession, id: Any) -> bool:
        """
        Check if a record exists by primary key.

        Args:
            session: Async database session
            id: Primary key value

        Returns:
            True if record exists, False otherwise
        """
        stmt = select(self.model.id).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
