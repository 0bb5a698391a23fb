"""
Coffee Repository implementation using SQLAlchemy.

Handles conversion between:
- Domain entities (Coffee) → ORM models (CoffeeModel)
- ORM models → Domain entities

Storage failures surface as StoreUnavailableError; nothing here retries.
"""

import logging
from contextlib import contextmanager
from typing import List

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.interfaces import ICoffeeRepository
from app.db.models import CoffeeModel
from app.domain.entities import Coffee, CoffeeNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(operation: str):
    """Re-raise SQLAlchemy failures as StoreUnavailableError"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"❌ Catalog store error during {operation}: {e}")
        raise StoreUnavailableError(e) from e


class CoffeeRepository(ICoffeeRepository):
    """SQLAlchemy implementation of ICoffeeRepository."""

    def __init__(self, db_session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            db_session: SQLAlchemy async session
        """
        self._db = db_session

    async def list_all(self) -> List[Coffee]:
        with translate_store_errors("list_all"):
            result = await self._db.execute(
                select(CoffeeModel).order_by(CoffeeModel.name, CoffeeModel.id)
            )
            return [self._to_domain(row) for row in result.scalars().all()]

    async def find_by_id(self, coffee_id: str) -> Coffee:
        with translate_store_errors("find_by_id"):
            result = await self._db.execute(
                select(CoffeeModel).where(CoffeeModel.id == coffee_id)
            )
            db_coffee = result.scalar_one_or_none()

        if db_coffee is None:
            logger.warning(f"Coffee {coffee_id} not found")
            raise CoffeeNotFoundError(coffee_id)

        return self._to_domain(db_coffee)

    async def save(self, coffee: Coffee) -> Coffee:
        """
        Insert or overwrite a coffee.

        merge() looks the row up by primary key first, so saving an
        identical coffee twice leaves one unchanged row.
        """
        with translate_store_errors("save"):
            await self._db.merge(self._to_orm(coffee))
            await self._db.flush()

        logger.debug(f"💾 Saved coffee {coffee.id} ({coffee.name})")
        return coffee

    async def delete_all(self) -> int:
        with translate_store_errors("delete_all"):
            result = await self._db.execute(delete(CoffeeModel))
            await self._db.flush()

        deleted = result.rowcount or 0
        logger.info(f"🗑️  Deleted {deleted} coffee(s)")
        return deleted

    async def count(self) -> int:
        with translate_store_errors("count"):
            result = await self._db.execute(select(func.count()).select_from(CoffeeModel))
            return result.scalar_one()

    # ============================================
    # Conversion helpers
    # ============================================

    @staticmethod
    def _to_orm(coffee: Coffee) -> CoffeeModel:
        return CoffeeModel(id=coffee.id, name=coffee.name)

    @staticmethod
    def _to_domain(db_coffee: CoffeeModel) -> Coffee:
        return Coffee(id=db_coffee.id, name=db_coffee.name)
