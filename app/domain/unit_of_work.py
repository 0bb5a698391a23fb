"""
Unit of Work pattern for transaction management.

The Unit of Work pattern ensures:
1. All operations happen in a single transaction
2. Atomic commit (all or nothing)
3. Post-commit hooks run AFTER successful commit (logging the seeded catalog, etc.)
4. Proper resource cleanup

Write units (and, on a shared connection, every unit) hold the catalog lock
for the whole transaction so that two reseeds never interleave.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

if TYPE_CHECKING:
    from app.core.interfaces import ICoffeeRepository

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """
    Abstract Unit of Work for transaction management.

    Provides:
    - Transaction boundaries (commit/rollback)
    - Repository access (coffees)
    - Post-commit hooks for side effects
    """

    coffees: 'ICoffeeRepository'

    async def __aenter__(self):
        """Enter async context"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """
        Exit async context.

        On success: commits and runs post-commit hooks
        On exception: rolls back (no hooks run)
        """
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.close()

    @abstractmethod
    async def commit(self):
        """Commit transaction and execute post-commit hooks"""
        pass

    @abstractmethod
    async def rollback(self):
        """Rollback transaction"""
        pass

    @abstractmethod
    async def close(self):
        """Close resources"""
        pass

    @abstractmethod
    def add_post_commit_hook(self, hook: Callable):
        """
        Register a post-commit hook.

        Hook will be called AFTER successful commit.

        Args:
            hook: Callable (sync or async) to execute after commit
        """
        pass


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work.

    Features:
    - Transaction management via SQLAlchemy session
    - Optional catalog lock held from enter to close
    - Post-commit hooks for side effects
    """

    def __init__(self, session: AsyncSession, lock: Optional[asyncio.Lock] = None):
        """
        Initialize Unit of Work.

        Args:
            session: SQLAlchemy async session
            lock: Lock to hold for the lifetime of the transaction
        """
        self._session = session
        self._lock = lock
        self._locked = False
        self._post_commit_hooks: List[Callable] = []

        # Import here to avoid circular dependencies
        from app.repositories.coffee_repository import CoffeeRepository

        self.coffees = CoffeeRepository(session)

    async def __aenter__(self):
        if self._lock is not None:
            await self._lock.acquire()
            self._locked = True
        return self

    async def commit(self):
        """
        Commit transaction and execute post-commit hooks.

        Post-commit hooks are executed in order after successful commit.
        Hook failures are logged but don't affect the transaction.
        """
        from app.repositories.coffee_repository import translate_store_errors

        try:
            with translate_store_errors("commit"):
                await self._session.commit()
            logger.debug(f"✅ Transaction committed, running {len(self._post_commit_hooks)} post-commit hooks")

            for hook in self._post_commit_hooks:
                try:
                    if inspect.iscoroutinefunction(hook):
                        await hook()
                    else:
                        hook()
                except Exception as e:
                    # Log but don't fail - transaction already committed
                    logger.error(f"❌ Post-commit hook failed: {e}", exc_info=True)

        finally:
            # Always clear hooks after commit
            self._post_commit_hooks.clear()

    async def rollback(self):
        """
        Rollback transaction.

        Discards all pending changes and clears post-commit hooks.
        """
        try:
            await self._session.rollback()
            logger.debug("↩️  Transaction rolled back")
        finally:
            # Clear hooks on rollback - they won't run
            self._post_commit_hooks.clear()

    async def close(self):
        """Close session, then release the catalog lock"""
        try:
            await self._session.close()
        finally:
            if self._locked:
                self._locked = False
                self._lock.release()

    def add_post_commit_hook(self, hook: Callable):
        """
        Add a post-commit hook.

        Args:
            hook: Callable (sync or async) to execute after commit

        Example:
            uow.add_post_commit_hook(lambda: logger.info("Catalog reseeded"))
        """
        self._post_commit_hooks.append(hook)
