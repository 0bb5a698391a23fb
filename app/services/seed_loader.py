"""
Seed Loader - replaces the catalog with a fixed list of coffees.

Runs once during startup (and from the seed_catalog CLI). The whole reseed is
one write Unit of Work: clear, then save each name under a fresh UUID, then
commit. Failures are logged and swallowed so the API still comes up.
"""
import logging
from typing import Callable, Iterable, List, Optional

from app.config import settings
from app.db.connection import get_unit_of_work
from app.domain.entities import Coffee
from app.domain.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


async def reseed_catalog(
    names: Iterable[str],
    uow_factory: Callable[..., AbstractUnitOfWork] = get_unit_of_work,
) -> List[Coffee]:
    """
    Delete every coffee, then save one new coffee per name.

    Args:
        names: Coffee names, saved in order
        uow_factory: Unit of Work factory accepting for_write=True

    Returns:
        The saved coffees

    Raises:
        StoreUnavailableError: If the store cannot be reached
    """
    coffees = [Coffee.create(name) for name in names]

    async with uow_factory(for_write=True) as uow:
        deleted = await uow.coffees.delete_all()
        for coffee in coffees:
            await uow.coffees.save(coffee)

        def log_seeded():
            logger.info(f"🌱 Catalog reseeded: removed {deleted}, added {len(coffees)}")
            for coffee in coffees:
                logger.info(f"   ☕ {coffee.id} {coffee.name}")

        uow.add_post_commit_hook(log_seeded)

    return coffees


async def load_seed_data(
    names: Optional[Iterable[str]] = None,
    uow_factory: Callable[..., AbstractUnitOfWork] = get_unit_of_work,
) -> List[Coffee]:
    """
    Startup entry point: reseed and never raise.

    Args:
        names: Override for the configured SEED_COFFEES list

    Returns:
        The saved coffees, or an empty list if seeding failed
    """
    if names is None:
        names = settings.seed_coffees

    try:
        return await reseed_catalog(names, uow_factory=uow_factory)
    except Exception as e:
        logger.error(f"❌ Failed to load seed data: {e}", exc_info=True)
        return []
