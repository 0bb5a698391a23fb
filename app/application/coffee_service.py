"""
Coffee Service - Business logic orchestration for the catalog API.

Mediates between the HTTP routes and:
- the catalog store (one short Unit of Work per call)
- OrderStream (a fresh stream per request)

No session is held open while a stream is running.
"""

from typing import Callable, List
import logging

from app.domain.entities import Coffee
from app.domain.unit_of_work import AbstractUnitOfWork
from app.services.order_stream import OrderStream

logger = logging.getLogger(__name__)


class CoffeeService:
    """
    Application service for coffee catalog operations.

    Usage:
        service = CoffeeService(get_unit_of_work, order_interval=1.0)
        coffees = await service.get_all()
    """

    def __init__(
        self,
        uow_factory: Callable[[], AbstractUnitOfWork],
        order_interval: float = 1.0,
    ):
        """
        Args:
            uow_factory: Returns a fresh (read) Unit of Work per call
            order_interval: Seconds between order events in streams built by get_orders
        """
        self.uow_factory = uow_factory
        self.order_interval = order_interval

    async def get_all(self) -> List[Coffee]:
        async with self.uow_factory() as uow:
            return await uow.coffees.list_all()

    async def get_by_id(self, coffee_id: str) -> Coffee:
        """
        Raises:
            CoffeeNotFoundError: If no coffee has this id
        """
        async with self.uow_factory() as uow:
            return await uow.coffees.find_by_id(coffee_id)

    async def get_orders(self, coffee_id: str, validate: bool = False) -> OrderStream:
        """
        Build a fresh order stream for a coffee.

        By default the id is not looked up: a stream for an unknown id emits
        orders referencing it all the same.

        Args:
            coffee_id: Coffee the orders reference
            validate: Look the id up first and raise CoffeeNotFoundError if missing

        Returns:
            Unstarted OrderStream - the caller iterates it and must close it
        """
        if validate:
            await self.get_by_id(coffee_id)

        return OrderStream(coffee_id, interval=self.order_interval)
