"""
Core interfaces for the coffee catalog.

The repository contract is the only thing the service layer knows about
storage; implementations must be safe to use from many in-flight requests
(one instance per session, one session per unit of work).
"""
from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.entities import Coffee


class ICoffeeRepository(ABC):
    """
    Interface for coffee storage and retrieval.

    Implementations must handle:
    - Insert-or-overwrite by id
    - Translating storage failures into StoreUnavailableError
    """

    @abstractmethod
    async def list_all(self) -> List['Coffee']:
        """
        Get every stored coffee.

        Returns:
            List of coffees in a stable order (by name, then id)
        """
        pass

    @abstractmethod
    async def find_by_id(self, coffee_id: str) -> 'Coffee':
        """
        Get coffee by ID.

        Raises:
            CoffeeNotFoundError: If no coffee has this id
        """
        pass

    @abstractmethod
    async def save(self, coffee: 'Coffee') -> 'Coffee':
        """Insert or overwrite a coffee by id. Saving the same coffee twice is a no-op."""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every coffee. Returns the number of rows removed."""
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
