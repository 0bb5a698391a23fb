"""
Domain Entities - the catalog item and the synthetic order event.

Both are immutable: a Coffee is never updated once created (the seed loader
replaces the whole catalog), and a CoffeeOrder is handed to the transport and
forgotten.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict


@dataclass(frozen=True)
class Coffee:
    """
    Catalog item entity.

    Identity is the opaque id string, generated once at creation.
    """

    id: str
    name: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Coffee id cannot be empty")
        if self.name is None:
            raise ValueError("Coffee name cannot be None")

    @classmethod
    def create(cls, name: str) -> "Coffee":
        """Create a new coffee with a freshly generated UUID4 id"""
        return cls(id=str(uuid.uuid4()), name=name)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class CoffeeOrder:
    """
    Synthetic order event emitted by an order stream.

    coffee_id is a back-reference only - it is never checked against the catalog.
    """

    coffee_id: str
    when_ordered: datetime

    @classmethod
    def now(cls, coffee_id: str) -> "CoffeeOrder":
        return cls(coffee_id=coffee_id, when_ordered=datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: {coffeeId, whenOrdered}"""
        return {
            "coffeeId": self.coffee_id,
            "whenOrdered": self.when_ordered.isoformat(),
        }

    def __repr__(self) -> str:
        return f"CoffeeOrder(coffee_id={self.coffee_id}, when_ordered={self.when_ordered.isoformat()})"


# Domain exceptions

class DomainError(Exception):
    """Base exception for domain layer errors"""
    pass


class CoffeeNotFoundError(DomainError):
    """Raised when no coffee with the requested id exists"""

    def __init__(self, coffee_id: str):
        self.coffee_id = coffee_id
        super().__init__(f"Coffee {coffee_id} not found")


class StoreUnavailableError(DomainError):
    """Raised when the catalog store cannot be reached"""

    def __init__(self, cause: Any = None):
        self.cause = cause
        super().__init__(f"Catalog store unavailable: {cause}" if cause else "Catalog store unavailable")
