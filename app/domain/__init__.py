"""
Domain layer - Business logic and domain models.

This layer contains:
- Domain entities (Coffee, CoffeeOrder)
- Domain exceptions
- Unit of Work abstraction

No dependencies on FastAPI.
"""
