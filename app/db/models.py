"""
SQLAlchemy ORM models for database tables.

YAGNI: Start minimal, add tables only when needed.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CoffeeModel(Base):
    """
    Coffees table - the catalog.

    Rows are written by the seed loader only; the API reads them.
    """
    __tablename__ = "coffees"

    id = Column(String(36), primary_key=True)  # UUID4 string
    name = Column(String(255), nullable=False)
