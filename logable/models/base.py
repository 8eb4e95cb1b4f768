"""
Base SQLAlchemy models with common fields.
"""

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declared_attr

from logable.core.database import Base


class BaseModel(Base):
    """Base model with an integer primary key."""

    __abstract__ = True

    @declared_attr
    def id(cls):
        return Column(Integer, primary_key=True, index=True)
