"""
Optimistic lock mixin for a version counter.
"""

from sqlalchemy import Column, Integer
from sqlalchemy.orm import declared_attr


class OptimisticLockMixin:
    """
    Mixin declaring a ``version`` column as the record's optimistic lock.

    Soft deletes write ``version + 1`` only where the stored version still
    matches, and raise StaleObjectError otherwise.
    """

    __optimistic_lock__ = "version"

    @declared_attr
    def version(cls):
        return Column(Integer, default=0, nullable=False)
