"""
SQLAlchemy models and mixins for audited records.
"""

from logable.models.base import Base, BaseModel
from logable.models.record import AuditedRecord
from logable.models.mixins import AuditMixin, OptimisticLockMixin, SoftDeleteMixin, TimestampMixin

__all__ = [
    "Base", "BaseModel", "AuditedRecord",
    "AuditMixin", "OptimisticLockMixin", "SoftDeleteMixin", "TimestampMixin",
]
