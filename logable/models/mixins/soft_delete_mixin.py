"""
Soft delete mixin for deleted_at and deleter_id fields.
"""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declared_attr


class SoftDeleteMixin:
    """Mixin for soft delete markers."""

    @declared_attr
    def deleted_at(cls):
        return Column(DateTime(timezone=True), nullable=True, index=True)

    @declared_attr
    def deleter_id(cls):
        return Column(String(255), nullable=True)

    @property
    def is_deleted(self) -> bool:
        """Check if the record has been soft deleted."""
        return self.deleted_at is not None
