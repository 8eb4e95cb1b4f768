"""
Timestamp mixin for created_at and updated_at fields.
"""

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declared_attr


class TimestampMixin:
    """Mixin for timestamp fields. Values are stamped by AuditHook, not by the database."""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), nullable=True)
