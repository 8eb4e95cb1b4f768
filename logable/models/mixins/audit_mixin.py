"""
Audit mixin for creator_id and updater_id fields.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import declared_attr


class AuditMixin:
    """Mixin for actor fields."""

    @declared_attr
    def creator_id(cls):
        return Column(String(255), nullable=True)

    @declared_attr
    def updater_id(cls):
        return Column(String(255), nullable=True)
