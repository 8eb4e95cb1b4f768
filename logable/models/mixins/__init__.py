"""
Model mixins providing the columns the audit behavior fills.
"""

from .timestamp_mixin import TimestampMixin
from .audit_mixin import AuditMixin
from .soft_delete_mixin import SoftDeleteMixin
from .optimistic_lock_mixin import OptimisticLockMixin

__all__ = ["TimestampMixin", "AuditMixin", "SoftDeleteMixin", "OptimisticLockMixin"]
