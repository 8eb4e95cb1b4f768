"""
Audit stamping and soft delete behaviors for SQLAlchemy records.
"""

from logable.behaviors import AttributeKind, AttributeSpec, AuditHook, ModelEvent
from logable.core.context import acting_as
from logable.core.errors import StaleObjectError
from logable.models import AuditedRecord

__version__ = "1.0.0"

__all__ = [
    "AttributeKind", "AttributeSpec", "AuditHook", "AuditedRecord", "ModelEvent",
    "StaleObjectError", "acting_as",
]
