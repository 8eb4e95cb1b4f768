"""
Record behaviors: lifecycle events, audit attribute wiring and the audit hook.
"""

from logable.behaviors.attributes import AttributeKind, AttributeSpec
from logable.behaviors.audit_hook import AuditHook
from logable.behaviors.lifecycle import (
    EVENT_AFTER_DELETE,
    EVENT_AFTER_INSERT,
    EVENT_AFTER_SOFT_DELETE,
    EVENT_AFTER_UPDATE,
    EVENT_BEFORE_DELETE,
    EVENT_BEFORE_INSERT,
    EVENT_BEFORE_SOFT_DELETE,
    EVENT_BEFORE_UPDATE,
    OP_ALL,
    OP_DELETE,
    OP_INSERT,
    OP_UPDATE,
    EventDispatcher,
    ModelEvent,
)

__all__ = [
    "AttributeKind", "AttributeSpec", "AuditHook", "EventDispatcher", "ModelEvent",
    "EVENT_BEFORE_INSERT", "EVENT_AFTER_INSERT", "EVENT_BEFORE_UPDATE", "EVENT_AFTER_UPDATE",
    "EVENT_BEFORE_DELETE", "EVENT_AFTER_DELETE", "EVENT_BEFORE_SOFT_DELETE", "EVENT_AFTER_SOFT_DELETE",
    "OP_INSERT", "OP_UPDATE", "OP_DELETE", "OP_ALL",
]
