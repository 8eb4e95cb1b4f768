"""
SQLAlchemy adapter exposing a mapped instance as an audited record.

AuditedRecord gives a mapped class the record capability interface used by
AuditHook (attribute access, dirty tracking, primary key, optimistic lock,
transactions, delete guards and events) and bridges SQLAlchemy flush events
into the record's own before_insert / before_update events.
"""

import logging
from typing import Any, Dict, Optional, Union

from sqlalchemy import event, inspect as sa_inspect, update
from sqlalchemy.orm import object_session
from sqlalchemy.orm.attributes import set_committed_value

from logable.behaviors.audit_hook import AuditHook
from logable.behaviors.lifecycle import (
    EVENT_AFTER_DELETE,
    EVENT_AFTER_INSERT,
    EVENT_AFTER_UPDATE,
    EVENT_BEFORE_DELETE,
    EVENT_BEFORE_INSERT,
    EVENT_BEFORE_UPDATE,
    EventDispatcher,
    ModelEvent,
)
from logable.core.errors import AuditError

logger = logging.getLogger(__name__)


class AuditedRecord(EventDispatcher):
    """
    Mixin for mapped classes that take part in the audit lifecycle.

    Class attributes:
        __optimistic_lock__: name of the version counter column, or None
        __transactional_ops__: operations (OP_INSERT/OP_UPDATE/OP_DELETE)
            that must run inside a transaction
    """

    # ==================== ATTRIBUTES ====================

    @classmethod
    def _column_keys(cls):
        return sa_inspect(cls).column_attrs.keys()

    def has_attribute(self, name: str) -> bool:
        """Check whether name is a mapped column attribute."""
        return name in self._column_keys()

    def get_attribute(self, name: str) -> Any:
        return getattr(self, name, None)

    def set_attribute(self, name: str, value: Any) -> None:
        """Set a column attribute. Names that are not mapped columns are ignored."""
        if not self.has_attribute(name):
            logger.debug(f"Ignoring unknown attribute {name} on {type(self).__name__}")
            return
        setattr(self, name, value)

    def set_old_attribute(self, name: str, value: Any) -> None:
        """Record value as the last persisted value of the attribute."""
        set_committed_value(self, name, value)

    def get_dirty_attributes(self) -> Dict[str, Any]:
        """Get column attributes modified since they were loaded or last flushed."""
        state = sa_inspect(self)
        column_keys = set(self._column_keys())
        return {
            attr.key: attr.value
            for attr in state.attrs
            if attr.key in column_keys and attr.history.has_changes()
        }

    def get_old_primary_key(self) -> Dict[str, Any]:
        """Get the primary key of the persisted row as attribute name/value pairs."""
        state = sa_inspect(self)
        if state.identity is None:
            raise AuditError.record_not_persisted(type(self).__name__)
        mapper = state.mapper
        return {
            mapper.get_property_by_column(column).key: value
            for column, value in zip(mapper.primary_key, state.identity)
        }

    # ==================== STORAGE ====================

    def optimistic_lock(self) -> Optional[str]:
        return getattr(type(self), "__optimistic_lock__", None)

    def is_transactional(self, operation: str) -> bool:
        return operation in getattr(type(self), "__transactional_ops__", ())

    def _require_session(self):
        session = object_session(self)
        if session is None:
            raise AuditError.record_not_persisted(type(self).__name__)
        return session

    def begin_transaction(self):
        """
        Begin a transaction, or a savepoint when one is already in progress.

        The savepoint is opened on the session's connection, so pending
        changes are not flushed ahead of the soft-delete guards.
        """
        session = self._require_session()
        if session.in_transaction():
            return session.connection().begin_nested()
        return session.begin()

    def expire_attributes(self) -> None:
        """Drop loaded attribute values so the next access reloads them."""
        session = object_session(self)
        if session is not None and sa_inspect(self).persistent:
            session.expire(self)

    def update_all(self, values: Dict[str, Any], condition: Dict[str, Any]) -> int:
        """Update rows of this record's table matching condition. Returns the affected row count."""
        session = self._require_session()
        model = type(self)
        stmt = (
            update(model)
            .where(*[getattr(model, name) == value for name, value in condition.items()])
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with session.no_autoflush:
            result = session.execute(stmt)
        return result.rowcount

    def update_attributes(self, values: Dict[str, Any]) -> int:
        """Write values straight to this record's row, bypassing the flush lifecycle."""
        if not values:
            return 0
        rows = self.update_all(values, self.get_old_primary_key())
        for name, value in values.items():
            self.set_old_attribute(name, value)
        return rows

    # ==================== DELETION ====================

    def before_delete(self) -> bool:
        """Raise the cancelable before_delete event. Returns whether deletion may proceed."""
        return self.trigger(EVENT_BEFORE_DELETE, ModelEvent()).is_valid

    def after_delete(self) -> None:
        self.trigger(EVENT_AFTER_DELETE)

    def delete(self) -> Union[int, bool]:
        """
        Delete the row physically unless a before_delete handler cancels it.

        With an AuditHook attached the handler soft deletes instead, so this
        returns False and the row stays.
        """
        session = self._require_session()
        if not self.before_delete():
            return False
        session.delete(self)
        session.flush()
        self.after_delete()
        return 1

    def soft_delete(self) -> Union[int, bool]:
        """Soft delete through the attached AuditHook."""
        hook = self.get_behavior(AuditHook)
        if hook is None:
            raise AuditError.behavior_not_attached(type(self).__name__)
        return hook.soft_delete()


# ==================== FLUSH EVENT BRIDGE ====================

@event.listens_for(AuditedRecord, "before_insert", propagate=True)
def _before_insert(mapper, connection, target):
    target.trigger(EVENT_BEFORE_INSERT)


@event.listens_for(AuditedRecord, "after_insert", propagate=True)
def _after_insert(mapper, connection, target):
    target.trigger(EVENT_AFTER_INSERT)


@event.listens_for(AuditedRecord, "before_update", propagate=True)
def _before_update(mapper, connection, target):
    target.trigger(EVENT_BEFORE_UPDATE)


@event.listens_for(AuditedRecord, "after_update", propagate=True)
def _after_update(mapper, connection, target):
    target.trigger(EVENT_AFTER_UPDATE)
