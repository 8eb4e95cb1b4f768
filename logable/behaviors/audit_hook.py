"""
Audit behavior for records: stamps created/updated/deleted timestamps and
actor ids on lifecycle events, and replaces physical deletion with a soft
delete that respects optimistic locking and transactional declarations.

Attach it by returning it from the record's ``behaviors()``:

    class Document(AuditedRecord, BaseModel):
        def behaviors(self):
            return [AuditHook(preserve_non_empty_values=True)]

The owner is anything offering the record capability interface:
``get_attribute``/``set_attribute``, ``get_dirty_attributes``,
``get_old_primary_key``, ``optimistic_lock``, ``update_attributes``,
``update_all``, ``set_old_attribute``, ``before_delete``/``after_delete``,
``on``/``off``/``trigger`` and, optionally, ``has_attribute``,
``is_transactional``, ``begin_transaction`` and ``expire_attributes``.
"""

import logging
import weakref
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from logable.behaviors.attributes import (
    CREATED_AT,
    CREATED_BY,
    DELETED_AT,
    DELETED_BY,
    UPDATED_AT,
    UPDATED_BY,
    AttributeKind,
    AttributeSpec,
    EventAttributeMap,
    build_default_map,
    normalize_attribute_map,
)
from logable.behaviors.lifecycle import (
    EVENT_AFTER_SOFT_DELETE,
    EVENT_BEFORE_DELETE,
    EVENT_BEFORE_SOFT_DELETE,
    EVENT_BEFORE_UPDATE,
    OP_DELETE,
    OP_UPDATE,
    EventHandler,
    ModelEvent,
)
from logable.core.config import get_settings
from logable.core.context import ContextActorProvider, SystemClock
from logable.core.errors import AuditError

logger = logging.getLogger(__name__)

_UNSET = object()

SlotValue = Union[AttributeSpec, Mapping[str, Any], None, bool]
SoftDeleteResult = Union[int, bool]


def _is_empty(value: Any) -> bool:
    return not value


class AuditHook:
    """Fills audit attributes and performs soft deletion for its owner record."""

    def __init__(
        self,
        created_at_attribute: SlotValue = CREATED_AT,
        updated_at_attribute: SlotValue = UPDATED_AT,
        deleted_at_attribute: SlotValue = DELETED_AT,
        created_by_attribute: SlotValue = CREATED_BY,
        updated_by_attribute: SlotValue = UPDATED_BY,
        deleted_by_attribute: SlotValue = DELETED_BY,
        attributes: Optional[Mapping[str, Any]] = None,
        skip_update_on_clean: Optional[bool] = None,
        preserve_non_empty_values: Optional[bool] = None,
        timestamp_value: Any = None,
        id_value: Any = None,
        clock: Any = _UNSET,
        actor_provider: Any = _UNSET,
        replace_regular_delete: Optional[bool] = None,
    ):
        settings = get_settings()

        self.created_at_attribute = AttributeSpec.coerce(created_at_attribute)
        self.updated_at_attribute = AttributeSpec.coerce(updated_at_attribute)
        self.deleted_at_attribute = AttributeSpec.coerce(deleted_at_attribute)
        self.created_by_attribute = AttributeSpec.coerce(created_by_attribute)
        self.updated_by_attribute = AttributeSpec.coerce(updated_by_attribute)
        self.deleted_by_attribute = AttributeSpec.coerce(deleted_by_attribute)

        if attributes:
            self.attributes: EventAttributeMap = normalize_attribute_map(attributes)
        else:
            self.attributes = build_default_map(
                self.created_at_attribute,
                self.updated_at_attribute,
                self.deleted_at_attribute,
                self.created_by_attribute,
                self.updated_by_attribute,
                self.deleted_by_attribute,
            )

        self.skip_update_on_clean = (
            settings.audit_skip_update_on_clean if skip_update_on_clean is None else skip_update_on_clean
        )
        self.preserve_non_empty_values = (
            settings.audit_preserve_non_empty_values
            if preserve_non_empty_values is None
            else preserve_non_empty_values
        )
        self.replace_regular_delete = (
            settings.audit_replace_regular_delete if replace_regular_delete is None else replace_regular_delete
        )
        self.timestamp_value = timestamp_value
        self.id_value = id_value
        self.clock = SystemClock() if clock is _UNSET else clock
        self.actor_provider = ContextActorProvider() if actor_provider is _UNSET else actor_provider

        self._owner_ref = None
        self._subscriptions: Tuple[Tuple[str, EventHandler], ...] = ()
        self._soft_deleting = False

    # ==================== ATTACHMENT ====================

    @property
    def owner(self):
        """The record this behavior is attached to."""
        owner = self._owner_ref() if self._owner_ref is not None else None
        if owner is None:
            raise AuditError.behavior_not_attached()
        return owner

    @property
    def is_attached(self) -> bool:
        return self._owner_ref is not None and self._owner_ref() is not None

    def events(self) -> Dict[str, EventHandler]:
        """Map each owner event to the handler this behavior subscribes."""
        handlers = {name: self.handle for name in self.attributes}
        if self.replace_regular_delete:
            handlers[EVENT_BEFORE_DELETE] = self.before_delete
        return handlers

    def attach(self, owner) -> None:
        """Bind to an owner and subscribe to its events."""
        if self.is_attached:
            self.detach()
        self._owner_ref = weakref.ref(owner)
        subscriptions = tuple(self.events().items())
        for name, handler in subscriptions:
            owner.on(name, handler)
        self._subscriptions = subscriptions

    def detach(self) -> None:
        """Unsubscribe from the owner's events and drop the reference."""
        owner = self._owner_ref() if self._owner_ref is not None else None
        if owner is not None:
            for name, handler in self._subscriptions:
                owner.off(name, handler)
        self._subscriptions = ()
        self._owner_ref = None

    # ==================== FIELD STAMPING ====================

    def get_timestamp_value(self, event: ModelEvent) -> Any:
        """Resolve the timestamp, falling back to the clock when no override is set."""
        if self.timestamp_value is None:
            return self.clock.now() if self.clock is not None else None
        if callable(self.timestamp_value):
            return self.timestamp_value(event)
        return self.timestamp_value

    def get_id_value(self, event: ModelEvent) -> Any:
        """Resolve the actor id, falling back to the actor provider when no override is set."""
        if self.id_value is None:
            return self.actor_provider.get_actor_id() if self.actor_provider is not None else None
        if callable(self.id_value):
            return self.id_value(event)
        return self.id_value

    def handle(self, event: ModelEvent) -> None:
        """Evaluate the attributes configured for the event and assign their values."""
        owner = self.owner
        if (
            self.skip_update_on_clean
            and event.name == EVENT_BEFORE_UPDATE
            and not owner.get_dirty_attributes()
        ):
            return

        specs = self.attributes.get(event.name)
        if not specs:
            return

        target = event.values
        resolved: Dict[AttributeKind, Any] = {}
        resolvers: Dict[AttributeKind, Callable[[ModelEvent], Any]] = {
            AttributeKind.TIMESTAMP: self.get_timestamp_value,
            AttributeKind.USER_ID: self.get_id_value,
        }

        for spec in specs:
            if not self._accepts(owner, spec.name):
                logger.debug(f"Skipping {spec.name}: not an attribute of {type(owner).__name__}")
                continue

            if self.preserve_non_empty_values:
                if target is not None and spec.name in target:
                    current = target[spec.name]
                else:
                    current = owner.get_attribute(spec.name)
                if not _is_empty(current):
                    continue

            if spec.kind not in resolved:
                resolved[spec.kind] = resolvers[spec.kind](event)
            value = resolved[spec.kind]

            if target is not None:
                target[spec.name] = value
            else:
                owner.set_attribute(spec.name, value)
            logger.debug(f"Stamped {spec.name} on {type(owner).__name__} for {event.name}")

    # ==================== SOFT DELETE ====================

    def soft_delete(self) -> SoftDeleteResult:
        """
        Mark the owner as deleted.

        Returns:
            int | bool: number of rows marked as deleted, or False when a guard
            rejected the deletion. Zero rows is a successful outcome.

        Raises:
            StaleObjectError: optimistic locking is enabled and the record is outdated
        """
        owner = self.owner
        if not self._is_transactional(OP_DELETE) and not self._is_transactional(OP_UPDATE):
            return self._run_soft_delete()

        transaction = self._begin_transaction()
        if transaction is None:
            return self._run_soft_delete()

        try:
            result = self._run_soft_delete()
        except BaseException:
            transaction.rollback()
            self._discard_written_values()
            logger.error(f"Soft delete of {type(owner).__name__} failed, transaction rolled back")
            raise

        if result is False:
            transaction.rollback()
        else:
            transaction.commit()
        return result

    def _run_soft_delete(self) -> SoftDeleteResult:
        owner = self.owner
        self._soft_deleting = True
        try:
            if not owner.before_delete():
                logger.debug(f"Soft delete of {type(owner).__name__} rejected by before_delete")
                return False
            result = self.soft_delete_internal()
            owner.after_delete()
        finally:
            self._soft_deleting = False
        return result

    def soft_delete_internal(self) -> SoftDeleteResult:
        """
        Write the soft-delete markers.

        The owner's dirty attributes form the pending write set; the deleted
        markers are stamped into it while the before_soft_delete event runs.
        """
        values = dict(self.owner.get_dirty_attributes())
        result = False
        if self.before_soft_delete(values):
            result = self.update_attributes(values)
            self.after_soft_delete()
            logger.info(f"Soft deleted {type(self.owner).__name__} ({result} row(s))")
        return result

    def before_soft_delete(self, values: Optional[Dict[str, Any]] = None) -> bool:
        """
        Invoked before soft deleting a record.

        Calls the owner's own before_soft_delete() when it defines one, then
        raises the cancelable before_soft_delete event.

        Returns:
            bool: whether the record should be soft deleted
        """
        owner = self.owner
        owner_hook = getattr(owner, "before_soft_delete", None)
        if callable(owner_hook) and not owner_hook():
            logger.debug(f"Soft delete of {type(owner).__name__} rejected by the record")
            return False
        event = owner.trigger(EVENT_BEFORE_SOFT_DELETE, ModelEvent(values=values))
        if not event.is_valid:
            logger.debug(f"Soft delete of {type(owner).__name__} rejected by an observer")
        return event.is_valid

    def after_soft_delete(self) -> None:
        """Invoked after soft deleting a record. Raises the after_soft_delete event."""
        owner = self.owner
        owner_hook = getattr(owner, "after_soft_delete", None)
        if callable(owner_hook):
            owner_hook()
        owner.trigger(EVENT_AFTER_SOFT_DELETE)

    def update_attributes(self, attributes: Mapping[str, Any]) -> int:
        """
        Persist attributes, taking the owner's optimistic lock into account.

        Returns:
            int: the number of rows affected

        Raises:
            StaleObjectError: the lock value no longer matches the stored row
        """
        owner = self.owner
        lock = owner.optimistic_lock()
        if lock is None:
            return owner.update_attributes(dict(attributes))

        attributes = dict(attributes)
        current = owner.get_attribute(lock)
        condition = dict(owner.get_old_primary_key())
        condition[lock] = current
        attributes[lock] = (current or 0) + 1

        rows = owner.update_all(attributes, condition)
        if not rows:
            logger.warning(f"Stale {type(owner).__name__} detected for condition {condition}")
            raise AuditError.stale_object(type(owner).__name__, condition)

        for name, value in attributes.items():
            owner.set_attribute(name, value)
            owner.set_old_attribute(name, value)
        return rows

    def before_delete(self, event: ModelEvent) -> None:
        """Handle the owner's before_delete event: soft delete and cancel the physical delete."""
        if self._soft_deleting:
            return
        logger.debug(f"Redirecting delete of {type(self.owner).__name__} to soft delete")
        self.soft_delete_internal()
        event.is_valid = False

    # ==================== TRANSACTIONS ====================

    def _is_transactional(self, operation: str) -> bool:
        is_transactional = getattr(self.owner, "is_transactional", None)
        if not callable(is_transactional):
            return False
        return bool(is_transactional(operation))

    def _begin_transaction(self):
        begin_transaction = getattr(self.owner, "begin_transaction", None)
        if not callable(begin_transaction):
            return None
        return begin_transaction()

    def _discard_written_values(self) -> None:
        # Values applied after a rolled back write no longer match the row
        expire_attributes = getattr(self.owner, "expire_attributes", None)
        if callable(expire_attributes):
            expire_attributes()

    def _accepts(self, owner, name: str) -> bool:
        has_attribute = getattr(owner, "has_attribute", None)
        if not callable(has_attribute):
            return True
        return bool(has_attribute(name))
