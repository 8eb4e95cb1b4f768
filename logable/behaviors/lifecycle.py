"""
Record lifecycle vocabulary: event names, operation names, the event object
and the per-instance event dispatcher that behaviors subscribe to.
"""

from typing import Any, Callable, Dict, List, Optional


# Lifecycle events
EVENT_BEFORE_INSERT = "before_insert"
EVENT_AFTER_INSERT = "after_insert"
EVENT_BEFORE_UPDATE = "before_update"
EVENT_AFTER_UPDATE = "after_update"
EVENT_BEFORE_DELETE = "before_delete"
EVENT_AFTER_DELETE = "after_delete"
EVENT_BEFORE_SOFT_DELETE = "before_soft_delete"
EVENT_AFTER_SOFT_DELETE = "after_soft_delete"

# Operations that a record may declare as transactional
OP_INSERT = "insert"
OP_UPDATE = "update"
OP_DELETE = "delete"
OP_ALL = frozenset({OP_INSERT, OP_UPDATE, OP_DELETE})

EventHandler = Callable[["ModelEvent"], Any]


class ModelEvent:
    """
    Event raised by a record.

    Handlers veto a cancelable event by setting ``is_valid`` to False and stop
    further dispatch by setting ``handled`` to True. ``values`` carries a
    pending write set when the event precedes a direct attribute update.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        sender: Any = None,
        data: Any = None,
        values: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.sender = sender
        self.data = data
        self.values = values
        self.is_valid = True
        self.handled = False

    def __repr__(self):
        return f"<ModelEvent(name='{self.name}', is_valid={self.is_valid})>"


class EventDispatcher:
    """
    Mixin giving an object named events and attached behaviors.

    Handler lists and behaviors live in the instance ``__dict__`` and are
    created on first use, because ORM-loaded instances never run ``__init__``.
    """

    def behaviors(self) -> List[Any]:
        """Return the behaviors to attach to this instance. Override in subclasses."""
        return []

    def _event_handlers(self) -> Dict[str, List[EventHandler]]:
        handlers = self.__dict__.get("_logable_handlers")
        if handlers is None:
            handlers = {}
            self.__dict__["_logable_handlers"] = handlers
        return handlers

    def ensure_behaviors(self) -> List[Any]:
        """Attach the behaviors declared by behaviors() once per instance."""
        attached = self.__dict__.get("_logable_behaviors")
        if attached is None:
            attached = []
            self.__dict__["_logable_behaviors"] = attached
            for behavior in self.behaviors():
                behavior.attach(self)
                attached.append(behavior)
        return attached

    def get_behavior(self, behavior_class: type) -> Optional[Any]:
        """Get the first attached behavior of the given type."""
        for behavior in self.ensure_behaviors():
            if isinstance(behavior, behavior_class):
                return behavior
        return None

    def on(self, name: str, handler: EventHandler) -> None:
        """Subscribe a handler to a named event."""
        self.ensure_behaviors()
        self._event_handlers().setdefault(name, []).append(handler)

    def off(self, name: str, handler: Optional[EventHandler] = None) -> bool:
        """Unsubscribe one handler, or every handler when none is given."""
        handlers = self._event_handlers()
        if name not in handlers:
            return False
        if handler is None:
            del handlers[name]
            return True
        remaining = [h for h in handlers[name] if h != handler]
        removed = len(remaining) != len(handlers[name])
        handlers[name] = remaining
        return removed

    def has_handlers(self, name: str) -> bool:
        """Check whether any handler is subscribed to a named event."""
        self.ensure_behaviors()
        return bool(self._event_handlers().get(name))

    def trigger(self, name: str, event: Optional[ModelEvent] = None) -> ModelEvent:
        """Raise a named event and return it after dispatch."""
        self.ensure_behaviors()
        if event is None:
            event = ModelEvent()
        event.name = name
        if event.sender is None:
            event.sender = self
        for handler in list(self._event_handlers().get(name, ())):
            handler(event)
            if event.handled:
                break
        return event
