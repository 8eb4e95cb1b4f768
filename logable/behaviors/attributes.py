"""
Audit attribute slots and the event-to-attribute wiring.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logable.behaviors.lifecycle import (
    EVENT_BEFORE_INSERT,
    EVENT_BEFORE_SOFT_DELETE,
    EVENT_BEFORE_UPDATE,
)
from logable.core.errors import AuditError


class AttributeKind(str, Enum):
    """Source of the value written into an audit attribute."""

    TIMESTAMP = "timestamp"
    USER_ID = "userId"


class AttributeSpec(BaseModel):
    """One audit slot: the attribute to fill and where its value comes from."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Attribute receiving the value")
    kind: AttributeKind = Field(description="Value source")

    @classmethod
    def coerce(cls, value: Any) -> Optional["AttributeSpec"]:
        """
        Build a spec from a configuration value.

        Accepts an AttributeSpec, a mapping with ``name`` and ``kind`` (or the
        legacy ``type`` key), or None/False for a disabled slot.
        """
        if value is None or value is False:
            return None
        if isinstance(value, AttributeSpec):
            return value
        if not isinstance(value, Mapping):
            raise AuditError.invalid_attribute_spec(
                "expected an AttributeSpec or a mapping with 'name' and 'kind'", value
            )
        data = dict(value)
        if "kind" not in data and "type" in data:
            data["kind"] = data.pop("type")
        try:
            return cls(**data)
        except ValidationError as e:
            raise AuditError.invalid_attribute_spec(str(e), value) from e


EventAttributeMap = Dict[str, Tuple[AttributeSpec, ...]]

# Default slots
CREATED_AT = AttributeSpec(name="created_at", kind=AttributeKind.TIMESTAMP)
UPDATED_AT = AttributeSpec(name="updated_at", kind=AttributeKind.TIMESTAMP)
DELETED_AT = AttributeSpec(name="deleted_at", kind=AttributeKind.TIMESTAMP)
CREATED_BY = AttributeSpec(name="creator_id", kind=AttributeKind.USER_ID)
UPDATED_BY = AttributeSpec(name="updater_id", kind=AttributeKind.USER_ID)
DELETED_BY = AttributeSpec(name="deleter_id", kind=AttributeKind.USER_ID)


def _present(specs: Iterable[Optional[AttributeSpec]]) -> Tuple[AttributeSpec, ...]:
    return tuple(spec for spec in specs if spec is not None)


def build_default_map(
    created_at: Optional[AttributeSpec],
    updated_at: Optional[AttributeSpec],
    deleted_at: Optional[AttributeSpec],
    created_by: Optional[AttributeSpec],
    updated_by: Optional[AttributeSpec],
    deleted_by: Optional[AttributeSpec],
) -> EventAttributeMap:
    """Wire the six slots to insert, update and soft-delete events. Disabled slots are dropped."""
    return {
        EVENT_BEFORE_INSERT: _present([created_at, updated_at, created_by, updated_by]),
        EVENT_BEFORE_UPDATE: _present([updated_at, updated_by]),
        EVENT_BEFORE_SOFT_DELETE: _present([deleted_at, deleted_by]),
    }


def normalize_attribute_map(attributes: Mapping[str, Any]) -> EventAttributeMap:
    """Normalize an override mapping event names to one spec or a list of specs."""
    normalized = {}
    for event_name, value in attributes.items():
        if isinstance(value, (AttributeSpec, Mapping)) or value is None or value is False:
            values = [value]
        elif isinstance(value, str):
            raise AuditError.invalid_attribute_spec(
                f"attribute '{value}' for event '{event_name}' has no kind", value
            )
        else:
            values = list(value)
        normalized[event_name] = _present(AttributeSpec.coerce(v) for v in values)
    return normalized
