"""Schema descriptors for parameters and request bodies.

A schema is one of three kinds:

- **ScalarSchema**: ``string``, ``integer``, ``number`` or ``boolean``, with an
  optional semantic ``format`` such as ``date-time``
- **ObjectSchema**: named nested schemas under ``properties``
- **ArraySchema**: one nested schema under ``items``

Each schema keeps the JSON-schema definition it was built from, with local
references already resolved, so the validator can use it directly. Schemas
are immutable once built.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

SCALAR_TYPES: Final[frozenset[str]] = frozenset(
    {"string", "integer", "number", "boolean", "null"}
)
TEMPORAL_FORMATS: Final[frozenset[str]] = frozenset({"date-time", "date"})


def _primitive_type(definition: Mapping[str, Any]) -> str | None:
    """Return the declared type, picking the non-null one from a type list."""
    declared = definition.get("type")
    if isinstance(declared, list):
        non_null = [t for t in declared if t != "null"]
        return non_null[0] if non_null else "null"
    return declared


@dataclass(frozen=True)
class Schema:
    """Base class of all schema kinds."""

    definition: Mapping[str, Any] = field(repr=False)

    @property
    def type(self) -> str | None:
        """The declared JSON type."""
        return _primitive_type(self.definition)

    @property
    def format(self) -> str | None:
        """The declared semantic format, if any."""
        return self.definition.get("format")

    @property
    def default(self) -> Any:  # noqa: ANN401 - defaults are arbitrary JSON
        """The declared default value, or None."""
        return self.definition.get("default")

    @property
    def has_default(self) -> bool:
        """Whether the schema declares a default value."""
        return "default" in self.definition

    def to_json_schema(self) -> dict[str, Any]:
        """Return a mutable deep copy of the definition for validators."""
        return copy.deepcopy(dict(self.definition))

    @staticmethod
    def from_definition(definition: Mapping[str, Any]) -> Schema:
        """Build the schema kind matching a (reference-free) definition.

        A definition without ``type`` is an object if it declares
        ``properties``, an array if it declares ``items`` and a string
        otherwise.

        Args:
            definition: JSON-schema definition with local references resolved.

        Returns:
            Schema: A ScalarSchema, ObjectSchema or ArraySchema.
        """
        frozen = MappingProxyType(copy.deepcopy(dict(definition)))
        declared = _primitive_type(frozen)

        if declared == "object" or (declared is None and "properties" in frozen):
            properties = {
                name: Schema.from_definition(sub)
                for name, sub in (frozen.get("properties") or {}).items()
            }
            return ObjectSchema(
                definition=frozen,
                properties=MappingProxyType(properties),
                required=tuple(frozen.get("required") or ()),
            )

        if declared == "array" or (declared is None and "items" in frozen):
            return ArraySchema(
                definition=frozen,
                items=Schema.from_definition(frozen.get("items") or {}),
            )

        return ScalarSchema(definition=frozen)


@dataclass(frozen=True)
class ScalarSchema(Schema):
    """Schema of a single primitive value."""

    @property
    def type(self) -> str:
        """The declared primitive type (``string`` when undeclared)."""
        return _primitive_type(self.definition) or "string"

    @property
    def is_date_time(self) -> bool:
        """Whether values need the temporal deserializer (date-time or date)."""
        return self.type == "string" and self.format in TEMPORAL_FORMATS


@dataclass(frozen=True)
class ObjectSchema(Schema):
    """Schema of a JSON object."""

    properties: Mapping[str, Schema] = field(default_factory=dict)
    required: tuple[str, ...] = ()


@dataclass(frozen=True)
class ArraySchema(Schema):
    """Schema of a JSON array."""

    items: Schema = field(default_factory=lambda: ScalarSchema(MappingProxyType({})))
