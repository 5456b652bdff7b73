"""Conversion of validated values into typed Python objects.

- **DateTimeSerializer**: ``date-time``/``date`` strings to ``datetime``/``date``
- **ObjectHydrator**: JSON bodies to pydantic model instances, recursively

Both are lenient: a value that does not fit its schema is returned as is,
because the validator has already reported it.
"""

import keyword
import re
from datetime import date, datetime
from typing import Any, Final

from loguru import logger
from pydantic import BaseModel, ConfigDict, create_model

from src.descriptions.schema import ArraySchema, ObjectSchema, ScalarSchema, Schema

MODEL_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^0-9a-zA-Z_]")
# RFC 3339 full-date, and date-time with a full time part and an offset
DATE_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
DATE_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?"
    r"(?:Z|[+-][0-9]{2}:[0-9]{2})",
    re.IGNORECASE,
)


def parse_temporal(value: str, value_format: str | None) -> date | datetime:
    """Parse a string according to a ``date``/``date-time`` format.

    Values must have the RFC 3339 shape; compact, week-date, date-only and
    naive forms that ``fromisoformat`` would also accept are rejected.

    Args:
        value: The string to parse.
        value_format: ``date`` for calendar dates, anything else for timestamps.

    Returns:
        date | datetime: The parsed value.

    Raises:
        ValueError: If the string is not a valid date or RFC 3339 timestamp.
    """
    if value_format == "date":
        if not DATE_PATTERN.fullmatch(value):
            msg = f"{value!r} is not an RFC 3339 full-date"
            raise ValueError(msg)
        return date.fromisoformat(value)
    if not DATE_TIME_PATTERN.fullmatch(value):
        msg = f"{value!r} is not an RFC 3339 date-time"
        raise ValueError(msg)
    return datetime.fromisoformat(value.upper())


class DateTimeSerializer:
    """Deserializes temporal strings declared by ``date-time``/``date`` schemas."""

    def deserialize(self, value: Any, schema: ScalarSchema) -> Any:  # noqa: ANN401
        """Return the temporal value for a string, or the value unchanged.

        Args:
            value: The (usually string) parameter value.
            schema: The parameter's scalar schema.

        Returns:
            Any: A ``date``/``datetime`` when the string parses, else ``value``.
        """
        if not isinstance(value, str):
            return value
        try:
            return parse_temporal(value, schema.format)
        except ValueError:
            logger.debug("Leaving unparseable {} value {!r} as string", schema.format, value)
            return value


def _is_field_name(name: str) -> bool:
    """Whether a property can be declared as a model field.

    Other properties are still kept as extra attributes of the model.
    """
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith(("_", "model_"))
        and not hasattr(BaseModel, name)
    )


class ObjectHydrator:
    """Builds pydantic model instances from decoded JSON bodies.

    One model class is generated per object schema and reused for every
    body of that schema. Declared properties become fields, undeclared ones
    are kept as extras. Values are not validated again on construction.
    """

    def __init__(self, date_time_serializer: DateTimeSerializer | None = None) -> None:
        self.date_time_serializer = date_time_serializer or DateTimeSerializer()
        self._models: dict[int, tuple[ObjectSchema, type[BaseModel]]] = {}

    def hydrate(self, data: Any, schema: Schema) -> Any:  # noqa: ANN401
        """Convert a decoded JSON value according to its schema.

        Args:
            data: Decoded JSON value.
            schema: The schema describing it.

        Returns:
            Any: Model instances for objects, lists for arrays, temporal
            values for date formats and everything else unchanged.
        """
        match schema:
            case ObjectSchema() if isinstance(data, dict):
                values = {
                    name: self.hydrate(value, schema.properties[name])
                    if name in schema.properties
                    else value
                    for name, value in data.items()
                }
                return self.model_for(schema).model_construct(**values)
            case ArraySchema() if isinstance(data, list):
                return [self.hydrate(item, schema.items) for item in data]
            case ScalarSchema() if schema.is_date_time:
                return self.date_time_serializer.deserialize(data, schema)
            case _:
                return data

    def model_for(self, schema: ObjectSchema) -> type[BaseModel]:
        """Return the model class generated for an object schema."""
        cached = self._models.get(id(schema))
        if cached is not None and cached[0] is schema:
            return cached[1]

        title = schema.definition.get("title")
        name = MODEL_NAME_PATTERN.sub("_", title) if isinstance(title, str) and title else ""
        fields: dict[str, Any] = {
            prop: (Any, None) for prop in schema.properties if _is_field_name(prop)
        }
        model = create_model(  # type: ignore[call-overload]
            name or f"Body{len(self._models) + 1}",
            __config__=ConfigDict(extra="allow"),
            **fields,
        )
        self._models[id(schema)] = (schema, model)
        return model
