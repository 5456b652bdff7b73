"""Coercion of raw string input into schema-declared primitive types.

Coercion is opportunistic: a value that does not parse is left exactly as it
arrived so that schema validation reports a clear type mismatch instead of
the coercer rejecting (or silently dropping) it.

Rules for scalar schemas:
- ``integer``: base-10 signed integer (``"42"``, ``"-7"``, ``"+3"``)
- ``number``: decimal or scientific notation, parsed as float
- ``boolean``: exactly ``"true"`` or ``"false"``, case-sensitive
- ``string``: unchanged; ``date-time``/``date`` formats are converted later
  by the request processor

Object and array schemas pass the raw value through unchanged.
"""

import re
from collections.abc import MutableMapping
from typing import Any, Final

from src.core.exceptions import UnsupportedLocationError
from src.core.types import ParameterBag
from src.descriptions.model import Operation, ParameterLocation
from src.descriptions.schema import ScalarSchema, Schema
from src.request.message import ApiRequest

INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
BOOLEAN_LITERALS: Final[dict[str, bool]] = {"true": True, "false": False}


def coerce_parameter(schema: Schema, raw_value: Any) -> Any:  # noqa: ANN401
    """Convert one raw value to the primitive type its schema declares.

    Args:
        schema: The parameter's schema.
        raw_value: The raw value, normally a string or list of strings.

    Returns:
        Any: The coerced value, or ``raw_value`` if it could not be coerced.
    """
    if not isinstance(schema, ScalarSchema) or not isinstance(raw_value, str):
        return raw_value

    match schema.type:
        case "integer":
            if INTEGER_PATTERN.fullmatch(raw_value):
                try:
                    return int(raw_value)
                except ValueError:
                    # beyond the interpreter's integer string conversion limit
                    return raw_value
        case "number":
            if NUMBER_PATTERN.fullmatch(raw_value):
                return float(raw_value)
        case "boolean":
            return BOOLEAN_LITERALS.get(raw_value, raw_value)

    return raw_value


class RequestCoercer:
    """Writes coerced parameter values into an attribute store.

    Each parameter's raw value is taken from the one bag its location names.
    Absent parameters are skipped: requiredness is the validator's job.
    """

    def coerce(
        self,
        operation: Operation,
        query: ParameterBag,
        path_attributes: ParameterBag,
        headers: ParameterBag,
        body: Any,  # noqa: ANN401 - decoded JSON
        target: MutableMapping[str, Any],
    ) -> None:
        """Coerce every declared parameter present in its bag into ``target``.

        Args:
            operation: The operation whose parameters are read.
            query: Query values.
            path_attributes: Attributes holding the path parameters.
            headers: Header values (names compared case-insensitively).
            body: The decoded JSON body, or None.
            target: Mapping the coerced values are written to.

        Raises:
            UnsupportedLocationError: If a parameter has an unknown location.
        """
        lowered_headers = {name.lower(): value for name, value in headers.items()}

        for parameter in operation.parameters:
            name = parameter.name

            match parameter.location:
                case ParameterLocation.BODY:
                    if body is not None:
                        target[name] = body
                    continue
                case ParameterLocation.QUERY:
                    bag, key = query, name
                case ParameterLocation.PATH:
                    bag, key = path_attributes, name
                case ParameterLocation.HEADER:
                    bag, key = lowered_headers, name.lower()
                case unknown:
                    raise UnsupportedLocationError(unknown, name)

            if key not in bag:
                continue
            target[name] = coerce_parameter(parameter.schema, bag[key])

    def coerce_request(
        self,
        operation: Operation,
        request: ApiRequest,
        body: Any = None,  # noqa: ANN401 - decoded JSON
    ) -> None:
        """Coerce a request's parameters into its own attribute store."""
        self.coerce(
            operation,
            request.query,
            request.attributes,
            request.headers,
            body,
            request.attributes,
        )
