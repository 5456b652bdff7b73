"""Assembly of the candidate parameter set of an operation.

The assembler reads each declared parameter from its location, coerces it
and fills in schema defaults for absent ones. Non-body array parameters are
split according to their collection format before their items are coerced.
"""

import copy
from typing import Any, Final

from src.core.types import ParameterBag
from src.descriptions.model import Operation, Parameter, ParameterLocation
from src.descriptions.schema import ArraySchema
from src.request.coercion import RequestCoercer, coerce_parameter

COLLECTION_SEPARATORS: Final[dict[str, str]] = {
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
}


def split_collection(value: str, collection_format: str | None) -> list[str]:
    """Split a serialized array parameter into its items.

    ``multi`` arrays arrive as repeated keys, so a single string is one item.
    Unknown formats are treated as ``csv``.

    Args:
        value: The raw parameter string.
        collection_format: ``csv``, ``ssv``, ``tsv``, ``pipes`` or ``multi``.

    Returns:
        list[str]: The items; an empty string yields no items.
    """
    if value == "":
        return []
    if collection_format == "multi":
        return [value]
    return value.split(COLLECTION_SEPARATORS.get(collection_format or "csv", ","))


class RequestParameterAssembler:
    """Builds the parameter object that is validated against the request schema.

    Args:
        coercer: Reads and coerces parameters; a default one is created if
            omitted.
    """

    def __init__(self, coercer: RequestCoercer | None = None) -> None:
        self.coercer = coercer or RequestCoercer()

    def assemble(
        self,
        operation: Operation,
        query: ParameterBag,
        attributes: ParameterBag,
        headers: ParameterBag,
        body: Any,  # noqa: ANN401 - decoded JSON
    ) -> dict[str, Any]:
        """Collect every present (or defaulted) parameter of an operation.

        Args:
            operation: The operation being called.
            query: Query values.
            attributes: Attributes holding the path parameters.
            headers: Header values.
            body: The decoded JSON body, or None.

        Returns:
            dict[str, Any]: Parameter name to coerced value, in declaration
            order.
        """
        coerced: dict[str, Any] = {}
        self.coercer.coerce(operation, query, attributes, headers, body, coerced)

        assembled: dict[str, Any] = {}
        for parameter in operation.parameters:
            if parameter.name in coerced:
                assembled[parameter.name] = self._assemble_value(
                    parameter, coerced[parameter.name]
                )
            elif parameter.schema.has_default:
                assembled[parameter.name] = copy.deepcopy(parameter.schema.default)
        return assembled

    @staticmethod
    def _assemble_value(parameter: Parameter, value: Any) -> Any:  # noqa: ANN401
        schema = parameter.schema
        if not isinstance(schema, ArraySchema) or parameter.location is ParameterLocation.BODY:
            return value
        if isinstance(value, str):
            value = split_collection(value, parameter.collection_format)
        if isinstance(value, list):
            return [coerce_parameter(schema.items, item) for item in value]
        return value
