"""Protocols for the collaborators of the request processor.

The processor only talks to these narrow interfaces; the default
implementations live next to it, and tests substitute mocks.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from src.core.types import ParameterBag
from src.descriptions.model import Description, Operation, Parameter
from src.descriptions.schema import ScalarSchema, Schema
from src.request.validation import ValidationResult


class DescriptionRepositoryProtocol(Protocol):
    """Looks up descriptions by document identifier."""

    def get(self, uri: str) -> Description:
        """Return the description, or raise DocumentNotFoundError."""
        ...


class ParameterAssemblerProtocol(Protocol):
    """Builds the candidate parameter set of an operation."""

    def assemble(
        self,
        operation: Operation,
        query: ParameterBag,
        attributes: ParameterBag,
        headers: ParameterBag,
        body: Any,  # noqa: ANN401 - decoded JSON
    ) -> Mapping[str, Any]:
        """Return parameter name to (coerced) value."""
        ...


class SchemaValidatorProtocol(Protocol):
    """Validates a candidate value against a schema."""

    def validate(self, schema: Schema, candidate: Any) -> ValidationResult:  # noqa: ANN401
        """Return the validation outcome with every error message."""
        ...


class ObjectHydratorProtocol(Protocol):
    """Turns a decoded JSON body into typed objects."""

    def hydrate(self, data: Any, schema: Schema) -> Any:  # noqa: ANN401
        """Return the hydrated value."""
        ...


class DateTimeDeserializerProtocol(Protocol):
    """Turns temporal strings into date/datetime values."""

    def deserialize(self, value: Any, schema: ScalarSchema) -> Any:  # noqa: ANN401
        """Return the temporal value."""
        ...


class ParameterRefBuilderProtocol(Protocol):
    """Links parameters to their declarations in a published description."""

    def build(self, description: Description, parameter: Parameter) -> str:
        """Return the URL of the parameter's declaration."""
        ...
