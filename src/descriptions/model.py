"""Immutable model of an API description.

A ``Description`` maps path templates to ``Path`` objects, each of which maps
HTTP methods to an ``Operation``. Operations own their ordered parameters
and a request schema that describes the whole parameter set at once.

Descriptions are shared by every request that hits their operations, so
nothing here can be mutated after construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from src.core.exceptions import OperationNotFoundError, UnsupportedLocationError
from src.descriptions.schema import ObjectSchema, Schema


class ParameterLocation(StrEnum):
    """Where a parameter's raw value is read from."""

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    BODY = "body"

    @classmethod
    def parse(cls, value: object, parameter: str | None = None) -> ParameterLocation:
        """Map a declared ``in`` value to a location.

        Args:
            value: The declared location.
            parameter: Name of the declaring parameter, for the error message.

        Returns:
            ParameterLocation: The matching location.

        Raises:
            UnsupportedLocationError: If the value is not a supported location.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise UnsupportedLocationError(value, parameter) from e


@dataclass(frozen=True)
class Parameter:
    """A single declared operation parameter.

    ``pointer`` is the JSON pointer of the declaration within its document,
    e.g. ``/paths/~1pets/get/parameters/0``.
    """

    name: str
    location: ParameterLocation
    schema: Schema
    required: bool = False
    collection_format: str | None = None
    pointer: str = ""


def build_request_schema(parameters: Iterable[Parameter]) -> ObjectSchema:
    """Describe a whole parameter set as one object schema.

    Each parameter becomes a property; required parameters are listed in
    ``required``.

    Args:
        parameters: The operation's parameters.

    Returns:
        ObjectSchema: Schema the assembled parameter object is validated against.
    """
    parameters = tuple(parameters)
    definition = {
        "type": "object",
        "properties": {p.name: p.schema.to_json_schema() for p in parameters},
        "required": [p.name for p in parameters if p.required],
    }
    if not definition["required"]:
        # Draft 4 requires a non-empty list
        del definition["required"]
    schema = Schema.from_definition(definition)
    if not isinstance(schema, ObjectSchema):  # pragma: no cover - always an object
        raise TypeError("Request schema must be an object schema")
    return schema


@dataclass(frozen=True)
class Operation:
    """One HTTP method on one path template."""

    path: str
    method: str
    operation_id: str
    parameters: tuple[Parameter, ...] = ()
    summary: str = ""
    request_schema: ObjectSchema = field(
        default_factory=lambda: build_request_schema(()), repr=False
    )

    @classmethod
    def create(
        cls,
        path: str,
        method: str,
        parameters: Iterable[Parameter] = (),
        operation_id: str | None = None,
        summary: str = "",
    ) -> Operation:
        """Build an operation and derive its request schema.

        Args:
            path: The path template, e.g. ``/pets/{petId}``.
            method: HTTP method (any case).
            parameters: Declared parameters in declaration order.
            operation_id: Declared operationId; derived from method and path
                when missing.
            summary: Short human description.

        Returns:
            Operation: The new operation.
        """
        parameters = tuple(parameters)
        return cls(
            path=path,
            method=method.lower(),
            operation_id=operation_id or fallback_operation_id(method, path),
            parameters=parameters,
            summary=summary,
            request_schema=build_request_schema(parameters),
        )

    def find_parameter(self, name: str) -> Parameter | None:
        """Return the parameter with this name, or None."""
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def get_parameter(self, name: str) -> Parameter:
        """Return the parameter with this name.

        Raises:
            KeyError: If the operation declares no such parameter.
        """
        parameter = self.find_parameter(name)
        if parameter is None:
            msg = f"Operation '{self.operation_id}' has no parameter '{name}'"
            raise KeyError(msg)
        return parameter

    @property
    def body_parameter(self) -> Parameter | None:
        """The parameter read from the request body, if declared."""
        for parameter in self.parameters:
            if parameter.location is ParameterLocation.BODY:
                return parameter
        return None


def fallback_operation_id(method: str, path: str) -> str:
    """Derive an operation id for operations that do not declare one."""
    sanitized = path.strip("/").replace("/", "_").replace("{", "").replace("}", "")
    return f"{method.lower()}_{sanitized or 'root'}"


@dataclass(frozen=True)
class Path:
    """A path template and the operations declared on it."""

    template: str
    operations: Mapping[str, Operation] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def get_operation(self, method: str) -> Operation:
        """Return the operation for an HTTP method (case-insensitive).

        Raises:
            OperationNotFoundError: If no operation is declared for the method.
        """
        try:
            return self.operations[method.lower()]
        except KeyError:
            raise OperationNotFoundError(self.template, method) from None


@dataclass(frozen=True)
class Description:
    """A loaded API description, identified by its document URI."""

    uri: str
    paths: Mapping[str, Path] = field(default_factory=lambda: MappingProxyType({}))
    title: str = ""
    version: str = ""

    def get_path(self, template: str) -> Path:
        """Return the path declared under this template.

        Raises:
            OperationNotFoundError: If the template is not declared.
        """
        try:
            return self.paths[template]
        except KeyError:
            raise OperationNotFoundError(template) from None

    @property
    def operations(self) -> Iterator[Operation]:
        """All operations, path by path in declaration order."""
        for path in self.paths.values():
            yield from path.operations.values()
