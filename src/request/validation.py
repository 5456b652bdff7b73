"""JSON-schema validation of assembled request parameters.

Schemas are checked with jsonschema's Draft 4 validator. The ``date-time``
and ``date`` formats are enforced with the same parser the temporal
deserializer uses, so every string that passes validation also converts.
"""

from dataclasses import dataclass
from typing import Any

from jsonschema import Draft4Validator, FormatChecker
from jsonschema.exceptions import ValidationError as SchemaError

from src.descriptions.schema import Schema
from src.request.hydration import parse_temporal

format_checker = FormatChecker(formats=())


@format_checker.checks("date-time", raises=ValueError)
def _check_date_time(value: object) -> bool:
    if isinstance(value, str):
        parse_temporal(value, "date-time")
    return True


@format_checker.checks("date", raises=ValueError)
def _check_date(value: object) -> bool:
    if isinstance(value, str):
        parse_temporal(value, "date")
    return True


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one candidate.

    Attributes:
        valid: True when the candidate satisfies the schema.
        errors: Human-readable messages, one per violation.
        parameters: Top-level properties of the candidate that the errors
            concern, in error order.
    """

    valid: bool
    errors: tuple[str, ...] = ()
    parameters: tuple[str, ...] = ()

    @classmethod
    def success(cls) -> "ValidationResult":
        """A result without errors."""
        return cls(valid=True)

    @classmethod
    def failure(
        cls,
        errors: list[str] | tuple[str, ...],
        parameters: list[str] | tuple[str, ...] = (),
    ) -> "ValidationResult":
        """A result carrying the given error messages."""
        return cls(valid=False, errors=tuple(errors), parameters=tuple(parameters))


def format_error(error: SchemaError) -> str:
    """Render a jsonschema error as ``path: message``.

    Errors on the candidate itself have no path prefix.
    """
    path = ".".join(str(part) for part in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message


def error_properties(error: SchemaError) -> list[str]:
    """Name the top-level properties an error concerns.

    Errors below the root belong to the first element of their path; a root
    ``required`` error concerns the properties that are missing.
    """
    if error.absolute_path:
        return [str(error.absolute_path[0])]
    if error.validator == "required" and isinstance(error.instance, dict):
        return [name for name in error.validator_value if name not in error.instance]
    return []


class SchemaValidator:
    """Validates candidates and collects every violation, not just the first.

    Compiled validators are reused per schema instance; descriptions are
    immutable, so a schema's validator never goes stale.
    """

    def __init__(self) -> None:
        self._validators: dict[int, tuple[Schema, Draft4Validator]] = {}

    def validate(self, schema: Schema, candidate: Any) -> ValidationResult:  # noqa: ANN401
        """Validate a candidate against a schema.

        Args:
            schema: The schema to check against.
            candidate: The value to check.

        Returns:
            ValidationResult: Valid, or invalid with the error messages sorted
            by location.
        """
        errors = sorted(
            self._validator_for(schema).iter_errors(candidate),
            key=lambda e: ([str(part) for part in e.absolute_path], e.message),
        )
        if not errors:
            return ValidationResult.success()
        parameters = dict.fromkeys(name for e in errors for name in error_properties(e))
        return ValidationResult.failure(
            [format_error(e) for e in errors], list(parameters)
        )

    def _validator_for(self, schema: Schema) -> Draft4Validator:
        cached = self._validators.get(id(schema))
        if cached is not None and cached[0] is schema:
            return cached[1]
        validator = Draft4Validator(schema.to_json_schema(), format_checker=format_checker)
        self._validators[id(schema)] = (schema, validator)
        return validator
