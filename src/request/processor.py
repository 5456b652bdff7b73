"""Request processing pipeline.

``RequestProcessor.process`` binds an incoming request to the operation its
routing facts name, assembles and coerces the declared parameters,
validates them against the operation's request schema and writes the typed
values back into the request's attributes. The outcome is returned as a
``ProcessedRequest`` or a ``RejectedRequest``; ``process_or_raise`` turns a
rejection into a ``ValidationError`` for hosts that prefer exceptions.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NoReturn

import orjson
from loguru import logger

from src.core.context import RequestContext
from src.core.exceptions import (
    MalformedContentError,
    MissingRoutingContextError,
    ValidationError,
)
from src.core.types import JsonValue
from src.descriptions.schema import ScalarSchema
from src.request.hydration import DateTimeSerializer
from src.request.interfaces import (
    DateTimeDeserializerProtocol,
    DescriptionRepositoryProtocol,
    ObjectHydratorProtocol,
    ParameterAssemblerProtocol,
    ParameterRefBuilderProtocol,
    SchemaValidatorProtocol,
)
from src.request.message import ApiRequest, RequestMeta
from src.request.validation import ValidationResult


@dataclass(frozen=True)
class ProcessedRequest:
    """A request whose parameters satisfied the operation's schema."""

    meta: RequestMeta
    validation: ValidationResult

    @property
    def valid(self) -> bool:
        """Always True."""
        return True

    @property
    def errors(self) -> tuple[str, ...]:
        """Always empty."""
        return ()

    def raise_for_errors(self) -> None:
        """Do nothing; the request is valid."""


@dataclass(frozen=True)
class RejectedRequest:
    """A request whose parameters violated the operation's schema.

    The request attributes still hold the coerced values, so hosts that
    choose to proceed can inspect what was received. ``parameter_refs`` maps
    each offending parameter to the URL of its declaration, when a reference
    builder is configured.
    """

    meta: RequestMeta
    validation: ValidationResult
    parameter_refs: Mapping[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        """Always False."""
        return False

    @property
    def errors(self) -> tuple[str, ...]:
        """The validation error messages."""
        return self.validation.errors

    def raise_for_errors(self) -> NoReturn:
        """Raise the rejection as a ValidationError."""
        context: dict[str, Any] = {"operation_id": self.meta.operation.operation_id}
        if self.parameter_refs:
            context["parameters"] = dict(self.parameter_refs)
        raise ValidationError(self.validation.errors, context=context)


type ProcessingResult = ProcessedRequest | RejectedRequest


class RequestProcessor:
    """Validates requests against their API description and types their parameters.

    Args:
        repository: Looks up descriptions by document identifier.
        validator: Validates the assembled parameters.
        assembler: Builds the candidate parameter set.
        hydrator: Optional; when given, a parsed JSON body is replaced by its
            hydrated form.
        date_time_serializer: Converts ``date-time``/``date`` parameters.
        parameter_ref_builder: Optional; links offending parameters of a
            rejected request to their declarations.
    """

    def __init__(
        self,
        repository: DescriptionRepositoryProtocol,
        validator: SchemaValidatorProtocol,
        assembler: ParameterAssemblerProtocol,
        hydrator: ObjectHydratorProtocol | None = None,
        date_time_serializer: DateTimeDeserializerProtocol | None = None,
        parameter_ref_builder: ParameterRefBuilderProtocol | None = None,
    ) -> None:
        self.repository = repository
        self.validator = validator
        self.assembler = assembler
        self.hydrator = hydrator
        self.date_time_serializer = date_time_serializer or DateTimeSerializer()
        self.parameter_ref_builder = parameter_ref_builder

    def process(self, request: ApiRequest) -> ProcessingResult:
        """Bind, assemble, validate and type one request.

        Args:
            request: The request; its attributes must hold the document
                identifier and the path template.

        Returns:
            ProcessingResult: ``ProcessedRequest`` when the parameters are
            valid, ``RejectedRequest`` with the error messages otherwise.
            Either way the request attributes hold the coerced parameters
            and the ``RequestMeta``.

        Raises:
            MissingRoutingContextError: If a routing attribute is missing.
            DocumentNotFoundError: If the document is unknown.
            OperationNotFoundError: If the path or method is not declared.
            MalformedContentError: If the body is not valid JSON.
        """
        uri = self._routing_attribute(request, RequestMeta.ATTRIBUTE_URI)
        template = self._routing_attribute(request, RequestMeta.ATTRIBUTE_PATH)

        description = self.repository.get(uri)
        operation = description.get_path(template).get_operation(request.method)
        RequestContext.set_operation_id(operation.operation_id)
        logger.debug(
            "Processing {} {} as operation {}",
            request.method.upper(),
            template,
            operation.operation_id,
        )

        body = self._parse_body(request.content)
        assembled = self.assembler.assemble(
            operation, request.query, request.attributes, request.headers, body
        )
        validation = self.validator.validate(operation.request_schema, dict(assembled))

        for name, value in assembled.items():
            parameter = operation.find_parameter(name)
            if (
                parameter is not None
                and isinstance(parameter.schema, ScalarSchema)
                and parameter.schema.is_date_time
            ):
                value = self.date_time_serializer.deserialize(value, parameter.schema)
            request.attributes[name] = value

        body_parameter = operation.body_parameter
        if self.hydrator is not None and body_parameter is not None and body is not None:
            request.attributes[body_parameter.name] = self.hydrator.hydrate(
                body, body_parameter.schema
            )

        meta = RequestMeta(description=description, operation=operation)
        request.attributes[RequestMeta.ATTRIBUTE] = meta

        if validation.valid:
            return ProcessedRequest(meta=meta, validation=validation)

        logger.debug(
            "Operation {} rejected request with {} validation errors",
            operation.operation_id,
            len(validation.errors),
        )
        return RejectedRequest(
            meta=meta,
            validation=validation,
            parameter_refs=self._parameter_refs(meta, validation),
        )

    def process_or_raise(self, request: ApiRequest) -> ProcessedRequest:
        """Process a request and raise if its parameters are invalid.

        Raises:
            ValidationError: If validation failed, after the attributes have
                been written.
        """
        result = self.process(request)
        if isinstance(result, RejectedRequest):
            result.raise_for_errors()
        return result

    def _parameter_refs(
        self, meta: RequestMeta, validation: ValidationResult
    ) -> dict[str, str]:
        if self.parameter_ref_builder is None:
            return {}
        refs: dict[str, str] = {}
        for name in validation.parameters:
            parameter = meta.operation.find_parameter(name)
            if parameter is not None:
                refs[name] = self.parameter_ref_builder.build(meta.description, parameter)
        return refs

    @staticmethod
    def _routing_attribute(request: ApiRequest, name: str) -> str:
        value = request.attributes.get(name)
        if value is None:
            raise MissingRoutingContextError(name)
        return str(value)

    @staticmethod
    def _parse_body(content: bytes) -> JsonValue:
        """Decode a JSON body; an empty body decodes to None."""
        if not content:
            return None
        try:
            return orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise MalformedContentError(f"Request body is not valid JSON: {e}", e) from e
