"""Build the description model from a parsed Swagger/OpenAPI document.

Both Swagger 2.0 and OpenAPI 3.x documents are accepted:

- Swagger 2.0 non-body parameters declare their schema inline (``type``,
  ``format``, ``items``...), body parameters under ``schema``.
- OpenAPI 3.x parameters declare ``schema``; the JSON request body becomes a
  ``body`` location parameter named after ``x-body-name`` (default ``body``).

Local references (``#/definitions/...``, ``#/components/...``) are resolved
inline so every schema is self-contained.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from loguru import logger

from src.core.exceptions import InvalidDescriptionError
from src.descriptions.model import (
    Description,
    Operation,
    Parameter,
    ParameterLocation,
    Path,
)
from src.descriptions.references import escape_pointer_token
from src.descriptions.schema import Schema

HTTP_METHODS: Final[tuple[str, ...]] = (
    "get",
    "put",
    "post",
    "delete",
    "options",
    "head",
    "patch",
)

# Swagger 2.0 parameter keys that describe the parameter, not its value
_PARAMETER_KEYS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "in",
        "required",
        "description",
        "collectionFormat",
        "allowEmptyValue",
        "schema",
    }
)

# OpenAPI 3.x style/explode pairs mapped to Swagger collection formats
_STYLE_FORMATS: Final[dict[tuple[str, bool], str]] = {
    ("form", True): "multi",
    ("form", False): "csv",
    ("simple", False): "csv",
    ("simple", True): "csv",
    ("spaceDelimited", False): "ssv",
    ("pipeDelimited", False): "pipes",
}

DEFAULT_BODY_NAME: Final[str] = "body"
JSON_MEDIA_TYPES: Final[tuple[str, ...]] = ("application/json", "text/json")


class _ReferenceResolver:
    """Inline local JSON references of one document."""

    def __init__(self, document: Mapping[str, Any], uri: str) -> None:
        self.document = document
        self.uri = uri

    def resolve(self, node: Any, seen: tuple[str, ...] = ()) -> Any:  # noqa: ANN401
        """Return ``node`` with every local ``$ref`` replaced by its target.

        A reference that points back into its own expansion is replaced by an
        unconstrained object schema.
        """
        if isinstance(node, list):
            return [self.resolve(item, seen) for item in node]
        if not isinstance(node, Mapping):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in seen:
                logger.debug("Recursive reference {} in {} left open", ref, self.uri)
                return {"type": "object"}
            return self.resolve(self._lookup(ref), (*seen, ref))

        return {key: self.resolve(value, seen) for key, value in node.items()}

    def _lookup(self, ref: str) -> Any:  # noqa: ANN401
        if not ref.startswith("#/"):
            msg = f"Only local references are supported, got '{ref}'"
            raise InvalidDescriptionError(msg, {"uri": self.uri, "ref": ref})

        target: Any = self.document
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, Mapping) or token not in target:
                msg = f"Unresolvable reference '{ref}'"
                raise InvalidDescriptionError(msg, {"uri": self.uri, "ref": ref})
            target = target[token]
        return target


def _collection_format(definition: Mapping[str, Any], openapi3: bool) -> str | None:
    if not openapi3:
        return definition.get("collectionFormat", "csv")
    location = definition.get("in")
    style = definition.get("style", "form" if location == "query" else "simple")
    explode = definition.get("explode", style == "form")
    return _STYLE_FORMATS.get((style, explode), "csv")


def _build_parameter(
    definition: Mapping[str, Any], openapi3: bool, pointer: str = ""
) -> Parameter:
    name = definition.get("name")
    if not name:
        msg = "Parameter declared without a name"
        raise InvalidDescriptionError(msg, {"parameter": dict(definition)})

    location = ParameterLocation.parse(definition.get("in"), name)

    if location is ParameterLocation.BODY or openapi3:
        schema_definition = definition.get("schema") or {}
    else:
        schema_definition = {
            key: value
            for key, value in definition.items()
            if key not in _PARAMETER_KEYS and not key.startswith("x-")
        }

    schema = Schema.from_definition(schema_definition)
    collection_format = (
        _collection_format(definition, openapi3)
        if schema.type == "array" and location is not ParameterLocation.BODY
        else None
    )

    return Parameter(
        name=name,
        location=location,
        schema=schema,
        # Path parameters are always required
        required=bool(definition.get("required", False))
        or location is ParameterLocation.PATH,
        collection_format=collection_format,
        pointer=pointer,
    )


def _build_body_parameter(
    request_body: Mapping[str, Any], pointer: str = ""
) -> Parameter | None:
    content = request_body.get("content") or {}
    media = next(
        (content[media_type] for media_type in JSON_MEDIA_TYPES if media_type in content),
        None,
    )
    if media is None:
        return None
    return Parameter(
        name=request_body.get("x-body-name", DEFAULT_BODY_NAME),
        location=ParameterLocation.BODY,
        schema=Schema.from_definition(media.get("schema") or {}),
        required=bool(request_body.get("required", False)),
        pointer=pointer,
    )


def _merge_parameters(
    shared: list[Mapping[str, Any]],
    own: list[Mapping[str, Any]],
    shared_pointer: str,
    own_pointer: str,
) -> list[tuple[Mapping[str, Any], str]]:
    """Combine path-level and operation-level parameters with their pointers.

    Operation-level parameters override path-level ones with the same name
    and location.
    """
    merged: dict[tuple[Any, Any], tuple[Mapping[str, Any], str]] = {}
    for definitions, pointer in ((shared, shared_pointer), (own, own_pointer)):
        for index, definition in enumerate(definitions):
            key = (definition.get("name"), definition.get("in"))
            merged[key] = (definition, f"{pointer}/parameters/{index}")
    return list(merged.values())


def build_description(uri: str, document: Mapping[str, Any]) -> Description:
    """Build a Description from a parsed document.

    Args:
        uri: The document identifier the description is registered under.
        document: The parsed Swagger 2.0 or OpenAPI 3.x document.

    Returns:
        Description: The immutable description model.

    Raises:
        InvalidDescriptionError: If the document is structurally unusable.
        UnsupportedLocationError: If a parameter declares an unknown location.
    """
    if not isinstance(document, Mapping):
        msg = f"API description '{uri}' is not a mapping"
        raise InvalidDescriptionError(msg, {"uri": uri})

    openapi3 = str(document.get("openapi", "")).startswith("3")
    resolver = _ReferenceResolver(document, uri)
    paths: dict[str, Path] = {}

    for template, raw_path_item in (document.get("paths") or {}).items():
        path_item = resolver.resolve(raw_path_item or {})
        shared = path_item.get("parameters") or []
        path_pointer = f"/paths/{escape_pointer_token(template)}"
        operations: dict[str, Operation] = {}

        for method in HTTP_METHODS:
            definition = path_item.get(method)
            if definition is None:
                continue

            operation_pointer = f"{path_pointer}/{method}"
            parameters = [
                _build_parameter(parameter, openapi3, pointer)
                for parameter, pointer in _merge_parameters(
                    shared,
                    definition.get("parameters") or [],
                    path_pointer,
                    operation_pointer,
                )
            ]
            if openapi3 and definition.get("requestBody"):
                body = _build_body_parameter(
                    definition["requestBody"], f"{operation_pointer}/requestBody"
                )
                if body is not None:
                    parameters.append(body)

            operations[method] = Operation.create(
                path=template,
                method=method,
                parameters=parameters,
                operation_id=definition.get("operationId"),
                summary=definition.get("summary", ""),
            )

        paths[template] = Path(template, MappingProxyType(operations))

    info = document.get("info") or {}
    description = Description(
        uri=uri,
        paths=MappingProxyType(paths),
        title=str(info.get("title", "")),
        version=str(info.get("version", "")),
    )
    logger.debug(
        "Built description {} with {} paths",
        uri,
        len(paths),
    )
    return description
