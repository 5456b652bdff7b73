"""Framework-neutral request representation used by the pipeline.

``ApiRequest`` bundles the raw input bags of one HTTP request (query values,
headers, body bytes) with its mutable attribute store. Upstream routing puts
path parameters and the routing facts into ``attributes``; the processor
writes the typed parameters and the ``RequestMeta`` back into it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from src.core.types import ParameterBag
from src.descriptions.model import Description, Operation


@dataclass(frozen=True)
class RequestMeta:
    """The API contract a request was bound to."""

    ATTRIBUTE: ClassVar[str] = "_api_meta"
    ATTRIBUTE_URI: ClassVar[str] = "_api_document_uri"
    ATTRIBUTE_PATH: ClassVar[str] = "_api_path"

    description: Description
    operation: Operation


@dataclass
class ApiRequest:
    """Raw input of one HTTP request plus its attribute store.

    Attributes:
        method: HTTP method.
        query: Query values; repeated keys hold a list of strings.
        headers: Header values keyed by lower-cased name.
        content: The undecoded request body.
        attributes: Request-scoped key/value store shared with the host.
    """

    method: str
    query: ParameterBag = field(default_factory=dict)
    headers: ParameterBag = field(default_factory=dict)
    content: bytes = b""
    attributes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    @property
    def meta(self) -> RequestMeta | None:
        """The bound contract, once the request has been processed."""
        return self.attributes.get(RequestMeta.ATTRIBUTE)

    def get(self, name: str, default: Any = None) -> Any:  # noqa: ANN401
        """Return an attribute, typically a processed parameter value."""
        return self.attributes.get(name, default)
