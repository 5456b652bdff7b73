"""JSON response class using orjson serialization.

Used as the application's default response class and for rendering the
values returned by operation handlers, which may contain ``datetime``
values and pydantic models produced by body hydration.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _default(value: Any) -> Any:  # noqa: ANN401 - orjson fallback hook
    """Serialize values orjson does not handle natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization.

    Attributes:
        media_type: The media type for the response.
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - accepts any JSON-serializable content
        """Render the content as JSON using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")

        # Use consistent sorting for predictable output
        return orjson.dumps(content, default=_default, option=orjson.OPT_SORT_KEYS)
