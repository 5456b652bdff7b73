"""Type aliases for dynamic data structures throughout the application.

HTTP input arrives as strings and decoded JSON, so much of the pipeline
handles values that cannot be statically typed. These aliases give those
values a name that says where they come from.
"""

from typing import Any

# JSON-compatible type that represents any valid JSON value
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# A request bag (query values, path attributes, headers) keyed by name.
# Repeated query keys hold a list of strings.
type ParameterBag = dict[str, Any]

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]
