"""Links from request errors back to parameter declarations.

Descriptions are often published next to the API. ``ParameterRefBuilder``
turns a parameter's JSON pointer into a URL that points at its declaration
in the published copy, so a client receiving a validation error can look up
what was expected.
"""

from src.descriptions.model import Description, Parameter


def escape_pointer_token(token: str) -> str:
    """Escape one JSON pointer reference token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


class ParameterRefBuilder:
    """Builds URLs to parameter declarations in published descriptions.

    Args:
        base_url: URL path the descriptions are published under.
        scheme: Scheme of absolute URLs; ``https`` when only a host is given.
        host: Host of absolute URLs. Without it, URLs are host-relative.

    Example:
        builder = ParameterRefBuilder("/specs", host="api.example.com")
        builder.build(description, parameter)
        # https://api.example.com/specs/petstore.yml#/paths/~1pets/get/parameters/0
    """

    def __init__(
        self, base_url: str = "/", scheme: str | None = None, host: str | None = None
    ) -> None:
        self.base_url = base_url
        self.scheme = scheme
        self.host = host

    def build(self, description: Description, parameter: Parameter) -> str:
        """Return the URL of a parameter's declaration.

        Args:
            description: The description declaring the parameter.
            parameter: The parameter.

        Returns:
            str: The document URL with the parameter's pointer as fragment.
        """
        document = f"{self.base_url.rstrip('/')}/{description.uri.lstrip('/')}"
        if self.host:
            document = f"{self.scheme or 'https'}://{self.host}{document}"
        return f"{document}#{parameter.pointer}"
