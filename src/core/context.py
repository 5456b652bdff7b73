"""Request context management for correlation IDs and operation tracking."""

import uuid
from contextvars import ContextVar

# Context variables survive across async boundaries within one request
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_operation_id_var: ContextVar[str | None] = ContextVar("operation_id", default=None)


class RequestContext:
    """Manages request-scoped data using contextvars.

    Holds the correlation ID set by the correlation middleware and the id of
    the API operation the request was routed to, so error handlers can report
    both without access to the request object.
    """

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.
        """
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def set_operation_id(operation_id: str) -> None:
        """Record the operation the current request was routed to."""
        _operation_id_var.set(operation_id)

    @staticmethod
    def get_operation_id() -> str | None:
        """Get the operation id of the current request, if routed."""
        return _operation_id_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables."""
        _correlation_id_var.set(None)
        _operation_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual request tracking.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.
    """
    return f"req-{uuid.uuid4()}"
