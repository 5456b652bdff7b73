"""FastAPI middleware and exception handlers.

- **RequestContextMiddleware**: Manages correlation IDs and request context
- **error_handler**: Translates exceptions into consistent error responses
"""
