"""Core infrastructure package for shared application functionality.

This package provides the foundational components used across all layers
of SpecGate:

- **config**: Centralized configuration management with environment support
- **context**: Correlation ID and routed-operation tracking
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging with Loguru
- **types**: Type aliases for better code clarity
"""
