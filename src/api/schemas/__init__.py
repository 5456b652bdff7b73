"""Pydantic models for API responses.

- **errors**: ErrorResponse and ServiceInfo
"""
