"""Standardized error response schemas.

- **ErrorResponse**: Main error response with all metadata fields
- **ServiceInfo**: Identifies the service that produced the error

Validation failures carry every validator message under
``details.errors``, so clients see all problems with a request at once.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(
        ...,
        description="Name of the service",
        examples=["SpecGate", "PetStore"],
    )

    version: str = Field(
        ...,
        description="Version of the service",
        examples=["0.1.0", "1.2.3"],
    )

    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["VALIDATION_ERROR", "OPERATION_NOT_FOUND", "MALFORMED_CONTENT"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=[
            "Request parameters failed validation",
            "No DELETE operation declared for path '/pets/{petId}'",
        ],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (e.g., every validation message)",
        examples=[{"errors": ["limit: 'ten' is not of type 'integer'"]}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
        examples=["2024-06-14T12:00:00+00:00"],
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description=(
            "Unique request identifier (different from correlation_id "
            "which can span multiple services)"
        ),
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "VALIDATION_ERROR",
                    "message": "Request parameters failed validation",
                    "details": {
                        "errors": [
                            "limit: 'ten' is not of type 'integer'",
                            "'petId' is a required property",
                        ],
                        "operation_id": "listPets",
                    },
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-06-14T12:00:00+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "SpecGate",
                        "version": "0.1.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "MALFORMED_CONTENT",
                    "message": "Request body is not valid JSON",
                    "timestamp": "2024-06-14T12:00:02+00:00",
                    "severity": "LOW",
                },
            ]
        }
    }
