"""SpecGate - contract-driven request processing for FastAPI.

SpecGate binds HTTP requests to the operations of an API description
(Swagger 2.0 or OpenAPI 3.x), turns their stringly-typed input into typed
parameters, validates them against the operation's schema and hands the
result to plain handler functions.

Architecture Overview:
- **API Layer**: FastAPI routes per described operation, error translation
- **Core Layer**: Configuration, logging, exceptions and request context
- **Descriptions**: Immutable model of API descriptions and their schemas
- **Request**: Coercion, assembly, validation and hydration pipeline
- **Infrastructure Layer**: Loading descriptions from disk
"""
