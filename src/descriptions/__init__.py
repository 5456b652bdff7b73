"""Immutable model of API descriptions.

- **schema**: Scalar, object and array schema descriptors
- **model**: Description, Path, Operation and Parameter
- **builder**: Builds the model from Swagger 2.0 / OpenAPI 3.x documents
- **references**: Links parameters to their declaration in published documents
"""
