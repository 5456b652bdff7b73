"""API-related constants."""

# HTTP Status Codes
HTTP_500_INTERNAL_SERVER_ERROR = 500

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Request handling
REQUEST_BODY_METHODS = {"POST", "PUT", "PATCH"}
HEALTH_PATH = "/health"
