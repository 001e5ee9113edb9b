"""
Error types for the Nemlig MCP server

Errors are carried as values inside Failure results rather than raised across
the transport, client and dispatcher boundaries.
"""

from typing import Optional


class NemligError(Exception):
    """Base class for every failure the client and tools can report"""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(NemligError):
    """Required configuration (e.g. credentials) is missing"""

    kind = "configuration_error"


class ValidationError(NemligError):
    """Tool or client arguments are missing or malformed"""

    kind = "validation_error"


class TransportError(NemligError):
    """Network failure, timeout or connection reset"""

    kind = "transport_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UpstreamError(NemligError):
    """Nemlig answered with a non-2xx status"""

    kind = "upstream_error"

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SessionExpiredError(UpstreamError):
    """401/403 from Nemlig: the stored session cookies are no longer accepted"""

    kind = "session_expired"

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(
            f"Authentication failed (HTTP {status_code}). "
            "Please run authenticate and try again.",
            status_code,
            body,
        )


class ProductNotFoundError(UpstreamError):
    """No product with the requested id was found"""

    kind = "not_found"

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} not found", 404)
        self.product_id = product_id


class ParseError(NemligError):
    """Response body did not have the shape a model requires"""

    kind = "parse_error"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Could not parse response field '{field}': {reason}")
        self.field = field
        self.reason = reason


class UnsupportedOperationError(NemligError):
    """The operation has no known Nemlig endpoint"""

    kind = "unsupported_operation"

    def __init__(self, operation: str):
        super().__init__(
            f"{operation} is not implemented: no Nemlig endpoint is known for it yet"
        )
        self.operation = operation
