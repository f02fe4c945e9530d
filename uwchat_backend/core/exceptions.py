class AppException(Exception):
    """Base class for errors raised by the chat backend.

    Attributes:
        message: Human-readable description.
        status_code: HTTP status the error maps to when it reaches a route.
        error_code: Machine-readable identifier.
    """

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class HumanVerificationFailed(AppException):
    """The verification service rejected the submitted token."""

    status_code = 400
    error_code = "VERIFICATION_FAILED"

    def __init__(self, message: str = "Human verification failed"):
        super().__init__(message)


class HumanVerificationUnavailable(AppException):
    """The verification service could not be reached or answered garbage."""

    status_code = 500
    error_code = "VERIFICATION_UNAVAILABLE"

    def __init__(self, message: str = "Human verification service unavailable"):
        super().__init__(message)


class QuotaExceeded(AppException):
    status_code = 429
    error_code = "RATE_LIMITED"

    def __init__(self, client_key: str, limit: int):
        super().__init__(f"Daily limit of {limit} requests reached")
        self.client_key = client_key
        self.limit = limit
        self.remaining = 0


class RateLimitStoreError(AppException):
    """The counter store is unreachable. Callers treat this as non-fatal."""

    error_code = "RATE_LIMIT_STORE_ERROR"


class InfrastructureError(AppException):
    """An embedding, vector or completion call failed."""

    status_code = 503
    error_code = "SERVICE_UNAVAILABLE"


class EmbeddingError(InfrastructureError):
    error_code = "EMBEDDING_FAILED"


class VectorStoreError(InfrastructureError):
    error_code = "VECTOR_STORE_FAILED"


class CompletionError(InfrastructureError):
    error_code = "COMPLETION_FAILED"


class ServiceConfigurationError(AppException):
    """A backing client could not be constructed from the current settings."""

    error_code = "SERVICE_CONFIGURATION_ERROR"
