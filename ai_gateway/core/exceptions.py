"""
Exception hierarchy for the AI gateway.

Provides unified exception handling across all providers. Every gateway
error carries an ``ErrorKind`` so the retry engine and the circuit breaker
can classify failures without inspecting provider-specific details.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of error classifications produced by adapters and resilience code."""

    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_MODEL = "unsupported_model"
    CONFIGURATION_MISSING = "configuration_missing"
    CONFIGURATION_DEPRECATED = "configuration_deprecated"
    CONFIGURATION_INVALID = "configuration_invalid"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    NETWORK = "network"
    EXTERNAL_API = "external_api"
    SERVICE_UNAVAILABLE = "service_unavailable"


# Operator errors: retrying cannot fix them
FATAL_ERROR_KINDS = frozenset(
    {
        ErrorKind.CONFIGURATION_MISSING,
        ErrorKind.CONFIGURATION_DEPRECATED,
        ErrorKind.AUTHENTICATION,
        ErrorKind.AUTHORIZATION,
    }
)


class AIServiceError(Exception):
    """
    Base exception for all AI gateway errors.

    Attributes:
        kind: Machine-readable classification
        provider: Name of the provider that raised the error, if any
        status_code: HTTP status reported by the backend, if any
        details: Extra context for logging
    """

    kind: ErrorKind = ErrorKind.EXTERNAL_API

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        kind: Optional[ErrorKind] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.details = details
        if kind is not None:
            self.kind = kind

    @property
    def is_fatal(self) -> bool:
        return self.kind in FATAL_ERROR_KINDS


class ValidationError(AIServiceError):
    """
    Input validation error.

    Raised when a chat completion request is malformed.
    Examples: empty messages, temperature out of range, non-positive max_tokens.
    """

    kind = ErrorKind.INVALID_REQUEST


class UnsupportedModelError(ValidationError):
    """Raised when a request names a model the provider does not serve."""

    kind = ErrorKind.UNSUPPORTED_MODEL


class ConfigurationError(AIServiceError):
    """
    Configuration error.

    Raised when the gateway is misconfigured.
    Examples: unknown provider tag, deployment not found, failed validation.
    """

    kind = ErrorKind.CONFIGURATION_INVALID


class MissingConfigurationError(ConfigurationError):
    """Raised when a required setting is absent for the active provider mode."""

    kind = ErrorKind.CONFIGURATION_MISSING

    def __init__(self, message: str, missing_variables=(), **kwargs):
        super().__init__(message, **kwargs)
        self.missing_variables = list(missing_variables)


class DeprecatedConfigurationError(ConfigurationError):
    """Raised when legacy settings describing an unsupported integration are present."""

    kind = ErrorKind.CONFIGURATION_DEPRECATED

    def __init__(self, message: str, deprecated_variables=(), **kwargs):
        super().__init__(message, **kwargs)
        self.deprecated_variables = list(deprecated_variables)


class ProviderNotFoundError(ConfigurationError):
    """
    Provider not found error.

    Raised when attempting to use a provider that hasn't been registered.
    """


class ProviderError(AIServiceError):
    """Base exception for errors reported by a backend"""


class AuthenticationError(ProviderError):
    """The backend rejected the credentials."""

    kind = ErrorKind.AUTHENTICATION


class AuthorizationError(ProviderError):
    """The credentials are valid but lack access to the resource."""

    kind = ErrorKind.AUTHORIZATION


class RateLimitError(ProviderError):
    """
    Rate limit exceeded error.

    Raised when the provider's rate limits are exceeded.
    Retryable under the default retry policy.
    """

    kind = ErrorKind.RATE_LIMITED


class RequestTimeoutError(ProviderError):
    """
    Operation timed out.

    Attributes:
        timeout_seconds: The deadline that was exceeded
        elapsed_seconds: How long the caller actually waited
    """

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        message: str,
        timeout_seconds: Optional[float] = None,
        elapsed_seconds: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds
        self.elapsed_seconds = elapsed_seconds


class NetworkError(ProviderError):
    """Connection to the backend failed before a response was received."""

    kind = ErrorKind.NETWORK


class APIError(ProviderError):
    """
    API communication error.

    Raised when the backend returned an error response not covered by a
    more specific class (typically a 5xx).
    """

    kind = ErrorKind.EXTERNAL_API


class ServiceUnavailableError(AIServiceError):
    """
    Circuit breaker is open and rejecting requests.

    Attributes:
        breaker_name: Name of the circuit breaker
        retry_after: Seconds until the breaker allows a trial call
    """

    kind = ErrorKind.SERVICE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        breaker_name: Optional[str] = None,
        retry_after: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.breaker_name = breaker_name
        self.retry_after = retry_after


class ProviderInitializationError(AIServiceError):
    """Raised by the factory when a provider could not be created after retrying."""

    def __init__(self, message: str, attempts: int, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts


def classify_error(error: BaseException) -> Optional[ErrorKind]:
    """
    Return the ErrorKind of an exception, or None if it is not classified.

    Gateway errors carry their own kind. Builtin connection and timeout
    errors raised by transports map to NETWORK and TIMEOUT.
    """
    if isinstance(error, AIServiceError):
        return error.kind
    if isinstance(error, ConnectionError):
        return ErrorKind.NETWORK
    if isinstance(error, TimeoutError):
        return ErrorKind.TIMEOUT
    return None
