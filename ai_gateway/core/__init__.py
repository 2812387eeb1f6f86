"""
Core AI gateway abstractions.

This module provides the foundational classes for the gateway:
- BaseAIProvider: Abstract interface all providers must implement
- Chat models: Unified request/response/chunk data models
- Exception hierarchy: Unified, classified error handling
- ProviderRegistry / ProviderFactory: Provider construction from configuration
- Resilience: retry with backoff, circuit breaker, timeout, rate-limited queue
"""

from .base import BaseAIProvider, extract_reasoning_steps
from .circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerStatus,
    CircuitState,
)
from .exceptions import (
    FATAL_ERROR_KINDS,
    AIServiceError,
    APIError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DeprecatedConfigurationError,
    ErrorKind,
    MissingConfigurationError,
    NetworkError,
    ProviderError,
    ProviderInitializationError,
    ProviderNotFoundError,
    RateLimitError,
    RequestTimeoutError,
    ServiceUnavailableError,
    UnsupportedModelError,
    ValidationError,
    classify_error,
)
from .factory import (
    ProviderFactory,
    create_provider,
    create_provider_with_validation,
    get_available_providers,
    register_provider,
)
from .models import (
    AIConfig,
    AzureOpenAIConfig,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    ChunkChoice,
    CompletionChoice,
    ModelCapabilities,
    OpenAIConfig,
    ReasoningStep,
    UsageInfo,
    ValidationResult,
)
from .rate_limiter import RateLimitedQueue
from .registry import ProviderRegistry, default_registry
from .retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    calculate_delay,
    retry_batch,
    retry_with_backoff,
    with_timeout,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "extract_reasoning_steps",
    # Data models
    "AIConfig",
    "AzureOpenAIConfig",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatMessage",
    "ChunkChoice",
    "CompletionChoice",
    "ModelCapabilities",
    "OpenAIConfig",
    "ReasoningStep",
    "UsageInfo",
    "ValidationResult",
    # Exceptions
    "FATAL_ERROR_KINDS",
    "AIServiceError",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "DeprecatedConfigurationError",
    "ErrorKind",
    "MissingConfigurationError",
    "NetworkError",
    "ProviderError",
    "ProviderInitializationError",
    "ProviderNotFoundError",
    "RateLimitError",
    "RequestTimeoutError",
    "ServiceUnavailableError",
    "UnsupportedModelError",
    "ValidationError",
    "classify_error",
    # Registry and factory
    "ProviderRegistry",
    "default_registry",
    "ProviderFactory",
    "create_provider",
    "create_provider_with_validation",
    "get_available_providers",
    "register_provider",
    # Resilience
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitBreakerStatus",
    "CircuitState",
    "DEFAULT_RETRY_POLICY",
    "RateLimitedQueue",
    "RetryPolicy",
    "calculate_delay",
    "retry_batch",
    "retry_with_backoff",
    "with_timeout",
]
