"""
AI Gateway Package

A provider-agnostic, resilient layer for chat completion backends.

Supports OpenAI and Azure OpenAI behind a unified interface. Every backend
call goes through a circuit breaker and a retry policy with exponential
backoff, optionally serialized by a rate-limited queue.

Quick Start:
    from ai_gateway import AIGatewaySettings, ProviderFactory
    from ai_gateway import ChatCompletionRequest, ChatMessage

    # Builds the provider selected by AI_PROVIDER
    config = AIGatewaySettings.get_ai_config()
    provider = await ProviderFactory().create_with_retry(config)

    response = await provider.create_chat_completion(
        ChatCompletionRequest(
            messages=[ChatMessage(role="user", content="Hello")],
            model=config.default_model,
        )
    )

Configuration:
    Django settings or environment variables: AI_PROVIDER, OPENAI_API_KEY,
    AZURE_OPENAI_* and friends. Run "python manage.py ai_config_report"
    to inspect them.
"""

# Import providers to trigger auto-registration
from . import providers

# Export commonly used classes
from .core import (
    AIConfig,
    AzureOpenAIConfig,
    BaseAIProvider,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    CircuitBreaker,
    CircuitBreakerConfig,
    OpenAIConfig,
    ProviderFactory,
    ProviderRegistry,
    RateLimitedQueue,
    RetryPolicy,
    default_registry,
    retry_with_backoff,
    AIServiceError,
    APIError,
    ConfigurationError,
    DeprecatedConfigurationError,
    ErrorKind,
    MissingConfigurationError,
    RateLimitError,
    ServiceUnavailableError,
    ValidationError,
)
from .config import AIGatewaySettings
from .providers import AzureOpenAIProvider, OpenAIProvider
from .validation import ConfigurationValidator, ValidatedConfig

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "BaseAIProvider",
    "ChatMessage",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatCompletionChunk",
    "ProviderFactory",
    "ProviderRegistry",
    "default_registry",
    # Providers
    "OpenAIProvider",
    "AzureOpenAIProvider",
    # Resilience
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "RateLimitedQueue",
    "RetryPolicy",
    "retry_with_backoff",
    # Exceptions
    "AIServiceError",
    "APIError",
    "ConfigurationError",
    "DeprecatedConfigurationError",
    "ErrorKind",
    "MissingConfigurationError",
    "RateLimitError",
    "ServiceUnavailableError",
    "ValidationError",
    # Configuration
    "AIConfig",
    "AzureOpenAIConfig",
    "OpenAIConfig",
    "AIGatewaySettings",
    "ConfigurationValidator",
    "ValidatedConfig",
]
