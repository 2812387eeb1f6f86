"""
AI provider factory.

Builds provider instances from an AIConfig, resolving the provider class
through a ProviderRegistry and wiring in the resilience collaborators the
configuration asks for.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .base import BaseAIProvider
from .exceptions import (
    AIServiceError,
    ConfigurationError,
    FATAL_ERROR_KINDS,
    MissingConfigurationError,
    ProviderInitializationError,
    ProviderNotFoundError,
    classify_error,
)
from .models import AIConfig, AzureOpenAIConfig, OpenAIConfig
from .rate_limiter import RateLimitedQueue
from .registry import ProviderRegistry, default_registry
from .retry import RetryPolicy, SleepFunc

logger = logging.getLogger(__name__)

# provider tag -> display name used in error messages
PROVIDER_LABELS: Dict[str, str] = {
    "openai": "OpenAI",
    "azure": "Azure",
}


class ProviderFactory:
    """
    Creates provider instances based on configuration.

    Example:
        >>> factory = ProviderFactory()
        >>> provider = await factory.create_with_retry(config, max_attempts=3)
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        *,
        sleep_func: Optional[SleepFunc] = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self._sleep = sleep_func or asyncio.sleep

    def create(self, config: AIConfig) -> BaseAIProvider:
        """
        Create a provider for ``config.provider``.

        Raises:
            ConfigurationError: If the provider tag is not supported
            MissingConfigurationError: If the tagged sub-config is absent
            ProviderNotFoundError: If the provider class is not registered
        """
        tag = (config.provider or "").lower()
        if tag not in PROVIDER_LABELS:
            raise ConfigurationError(f"Unsupported provider: {config.provider}")

        sub_config = getattr(config, tag, None)
        if sub_config is None:
            label = PROVIDER_LABELS[tag]
            raise MissingConfigurationError(
                f"{label} configuration is required when using {label} provider",
                provider=tag,
            )

        return self._instantiate(tag, sub_config, self._resilience_options(config))

    def create_openai(self, config: OpenAIConfig, **options) -> BaseAIProvider:
        return self._instantiate("openai", config, options)

    def create_azure(self, config: AzureOpenAIConfig, **options) -> BaseAIProvider:
        return self._instantiate("azure", config, options)

    def get_supported_providers(self) -> List[str]:
        return self.registry.list_providers()

    async def create_with_validation(self, config: AIConfig) -> BaseAIProvider:
        """
        Create a provider and confirm the backend accepts its configuration.

        Raises:
            ConfigurationError: If validate_configuration() returns False
            AuthenticationError, AuthorizationError: Propagated from validation
        """
        provider = self.create(config)
        if not await provider.validate_configuration():
            raise ConfigurationError(
                f"Provider {config.provider} configuration validation failed",
                provider=config.provider,
            )
        return provider

    async def create_with_retry(
        self,
        config: AIConfig,
        max_attempts: int = 3,
        delay: float = 1.0,
    ) -> BaseAIProvider:
        """
        Retry create_with_validation with linear backoff (delay * attempt).

        Fatal errors (missing or deprecated configuration, bad credentials)
        stop the loop early.

        Raises:
            ProviderInitializationError: Wrapping the last underlying error
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        last_error: Optional[Exception] = None
        attempt = 0
        while attempt < max_attempts:
            attempt += 1
            try:
                return await self.create_with_validation(config)
            except Exception as error:
                last_error = error
                if classify_error(error) in FATAL_ERROR_KINDS or attempt >= max_attempts:
                    break
                wait = delay * attempt
                logger.warning(
                    f"Provider creation attempt {attempt}/{max_attempts} failed, "
                    f"retrying in {wait:.2f}s: {error}",
                    extra={"attempt": attempt, "delay": wait, "provider": config.provider},
                )
                await self._sleep(wait)

        kind = last_error.kind if isinstance(last_error, AIServiceError) else None
        raise ProviderInitializationError(
            f"Failed to create provider after {attempt} attempts. "
            f"Last error: {last_error or 'Unknown error'}",
            attempts=attempt,
            provider=config.provider,
            kind=kind,
        ) from last_error

    def _instantiate(
        self, tag: str, sub_config: Any, options: Dict[str, Any]
    ) -> BaseAIProvider:
        if not self.registry.is_registered(tag):
            raise ProviderNotFoundError(
                f"{PROVIDER_LABELS.get(tag, tag)} provider is not registered. "
                "Make sure to register it first.",
                provider=tag,
            )

        provider_class = self.registry.get(tag)
        provider = provider_class(sub_config, **options)
        logger.info(f"Created {provider!r}")
        return provider

    @staticmethod
    def _resilience_options(config: AIConfig) -> Dict[str, Any]:
        options: Dict[str, Any] = {"retry_policy": RetryPolicy(timeout=config.timeout or None)}
        if config.min_request_interval:
            options["request_queue"] = RateLimitedQueue(
                config.min_request_interval, name=config.provider
            )
        return options


def create_provider(
    config: AIConfig, registry: Optional[ProviderRegistry] = None
) -> BaseAIProvider:
    """Convenience function to create a provider"""
    return ProviderFactory(registry).create(config)


async def create_provider_with_validation(
    config: AIConfig, registry: Optional[ProviderRegistry] = None
) -> BaseAIProvider:
    """Convenience function to create a provider with validation"""
    return await ProviderFactory(registry).create_with_validation(config)


def register_provider(name: str, provider_class, registry: Optional[ProviderRegistry] = None) -> None:
    """Register a provider for use with the factory"""
    (registry if registry is not None else default_registry).register(name, provider_class)


def get_available_providers(registry: Optional[ProviderRegistry] = None) -> List[str]:
    return (registry if registry is not None else default_registry).list_providers()
