"""
Base AI provider interface.

All AI providers must implement this interface to be compatible
with the gateway. The base class also owns the pieces every adapter
shares: request validation, usage accounting and the resilient call
path (circuit breaker + retry, optionally behind a rate-limited queue).
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from .circuit_breaker import CircuitBreaker
from .exceptions import UnsupportedModelError, ValidationError
from .models import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ModelCapabilities,
    ReasoningStep,
    UsageInfo,
)
from .rate_limiter import RateLimitedQueue
from .retry import RetryPolicy, SleepFunc, retry_with_backoff

T = TypeVar("T")

DEFAULT_MAX_TOKENS = 4096
DEFAULT_STEP_CONFIDENCE = 85

_STEP_PATTERN = re.compile(r"Step (\d+):")


def extract_reasoning_steps(content: Optional[str]) -> Optional[List[ReasoningStep]]:
    """
    Split "Step N:" markers in an answer into ReasoningStep objects.

    Returns:
        The steps found, or None if the content has no step markers
    """
    if not content:
        return None

    matches = list(_STEP_PATTERN.finditer(content))
    steps = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(content)
        thought = content[match.end():end].strip()
        if not thought:
            continue
        steps.append(
            ReasoningStep(
                step=int(match.group(1)),
                thought=thought,
                confidence=DEFAULT_STEP_CONFIDENCE,
            )
        )

    return steps or None


class BaseAIProvider(ABC):
    """
    Abstract base class for AI providers.

    Subclasses declare their static capabilities as class attributes and
    implement the completion, streaming and validation methods. Every
    outbound backend call should go through ``_call``.
    """

    name: str = ""
    supported_models: Sequence[str] = ()
    supports_streaming: bool = False
    supports_reasoning: bool = False

    def __init__(
        self,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        request_queue: Optional[RateLimitedQueue] = None,
        sleep_func: Optional[SleepFunc] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the shared resilience collaborators.

        Args:
            retry_policy: Policy for backend calls (defaults to RetryPolicy())
            circuit_breaker: Breaker guarding this provider's backend
            request_queue: Optional rate-limited queue to serialize calls
            sleep_func: Injectable async sleep for retry backoff
            logger: Logger for request and retry records
        """
        self.retry_policy = retry_policy or RetryPolicy()
        self.circuit_breaker = circuit_breaker or CircuitBreaker(name=self.name)
        self.request_queue = request_queue
        self.logger = logger or logging.getLogger(self.__class__.__module__)
        self._sleep = sleep_func
        self._usage = UsageInfo()

    @abstractmethod
    async def create_chat_completion(
        self, request: ChatCompletionRequest
    ) -> ChatCompletionResponse:
        """
        Generate a chat completion.

        Raises:
            ValidationError: On an invalid request (never retried)
            ProviderError: On backend failures that survived retry
            ServiceUnavailableError: When the circuit breaker is open
        """

    @abstractmethod
    def create_streaming_chat_completion(
        self, request: ChatCompletionRequest
    ) -> AsyncIterator[ChatCompletionChunk]:
        """
        Stream a chat completion.

        Returns a lazy async iterator that ends when the backend signals
        completion. It cannot be restarted; call again for a new stream.
        """

    @abstractmethod
    async def validate_configuration(self) -> bool:
        """
        Validate provider settings and connectivity.

        Returns:
            True if the backend accepted the configuration, False otherwise
        """

    async def get_usage_info(self) -> UsageInfo:
        """Cumulative token usage of completions served by this instance"""
        return self._usage

    def is_model_supported(self, model: str) -> bool:
        return model in self.supported_models

    def get_model_capabilities(self, model: str) -> ModelCapabilities:
        """Default capabilities; adapters override with model-specific limits"""
        return ModelCapabilities(
            max_tokens=DEFAULT_MAX_TOKENS,
            supports_reasoning=False,
            supports_streaming=self.supports_streaming,
        )

    def validate_request(self, request: ChatCompletionRequest) -> None:
        """
        Validate common request parameters.

        Raises:
            ValidationError: On empty messages, missing model or out-of-range values
            UnsupportedModelError: If the model is not served by this provider
        """
        if not request.messages:
            raise ValidationError("Messages array cannot be empty", provider=self.name)

        if not request.model:
            raise ValidationError("Model is required", provider=self.name)

        if not self.is_model_supported(request.model):
            raise UnsupportedModelError(
                f"Model {request.model} is not supported by {self.name}",
                provider=self.name,
            )

        if request.temperature is not None and not 0 <= request.temperature <= 2:
            raise ValidationError(
                "Temperature must be between 0 and 2", provider=self.name
            )

        if request.max_tokens is not None and request.max_tokens <= 0:
            raise ValidationError(
                "Max tokens must be greater than 0", provider=self.name
            )

    async def _call(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: Optional[RetryPolicy] = None,
    ) -> T:
        """Run one backend call through the breaker, retry and optional queue"""
        policy = policy or self.retry_policy

        def guarded() -> Awaitable[T]:
            return self.circuit_breaker.execute(operation)

        if self.request_queue is not None:
            return await self.request_queue.execute(guarded, policy)
        return await retry_with_backoff(
            guarded, policy, logger=self.logger, sleep_func=self._sleep
        )

    def _record_usage(self, usage: Optional[UsageInfo]) -> None:
        if usage is not None:
            self._usage = self._usage.combined_with(usage)

    def get_model_info(self) -> Dict[str, Any]:
        """
        Get information about this provider.

        Returns:
            Dictionary with provider name, capability flags and model count
        """
        return {
            "provider": self.name,
            "supports_streaming": self.supports_streaming,
            "supports_reasoning": self.supports_reasoning,
            "model_count": len(self.supported_models),
        }

    def __repr__(self) -> str:
        """String representation"""
        return f"{self.__class__.__name__}(provider={self.name})"
