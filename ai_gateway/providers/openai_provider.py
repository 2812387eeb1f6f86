"""
OpenAI provider implementation.

Adapts the OpenAI API to the unified provider interface.
"""

import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Tuple

import openai
from openai import AsyncOpenAI

from ai_gateway.core import (
    AIServiceError,
    APIError,
    AuthenticationError,
    AuthorizationError,
    BaseAIProvider,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    ChunkChoice,
    CompletionChoice,
    ConfigurationError,
    ModelCapabilities,
    NetworkError,
    OpenAIConfig,
    RateLimitError,
    RequestTimeoutError,
    UsageInfo,
    ValidationError,
    extract_reasoning_steps,
)
from ai_gateway.core.base import DEFAULT_MAX_TOKENS

logger = logging.getLogger(__name__)

# Opening a stream is retried at most this many times
STREAM_MAX_ATTEMPTS = 2

# HTTP status -> gateway error class
STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: ConfigurationError,
    429: RateLimitError,
    502: NetworkError,
    504: RequestTimeoutError,
}

# (model prefix, max tokens, reasoning model); first match wins
MODEL_LIMITS: List[Tuple[str, int, bool]] = [
    ("o1", 128000, True),
    ("gpt-4o", 128000, False),
    ("gpt-4-turbo", 128000, False),
    ("gpt-4-0125", 128000, False),
    ("gpt-4-1106", 128000, False),
    ("gpt-4-32k", 32768, False),
    ("gpt-4", 8192, False),
    ("gpt-3.5-turbo-16k", 16384, False),
    ("gpt-35-turbo-16k", 16384, False),
    ("gpt-3.5-turbo", 4096, False),
    ("gpt-35-turbo", 4096, False),
]


def is_reasoning_model(model: str) -> bool:
    return model.startswith("o1")


class OpenAIProvider(BaseAIProvider):
    """
    OpenAI API provider implementation.

    Wraps the async OpenAI client. SDK-level retries are disabled: every
    call goes through the gateway's breaker and retry policy instead.
    """

    name = "openai"
    display_name = "OpenAI"
    supported_models = (
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
        "gpt-4-turbo-preview",
        "gpt-4-0125-preview",
        "gpt-4-1106-preview",
        "gpt-4",
        "gpt-4-32k",
        "gpt-3.5-turbo",
        "gpt-3.5-turbo-16k",
        "o1-preview",
        "o1-mini",
    )
    supports_streaming = True
    supports_reasoning = True

    def __init__(self, config: OpenAIConfig, **kwargs):
        """
        Initialize OpenAI provider.

        Args:
            config: API key, optional base URL and organization
            **kwargs: Resilience collaborators forwarded to BaseAIProvider
        """
        super().__init__(**kwargs)
        self.config = config
        self.client = self._build_client()

        logger.debug(f"Initialized {self.__class__.__name__}")

    def _build_client(self):
        return AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            organization=self.config.organization,
            max_retries=0,
        )

    async def create_chat_completion(
        self, request: ChatCompletionRequest
    ) -> ChatCompletionResponse:
        """
        Generate chat completion using OpenAI API.

        Raises:
            ValidationError: On an invalid request
            ProviderError: On backend failures that survived retry
            ServiceUnavailableError: When the circuit breaker is open
        """
        self.validate_request(request)
        params = self._build_params(request, stream=False)

        logger.debug(f"Calling {self.display_name} API with model={params['model']}")
        try:
            response = await self._call(
                self._translated(lambda: self.client.chat.completions.create(**params))
            )
        except AIServiceError as e:
            logger.error(f"{self.display_name} chat completion failed: {e}")
            raise

        result = self._convert_response(response, request)
        self._record_usage(result.usage)

        if result.usage:
            logger.debug(
                f"{self.display_name} API call successful: {result.usage.total_tokens} tokens"
            )
        return result

    async def create_streaming_chat_completion(
        self, request: ChatCompletionRequest
    ) -> AsyncIterator[ChatCompletionChunk]:
        """
        Stream a chat completion chunk by chunk.

        Opening the stream is retried; a failure while iterating is not.
        The upstream response is closed however iteration ends.
        """
        self.validate_request(request)
        params = self._build_params(request, stream=True)
        policy = self.retry_policy.with_overrides(
            max_attempts=min(STREAM_MAX_ATTEMPTS, self.retry_policy.max_attempts)
        )

        stream = await self._call(
            self._translated(lambda: self.client.chat.completions.create(**params)),
            policy,
        )

        try:
            async for chunk in stream:
                yield self._convert_chunk(chunk)
        except openai.APIError as e:
            logger.error(f"{self.display_name} stream interrupted: {e}")
            raise self._translate_error(e) from e
        finally:
            await stream.close()

    async def validate_configuration(self) -> bool:
        """
        Validate settings by listing models.

        Returns:
            True if the API accepted the credentials

        Raises:
            AuthenticationError, AuthorizationError: Bad credentials are not
                reported as a False result
        """
        try:
            await self._call(self._translated(lambda: self.client.models.list()))
            return True
        except AIServiceError as e:
            if e.is_fatal:
                logger.error(f"{self.display_name} rejected the configured credentials: {e}")
                raise
            logger.error(f"{self.display_name} configuration validation failed: {e}")
            return False

    def get_model_capabilities(self, model: str) -> ModelCapabilities:
        for prefix, max_tokens, reasoning in MODEL_LIMITS:
            if model.startswith(prefix):
                return ModelCapabilities(
                    max_tokens=max_tokens,
                    supports_reasoning=reasoning,
                    supports_streaming=not reasoning,
                )
        return ModelCapabilities(
            max_tokens=DEFAULT_MAX_TOKENS,
            supports_reasoning=False,
            supports_streaming=True,
        )

    def get_model_info(self) -> Dict[str, Any]:
        info = super().get_model_info()
        info["base_url"] = self.config.base_url
        return info

    def _model_name(self, request: ChatCompletionRequest) -> str:
        return request.model

    def _build_params(self, request: ChatCompletionRequest, stream: bool) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "model": self._model_name(request),
            "messages": [
                {"role": msg.role, "content": msg.content} for msg in request.messages
            ],
            "stream": stream,
        }

        # Reasoning models take max_completion_tokens and a fixed temperature
        if is_reasoning_model(request.model):
            if request.max_tokens is not None:
                params["max_completion_tokens"] = request.max_tokens
        else:
            if request.temperature is not None:
                params["temperature"] = request.temperature
            if request.max_tokens is not None:
                params["max_tokens"] = request.max_tokens

        return params

    def _translated(
        self, call: Callable[[], Awaitable[Any]]
    ) -> Callable[[], Awaitable[Any]]:
        """Wrap an SDK call so its errors surface as gateway errors"""

        async def operation():
            try:
                return await call()
            except openai.APIError as e:
                raise self._translate_error(e) from e

        return operation

    def _translate_error(self, error: Exception) -> AIServiceError:
        """Map an openai SDK exception onto the gateway hierarchy"""
        label = self.display_name

        # APITimeoutError subclasses APIConnectionError, check it first
        if isinstance(error, openai.APITimeoutError):
            return RequestTimeoutError(f"{label} request timed out", provider=self.name)

        if isinstance(error, openai.APIConnectionError):
            return NetworkError(f"{label} connection error: {error}", provider=self.name)

        if isinstance(error, openai.APIStatusError):
            status = error.status_code
            error_class = STATUS_ERRORS.get(status, APIError)
            return error_class(
                f"{label} API error ({status}): {error.message}",
                provider=self.name,
                status_code=status,
                details=error.body,
            )

        return APIError(f"{label} API error: {error}", provider=self.name)

    def _convert_response(
        self, response: Any, request: ChatCompletionRequest
    ) -> ChatCompletionResponse:
        attach_reasoning = request.reasoning_mode or is_reasoning_model(request.model)

        choices = []
        for choice in response.choices:
            content = choice.message.content or ""
            choices.append(
                CompletionChoice(
                    index=choice.index,
                    message=ChatMessage(
                        role=choice.message.role or "assistant",
                        content=content,
                        reasoning=extract_reasoning_steps(content) if attach_reasoning else None,
                    ),
                    finish_reason=choice.finish_reason or "stop",
                )
            )

        usage = None
        if response.usage is not None:
            usage = UsageInfo(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return ChatCompletionResponse(
            id=response.id,
            model=response.model or request.model,
            provider=self.name,
            choices=choices,
            usage=usage,
            created=response.created,
            raw_response=response,
        )

    def _convert_chunk(self, chunk: Any) -> ChatCompletionChunk:
        return ChatCompletionChunk(
            id=chunk.id,
            model=chunk.model,
            created=chunk.created,
            choices=[
                ChunkChoice(
                    index=choice.index,
                    content=(choice.delta.content or "") if choice.delta else "",
                    role=choice.delta.role if choice.delta else None,
                    finish_reason=choice.finish_reason,
                )
                for choice in chunk.choices
            ],
        )
