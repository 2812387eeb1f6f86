"""
Unified data models for AI gateway communication.

These models provide a provider-agnostic interface for chat completions,
allowing callers to work with any registered backend (OpenAI, Azure OpenAI)
without changing business logic.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

VALID_ROLES = {"system", "user", "assistant"}


@dataclass
class ReasoningStep:
    """A single step extracted from a reasoning model's answer"""

    step: int
    thought: str
    confidence: int
    duration: Optional[float] = None


@dataclass
class ChatMessage:
    """
    Unified chat message format.

    All providers convert to/from this format for consistency.
    """

    role: str  # "system", "user", or "assistant"
    content: str
    reasoning: Optional[List[ReasoningStep]] = None

    def __post_init__(self):
        """Validate role"""
        if self.role not in VALID_ROLES:
            raise ValueError(
                f"Invalid role '{self.role}'. Must be one of: {VALID_ROLES}"
            )


@dataclass
class ChatCompletionRequest:
    """Provider-agnostic chat completion request"""

    messages: List[ChatMessage]
    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: bool = False
    reasoning_mode: bool = False


@dataclass(frozen=True)
class UsageInfo:
    """Token usage snapshot"""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: Optional[float] = None

    def combined_with(self, other: "UsageInfo") -> "UsageInfo":
        """Return a new snapshot adding ``other`` to this one"""
        cost = None
        if self.cost is not None or other.cost is not None:
            cost = (self.cost or 0.0) + (other.cost or 0.0)
        return UsageInfo(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
            cost=cost,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
            "cost": self.cost,
        }


@dataclass
class CompletionChoice:
    index: int
    message: ChatMessage
    finish_reason: str = "stop"


@dataclass
class ChatCompletionResponse:
    """
    Unified completion response format.

    All providers convert their responses to this format.
    """

    id: str
    model: str  # Model used (e.g., "gpt-4o-mini")
    provider: str  # Provider name (e.g., "openai", "azure")
    choices: List[CompletionChoice]
    usage: Optional[UsageInfo] = None
    created: int = field(default_factory=lambda: int(time.time()))
    object: str = "chat.completion"
    raw_response: Optional[Any] = None  # Provider-specific raw response for debugging

    def __post_init__(self):
        """Validate required fields"""
        if not self.model:
            raise ValueError("Model name is required")
        if not self.provider:
            raise ValueError("Provider name is required")

    @property
    def content(self) -> str:
        """Text of the first choice, or an empty string"""
        if not self.choices:
            return ""
        return self.choices[0].message.content

    @property
    def finish_reason(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[0].finish_reason

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (excluding raw_response)"""
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "provider": self.provider,
            "choices": [
                {
                    "index": choice.index,
                    "message": {
                        "role": choice.message.role,
                        "content": choice.message.content,
                    },
                    "finish_reason": choice.finish_reason,
                }
                for choice in self.choices
            ],
            "usage": self.usage.to_dict() if self.usage else None,
        }


@dataclass
class ChunkChoice:
    index: int
    content: str = ""
    role: Optional[str] = None
    finish_reason: Optional[str] = None


@dataclass
class ChatCompletionChunk:
    """One incremental piece of a streaming completion"""

    id: str
    model: str
    choices: List[ChunkChoice]
    created: int = field(default_factory=lambda: int(time.time()))
    object: str = "chat.completion.chunk"

    @property
    def content(self) -> str:
        return "".join(choice.content for choice in self.choices)


@dataclass(frozen=True)
class ModelCapabilities:
    max_tokens: int
    supports_reasoning: bool
    supports_streaming: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_tokens": self.max_tokens,
            "supports_reasoning": self.supports_reasoning,
            "supports_streaming": self.supports_streaming,
        }


@dataclass(frozen=True)
class OpenAIConfig:
    """Settings for the official OpenAI API"""

    api_key: str
    base_url: Optional[str] = None
    organization: Optional[str] = None


@dataclass(frozen=True)
class AzureOpenAIConfig:
    """Settings for an Azure OpenAI resource"""

    api_key: str
    endpoint: str
    deployment: str
    api_version: str = "2024-02-15-preview"
    use_responses_api: bool = False


@dataclass(frozen=True)
class AIConfig:
    """
    Provider selection plus the sub-configuration for each backend.

    ``provider`` is the discriminant; only the matching sub-config is read.
    """

    provider: str
    default_model: str = "gpt-4o-mini"
    enable_reasoning: bool = False
    timeout: Optional[float] = 100.0  # seconds per attempt
    min_request_interval: Optional[float] = None  # seconds between dispatches
    openai: Optional[OpenAIConfig] = None
    azure: Optional[AzureOpenAIConfig] = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a non-throwing configuration check"""

    is_valid: bool
    errors: tuple = ()
    warnings: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
