"""
AI provider implementations.

This module contains concrete implementations of the BaseAIProvider interface
for the supported backends (OpenAI, Azure OpenAI).

Providers are automatically registered in the default registry when this
module is imported.
"""

from ai_gateway.core import default_registry
from .azure_provider import AzureOpenAIProvider
from .openai_provider import OpenAIProvider

# Auto-register providers
default_registry.register("openai", OpenAIProvider)
default_registry.register("azure", AzureOpenAIProvider)

__all__ = [
    "OpenAIProvider",
    "AzureOpenAIProvider",
]
