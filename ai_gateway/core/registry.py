"""
Provider registry for managing AI providers.

Maps provider names to provider classes. A registry is an ordinary
object: the gateway keeps one ``default_registry`` populated when
``ai_gateway.providers`` is imported, and callers (tests in particular)
can build and pass their own.
"""

from typing import Dict, List, Type

from .base import BaseAIProvider
from .exceptions import ProviderNotFoundError


class ProviderRegistry:
    """
    Name-keyed registry of provider classes.

    Names are case-insensitive. Mutations are not synchronized; callers
    that register concurrently must serialize their own access.
    """

    def __init__(self):
        self._providers: Dict[str, Type[BaseAIProvider]] = {}

    def register(self, name: str, provider_class: Type[BaseAIProvider]) -> None:
        """
        Register a provider, replacing any previous entry with the same name.

        Args:
            name: Provider name (e.g., "openai", "azure")
            provider_class: Provider class (must inherit from BaseAIProvider)

        Raises:
            TypeError: If provider_class doesn't inherit from BaseAIProvider
        """
        if not (isinstance(provider_class, type) and issubclass(provider_class, BaseAIProvider)):
            raise TypeError(
                f"{getattr(provider_class, '__name__', provider_class)!s} "
                "must inherit from BaseAIProvider"
            )

        self._providers[name.lower()] = provider_class

    def get(self, name: str) -> Type[BaseAIProvider]:
        """
        Get a provider class by name.

        Raises:
            ProviderNotFoundError: If provider not found
        """
        name = name.lower()
        if name not in self._providers:
            available = ", ".join(self.list_providers()) or "none"
            raise ProviderNotFoundError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return self._providers[name]

    def list_providers(self) -> List[str]:
        """Sorted names of all registered providers"""
        return sorted(self._providers.keys())

    def is_registered(self, name: str) -> bool:
        return name.lower() in self._providers

    def unregister(self, name: str) -> None:
        self._providers.pop(name.lower(), None)

    def clear(self) -> None:
        """
        Clear all registered providers.

        Useful for testing.
        """
        self._providers.clear()

    def __contains__(self, name: str) -> bool:
        return self.is_registered(name)

    def __len__(self) -> int:
        return len(self._providers)


default_registry = ProviderRegistry()
