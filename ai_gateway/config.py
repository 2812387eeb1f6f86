"""
Configuration management for the AI gateway.

Provides centralized configuration loading. Values come from Django
settings when Django is configured, falling back to the process
environment, and are read at call time so nothing is cached.
"""

import os
from typing import Dict, Mapping, Optional

from django.conf import settings

from .core.exceptions import ConfigurationError
from .core.models import AIConfig, AzureOpenAIConfig, OpenAIConfig

DEPRECATED_VARIABLES = (
    "OPENAI_ACCESS_TOKEN",
    "CHATGPT_ACCESS_TOKEN",
    "API_REVERSE_PROXY",
    "REVERSE_PROXY_URL",
)

KNOWN_VARIABLES = (
    "AI_PROVIDER",
    "DEFAULT_MODEL",
    "ENABLE_REASONING",
    "TIMEOUT_MS",
    "AI_MIN_REQUEST_INTERVAL_MS",
    "OPENAI_API_KEY",
    "OPENAI_API_BASE_URL",
    "OPENAI_ORGANIZATION",
    "OPENAI_API_MODEL",
    "OPENAI_API_DISABLE_DEBUG",
    "DEBUG",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_API_VERSION",
    "AZURE_OPENAI_USE_RESPONSES_API",
) + DEPRECATED_VARIABLES

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_MS = 100000
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class AIGatewaySettings:
    """
    Configuration manager for the AI gateway.

    Loads configuration from Django settings (or the environment) and
    provides convenient access methods.
    """

    @staticmethod
    def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a raw setting as text.

        Args:
            name: Variable name (e.g., "OPENAI_API_KEY")
            default: Returned when the variable is not set anywhere

        Returns:
            The Django setting when configured and present, else the
            environment variable, else default
        """
        if settings.configured:
            value = getattr(settings, name, None)
            if value is not None:
                return _as_text(value)
        return os.environ.get(name, default)

    @staticmethod
    def get_environment() -> Dict[str, str]:
        """
        Snapshot of every recognised variable that is currently set.

        Returns:
            Mapping of variable name to its text value
        """
        environment = {}
        for name in KNOWN_VARIABLES:
            value = AIGatewaySettings.get_setting(name)
            if value is not None:
                environment[name] = value
        return environment

    @staticmethod
    def get_ai_config(environ: Optional[Mapping[str, str]] = None) -> AIConfig:
        """
        Build an AIConfig from settings.

        Millisecond variables (TIMEOUT_MS, AI_MIN_REQUEST_INTERVAL_MS) are
        converted to seconds. A backend sub-config is only built when its
        credentials are present.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        env = environ if environ is not None else AIGatewaySettings.get_environment()

        timeout_ms = parse_ms(env, "TIMEOUT_MS", DEFAULT_TIMEOUT_MS)
        interval_ms = parse_ms(env, "AI_MIN_REQUEST_INTERVAL_MS", None)

        openai_config = None
        if _present(env, "OPENAI_API_KEY"):
            openai_config = OpenAIConfig(
                api_key=env["OPENAI_API_KEY"].strip(),
                base_url=env.get("OPENAI_API_BASE_URL") or None,
                organization=env.get("OPENAI_ORGANIZATION") or None,
            )

        azure_config = None
        if all(
            _present(env, name)
            for name in ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT")
        ):
            azure_config = AzureOpenAIConfig(
                api_key=env["AZURE_OPENAI_API_KEY"].strip(),
                endpoint=env["AZURE_OPENAI_ENDPOINT"].strip(),
                deployment=env["AZURE_OPENAI_DEPLOYMENT"].strip(),
                api_version=env.get("AZURE_OPENAI_API_VERSION") or DEFAULT_AZURE_API_VERSION,
                use_responses_api=_flag(env, "AZURE_OPENAI_USE_RESPONSES_API"),
            )

        return AIConfig(
            provider=(env.get("AI_PROVIDER") or DEFAULT_PROVIDER).strip().lower(),
            default_model=env.get("DEFAULT_MODEL") or DEFAULT_MODEL,
            enable_reasoning=_flag(env, "ENABLE_REASONING"),
            timeout=timeout_ms / 1000 if timeout_ms else None,
            min_request_interval=interval_ms / 1000 if interval_ms else None,
            openai=openai_config,
            azure=azure_config,
        )


def _present(env: Mapping[str, str], name: str) -> bool:
    return bool((env.get(name) or "").strip())


def _flag(env: Mapping[str, str], name: str) -> bool:
    return (env.get(name) or "").strip().lower() == "true"


def parse_ms(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    """Read a non-negative millisecond setting, or default when it is blank"""
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer number of milliseconds, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return value
