"""
Startup configuration validation.

Detects deprecated settings and missing credentials for the active
provider mode, either failing fast with migration guidance or reporting
the problems without raising.
"""

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from .config import (
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_TIMEOUT_MS,
    DEPRECATED_VARIABLES,
    AIGatewaySettings,
    parse_ms,
)
from .core.exceptions import DeprecatedConfigurationError, MissingConfigurationError
from .core.models import ValidationResult
from .migration import (
    MigrationInfo,
    build_migration_steps,
    render_deprecation_message,
    render_missing_config_message,
)

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = {
    "azure": ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT"),
    "openai": ("OPENAI_API_KEY",),
}

# variable -> setting checked for plain-HTTP URLs, per provider mode
URL_VARIABLES = {
    "azure": "AZURE_OPENAI_ENDPOINT",
    "openai": "OPENAI_API_BASE_URL",
}


def _deprecated_variables(env: Mapping[str, str]) -> List[str]:
    return [name for name in DEPRECATED_VARIABLES if env.get(name)]


@dataclass(frozen=True)
class ValidatedConfig:
    """Normalized configuration returned once validation has passed"""

    provider: str
    api_key: str
    base_url: Optional[str]
    model: str
    timeout: float  # seconds
    disable_debug: bool
    debug: bool


class ConfigurationValidator:
    """
    Validates gateway settings and produces migration guidance.

    Args:
        environ: Mapping of variable names to values. When None, settings
            are read fresh from AIGatewaySettings on every call.

    Example:
        >>> ConfigurationValidator().validate_environment()
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def _env(self) -> Mapping[str, str]:
        if self._environ is not None:
            return self._environ
        return AIGatewaySettings.get_environment()

    @staticmethod
    def _provider_mode(env: Mapping[str, str]) -> str:
        provider = (env.get("AI_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
        return "azure" if provider == "azure" else "openai"

    @staticmethod
    def _missing_variables(env: Mapping[str, str], mode: str) -> List[str]:
        return [
            name for name in REQUIRED_VARIABLES[mode] if not (env.get(name) or "").strip()
        ]

    def get_deprecated_variables(self) -> List[str]:
        """Deprecated variables that are present with a non-empty value"""
        return _deprecated_variables(self._env())

    def validate_environment(self) -> None:
        """
        Fail fast on unusable configuration.

        Raises:
            DeprecatedConfigurationError: If any deprecated variable is set
            MissingConfigurationError: If the active mode lacks a required variable
        """
        env = self._env()

        deprecated = _deprecated_variables(env)
        if deprecated:
            logger.error(f"Deprecated configuration detected: {', '.join(deprecated)}")
            raise DeprecatedConfigurationError(
                render_deprecation_message(deprecated), deprecated_variables=deprecated
            )

        mode = self._provider_mode(env)
        missing = self._missing_variables(env, mode)
        if missing:
            logger.error(f"Missing required configuration: {', '.join(missing)}")
            raise MissingConfigurationError(
                render_missing_config_message(mode),
                missing_variables=missing,
                provider=mode,
            )

    def validate_safely(self) -> ValidationResult:
        """
        Validate configuration without throwing errors.

        Returns:
            ValidationResult listing every problem found
        """
        env = self._env()
        errors = []
        warnings = []

        deprecated = _deprecated_variables(env)
        if deprecated:
            errors.append(f"Deprecated configuration detected: {', '.join(deprecated)}")

        mode = self._provider_mode(env)
        for name in self._missing_variables(env, mode):
            errors.append(f"Missing required configuration: {name}")

        url_variable = URL_VARIABLES[mode]
        url = env.get(url_variable)
        if url and not url.startswith("https://"):
            warnings.append(f"{url_variable} should use HTTPS protocol")

        return ValidationResult(
            is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings)
        )

    def get_validated_config(self) -> ValidatedConfig:
        """
        Validate, then return the normalized configuration.

        Raises:
            DeprecatedConfigurationError, MissingConfigurationError: As validate_environment
            ConfigurationError: If TIMEOUT_MS is not a non-negative integer
        """
        self.validate_environment()
        env = self._env()
        mode = self._provider_mode(env)

        timeout_ms = parse_ms(env, "TIMEOUT_MS", DEFAULT_TIMEOUT_MS)

        if mode == "azure":
            api_key = env["AZURE_OPENAI_API_KEY"].strip()
            base_url = env["AZURE_OPENAI_ENDPOINT"].strip()
        else:
            api_key = env["OPENAI_API_KEY"].strip()
            base_url = env.get("OPENAI_API_BASE_URL") or None

        return ValidatedConfig(
            provider=mode,
            api_key=api_key,
            base_url=base_url,
            model=env.get("OPENAI_API_MODEL") or DEFAULT_MODEL,
            timeout=(timeout_ms or DEFAULT_TIMEOUT_MS) / 1000,
            disable_debug=env.get("OPENAI_API_DISABLE_DEBUG") == "true",
            debug=env.get("DEBUG") == "true",
        )

    def get_migration_info(self) -> MigrationInfo:
        """Rebuilt from the current settings on every call"""
        env = self._env()
        deprecated = _deprecated_variables(env)
        missing = self._missing_variables(env, self._provider_mode(env))
        return MigrationInfo(
            has_deprecated_config=bool(deprecated),
            deprecated_variables=deprecated,
            migration_steps=build_migration_steps(deprecated, missing),
        )
