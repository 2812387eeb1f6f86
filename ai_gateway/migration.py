"""
Migration guidance for deprecated and missing configuration.

Holds the operator-facing texts shown when legacy settings (unofficial
access tokens, reverse proxies) are found or when the active provider
mode is missing required credentials.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

ACCESS_TOKEN_VARIABLES = ("OPENAI_ACCESS_TOKEN", "CHATGPT_ACCESS_TOKEN")
REVERSE_PROXY_VARIABLES = ("API_REVERSE_PROXY", "REVERSE_PROXY_URL")


@dataclass(frozen=True)
class MigrationStep:
    action: str
    description: str
    example: Optional[str] = None


@dataclass(frozen=True)
class Resource:
    title: str
    url: str
    description: str


@dataclass(frozen=True)
class MigrationGuidance:
    """A titled, ordered set of steps plus reference links"""

    title: str
    description: str
    steps: Tuple[MigrationStep, ...]
    resources: Tuple[Resource, ...]


@dataclass
class MigrationInfo:
    """Report on deprecated configuration and what to do about it"""

    has_deprecated_config: bool
    deprecated_variables: List[str] = field(default_factory=list)
    migration_steps: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "has_deprecated_config": self.has_deprecated_config,
            "deprecated_variables": list(self.deprecated_variables),
            "migration_steps": list(self.migration_steps),
        }


API_KEY_RESOURCE = Resource(
    title="Get OpenAI API Key",
    url="https://platform.openai.com/api-keys",
    description="Create and manage your OpenAI API keys",
)

SET_API_KEY_STEP = MigrationStep(
    action="Set OPENAI_API_KEY",
    description="Add your official OpenAI API key",
    example="OPENAI_API_KEY=sk-...",
)

ACCESS_TOKEN_GUIDANCE = MigrationGuidance(
    title="Deprecated Configuration Detected",
    description=(
        "The OPENAI_ACCESS_TOKEN variable is no longer supported. "
        "Please migrate to the official OpenAI API."
    ),
    steps=(
        MigrationStep(
            action="Remove OPENAI_ACCESS_TOKEN",
            description="Delete the OPENAI_ACCESS_TOKEN environment variable",
        ),
        SET_API_KEY_STEP,
        MigrationStep(
            action="Remove API_REVERSE_PROXY",
            description="Delete the API_REVERSE_PROXY environment variable if present",
        ),
    ),
    resources=(API_KEY_RESOURCE,),
)

REVERSE_PROXY_GUIDANCE = MigrationGuidance(
    title="Deprecated Reverse Proxy Configuration Detected",
    description=(
        "The API_REVERSE_PROXY variable is no longer supported. "
        "Please migrate to the official OpenAI API."
    ),
    steps=(
        MigrationStep(
            action="Remove API_REVERSE_PROXY",
            description="Delete the API_REVERSE_PROXY environment variable",
        ),
        SET_API_KEY_STEP,
        MigrationStep(
            action="Optional: Set OPENAI_API_BASE_URL",
            description="Set custom API base URL if needed",
            example="OPENAI_API_BASE_URL=https://api.openai.com",
        ),
    ),
    resources=(
        API_KEY_RESOURCE,
        Resource(
            title="OpenAI API Documentation",
            url="https://platform.openai.com/docs/api-reference",
            description="Official OpenAI API documentation",
        ),
    ),
)

MISSING_AZURE_CONFIG_MESSAGE = """\
Missing Required Azure OpenAI Configuration

The application is configured to use Azure OpenAI but required environment variables are missing.

Required Azure OpenAI Environment Variables:
- AZURE_OPENAI_API_KEY: Your Azure OpenAI API key
- AZURE_OPENAI_ENDPOINT: Your Azure OpenAI endpoint (e.g., https://your-resource.openai.azure.com)
- AZURE_OPENAI_DEPLOYMENT: Your Azure OpenAI deployment name
- AZURE_OPENAI_API_VERSION: API version (optional, defaults to 2024-02-15-preview)

Setup Steps:
1. Get your Azure OpenAI credentials from the Azure Portal
2. Set the required environment variables
3. Restart the application

Example configuration:
AI_PROVIDER=azure
AZURE_OPENAI_API_KEY=your_azure_api_key_here
AZURE_OPENAI_ENDPOINT=https://your-resource.openai.azure.com
AZURE_OPENAI_DEPLOYMENT=your_deployment_name
AZURE_OPENAI_API_VERSION=2024-02-15-preview

Please set your Azure OpenAI configuration and restart the application."""

MISSING_OPENAI_CONFIG_MESSAGE = """\
Missing Required Configuration: OPENAI_API_KEY

The application requires a valid OpenAI API key to function.

Setup Steps:
1. Get your API key from: https://platform.openai.com/api-keys
2. Set the environment variable: OPENAI_API_KEY=sk-your-api-key-here
3. Optionally set: OPENAI_API_BASE_URL=https://api.openai.com (if using a custom endpoint)

Example configuration:
OPENAI_API_KEY=sk-proj-...
OPENAI_API_MODEL=gpt-4o
OPENAI_API_BASE_URL=https://api.openai.com

Please set your API key and restart the application."""


def generic_guidance(deprecated_variables: Sequence[str]) -> MigrationGuidance:
    return MigrationGuidance(
        title="Deprecated Configuration Detected",
        description="The following configuration variables are no longer supported.",
        steps=(
            MigrationStep(
                action=f"Remove deprecated variables: {', '.join(deprecated_variables)}",
                description="Delete the deprecated environment variables",
            ),
            SET_API_KEY_STEP,
        ),
        resources=(API_KEY_RESOURCE,),
    )


def select_guidance(deprecated_variables: Sequence[str]) -> MigrationGuidance:
    """
    Pick the guide for a set of deprecated variables.

    The access-token family takes precedence over the reverse-proxy family.
    """
    if any(name in ACCESS_TOKEN_VARIABLES for name in deprecated_variables):
        return ACCESS_TOKEN_GUIDANCE
    if any(name in REVERSE_PROXY_VARIABLES for name in deprecated_variables):
        return REVERSE_PROXY_GUIDANCE
    return generic_guidance(deprecated_variables)


def render_deprecation_message(deprecated_variables: Sequence[str]) -> str:
    """
    Render the full deprecation error text.

    Layout: title, description, offending variables, numbered steps with
    optional examples, resources, closing instruction.
    """
    guidance = select_guidance(deprecated_variables)

    steps = []
    for index, step in enumerate(guidance.steps, start=1):
        text = f"{index}. {step.action}\n   {step.description}"
        if step.example:
            text += f"\n   Example: {step.example}"
        steps.append(text)

    resources = [
        f"• {resource.title}: {resource.url}\n  {resource.description}"
        for resource in guidance.resources
    ]

    return (
        f"{guidance.title}\n\n"
        f"{guidance.description}\n\n"
        f"Deprecated variables found: {', '.join(deprecated_variables)}\n\n"
        f"Migration Steps:\n"
        + "\n\n".join(steps)
        + "\n\nResources:\n"
        + "\n".join(resources)
        + "\n\nPlease update your configuration and restart the application."
    )


def render_missing_config_message(provider: str) -> str:
    """Setup guide for the active provider mode"""
    if provider == "azure":
        return MISSING_AZURE_CONFIG_MESSAGE
    return MISSING_OPENAI_CONFIG_MESSAGE


def build_migration_steps(
    deprecated_variables: Sequence[str], missing_variables: Sequence[str]
) -> List[str]:
    """
    Ordered, human-readable steps to reach a valid configuration.

    Always ends with a restart instruction.
    """
    steps = []
    if deprecated_variables:
        steps.append(f"Remove deprecated variables: {', '.join(deprecated_variables)}")

    descriptions = {
        "AZURE_OPENAI_API_KEY": "your Azure OpenAI API key",
        "AZURE_OPENAI_ENDPOINT": "your Azure OpenAI endpoint",
        "AZURE_OPENAI_DEPLOYMENT": "your Azure OpenAI deployment name",
        "OPENAI_API_KEY": "your official OpenAI API key",
    }
    for name in missing_variables:
        steps.append(f"Set {name} with {descriptions.get(name, 'a value')}")

    steps.append("Restart the application")
    return steps
