"""
Azure OpenAI provider implementation.

Same wire protocol as OpenAI, addressed through a resource endpoint and a
named deployment.
"""

import logging
from typing import Any, Dict

from openai import AsyncAzureOpenAI

from ai_gateway.core import AIServiceError, AzureOpenAIConfig, ChatCompletionRequest

from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class AzureOpenAIProvider(OpenAIProvider):
    """
    Azure OpenAI provider implementation.

    Requests are always routed to the configured deployment; the request's
    model name is checked against Azure's model names only.
    """

    name = "azure"
    display_name = "Azure OpenAI"
    supported_models = (
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4",
        "gpt-4-32k",
        "gpt-4-turbo",
        "gpt-35-turbo",
        "gpt-35-turbo-16k",
    )
    supports_streaming = True
    supports_reasoning = False

    def __init__(self, config: AzureOpenAIConfig, **kwargs):
        """
        Initialize Azure OpenAI provider.

        Args:
            config: API key, resource endpoint, deployment and API version
            **kwargs: Resilience collaborators forwarded to BaseAIProvider
        """
        super().__init__(config, **kwargs)

    def _build_client(self):
        return AsyncAzureOpenAI(
            api_key=self.config.api_key,
            azure_endpoint=self.config.endpoint,
            azure_deployment=self.config.deployment,
            api_version=self.config.api_version,
            max_retries=0,
        )

    def _model_name(self, request: ChatCompletionRequest) -> str:
        return self.config.deployment

    async def validate_configuration(self) -> bool:
        """
        Validate settings with a one-token completion against the deployment.

        Returns:
            True if the deployment answered

        Raises:
            AuthenticationError, AuthorizationError: On rejected credentials
        """
        try:
            await self._call(
                self._translated(
                    lambda: self.client.chat.completions.create(
                        model=self.config.deployment,
                        messages=[{"role": "user", "content": "test"}],
                        max_tokens=1,
                    )
                )
            )
            return True
        except AIServiceError as e:
            if e.is_fatal:
                logger.error(f"Azure OpenAI rejected the configured credentials: {e}")
                raise
            logger.error(
                f"Azure OpenAI configuration validation failed for deployment "
                f"{self.config.deployment}: {e}"
            )
            return False

    def get_model_info(self) -> Dict[str, Any]:
        info = super(OpenAIProvider, self).get_model_info()
        info.update(
            {
                "endpoint": self.config.endpoint,
                "deployment": self.config.deployment,
                "api_version": self.config.api_version,
                "use_responses_api": self.config.use_responses_api,
            }
        )
        return info
