"""
Unit tests for AI gateway configuration.

Tests configuration loading from Django settings and the environment.
"""
import os
import unittest
from unittest.mock import patch
from django.test import SimpleTestCase, override_settings

from ai_gateway.config import AIGatewaySettings
from ai_gateway.core.exceptions import ConfigurationError


@patch.dict(os.environ, {}, clear=True)
class TestAIGatewaySettings(SimpleTestCase):
    """Test configuration management"""

    @override_settings(OPENAI_API_KEY="settings-key")
    def test_django_setting_wins_over_environment(self):
        with patch.dict(os.environ, {"OPENAI_API_KEY": "env-key"}):
            self.assertEqual(AIGatewaySettings.get_setting("OPENAI_API_KEY"), "settings-key")

    def test_falls_back_to_environment(self):
        with patch.dict(os.environ, {"AZURE_OPENAI_ENDPOINT": "https://env.example.com"}):
            self.assertEqual(
                AIGatewaySettings.get_setting("AZURE_OPENAI_ENDPOINT"),
                "https://env.example.com",
            )

    def test_default_when_unset(self):
        self.assertIsNone(AIGatewaySettings.get_setting("OPENAI_API_KEY"))
        self.assertEqual(AIGatewaySettings.get_setting("AI_PROVIDER", "openai"), "openai")

    @override_settings(ENABLE_REASONING=True, TIMEOUT_MS=5000)
    def test_non_string_settings_are_normalized(self):
        self.assertEqual(AIGatewaySettings.get_setting("ENABLE_REASONING"), "true")
        self.assertEqual(AIGatewaySettings.get_setting("TIMEOUT_MS"), "5000")

    @override_settings(OPENAI_API_KEY="sk-test", OPENAI_ACCESS_TOKEN="legacy")
    def test_get_environment_lists_known_variables(self):
        environment = AIGatewaySettings.get_environment()
        self.assertEqual(environment["OPENAI_API_KEY"], "sk-test")
        self.assertEqual(environment["OPENAI_ACCESS_TOKEN"], "legacy")
        self.assertNotIn("SECRET_KEY", environment)

    @override_settings(
        OPENAI_API_KEY="sk-test",
        OPENAI_API_BASE_URL="https://api.openai.com/v1",
        OPENAI_ORGANIZATION="org-1",
    )
    def test_get_ai_config_openai_defaults(self):
        config = AIGatewaySettings.get_ai_config()

        self.assertEqual(config.provider, "openai")
        self.assertEqual(config.default_model, "gpt-4o-mini")
        self.assertFalse(config.enable_reasoning)
        self.assertEqual(config.timeout, 100.0)
        self.assertIsNone(config.min_request_interval)
        self.assertEqual(config.openai.api_key, "sk-test")
        self.assertEqual(config.openai.base_url, "https://api.openai.com/v1")
        self.assertEqual(config.openai.organization, "org-1")
        self.assertIsNone(config.azure)

    @override_settings(
        AI_PROVIDER="Azure",
        AZURE_OPENAI_API_KEY="azure-key",
        AZURE_OPENAI_ENDPOINT="https://test.openai.azure.com",
        AZURE_OPENAI_DEPLOYMENT="gpt-4o",
        AZURE_OPENAI_USE_RESPONSES_API="true",
        TIMEOUT_MS="30000",
        AI_MIN_REQUEST_INTERVAL_MS="250",
    )
    def test_get_ai_config_azure(self):
        config = AIGatewaySettings.get_ai_config()

        self.assertEqual(config.provider, "azure")
        self.assertEqual(config.timeout, 30.0)
        self.assertEqual(config.min_request_interval, 0.25)
        self.assertEqual(config.azure.deployment, "gpt-4o")
        self.assertEqual(config.azure.api_version, "2024-02-15-preview")
        self.assertTrue(config.azure.use_responses_api)
        self.assertIsNone(config.openai)

    def test_get_ai_config_from_explicit_mapping(self):
        config = AIGatewaySettings.get_ai_config(
            {"OPENAI_API_KEY": "sk", "DEFAULT_MODEL": "gpt-4o", "ENABLE_REASONING": "true"}
        )
        self.assertEqual(config.default_model, "gpt-4o")
        self.assertTrue(config.enable_reasoning)

    def test_get_ai_config_rejects_bad_numbers(self):
        with self.assertRaises(ConfigurationError):
            AIGatewaySettings.get_ai_config({"TIMEOUT_MS": "fast"})
        with self.assertRaises(ConfigurationError):
            AIGatewaySettings.get_ai_config({"AI_MIN_REQUEST_INTERVAL_MS": "-5"})


if __name__ == '__main__':
    unittest.main()
