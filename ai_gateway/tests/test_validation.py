"""
Unit tests for configuration validation and migration guidance.
"""
import unittest

from ai_gateway.config import AIGatewaySettings
from ai_gateway.core.exceptions import (
    ConfigurationError,
    DeprecatedConfigurationError,
    ErrorKind,
    MissingConfigurationError,
)
from ai_gateway.migration import (
    ACCESS_TOKEN_GUIDANCE,
    REVERSE_PROXY_GUIDANCE,
    build_migration_steps,
    render_deprecation_message,
    render_missing_config_message,
    select_guidance,
)
from ai_gateway.validation import ConfigurationValidator

AZURE_ENV = {
    "AI_PROVIDER": "azure",
    "AZURE_OPENAI_API_KEY": "azure-key",
    "AZURE_OPENAI_ENDPOINT": "https://test.openai.azure.com",
    "AZURE_OPENAI_DEPLOYMENT": "gpt-4o",
}


class TestConfigurationValidator(unittest.TestCase):
    """Test fail-fast and non-throwing validation"""

    def test_valid_openai_environment(self):
        validator = ConfigurationValidator({"OPENAI_API_KEY": "sk-test"})
        validator.validate_environment()
        self.assertTrue(validator.validate_safely().is_valid)

    def test_deprecated_access_token_always_fails(self):
        for name in ("OPENAI_ACCESS_TOKEN", "CHATGPT_ACCESS_TOKEN"):
            with self.subTest(name=name):
                validator = ConfigurationValidator(
                    {"OPENAI_API_KEY": "sk-valid", name: "legacy-token"}
                )
                with self.assertRaises(DeprecatedConfigurationError) as ctx:
                    validator.validate_environment()

                message = str(ctx.exception)
                self.assertIn("deprecated", message.lower())
                self.assertIn(name, message)
                self.assertEqual(ctx.exception.deprecated_variables, [name])
                self.assertEqual(ctx.exception.kind, ErrorKind.CONFIGURATION_DEPRECATED)

    def test_deprecated_reverse_proxy_fails(self):
        validator = ConfigurationValidator(
            {"OPENAI_API_KEY": "sk-valid", "API_REVERSE_PROXY": "https://proxy"}
        )
        with self.assertRaises(DeprecatedConfigurationError) as ctx:
            validator.validate_environment()
        self.assertIn("Deprecated Reverse Proxy Configuration Detected", str(ctx.exception))

    def test_empty_deprecated_variable_is_ignored(self):
        validator = ConfigurationValidator({"OPENAI_API_KEY": "sk", "OPENAI_ACCESS_TOKEN": ""})
        self.assertEqual(validator.get_deprecated_variables(), [])
        validator.validate_environment()

    def test_missing_openai_key(self):
        for env in ({}, {"OPENAI_API_KEY": "   "}):
            with self.subTest(env=env):
                with self.assertRaises(MissingConfigurationError) as ctx:
                    ConfigurationValidator(env).validate_environment()
                self.assertIn("Missing Required Configuration: OPENAI_API_KEY", str(ctx.exception))
                self.assertEqual(ctx.exception.missing_variables, ["OPENAI_API_KEY"])

    def test_azure_mode_requires_azure_variables(self):
        ConfigurationValidator(AZURE_ENV).validate_environment()

        for name in ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT"):
            with self.subTest(missing=name):
                env = {key: value for key, value in AZURE_ENV.items() if key != name}
                with self.assertRaises(MissingConfigurationError) as ctx:
                    ConfigurationValidator(env).validate_environment()
                self.assertIn("Missing Required Azure OpenAI Configuration", str(ctx.exception))
                self.assertEqual(ctx.exception.missing_variables, [name])

    def test_azure_mode_does_not_need_openai_key(self):
        result = ConfigurationValidator(AZURE_ENV).validate_safely()
        self.assertTrue(result.is_valid)

    def test_validate_safely_collects_everything(self):
        result = ConfigurationValidator(
            {
                "OPENAI_ACCESS_TOKEN": "legacy",
                "REVERSE_PROXY_URL": "http://proxy",
                "OPENAI_API_BASE_URL": "http://insecure.example.com",
            }
        ).validate_safely()

        self.assertFalse(result.is_valid)
        self.assertEqual(
            list(result.errors),
            [
                "Deprecated configuration detected: OPENAI_ACCESS_TOKEN, REVERSE_PROXY_URL",
                "Missing required configuration: OPENAI_API_KEY",
            ],
        )
        self.assertEqual(list(result.warnings), ["OPENAI_API_BASE_URL should use HTTPS protocol"])

    def test_validate_safely_warns_on_http_azure_endpoint(self):
        env = dict(AZURE_ENV, AZURE_OPENAI_ENDPOINT="http://test.openai.azure.com")
        result = ConfigurationValidator(env).validate_safely()
        self.assertTrue(result.is_valid)
        self.assertEqual(list(result.warnings), ["AZURE_OPENAI_ENDPOINT should use HTTPS protocol"])

    def test_validated_config_defaults(self):
        config = ConfigurationValidator({"OPENAI_API_KEY": "sk-test"}).get_validated_config()

        self.assertEqual(config.provider, "openai")
        self.assertEqual(config.api_key, "sk-test")
        self.assertIsNone(config.base_url)
        self.assertEqual(config.model, "gpt-4o-mini")
        self.assertEqual(config.timeout, 100.0)
        self.assertFalse(config.disable_debug)
        self.assertFalse(config.debug)

    def test_validated_config_overrides(self):
        config = ConfigurationValidator(
            {
                "OPENAI_API_KEY": "sk-test",
                "OPENAI_API_BASE_URL": "https://proxy.example.com/v1",
                "OPENAI_API_MODEL": "gpt-4o",
                "TIMEOUT_MS": "30000",
                "OPENAI_API_DISABLE_DEBUG": "true",
                "DEBUG": "true",
            }
        ).get_validated_config()

        self.assertEqual(config.base_url, "https://proxy.example.com/v1")
        self.assertEqual(config.model, "gpt-4o")
        self.assertEqual(config.timeout, 30.0)
        self.assertTrue(config.disable_debug)
        self.assertTrue(config.debug)

    def test_validated_config_azure(self):
        config = ConfigurationValidator(AZURE_ENV).get_validated_config()
        self.assertEqual(config.provider, "azure")
        self.assertEqual(config.api_key, "azure-key")
        self.assertEqual(config.base_url, "https://test.openai.azure.com")

    def test_validated_config_rejects_bad_timeout(self):
        with self.assertRaises(ConfigurationError):
            ConfigurationValidator(
                {"OPENAI_API_KEY": "sk", "TIMEOUT_MS": "soon"}
            ).get_validated_config()

    def test_validated_config_rejects_negative_timeout(self):
        env = {"OPENAI_API_KEY": "sk", "TIMEOUT_MS": "-5"}
        with self.assertRaises(ConfigurationError):
            ConfigurationValidator(env).get_validated_config()
        with self.assertRaises(ConfigurationError):
            AIGatewaySettings.get_ai_config(env)

    def test_migration_info(self):
        info = ConfigurationValidator({"CHATGPT_ACCESS_TOKEN": "legacy"}).get_migration_info()

        self.assertTrue(info.has_deprecated_config)
        self.assertEqual(info.deprecated_variables, ["CHATGPT_ACCESS_TOKEN"])
        self.assertEqual(
            info.migration_steps,
            [
                "Remove deprecated variables: CHATGPT_ACCESS_TOKEN",
                "Set OPENAI_API_KEY with your official OpenAI API key",
                "Restart the application",
            ],
        )

    def test_migration_info_is_rebuilt_on_each_call(self):
        env = {"OPENAI_API_KEY": "sk"}
        validator = ConfigurationValidator(env)
        self.assertFalse(validator.get_migration_info().has_deprecated_config)

        env["API_REVERSE_PROXY"] = "https://proxy"
        self.assertTrue(validator.get_migration_info().has_deprecated_config)


class TestMigrationGuidance(unittest.TestCase):
    """Test guide selection and rendering"""

    def test_access_token_family_takes_precedence(self):
        guidance = select_guidance(["API_REVERSE_PROXY", "OPENAI_ACCESS_TOKEN"])
        self.assertIs(guidance, ACCESS_TOKEN_GUIDANCE)
        self.assertIs(select_guidance(["REVERSE_PROXY_URL"]), REVERSE_PROXY_GUIDANCE)

    def test_generic_guidance_for_other_variables(self):
        guidance = select_guidance(["SOME_OLD_SETTING"])
        self.assertIn("SOME_OLD_SETTING", guidance.steps[0].action)

    def test_render_deprecation_message_layout(self):
        message = render_deprecation_message(["OPENAI_ACCESS_TOKEN"])
        lines = message.splitlines()

        self.assertEqual(lines[0], "Deprecated Configuration Detected")
        self.assertIn("Deprecated variables found: OPENAI_ACCESS_TOKEN", message)
        self.assertIn("1. Remove OPENAI_ACCESS_TOKEN", message)
        self.assertIn("   Example: OPENAI_API_KEY=sk-...", message)
        self.assertIn("• Get OpenAI API Key: https://platform.openai.com/api-keys", message)
        self.assertTrue(
            message.endswith("Please update your configuration and restart the application.")
        )

    def test_render_missing_config_message(self):
        self.assertIn("AZURE_OPENAI_DEPLOYMENT", render_missing_config_message("azure"))
        self.assertIn("OPENAI_API_KEY", render_missing_config_message("openai"))

    def test_build_migration_steps_always_ends_with_restart(self):
        self.assertEqual(build_migration_steps([], []), ["Restart the application"])


if __name__ == '__main__':
    unittest.main()
