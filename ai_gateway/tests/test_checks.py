"""
Tests for the Django system check and the configuration report command.
"""
import os
import unittest
from io import StringIO
from unittest.mock import patch
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, override_settings

from ai_gateway.checks import check_ai_gateway_configuration
from ai_gateway.management.commands.ai_config_report import mask


@patch.dict(os.environ, {}, clear=True)
class TestConfigurationCheck(SimpleTestCase):
    """Test system check messages"""

    @override_settings(OPENAI_API_KEY="sk-test")
    def test_valid_configuration_has_no_messages(self):
        self.assertEqual(check_ai_gateway_configuration(None), [])

    @override_settings(OPENAI_API_KEY="sk-test", OPENAI_ACCESS_TOKEN="legacy")
    def test_deprecated_variables_are_errors(self):
        messages = check_ai_gateway_configuration(None)

        self.assertEqual([m.id for m in messages], ["ai_gateway.E001"])
        self.assertIn("OPENAI_ACCESS_TOKEN", messages[0].msg)
        self.assertTrue(messages[0].is_serious())

    @override_settings(AI_PROVIDER="azure", AZURE_OPENAI_API_KEY="key")
    def test_missing_variables_are_errors(self):
        messages = check_ai_gateway_configuration(None)

        self.assertEqual([m.id for m in messages], ["ai_gateway.E002", "ai_gateway.E002"])
        self.assertIn("AZURE_OPENAI_ENDPOINT", messages[0].msg)
        self.assertIn("AZURE_OPENAI_DEPLOYMENT", messages[1].msg)

    @override_settings(OPENAI_API_KEY="sk-test", OPENAI_API_BASE_URL="http://localhost:8080")
    def test_plain_http_endpoint_is_warning(self):
        messages = check_ai_gateway_configuration(None)

        self.assertEqual([m.id for m in messages], ["ai_gateway.W001"])
        self.assertFalse(messages[0].is_serious())


@patch.dict(os.environ, {}, clear=True)
class TestConfigReportCommand(SimpleTestCase):
    """Test the ai_config_report management command"""

    @override_settings(OPENAI_API_KEY="sk-test-1234")
    def test_report_valid_configuration(self):
        out = StringIO()
        call_command("ai_config_report", stdout=out)
        output = out.getvalue()

        self.assertIn("AI Gateway Configuration Report", output)
        self.assertIn("Configuration is valid", output)
        self.assertIn("1234", output)
        self.assertNotIn("sk-test-1234", output)
        self.assertIn("openai", output)

    @override_settings(OPENAI_API_KEY="sk-test", API_REVERSE_PROXY="https://proxy")
    def test_report_prints_migration_steps(self):
        out = StringIO()
        call_command("ai_config_report", stdout=out)
        output = out.getvalue()

        self.assertIn("Migration Required", output)
        self.assertIn("Remove deprecated variables: API_REVERSE_PROXY", output)
        self.assertIn("Restart the application", output)

    @override_settings(AI_PROVIDER="openai")
    def test_strict_fails_on_invalid_configuration(self):
        with self.assertRaises(CommandError):
            call_command("ai_config_report", "--strict", stdout=StringIO())

    def test_mask(self):
        self.assertEqual(mask("OPENAI_API_KEY", "sk-abcdef"), "*****cdef")
        self.assertEqual(mask("AI_PROVIDER", "azure"), "azure")


if __name__ == '__main__':
    unittest.main()
