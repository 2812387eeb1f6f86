"""
Django system checks for AI gateway configuration.

These checks surface deprecated and missing provider settings at startup.
Run with: python manage.py check
"""

from django.core.checks import Warning, Error, register

from .validation import ConfigurationValidator


@register()
def check_ai_gateway_configuration(app_configs, **kwargs):
    """
    Check that the active AI provider is configured with supported settings.

    Deprecated variables and missing credentials are errors; plain-HTTP
    endpoints are warnings.
    """
    messages = []
    validator = ConfigurationValidator()

    deprecated = validator.get_deprecated_variables()
    if deprecated:
        messages.append(
            Error(
                f"Deprecated AI configuration detected: {', '.join(deprecated)}",
                hint='Remove the deprecated variables and set OPENAI_API_KEY. '
                     'Run "python manage.py ai_config_report" for migration steps.',
                id='ai_gateway.E001',
            )
        )

    result = validator.validate_safely()
    for error in result.errors:
        if error.startswith('Missing required configuration'):
            messages.append(
                Error(
                    error,
                    hint='Set the variable in Django settings or the environment',
                    id='ai_gateway.E002',
                )
            )

    for warning in result.warnings:
        messages.append(
            Warning(
                warning,
                hint='Use an https:// URL for the AI provider endpoint',
                id='ai_gateway.W001',
            )
        )

    return messages
