"""
Tests for the AI gateway package.

Test coverage includes:
- Resilience tests (retry, circuit breaker, rate-limited queue)
- Registry and factory tests (with fake providers)
- Provider tests (mocked OpenAI / Azure OpenAI clients)
- Configuration, validation and migration tests
- Django system check and management command tests
"""

import django
from django.conf import settings

if not settings.configured:
    settings.configure(
        SECRET_KEY="ai-gateway-tests",
        INSTALLED_APPS=[
            "ai_gateway.apps.AIGatewayConfig",
        ],
        DATABASES={},
        USE_TZ=True,
    )
    django.setup()
