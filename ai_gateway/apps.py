from django.apps import AppConfig


class AIGatewayConfig(AppConfig):
    name = 'ai_gateway'
    verbose_name = 'AI Gateway'

    def ready(self):
        """
        Register system checks and the built-in providers when the app is ready.
        """
        import ai_gateway.checks  # noqa: F401  # Register configuration checks
        import ai_gateway.providers  # noqa: F401  # Populate default_registry
