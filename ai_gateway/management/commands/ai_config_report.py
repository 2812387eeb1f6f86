"""
Management command to report AI gateway configuration and migration steps.
"""

from django.core.management.base import BaseCommand, CommandError
from tabulate import tabulate

from ai_gateway.config import AIGatewaySettings
from ai_gateway.core import get_available_providers
from ai_gateway.validation import ConfigurationValidator

SECRET_MARKERS = ("KEY", "TOKEN")


def mask(name, value):
    """Hide all but the last four characters of secrets"""
    if any(marker in name for marker in SECRET_MARKERS) and value:
        return "*" * max(len(value) - 4, 0) + value[-4:]
    return value


class Command(BaseCommand):
    help = "Report AI provider configuration, problems and migration steps"

    def add_arguments(self, parser):
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Exit with an error if the configuration is invalid",
        )

    def handle(self, *args, **options):
        validator = ConfigurationValidator()
        environment = AIGatewaySettings.get_environment()

        self.stdout.write(self.style.SUCCESS("\n🔧 AI Gateway Configuration Report\n"))

        self.print_settings(environment)
        result = self.print_validation(validator)
        self.print_migration(validator)

        if options["strict"] and not result.is_valid:
            raise CommandError(
                f"AI gateway configuration is invalid: {len(result.errors)} error(s)"
            )

    def print_settings(self, environment):
        """Print recognised settings, secrets masked"""
        self.stdout.write(self.style.WARNING("\n📋 Settings"))
        self.stdout.write("=" * 80 + "\n")

        if not environment:
            self.stdout.write(self.style.WARNING("No AI settings found\n"))
        else:
            data = [[name, mask(name, value)] for name, value in sorted(environment.items())]
            self.stdout.write(
                tabulate(data, headers=["Variable", "Value"], tablefmt="grid") + "\n"
            )

        providers = ", ".join(get_available_providers()) or "none"
        self.stdout.write(f"Registered providers: {providers}\n")

    def print_validation(self, validator):
        """Print errors and warnings"""
        self.stdout.write(self.style.WARNING("\n✅ Validation"))
        self.stdout.write("=" * 80 + "\n")

        result = validator.validate_safely()
        if result.is_valid and not result.warnings:
            self.stdout.write(self.style.SUCCESS("Configuration is valid\n"))
            return result

        data = [["error", message] for message in result.errors]
        data += [["warning", message] for message in result.warnings]
        self.stdout.write(
            tabulate(data, headers=["Level", "Message"], tablefmt="grid") + "\n"
        )
        return result

    def print_migration(self, validator):
        """Print migration steps for deprecated settings"""
        info = validator.get_migration_info()
        if not info.has_deprecated_config:
            return

        self.stdout.write(self.style.ERROR("\n🚚 Migration Required"))
        self.stdout.write("=" * 80 + "\n")
        self.stdout.write(
            f"Deprecated variables found: {', '.join(info.deprecated_variables)}\n"
        )

        data = [[i, step] for i, step in enumerate(info.migration_steps, 1)]
        self.stdout.write(tabulate(data, headers=["#", "Step"], tablefmt="grid") + "\n")
