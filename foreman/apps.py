"""
Django Foreman app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ForemanConfig(AppConfig):
    """Foreman application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "foreman"
    verbose_name = _("Production Projects")

    def ready(self):
        # Import handlers to register them
        from foreman.signals import handlers  # noqa: F401
