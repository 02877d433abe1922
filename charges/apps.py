from django.apps import AppConfig


class ChargesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'charges'
    verbose_name = 'Dispatch Charges & Packing'

    def ready(self):
        """Import signals when app is ready."""
        import charges.signals  # noqa: F401
