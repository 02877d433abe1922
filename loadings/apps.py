from django.apps import AppConfig


class LoadingsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'loadings'
    verbose_name = 'Loadings & Stock'
