from django.apps import AppConfig


class AuthConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.auth'
    # Avoid clashing with django.contrib.auth
    label = 'storefront_auth'
