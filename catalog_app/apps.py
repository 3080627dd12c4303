from django.apps import AppConfig


class CatalogAppConfig(AppConfig):
    name = "catalog_app"
    verbose_name = "Product catalog"
    default_auto_field = "django.db.models.BigAutoField"
