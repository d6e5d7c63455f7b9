"""Catalog app configuration."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Configuration for catalog app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.catalog"
