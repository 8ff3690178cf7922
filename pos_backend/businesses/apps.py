# businesses/apps.py

"""
BUSINESSES APP CONFIG

Tenant module:
- Business (isolation boundary for catalog, sequence and payment methods)
- Payment Method Directory (read-only to the checkout core)
"""

from django.apps import AppConfig


class BusinessesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "businesses"
    verbose_name = "Businesses"
