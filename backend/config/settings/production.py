"""
Production settings.

Security-hardened settings for deployed environments.
All secrets are read from environment variables (injected via the task definition).
"""

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import settings

DEBUG = False

# Payment processing cannot start without provider credentials
for _name in ("STRIPE_SECRET_KEY", "STRIPE_WEBHOOK_SECRET"):
    if not getattr(settings, _name):
        raise ImproperlyConfigured(f"{_name} must be set in production")

SECURE_SSL_REDIRECT = True
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
