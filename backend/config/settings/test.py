"""
Test settings.

In-memory SQLite and dummy Stripe credentials so the suite runs without
external services.
"""

from .base import *  # noqa: F403
from .base import settings

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

settings.STRIPE_SECRET_KEY = "sk_test_dummy"
settings.STRIPE_WEBHOOK_SECRET = "whsec_test_secret"
settings.STRIPE_CURRENCY = "brl"
settings.SUBSCRIPTION_PERIOD_DAYS = 30

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
