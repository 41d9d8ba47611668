# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite regardless of DATABASE_URL
- Quiet service loggers
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

for _name in ("customers", "inventory", "operations", "reports"):
    LOGGING["loggers"][_name]["level"] = "WARNING"
