"""
CourtTime – Django Settings (Infrastructure Only)
==================================================
Django serves as the persistence container for the booking rules engine.
The rules engine is the authority; Django does not dictate its structure.

Only the booking store is registered as an app. The engine itself is
plain Python and reads storage through courttime.booking_store.provider.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
# BASE_DIR = project root (where pyproject.toml lives)
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get(
    "COURTTIME_SECRET_KEY", "courttime-dev-key-replace-before-deployment"
)

DEBUG = os.environ.get("COURTTIME_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── CourtTime Modules ─────────────────────────────────
    "courttime.booking_store",
]

MIDDLEWARE = []

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production uses PostgreSQL via environment.
if os.environ.get("COURTTIME_DB_ENGINE") == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("COURTTIME_DB_NAME", "courttime"),
            "USER": os.environ.get("COURTTIME_DB_USER", "courttime"),
            "PASSWORD": os.environ.get("COURTTIME_DB_PASSWORD", ""),
            "HOST": os.environ.get("COURTTIME_DB_HOST", "localhost"),
            "PORT": os.environ.get("COURTTIME_DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Rules Engine ──────────────────────────────────────────────
# Read by courttime.rules_engine.settings.RulesEngineSettings.
COURTTIME_RULES = {
    "DEFAULT_CANCEL_CUTOFF_MINUTES": 240,
    "DEFAULT_PENALTY_TYPE": "strike",
    "COUNTED_BOOKING_STATUSES": ["confirmed", "pending"],
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "courttime": {
            "handlers": ["console"],
            "level": os.environ.get("COURTTIME_LOG_LEVEL", "INFO"),
        },
    },
}
