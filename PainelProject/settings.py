"""
Django settings for the Painel project.

Every deploy-specific value comes from the environment; defaults are meant
for local development.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = _env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]
CSRF_TRUSTED_ORIGINS = [o.strip() for o in os.getenv("DJANGO_CSRF_TRUSTED_ORIGINS", "").split(",") if o.strip()]

INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "Painel",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "Painel.middleware.SessionProfileMiddleware",
]

ROOT_URLCONF = "PainelProject.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "Painel.context_processors.authorization",
                "Painel.context_processors.site_settings",
            ],
        },
    },
]

WSGI_APPLICATION = "PainelProject.wsgi.application"

# Persistence lives in Supabase; SQLite only satisfies Django's checks.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# Sessions hold only the Supabase token and the cached profile.
SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SECURE = _env_bool("DJANGO_SESSION_COOKIE_SECURE", not DEBUG)
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

LOGIN_URL = "/login"

LANGUAGE_CODE = "pt-br"
TIME_ZONE = "America/Sao_Paulo"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Supabase (auth + tables)
PAINEL_SUPABASE_URL = os.getenv("PAINEL_SUPABASE_URL", "")
PAINEL_SUPABASE_ANON_KEY = os.getenv("PAINEL_SUPABASE_ANON_KEY", "")
PAINEL_SUPABASE_TIMEOUT_SECONDS = int(os.getenv("PAINEL_SUPABASE_TIMEOUT_SECONDS", "8"))
PAINEL_SUPABASE_MAX_RETRIES = int(os.getenv("PAINEL_SUPABASE_MAX_RETRIES", "2"))

# External automation notified on order status changes (optional)
PAINEL_ORDER_STATUS_WEBHOOK_URL = os.getenv("PAINEL_ORDER_STATUS_WEBHOOK_URL", "")
PAINEL_WEBHOOK_TIMEOUT_SECONDS = int(os.getenv("PAINEL_WEBHOOK_TIMEOUT_SECONDS", "10"))

PAINEL_SITE_NAME = os.getenv("PAINEL_SITE_NAME", "Painel Delivery")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "Painel": {
            "handlers": ["console"],
            "level": os.getenv("PAINEL_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "painel.startup": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}
