"""
WSGI config for PainelProject project.

It exposes the WSGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/stable/howto/deployment/wsgi/
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'PainelProject.settings')

application = get_wsgi_application()

# Log key runtime settings so misconfigurations are obvious in the PaaS logs.
from django.conf import settings  # noqa: E402

logger = logging.getLogger("painel.startup")
release = os.getenv("GIT_SHA") or "unknown"
logger.info(
    "Painel startup release=%s DEBUG=%s ALLOWED_HOSTS=%s supabase_configured=%s",
    release,
    settings.DEBUG,
    getattr(settings, "ALLOWED_HOSTS", None),
    bool(getattr(settings, "PAINEL_SUPABASE_URL", "")),
)
