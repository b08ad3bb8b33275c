from django.conf import settings
from django.utils import timezone

from .authorization.guards import get_authz
from .authorization.menu import LOGOUT_ITEM, visible_menu


def authorization(request):
    """Expose the session's authorization helpers and the filtered menu."""
    authz = get_authz(request)
    return {
        "authz": authz,
        "current_profile": authz.profile,
        "menu_items": visible_menu(authz) if authz.profile else [],
        "logout_item": LOGOUT_ITEM,
    }


def site_settings(request):
    """Add site settings to context"""
    return {
        "SITE_NAME": getattr(settings, "PAINEL_SITE_NAME", "Painel Delivery"),
        "CURRENT_YEAR": timezone.now().year,
    }
