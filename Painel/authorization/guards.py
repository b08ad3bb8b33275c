from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from urllib.parse import urlencode, urlsplit

from django.conf import settings
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from .roles import (
    CATEGORY_MANAGEMENT,
    ESTABLISHMENT_DASHBOARD,
    FULL_DASHBOARD,
    LOGIN_ROUTE,
    ORDERS_KANBAN,
    PRODUCT_MANAGEMENT,
    STAFF_MANAGEMENT,
    USER_MANAGEMENT,
    USER_TYPES_MANAGEMENT,
    PermissionRequirement,
)
from .session import AuthorizationSession

logger = logging.getLogger(__name__)


class GuardOutcome(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    DENIED_VIEW = "denied_view"
    REDIRECT = "redirect"
    ALLOW = "allow"


@dataclass(frozen=True, slots=True)
class GuardDecision:
    outcome: GuardOutcome
    target: str = ""


def _login_target(requested_path: str) -> str:
    login_url = getattr(settings, "LOGIN_URL", LOGIN_ROUTE)
    if not requested_path:
        return login_url
    return f"{login_url}?{urlencode({'next': requested_path})}"


def evaluate_guard(
    authz: AuthorizationSession,
    *,
    permission: PermissionRequirement | None = None,
    fallback_route: str | None = None,
    show_unauthorized: bool = False,
    requested_path: str = "",
) -> GuardDecision:
    """
    Decide what a guarded page should do for the current session.

    Loading sessions get no access decision at all. Sessions without a
    profile go to the login page carrying the requested location. A denied
    requirement either shows the access-denied page or redirects to the
    fallback route (or the role's default route).
    """
    if authz.loading:
        return GuardDecision(GuardOutcome.LOADING)

    if authz.profile is None:
        return GuardDecision(GuardOutcome.UNAUTHENTICATED, _login_target(requested_path))

    if permission is not None and not authz.has_permission(permission):
        if show_unauthorized:
            return GuardDecision(GuardOutcome.DENIED_VIEW)
        target = fallback_route or authz.get_default_route()
        if requested_path and urlsplit(requested_path).path == target:
            # Redirecting to the page being denied would loop.
            return GuardDecision(GuardOutcome.DENIED_VIEW)
        return GuardDecision(GuardOutcome.REDIRECT, target)

    return GuardDecision(GuardOutcome.ALLOW)


def _back_url(request, authz: AuthorizationSession) -> str:
    referer = request.META.get("HTTP_REFERER", "")
    if referer and url_has_allowed_host_and_scheme(
        url=referer,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return referer
    return authz.get_default_route()


def get_authz(request) -> AuthorizationSession:
    authz = getattr(request, "authz", None)
    if authz is None:
        # Middleware not installed: treat as anonymous.
        authz = AuthorizationSession(None)
        request.authz = authz
    return authz


def route_guard(
    permission: PermissionRequirement | None = None,
    *,
    fallback_route: str | None = None,
    show_unauthorized: bool = False,
):
    """View decorator enforcing ``permission`` on the current session."""

    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            authz = get_authz(request)
            decision = evaluate_guard(
                authz,
                permission=permission,
                fallback_route=fallback_route,
                show_unauthorized=show_unauthorized,
                requested_path=request.get_full_path(),
            )

            if decision.outcome is GuardOutcome.ALLOW:
                return view_func(request, *args, **kwargs)

            if decision.outcome is GuardOutcome.LOADING:
                return render(request, "painel/loading.html", status=200)

            if decision.outcome is GuardOutcome.DENIED_VIEW:
                logger.info(
                    "Access denied to %s for role %s", request.path, authz.role.value
                )
                return render(
                    request,
                    "painel/access_denied.html",
                    {
                        "current_role": authz.role.value,
                        "back_url": _back_url(request, authz),
                    },
                    status=403,
                )

            if decision.outcome is GuardOutcome.REDIRECT:
                logger.info("Redirecting %s from %s to %s", authz.profile.id, request.path, decision.target)
            return redirect(decision.target)

        return _wrapped_view

    return decorator


def login_required_guard(view_func):
    return route_guard()(view_func)


def admin_only_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(FULL_DASHBOARD, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def establishment_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(ESTABLISHMENT_DASHBOARD, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def orders_guard(view_func):
    return route_guard(ORDERS_KANBAN)(view_func)


def product_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(PRODUCT_MANAGEMENT, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def category_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(CATEGORY_MANAGEMENT, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def staff_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(STAFF_MANAGEMENT, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def user_management_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(USER_MANAGEMENT, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard


def user_types_guard(view_func=None, *, show_unauthorized: bool = True):
    guard = route_guard(USER_TYPES_MANAGEMENT, show_unauthorized=show_unauthorized)
    return guard(view_func) if view_func else guard
