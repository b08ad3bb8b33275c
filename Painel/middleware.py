from __future__ import annotations

from .authorization.session import AuthorizationSession
from .integration.auth import load_session_profile


class SessionProfileMiddleware:
    """
    Resolves the signed-in profile and attaches ``request.authz``.

    Must run after ``SessionMiddleware``.
    """

    SKIP_PREFIXES = ("/static/", "/media/", "/favicon.ico")

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith(self.SKIP_PREFIXES):
            request.authz = AuthorizationSession(None)
            return self.get_response(request)

        profile, loading = load_session_profile(request)
        request.authz = AuthorizationSession(profile, loading=loading)
        return self.get_response(request)
