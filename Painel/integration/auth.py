"""
Session binding between Django and Supabase auth.

The Django session keeps the Supabase access token and, once fetched, the
serialized user profile. Profile resolution is retried on later requests
while Supabase is unreachable; during that window the session is reported as
still loading.
"""

from __future__ import annotations

import logging
from typing import Any

from Painel.authorization.roles import UserProfile

from .adapter import profile_from_session, profile_to_session, to_user_profile
from .client import SupabaseClient, eq
from .exceptions import ContractError, IntegrationError, UpstreamUnavailable

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "supabase_access_token"
SESSION_USER_KEY = "supabase_user"
SESSION_PROFILE_KEY = "painel_profile"


def fetch_profile(client: SupabaseClient, user: dict[str, Any]) -> UserProfile | None:
    user_id = str(user.get("id", "")).strip()
    email = str(user.get("email", "") or "").strip()
    if not user_id:
        return None

    profile_row = client.select_one("user_profiles", filters={"user_id": eq(user_id)})
    if profile_row is None:
        logger.warning("No user_profiles row for %s", email or user_id)
        return None

    role_row = None
    if profile_row.get("role_id"):
        role_row = client.select_one(
            "user_roles", columns="role_name", filters={"id": eq(profile_row["role_id"])}
        )
    return to_user_profile(user_id, email, profile_row, role_row)


def sign_in(request, email: str, password: str) -> UserProfile | None:
    """
    Authenticate against Supabase and store the session.

    Raises ContractError on bad credentials or a missing profile and
    UpstreamUnavailable when Supabase is down. Returns None when the
    credentials were accepted but the profile could not be fetched yet.
    """
    client = SupabaseClient()
    payload = client.sign_in_with_password(email, password)
    token = str(payload.get("access_token", "")).strip()
    user = payload.get("user") if isinstance(payload.get("user"), dict) else {}
    if not token:
        raise ContractError("Supabase did not return an access token.")

    request.session.cycle_key()
    request.session[SESSION_TOKEN_KEY] = token
    request.session[SESSION_USER_KEY] = {"id": user.get("id"), "email": user.get("email")}
    request.session.pop(SESSION_PROFILE_KEY, None)

    try:
        profile = fetch_profile(SupabaseClient(access_token=token), user)
    except UpstreamUnavailable as exc:
        logger.warning("Profile fetch postponed for %s: %s", email, exc)
        return None
    except ContractError:
        _forget(request)
        raise

    if profile is None:
        _forget(request)
        raise ContractError("Perfil de usuário não encontrado.")

    request.session[SESSION_PROFILE_KEY] = profile_to_session(profile)
    logger.info("Signed in %s as %s", email, profile.role.value)
    return profile


def sign_out(request) -> None:
    token = request.session.get(SESSION_TOKEN_KEY)
    if token:
        try:
            SupabaseClient().sign_out(token)
        except IntegrationError as exc:
            # The local session is cleared regardless.
            logger.warning("Supabase sign-out failed: %s", exc)
    request.session.flush()


def _forget(request) -> None:
    for key in (SESSION_TOKEN_KEY, SESSION_USER_KEY, SESSION_PROFILE_KEY):
        request.session.pop(key, None)


def load_session_profile(request) -> tuple[UserProfile | None, bool]:
    """Return ``(profile, loading)`` for the current request."""
    session = getattr(request, "session", None)
    if session is None:
        return None, False

    token = session.get(SESSION_TOKEN_KEY)
    if not token:
        return None, False

    profile = profile_from_session(session.get(SESSION_PROFILE_KEY))
    if profile is not None:
        return profile, False

    client = SupabaseClient(access_token=token)
    try:
        user = session.get(SESSION_USER_KEY) or client.get_user(token)
        profile = fetch_profile(client, user)
    except UpstreamUnavailable as exc:
        logger.warning("Profile still loading: %s", exc)
        return None, True
    except ContractError as exc:
        logger.warning("Dropping Supabase session: %s", exc)
        _forget(request)
        return None, False

    if profile is None:
        _forget(request)
        return None, False

    session[SESSION_PROFILE_KEY] = profile_to_session(profile)
    return profile, False
