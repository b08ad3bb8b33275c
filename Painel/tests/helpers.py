from django.conf import settings

from Painel.authorization.roles import Role, UserProfile
from Painel.integration.adapter import profile_to_session
from Painel.integration.auth import SESSION_PROFILE_KEY, SESSION_TOKEN_KEY, SESSION_USER_KEY


def make_profile(role=Role.ESTABLISHMENT, establishment_id="E1", **kwargs):
    defaults = {
        "id": f"user-{role.name.lower()}",
        "email": f"{role.name.lower()}@example.com",
        "name": role.value,
    }
    defaults.update(kwargs)
    return UserProfile(role=role, establishment_id=establishment_id, **defaults)


def login_as(client, profile, token="token-123", user=None):
    """Store a signed-in Supabase session in the test client's cookie."""
    session = client.session
    session[SESSION_TOKEN_KEY] = token
    if user is not None:
        session[SESSION_USER_KEY] = user
    if profile is not None:
        session[SESSION_PROFILE_KEY] = profile_to_session(profile)
    session.save()
    client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
