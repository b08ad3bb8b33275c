from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from Painel.authorization.roles import Role, UserProfile

logger = logging.getLogger(__name__)

# user_roles.role_name -> Role
ROLE_NAMES = {
    "admin_geral": Role.ADMINISTRATOR,
    "estabelecimento": Role.ESTABLISHMENT,
    "atendente": Role.ATTENDANT,
}


def _as_str(value: Any) -> str:
    return str(value).strip() if value not in (None, "") else ""


def to_role(raw: Any) -> Role | None:
    name = _as_str(raw)
    if not name:
        return None
    if name.lower() in ROLE_NAMES:
        return ROLE_NAMES[name.lower()]
    try:
        return Role(name)
    except ValueError:
        return None


def to_user_profile(
    user_id: str,
    email: str,
    profile_row: dict[str, Any],
    role_row: dict[str, Any] | None,
) -> UserProfile | None:
    """
    Adapter: ``user_profiles`` row (+ its ``user_roles`` row) -> UserProfile.

    Returns None when the role cannot be mapped; an unknown role never
    receives a default.
    """
    role = to_role((role_row or {}).get("role_name"))
    if role is None:
        logger.warning("Profile %s has no recognised role: %s", user_id, role_row)
        return None

    establishment_id = _as_str(profile_row.get("estabelecimento_id")) or None
    return UserProfile(
        id=_as_str(profile_row.get("id")) or user_id,
        role=role,
        establishment_id=establishment_id,
        email=email,
        name=_as_str(profile_row.get("nome")) or email.split("@")[0] or "Usuário",
        status=_as_str(profile_row.get("status")) or "active",
        created_at=_as_str(profile_row.get("created_at")),
        updated_at=_as_str(profile_row.get("updated_at")),
        establishment_name=_as_str(profile_row.get("estabelecimento_nome")),
    )


def profile_to_session(profile: UserProfile) -> dict[str, Any]:
    payload = asdict(profile)
    payload["role"] = profile.role.value
    return payload


def profile_from_session(payload: Any) -> UserProfile | None:
    if not isinstance(payload, dict):
        return None
    role = to_role(payload.get("role"))
    profile_id = _as_str(payload.get("id"))
    if role is None or not profile_id:
        return None
    return UserProfile(
        id=profile_id,
        role=role,
        establishment_id=_as_str(payload.get("establishment_id")) or None,
        email=_as_str(payload.get("email")),
        name=_as_str(payload.get("name")),
        status=_as_str(payload.get("status")) or "active",
        created_at=_as_str(payload.get("created_at")),
        updated_at=_as_str(payload.get("updated_at")),
        establishment_name=_as_str(payload.get("establishment_name")),
    )
