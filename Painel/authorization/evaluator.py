"""
Permission evaluation.

All functions here are pure: they only read the profile and the policy they
receive. Anything that cannot be proven allowed is denied.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TypeVar

from .roles import (
    DASHBOARD_ROUTE,
    LOGIN_ROUTE,
    ORDERS_ROUTE,
    Action,
    PermissionRequirement,
    Resource,
    Role,
    UserProfile,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Reachable by any signed-in user, whatever the role.
PUBLIC_ROUTES = ("/perfil", "/minha-conta")

ROLE_ROUTES: dict[Role, tuple[str, ...]] = {
    Role.ADMINISTRATOR: ("*",),
    Role.ESTABLISHMENT: (
        "/dashboard",
        "/pedidos",
        "/produtos",
        "/clientes",
        "/cardapio",
        "/categorias",
        "/estabelecimento",
        "/atendentes",
    ),
    Role.ATTENDANT: (
        "/pedidos",
        "/clientes",
    ),
}


def _coerce(enum_cls: type[E], value: E | str) -> E | None:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _same_establishment(profile: UserProfile, establishment_id: str | None) -> bool:
    return establishment_id is None or establishment_id == profile.establishment_id


def has_permission(profile: UserProfile | None, requirement: PermissionRequirement) -> bool:
    if profile is None:
        logger.debug("has_permission: denied, no profile")
        return False

    if profile.role not in requirement.allowed_roles:
        logger.debug("has_permission: denied, role %s not allowed", profile.role.value)
        return False

    # Administrators skip every establishment check.
    if profile.role is Role.ADMINISTRATOR:
        return True

    if requirement.requires_establishment and not profile.establishment_id:
        logger.debug("has_permission: denied, %s has no establishment", profile.id)
        return False

    if requirement.allowed_establishment_ids and (
        profile.establishment_id not in requirement.allowed_establishment_ids
    ):
        logger.debug(
            "has_permission: denied, establishment %s not in allowed list",
            profile.establishment_id,
        )
        return False

    return True


def can_perform_action(
    profile: UserProfile | None,
    action: Action | str,
    resource: Resource | str,
    resource_establishment_id: str | None = None,
) -> bool:
    """
    Decide whether ``profile`` may apply ``action`` to ``resource``.

    ``resource_establishment_id`` is the establishment that owns the target
    row; when omitted, scoped roles are judged on the action alone.
    """
    if profile is None:
        return False

    role = profile.role
    if role is Role.ADMINISTRATOR:
        return True

    action = _coerce(Action, action)
    resource = _coerce(Resource, resource)
    if action is None or resource is None:
        logger.debug("can_perform_action: denied, unknown action/resource")
        return False

    if resource is Resource.ORDERS:
        if role is Role.ESTABLISHMENT:
            return _same_establishment(profile, resource_establishment_id)
        if role is Role.ATTENDANT:
            if action is Action.DELETE:
                return False
            return _same_establishment(profile, resource_establishment_id)
        return False

    if resource in (Resource.PRODUCTS, Resource.CLIENTS):
        if role is Role.ESTABLISHMENT:
            return _same_establishment(profile, resource_establishment_id)
        if role is Role.ATTENDANT:
            if resource is Resource.PRODUCTS:
                return action is Action.READ
            if action is Action.DELETE:
                return False
            return _same_establishment(profile, resource_establishment_id)
        return False

    if resource is Resource.ESTABLISHMENTS:
        # Owners may only edit their own establishment record.
        return (
            role is Role.ESTABLISHMENT
            and action is Action.UPDATE
            and resource_establishment_id is not None
            and resource_establishment_id == profile.establishment_id
        )

    if resource is Resource.ATTENDANTS:
        if role is Role.ESTABLISHMENT:
            return _same_establishment(profile, resource_establishment_id)
        return False

    return False


def get_default_route_for_role(profile: UserProfile | None) -> str:
    if profile is None:
        return LOGIN_ROUTE
    if profile.role in (Role.ADMINISTRATOR, Role.ESTABLISHMENT):
        return DASHBOARD_ROUTE
    if profile.role is Role.ATTENDANT:
        # Attendants land straight on the order kanban.
        return ORDERS_ROUTE
    return LOGIN_ROUTE


def can_access_route(profile: UserProfile | None, route: str) -> bool:
    if profile is None:
        return False

    if route in PUBLIC_ROUTES:
        return True

    if profile.role is Role.ADMINISTRATOR:
        return True

    allowed = ROLE_ROUTES.get(profile.role, ())
    if "*" in allowed:
        return True
    # Prefix match: "/pedidos" also covers "/pedidos/listar".
    granted = any(route.startswith(prefix) for prefix in allowed)
    if not granted:
        logger.debug("can_access_route: %s denied for %s", route, profile.role.value)
    return granted
