from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from . import evaluator
from .roles import Action, PermissionRequirement, Resource, Role, UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthorizationHelpers:
    """Evaluator functions bound to one profile."""

    has_permission: Callable[[PermissionRequirement], bool]
    can_perform_action: Callable[..., bool]
    can_access_route: Callable[[str], bool]
    get_default_route: Callable[[], str]


def create_auth_helpers(profile: UserProfile | None) -> AuthorizationHelpers:
    def _can_perform_action(
        action: Action | str,
        resource: Resource | str,
        resource_establishment_id: str | None = None,
    ) -> bool:
        return evaluator.can_perform_action(profile, action, resource, resource_establishment_id)

    return AuthorizationHelpers(
        has_permission=lambda requirement: evaluator.has_permission(profile, requirement),
        can_perform_action=_can_perform_action,
        can_access_route=lambda route: evaluator.can_access_route(profile, route),
        get_default_route=lambda: evaluator.get_default_route_for_role(profile),
    )


def _cache_key(profile: UserProfile | None) -> tuple[str, Role] | None:
    if profile is None:
        return None
    return (profile.id, profile.role)


class AuthorizationSession:
    """
    Authorization view of the current session.

    Wraps the profile resolved by the session middleware and exposes the
    evaluator bound to it. Bound helpers are rebuilt only when the
    ``(profile.id, profile.role)`` pair changes; other profile fields such as
    ``status`` do not trigger a rebuild.
    """

    def __init__(self, profile: UserProfile | None = None, *, loading: bool = False) -> None:
        self.profile = profile
        self.loading = loading
        self._key = _cache_key(profile)
        self._helpers = create_auth_helpers(profile)

    def update(self, profile: UserProfile | None, *, loading: bool = False) -> None:
        self.profile = profile
        self.loading = loading
        key = _cache_key(profile)
        if key != self._key:
            logger.debug("Rebinding authorization helpers for %s", key)
            self._key = key
            self._helpers = create_auth_helpers(profile)

    @property
    def helpers(self) -> AuthorizationHelpers:
        return self._helpers

    @property
    def is_authenticated(self) -> bool:
        return self.profile is not None

    @property
    def role(self) -> Role | None:
        return self.profile.role if self.profile else None

    def has_permission(self, requirement: PermissionRequirement) -> bool:
        return self._helpers.has_permission(requirement)

    def can_perform_action(
        self,
        action: Action | str,
        resource: Resource | str,
        resource_establishment_id: str | None = None,
    ) -> bool:
        return self._helpers.can_perform_action(action, resource, resource_establishment_id)

    def can_access_route(self, route: str) -> bool:
        return self._helpers.can_access_route(route)

    def get_default_route(self) -> str:
        return self._helpers.get_default_route()

    # Role checks used by templates to show or hide buttons.

    def is_admin(self) -> bool:
        return self.role is Role.ADMINISTRATOR

    def is_establishment(self) -> bool:
        return self.role is Role.ESTABLISHMENT

    def is_attendant(self) -> bool:
        return self.role is Role.ATTENDANT

    def can_manage_establishment(self) -> bool:
        return self.is_admin() or self.is_establishment()

    def can_delete_orders(self) -> bool:
        return self.is_admin() or self.is_establishment()

    def can_manage_products(self) -> bool:
        return self.is_admin() or self.is_establishment()

    def can_manage_staff(self) -> bool:
        return self.is_admin() or self.is_establishment()

    def is_read_only_user(self) -> bool:
        return self.is_attendant()
