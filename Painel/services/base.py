from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied

from Painel.authorization import evaluator
from Painel.authorization.roles import Action, PermissionRequirement, Resource, Role, UserProfile
from Painel.integration.client import SupabaseClient, eq

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised for invalid input before anything reaches Supabase."""


class ScopedTableService:
    """
    Pass-through to one Supabase table, scoped to the caller's establishment.

    Administrators see every row. Other roles only see rows of their own
    establishment; without one they see nothing.
    """

    table: str = ""
    resource: Resource | None = None
    key_column = "codigo"
    establishment_column = "codigo_estabelecimento"
    columns = "*"
    default_order = "nome.asc"

    def __init__(self, client: SupabaseClient, profile: UserProfile | None) -> None:
        self.client = client
        self.profile = profile

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.role is Role.ADMINISTRATOR

    def require_profile(self) -> UserProfile:
        if self.profile is None:
            raise PermissionDenied("Usuário não autenticado.")
        return self.profile

    def check_action(self, action: Action, establishment_id: str | None = None) -> None:
        profile = self.require_profile()
        if not evaluator.can_perform_action(profile, action, self.resource, establishment_id):
            logger.info(
                "%s denied %s on %s (establishment=%s)",
                profile.id,
                action.value,
                self.table,
                establishment_id,
            )
            raise PermissionDenied(f"Sem permissão para {action.value} em {self.table}.")

    def check_requirement(self, requirement: PermissionRequirement) -> None:
        profile = self.require_profile()
        if not evaluator.has_permission(profile, requirement):
            raise PermissionDenied(f"Sem permissão para alterar {self.table}.")

    def scope_filters(self) -> dict[str, str] | None:
        """PostgREST filters for listings, or None when nothing is visible."""
        profile = self.require_profile()
        if profile.role is Role.ADMINISTRATOR:
            return {}
        if not profile.establishment_id:
            return None
        return {self.establishment_column: eq(profile.establishment_id)}

    def list_rows(self, extra_filters: dict[str, str] | None = None, order: str | None = None) -> list[dict[str, Any]]:
        filters = self.scope_filters()
        if filters is None:
            logger.warning("%s has no establishment; %s listing is empty", self.profile.id, self.table)
            return []
        filters.update(extra_filters or {})
        return self.client.select(
            self.table,
            columns=self.columns,
            filters=filters,
            order=order or self.default_order,
        )

    def get_row(self, code: str) -> dict[str, Any]:
        filters = self.scope_filters()
        if filters is None:
            raise PermissionDenied("Usuário sem estabelecimento.")
        filters[self.key_column] = eq(code)
        row = self.client.select_one(self.table, columns=self.columns, filters=filters)
        if row is None:
            raise ServiceError(f"Registro {code} não encontrado em {self.table}.")
        return row

    def establishment_for_create(self, data: dict[str, Any]) -> str:
        """Establishment stamped on new rows: always the caller's own, unless admin."""
        profile = self.require_profile()
        establishment_id = profile.establishment_id
        if profile.role is Role.ADMINISTRATOR:
            establishment_id = str(data.get(self.establishment_column) or establishment_id or "").strip()
        if not establishment_id:
            raise ServiceError("ID do estabelecimento não encontrado.")
        return establishment_id

    def update_row(self, code: str, values: dict[str, Any]) -> dict[str, Any]:
        return self.client.update(self.table, values, filters={self.key_column: eq(code)})

    def delete_row(self, code: str) -> None:
        self.client.delete(self.table, filters={self.key_column: eq(code)})


def require_text(data: dict[str, Any], field: str, label: str) -> str:
    value = str(data.get(field) or "").strip()
    if not value:
        raise ServiceError(f"{label} é obrigatório.")
    return value
