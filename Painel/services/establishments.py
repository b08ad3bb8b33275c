"""An establishment's own registration data."""

from __future__ import annotations

from typing import Any

from django.core.exceptions import PermissionDenied

from Painel.authorization.roles import Action, Resource
from Painel.integration.client import eq

from .base import ScopedTableService, ServiceError, require_text
from .companies import normalize_cnpj

EDITABLE_FIELDS = (
    "nome",
    "cnpj",
    "telefone",
    "email",
    "endereco",
    "numero",
    "bairro",
    "cep",
    "cidade",
    "uf",
)


class EstablishmentsService(ScopedTableService):
    """
    Owners read and edit their own establishment; administrators any of them.

    Writes go through the ``estabelecimentos`` update rule, which only lets an
    owner touch the row whose code matches their profile.
    """

    table = "estabelecimentos"
    resource = Resource.ESTABLISHMENTS
    establishment_column = "codigo"

    def _target(self, code: str | None) -> str:
        profile = self.require_profile()
        target = str(code or profile.establishment_id or "").strip()
        if not target:
            raise ServiceError("Estabelecimento não encontrado.")
        return target

    def get_establishment(self, code: str | None = None) -> dict[str, Any]:
        target = self._target(code)
        if not self.is_admin and target != self.profile.establishment_id:
            raise PermissionDenied("Sem permissão para ver este estabelecimento.")
        row = self.client.select_one(self.table, filters={self.key_column: eq(target)})
        if row is None:
            raise ServiceError(f"Estabelecimento {target} não encontrado.")
        return row

    def update_establishment(self, data: dict[str, Any], code: str | None = None) -> dict[str, Any]:
        target = self._target(code)
        self.check_action(Action.UPDATE, target)

        values = {key: str(data[key] or "").strip() for key in EDITABLE_FIELDS if key in data}
        if "nome" in values:
            values["nome"] = require_text(values, "nome", "Nome")
        if values.get("cnpj"):
            values["cnpj"] = normalize_cnpj(values["cnpj"])
        if values.get("uf"):
            values["uf"] = values["uf"].upper()[:2]
        if not values:
            raise ServiceError("Nada para atualizar.")
        return self.update_row(target, values)
