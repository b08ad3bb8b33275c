from __future__ import annotations

from typing import Any

from Painel.authorization.roles import ESTABLISHMENT_DASHBOARD

from .base import ScopedTableService, require_text


class CouriersService(ScopedTableService):
    """Couriers are managed by whoever may open the establishment dashboard."""

    table = "entregadores"
    columns = "codigo,nome,telefone,codigo_estabelecimento,data_criacao,ativo"

    def list_couriers(self) -> list[dict[str, Any]]:
        self.check_requirement(ESTABLISHMENT_DASHBOARD)
        return self.list_rows()

    def create_courier(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_requirement(ESTABLISHMENT_DASHBOARD)
        return self.client.insert(
            self.table,
            {
                "nome": require_text(data, "nome", "Nome"),
                "telefone": require_text(data, "telefone", "Telefone"),
                "codigo_estabelecimento": self.establishment_for_create(data),
                "ativo": True,
            },
        )

    def set_active(self, code: str, active: bool) -> dict[str, Any]:
        self.check_requirement(ESTABLISHMENT_DASHBOARD)
        self.get_row(code)
        return self.update_row(code, {"ativo": active})
