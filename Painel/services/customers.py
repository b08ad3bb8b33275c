from __future__ import annotations

from typing import Any

from Painel.authorization.roles import Action, Resource

from .base import ScopedTableService, ServiceError, require_text

EDITABLE_FIELDS = ("nome", "sobrenome", "whatsapp", "email", "endereco", "bairro", "cidade", "ativo")


class ClientsService(ScopedTableService):
    table = "clientes"
    resource = Resource.CLIENTS

    def list_clients(self) -> list[dict[str, Any]]:
        self.check_action(Action.READ)
        return self.list_rows()

    def get_client(self, code: str) -> dict[str, Any]:
        client = self.get_row(code)
        self.check_action(Action.READ, client.get(self.establishment_column))
        return client

    def create_client(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_action(Action.CREATE)
        establishment_id = self.establishment_for_create(data)
        self.check_action(Action.CREATE, establishment_id)

        values = {key: data[key] for key in EDITABLE_FIELDS if data.get(key) not in (None, "")}
        values["nome"] = require_text(data, "nome", "Nome")
        values["whatsapp"] = require_text(data, "whatsapp", "WhatsApp")
        values.setdefault("ativo", True)
        values["codigo_estabelecimento"] = establishment_id
        return self.client.insert(self.table, values)

    def update_client(self, code: str, data: dict[str, Any]) -> dict[str, Any]:
        self.check_action(Action.UPDATE)
        current = self.get_row(code)
        self.check_action(Action.UPDATE, current.get(self.establishment_column))

        values = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        if not values:
            raise ServiceError("Nada para atualizar.")
        if "nome" in values:
            values["nome"] = require_text(values, "nome", "Nome")
        return self.update_row(code, values)

    def delete_client(self, code: str) -> None:
        self.check_action(Action.DELETE)
        current = self.get_row(code)
        self.check_action(Action.DELETE, current.get(self.establishment_column))
        self.delete_row(code)

    def stats(self, rows: list[dict[str, Any]] | None = None) -> dict[str, int]:
        if rows is None:
            rows = self.list_clients()
        active = sum(1 for row in rows if row.get("ativo"))
        cities = {str(row.get("cidade") or "").strip() for row in rows} - {""}
        return {
            "total": len(rows),
            "ativos": active,
            "inativos": len(rows) - active,
            "cidades_atendidas": len(cities),
        }
