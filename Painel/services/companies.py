from __future__ import annotations

import re
from typing import Any

from Painel.authorization.roles import FULL_DASHBOARD

from .base import ScopedTableService, ServiceError, require_text


def normalize_cnpj(value: Any) -> str:
    digits = re.sub(r"\D", "", str(value or ""))
    if len(digits) != 14:
        raise ServiceError("CNPJ deve ter 14 dígitos.")
    return digits


class CompaniesService(ScopedTableService):
    """Companies (establishments) as seen by platform administrators."""

    table = "empresas"
    establishment_column = "codigo"
    default_order = "razao_social.asc"

    def list_companies(self) -> list[dict[str, Any]]:
        self.check_requirement(FULL_DASHBOARD)
        return self.list_rows()

    def create_company(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_requirement(FULL_DASHBOARD)
        return self.client.insert(
            self.table,
            {
                "razao_social": require_text(data, "razao_social", "Razão social"),
                "nome_fantasia": str(data.get("nome_fantasia") or "").strip(),
                "cnpj": normalize_cnpj(data.get("cnpj")),
                "email": str(data.get("email") or "").strip(),
                "telefone": str(data.get("telefone") or "").strip(),
            },
        )
