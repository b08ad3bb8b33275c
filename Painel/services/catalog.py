"""Products and categories of an establishment's menu."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from Painel.authorization.roles import CATEGORY_MANAGEMENT, Action, Resource
from Painel.integration.client import ilike

from .base import ScopedTableService, ServiceError, require_text


def _price(value: Any) -> str:
    try:
        price = Decimal(str(value).replace(",", "."))
    except (InvalidOperation, TypeError):
        raise ServiceError("Preço inválido.") from None
    if price < 0:
        raise ServiceError("Preço não pode ser negativo.")
    return str(price)


class ProductsService(ScopedTableService):
    table = "produtos"
    resource = Resource.PRODUCTS

    def list_products(self) -> list[dict[str, Any]]:
        self.check_action(Action.READ)
        return self.list_rows()

    def get_product(self, code: str) -> dict[str, Any]:
        product = self.get_row(code)
        self.check_action(Action.READ, product.get(self.establishment_column))
        return product

    def search_products(self, term: str) -> list[dict[str, Any]]:
        self.check_action(Action.READ)
        term = term.strip()
        if not term:
            return self.list_rows()
        return self.list_rows({"nome": ilike(term)})

    def create_product(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_action(Action.CREATE)
        establishment_id = self.establishment_for_create(data)
        self.check_action(Action.CREATE, establishment_id)

        values = {
            "nome": require_text(data, "nome", "Nome"),
            "descricao": str(data.get("descricao") or "").strip(),
            "preco": _price(data.get("preco")),
            "disponivel": bool(data.get("disponivel", True)),
            "codigo_estabelecimento": establishment_id,
        }
        if data.get("codigo_categoria"):
            values["codigo_categoria"] = data["codigo_categoria"]
        return self.client.insert(self.table, values)

    def update_product(self, code: str, data: dict[str, Any]) -> dict[str, Any]:
        self.check_action(Action.UPDATE)
        product = self.get_row(code)
        self.check_action(Action.UPDATE, product.get(self.establishment_column))

        values: dict[str, Any] = {}
        if "nome" in data:
            values["nome"] = require_text(data, "nome", "Nome")
        if "preco" in data:
            values["preco"] = _price(data["preco"])
        for key in ("descricao", "disponivel"):
            if key in data:
                values[key] = data[key]
        if "codigo_categoria" in data:
            values["codigo_categoria"] = data["codigo_categoria"] or None
        if not values:
            raise ServiceError("Nada para atualizar.")
        return self.update_row(code, values)

    def toggle_availability(self, code: str) -> dict[str, Any]:
        self.check_action(Action.UPDATE)
        product = self.get_row(code)
        self.check_action(Action.UPDATE, product.get(self.establishment_column))
        return self.update_row(code, {"disponivel": not bool(product.get("disponivel"))})

    def delete_product(self, code: str) -> None:
        self.check_action(Action.DELETE)
        product = self.get_row(code)
        self.check_action(Action.DELETE, product.get(self.establishment_column))
        self.delete_row(code)


class CategoriesService(ScopedTableService):
    """Categories follow the product rules for writes."""

    table = "categorias"
    resource = Resource.PRODUCTS

    def list_categories(self) -> list[dict[str, Any]]:
        return self.list_rows()

    def create_category(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_requirement(CATEGORY_MANAGEMENT)
        establishment_id = self.establishment_for_create(data)
        self.check_action(Action.CREATE, establishment_id)
        return self.client.insert(
            self.table,
            {"nome": require_text(data, "nome", "Nome"), "codigo_estabelecimento": establishment_id},
        )

    def delete_category(self, code: str) -> None:
        self.check_requirement(CATEGORY_MANAGEMENT)
        category = self.get_row(code)
        self.check_action(Action.DELETE, category.get(self.establishment_column))
        self.delete_row(code)
