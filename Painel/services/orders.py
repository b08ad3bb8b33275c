from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from django.utils import timezone

from Painel.authorization.roles import Action, Resource
from Painel.integration.client import eq, in_list
from Painel.integration.exceptions import IntegrationError
from Painel.integration.webhooks import notify_order_status_change

from .base import ScopedTableService, ServiceError

logger = logging.getLogger(__name__)

# Kanban columns, in board order.
ORDER_STATUSES = (
    "Pedindo",
    "Aguardando Pagamento",
    "Pagamento Confirmado",
    "Em preparação",
    "Pedido Pronto",
    "Saiu para entrega",
    "Pedido Entregue",
    "Cancelado Pelo Estabelecimento",
    "Cancelado pelo Cliente",
)

ITEMS_TABLE = "itens_pedido"
CLIENTS_TABLE = "clientes"
PRODUCTS_TABLE = "produtos"

PAYMENT_METHODS = ("Dinheiro", "Cartão de Crédito", "Cartão de Débito", "Pix", "Vale Refeição")
DELIVERY_METHODS = ("Entrega", "Retirada")


def _as_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value if value not in (None, "") else 0))
    except InvalidOperation:
        return Decimal("0")


def new_order_number() -> str:
    """Year followed by the last four digits of the current epoch in milliseconds."""
    now = timezone.now()
    return f"{now.year}{int(now.timestamp() * 1000) % 10000:04d}"


def to_order(row: dict[str, Any]) -> dict[str, Any]:
    """Flatten a ``pedidos`` row (with its joined client) for templates."""
    client = row.get("clientes") if isinstance(row.get("clientes"), dict) else {}
    return {
        "codigo": row.get("codigo"),
        "numero_pedido": str(row.get("numero do pedido") or ""),
        "codigo_estabelecimento": row.get("codigo_estabelecimento"),
        "status": row.get("status") or ORDER_STATUSES[0],
        "total_pedido": _as_decimal(row.get("total_pedido")),
        "valor_entrega": _as_decimal(row.get("Valor_da_Entrega")),
        "forma_pagamento": row.get("Forma de Pagamento") or "Não informado",
        "data_criacao": row.get("data_criacao"),
        "cliente_nome": " ".join(
            part for part in (client.get("nome"), client.get("sobrenome")) if part
        ) or "Cliente",
        "cliente_whatsapp": client.get("whatsapp") or "",
    }


class OrdersService(ScopedTableService):
    table = "pedidos"
    resource = Resource.ORDERS
    columns = "*,clientes(nome,sobrenome,whatsapp)"
    default_order = "data_criacao.desc"

    def list_orders(self) -> list[dict[str, Any]]:
        self.check_action(Action.READ)
        return [to_order(row) for row in self.list_rows()]

    def get_order(self, order_code: str) -> dict[str, Any]:
        order = self.get_row(order_code)
        self.check_action(Action.READ, order.get(self.establishment_column))
        return to_order(order)

    def kanban(self) -> dict[str, list[dict[str, Any]]]:
        board: dict[str, list[dict[str, Any]]] = {status: [] for status in ORDER_STATUSES}
        for order in self.list_orders():
            board.setdefault(order["status"], []).append(order)
        return board

    def list_items(self, order_code: str) -> list[dict[str, Any]]:
        order = self.get_row(order_code)
        self.check_action(Action.READ, order.get(self.establishment_column))
        return self.client.select(
            ITEMS_TABLE,
            filters={"codigo_pedido": eq(order_code)},
            order="data_criacao.asc",
        )

    def update_status(self, order_code: str, new_status: str) -> dict[str, Any]:
        if new_status not in ORDER_STATUSES:
            raise ServiceError(f"Status inválido: {new_status}")
        self.check_action(Action.UPDATE)
        order = self.get_row(order_code)
        self.check_action(Action.UPDATE, order.get(self.establishment_column))

        updated = self.update_row(order_code, {"status": new_status})
        logger.info("Order %s moved to %s by %s", order_code, new_status, self.profile.id)
        notify_order_status_change(
            str(order.get("numero do pedido") or order_code), new_status, self.profile
        )
        return updated

    def delete_order(self, order_code: str) -> None:
        self.check_action(Action.DELETE)
        order = self.get_row(order_code)
        self.check_action(Action.DELETE, order.get(self.establishment_column))

        self.client.delete(ITEMS_TABLE, filters={"codigo_pedido": eq(order_code)})
        self.delete_row(order_code)
        logger.info("Order %s deleted by %s", order_code, self.profile.id)

    def create_order(self, data: dict[str, Any], items: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Register a counter order: a new client row, the order, then its items.

        Prices and names come from the establishment's own product rows, never
        from the submitted form. If the items cannot be stored the order is
        removed again.
        """
        self.check_action(Action.CREATE)
        establishment_id = self.establishment_for_create(data)
        self.check_action(Action.CREATE, establishment_id)

        quantities = {}
        for item in items:
            code = str(item.get("codigo_produto") or "").strip()
            try:
                quantity = int(item.get("quantidade") or 0)
            except (TypeError, ValueError):
                quantity = 0
            if code and quantity > 0:
                quantities[code] = quantities.get(code, 0) + quantity
        if not quantities:
            raise ServiceError("Pedido deve ter pelo menos um item.")

        client_name = str(data.get("cliente_nome") or "").strip()
        if not client_name:
            raise ServiceError("Digite o nome do cliente.")
        payment = data.get("forma_pagamento")
        if payment not in PAYMENT_METHODS:
            raise ServiceError("Selecione a forma de pagamento.")
        delivery = data.get("forma_entrega")
        if delivery not in DELIVERY_METHODS:
            raise ServiceError("Selecione a forma de entrega.")
        delivery_fee = _as_decimal(data.get("valor_entrega")) if delivery == "Entrega" else Decimal("0")
        if delivery_fee < 0:
            raise ServiceError("Valor de entrega inválido.")

        products = self.client.select(
            PRODUCTS_TABLE,
            columns="codigo,nome,preco,codigo_estabelecimento",
            filters={
                "codigo": in_list(sorted(quantities)),
                "codigo_estabelecimento": eq(establishment_id),
            },
        )
        by_code = {str(product.get("codigo")): product for product in products}
        missing = sorted(set(quantities) - set(by_code))
        if missing:
            raise ServiceError(f"Produtos não encontrados: {', '.join(missing)}")

        lines = []
        subtotal = Decimal("0")
        for code, quantity in quantities.items():
            price = _as_decimal(by_code[code].get("preco"))
            line_total = price * quantity
            subtotal += line_total
            lines.append(
                {
                    "codigo_produto": code,
                    "nome_item": by_code[code].get("nome") or "",
                    "qtde_item": quantity,
                    "valor_item": str(price),
                    "total_produto": str(line_total),
                }
            )

        client_row = self.client.insert(
            CLIENTS_TABLE,
            {
                "nome": client_name,
                "sobrenome": str(data.get("cliente_sobrenome") or "").strip(),
                "whatsapp": str(data.get("cliente_whatsapp") or "").strip(),
                "codigo_estabelecimento": establishment_id,
            },
        )

        order_number = new_order_number()
        order = self.client.insert(
            self.table,
            {
                "numero do pedido": order_number,
                "codigo_estabelecimento": establishment_id,
                "codigo_cliente": client_row.get("codigo"),
                "total_pedido": str(subtotal + delivery_fee),
                "Forma de Pagamento": payment,
                "Forma de Entregra": delivery,
                "Valor_da_Entrega": str(delivery_fee),
                "Obervação do Pedido": str(data.get("observacao") or "").strip() or None,
                "status": ORDER_STATUSES[0],
            },
        )

        for line in lines:
            line["codigo_pedido"] = order.get("codigo")
            line["numero_do_pedido"] = order_number
        try:
            self.client.insert_many(ITEMS_TABLE, lines)
        except IntegrationError as exc:
            logger.warning("Items of order %s rejected, rolling back: %s", order_number, exc)
            self.delete_row(order.get("codigo"))
            raise ServiceError("Erro ao criar itens do pedido.") from exc

        logger.info("Order %s created by %s with %s items", order_number, self.profile.id, len(lines))
        return order
