from __future__ import annotations

import logging

import requests

from Painel.authorization.roles import UserProfile

from .settings import get_supabase_settings

logger = logging.getLogger(__name__)

USER_AGENT = "Painel-Admin/1.0"


def notify_order_status_change(order_number: str, new_status: str, profile: UserProfile | None) -> bool:
    """
    Tell the external automation that an order changed status.

    Best effort: a failed notification is logged and never undoes the status
    change. Returns True when the endpoint accepted the payload.
    """
    config = get_supabase_settings()
    if not config.order_status_webhook_url:
        return False

    payload = {
        "codigo_estabelecimento": profile.establishment_id if profile else None,
        "status_pedido": new_status,
        "numero_pedido": order_number,
    }
    try:
        response = requests.post(
            config.order_status_webhook_url,
            json=payload,
            headers={"User-Agent": USER_AGENT},
            timeout=config.webhook_timeout_seconds,
        )
    except requests.RequestException as exc:
        logger.warning("Order status webhook failed for %s: %s", order_number, exc)
        return False

    if response.status_code >= 400:
        logger.warning(
            "Order status webhook rejected %s (%s): %s",
            order_number,
            response.status_code,
            response.text[:200],
        )
        return False
    return True
