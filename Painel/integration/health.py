from __future__ import annotations

from typing import Any

from .client import SupabaseClient
from .settings import get_supabase_settings


def integration_health_snapshot() -> dict[str, Any]:
    config = get_supabase_settings()
    upstream = SupabaseClient().get_health()

    healthy = upstream.get("status") not in {"down", "error", "not_configured"}
    return {
        "configured": bool(config.url and config.anon_key),
        "healthy": healthy,
        "upstream": upstream,
        "order_status_webhook": bool(config.order_status_webhook_url),
    }
