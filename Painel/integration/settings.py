from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True, slots=True)
class SupabaseSettings:
    url: str
    anon_key: str
    timeout_seconds: int
    max_retries: int
    order_status_webhook_url: str
    webhook_timeout_seconds: int


def get_supabase_settings() -> SupabaseSettings:
    return SupabaseSettings(
        url=getattr(settings, "PAINEL_SUPABASE_URL", "").rstrip("/"),
        anon_key=getattr(settings, "PAINEL_SUPABASE_ANON_KEY", ""),
        timeout_seconds=int(getattr(settings, "PAINEL_SUPABASE_TIMEOUT_SECONDS", 8)),
        max_retries=int(getattr(settings, "PAINEL_SUPABASE_MAX_RETRIES", 2)),
        order_status_webhook_url=getattr(settings, "PAINEL_ORDER_STATUS_WEBHOOK_URL", ""),
        webhook_timeout_seconds=int(getattr(settings, "PAINEL_WEBHOOK_TIMEOUT_SECONDS", 10)),
    )
