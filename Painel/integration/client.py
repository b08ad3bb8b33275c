from __future__ import annotations

from typing import Any

import requests

from .exceptions import ContractError, UpstreamUnavailable
from .settings import get_supabase_settings


def eq(value: Any) -> str:
    return f"eq.{value}"


def ilike(term: str) -> str:
    return f"ilike.*{term}*"


def in_list(values) -> str:
    return "in.(" + ",".join(str(value) for value in values) + ")"


class SupabaseClient:
    """HTTP client for the Supabase auth (GoTrue) and table (PostgREST) APIs."""

    def __init__(self, access_token: str | None = None) -> None:
        self.config = get_supabase_settings()
        self.access_token = access_token

    def is_configured(self) -> bool:
        return bool(self.config.url and self.config.anon_key)

    def _ensure_configured(self) -> None:
        if not self.is_configured():
            raise ContractError("Supabase URL/key are not configured.")

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        self._ensure_configured()
        endpoint = f"{self.config.url}/auth/v1/token"
        return self._request(
            "POST",
            endpoint,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            skip_auth=True,
        )

    def sign_out(self, access_token: str) -> None:
        self._ensure_configured()
        self._request("POST", f"{self.config.url}/auth/v1/logout", bearer_token=access_token)

    def get_user(self, access_token: str) -> dict[str, Any]:
        self._ensure_configured()
        return self._request("GET", f"{self.config.url}/auth/v1/user", bearer_token=access_token)

    def sign_up(self, email: str, password: str, metadata: dict[str, Any] | None = None) -> dict[str, Any]:
        self._ensure_configured()
        return self._request(
            "POST",
            f"{self.config.url}/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
            skip_auth=True,
        )

    def get_health(self) -> dict[str, Any]:
        if not self.is_configured():
            return {"status": "not_configured"}
        try:
            payload = self._request("GET", f"{self.config.url}/auth/v1/health", skip_auth=True)
        except UpstreamUnavailable:
            return {"status": "down"}
        except ContractError as exc:
            return {"status": "error", "detail": str(exc)}
        return payload if isinstance(payload, dict) else {"status": "ok"}

    # ------------------------------------------------------------------
    # Edge functions
    # ------------------------------------------------------------------

    def call_function(
        self,
        name: str,
        *,
        method: str = "POST",
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        skip_auth: bool = False,
    ) -> Any:
        self._ensure_configured()
        return self._request(
            method,
            f"{self.config.url}/functions/v1/{name}",
            json=json,
            params=params,
            skip_auth=skip_auth,
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _table_url(self, table: str) -> str:
        return f"{self.config.url}/rest/v1/{table}"

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: dict[str, str] | None = None,
        order: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self._ensure_configured()
        params: dict[str, Any] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        data = self._request("GET", self._table_url(table), params=params)
        if isinstance(data, list):
            return data
        raise ContractError(f"Unexpected payload for {table} (expected list).")

    def select_one(self, table: str, **kwargs: Any) -> dict[str, Any] | None:
        rows = self.select(table, limit=1, **kwargs)
        return rows[0] if rows else None

    def insert(self, table: str, values: dict[str, Any]) -> dict[str, Any]:
        self._ensure_configured()
        data = self._request(
            "POST",
            self._table_url(table),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return self._first_row(table, data)

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self._ensure_configured()
        if not rows:
            return []
        data = self._request(
            "POST",
            self._table_url(table),
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        return data if isinstance(data, list) else []

    def update(self, table: str, values: dict[str, Any], *, filters: dict[str, str]) -> dict[str, Any]:
        self._ensure_configured()
        if not filters:
            raise ContractError("Refusing to update without filters.")
        data = self._request(
            "PATCH",
            self._table_url(table),
            params=filters,
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return self._first_row(table, data)

    def delete(self, table: str, *, filters: dict[str, str]) -> None:
        self._ensure_configured()
        if not filters:
            raise ContractError("Refusing to delete without filters.")
        self._request("DELETE", self._table_url(table), params=filters)

    def _first_row(self, table: str, data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        raise ContractError(f"No row returned by {table}.")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        bearer_token = kwargs.pop("bearer_token", None) or self.access_token
        skip_auth = bool(kwargs.pop("skip_auth", False))
        headers["apikey"] = self.config.anon_key
        if bearer_token and not skip_auth:
            headers["Authorization"] = f"Bearer {bearer_token}"
        else:
            headers["Authorization"] = f"Bearer {self.config.anon_key}"
        headers["Accept"] = "application/json"

        last_exception: Exception | None = None
        for _ in range(self.config.max_retries + 1):
            try:
                response = requests.request(
                    method=method,
                    url=url,
                    timeout=self.config.timeout_seconds,
                    headers=headers,
                    **kwargs,
                )
            except requests.RequestException as exc:
                last_exception = exc
                continue

            if response.status_code in (502, 503, 504):
                last_exception = UpstreamUnavailable(
                    f"Upstream unavailable with status {response.status_code}"
                )
                continue
            if response.status_code >= 400:
                raise ContractError(
                    f"Supabase request failed ({response.status_code}): {response.text[:300]}"
                )
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ContractError("Supabase response is not valid JSON.") from exc

        raise UpstreamUnavailable(
            f"Supabase request failed after retries: {last_exception!s}"
        )
