from __future__ import annotations

import logging
import re
from typing import Any

from Painel.authorization.roles import USER_MANAGEMENT, USER_TYPES_MANAGEMENT, Action, Resource
from Painel.integration.adapter import ROLE_NAMES
from Painel.integration.client import SupabaseClient, eq

from .base import ScopedTableService, ServiceError, require_text

logger = logging.getLogger(__name__)

ATTENDANT_ROLE_NAME = "atendente"
ADMIN_ROLE_NAME = "admin_geral"
ROLES_TABLE = "user_roles"
INVITES_FUNCTION = "sistema-convites"
MIN_PASSWORD_LENGTH = 6


def _require_email(data: dict[str, Any], field: str = "email") -> str:
    email = str(data.get(field) or "").strip().lower()
    if not re.fullmatch(r"\S+@\S+\.\S+", email):
        raise ServiceError("Email inválido.")
    return email


def _require_password(password: Any) -> str:
    password = str(password or "")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ServiceError(f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres.")
    return password


def _function_payload(result: Any, failure: str) -> dict[str, Any]:
    if not isinstance(result, dict) or not result.get("success"):
        error = result.get("error") if isinstance(result, dict) else None
        raise ServiceError(error or failure)
    data = result.get("data")
    return data if isinstance(data, dict) else {}


class AttendantsService(ScopedTableService):
    """Attendants are ``user_profiles`` rows with the attendant role."""

    table = "user_profiles"
    resource = Resource.ATTENDANTS
    key_column = "id"
    establishment_column = "estabelecimento_id"

    def _attendant_role_id(self) -> Any:
        role = self.client.select_one(
            ROLES_TABLE, columns="id", filters={"role_name": eq(ATTENDANT_ROLE_NAME)}
        )
        return role.get("id") if role else None

    def list_attendants(self) -> list[dict[str, Any]]:
        self.check_action(Action.READ)
        role_id = self._attendant_role_id()
        if role_id is None:
            logger.warning("No %s role registered in user_roles", ATTENDANT_ROLE_NAME)
            return []
        return self.list_rows({"role_id": eq(role_id)})

    def set_active(self, attendant_id: str, active: bool) -> dict[str, Any]:
        self.check_action(Action.UPDATE)
        attendant = self.get_row(attendant_id)
        self.check_action(Action.UPDATE, attendant.get(self.establishment_column))
        return self.update_row(attendant_id, {"ativo": active})

    def list_invites(self) -> list[dict[str, Any]]:
        """Pending invites of the caller's establishment, kept by the invites edge function."""
        self.check_action(Action.READ, self.require_profile().establishment_id)
        result = self.client.call_function(INVITES_FUNCTION, method="GET")
        if not isinstance(result, dict):
            return []
        return [invite for invite in result.get("data") or [] if isinstance(invite, dict)]

    def invite_attendant(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_action(Action.CREATE)
        establishment_id = self.establishment_for_create(data)
        self.check_action(Action.CREATE, establishment_id)

        payload = {
            "email": _require_email(data),
            "nomeConvidado": require_text(data, "nome", "Nome"),
            "telefone": str(data.get("telefone") or "").strip(),
            "estabelecimentoId": establishment_id,
        }
        invite = _function_payload(
            self.client.call_function(INVITES_FUNCTION, json=payload),
            "Erro ao enviar convite.",
        )
        logger.info("Attendant invite sent to %s by %s", payload["email"], self.profile.id)
        return invite


def validate_invite(client: SupabaseClient, token: str) -> dict[str, Any]:
    """Invite details for an activation link; anonymous callers are allowed."""
    token = str(token or "").strip()
    if not token:
        raise ServiceError("Token de convite inválido.")
    return _function_payload(
        client.call_function(
            INVITES_FUNCTION, params={"action": "validate"}, json={"token": token}, skip_auth=True
        ),
        "Token inválido ou expirado.",
    )


def activate_invite(client: SupabaseClient, token: str, password: str) -> dict[str, Any]:
    token = str(token or "").strip()
    if not token:
        raise ServiceError("Token de convite inválido.")
    return _function_payload(
        client.call_function(
            INVITES_FUNCTION,
            params={"action": "activate"},
            json={"token": token, "senha": _require_password(password)},
            skip_auth=True,
        ),
        "Erro ao ativar conta.",
    )


class UsersService(ScopedTableService):
    """Every dashboard user, for administrators."""

    table = "user_profiles"
    key_column = "id"
    establishment_column = "estabelecimento_id"
    columns = "id,nome,status,estabelecimento_id,created_at,user_roles(role_name)"

    def list_users(self) -> list[dict[str, Any]]:
        self.check_requirement(USER_MANAGEMENT)
        return self.list_rows()

    def create_user(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create the auth account, then the profile row linking it to a role."""
        self.check_requirement(USER_MANAGEMENT)

        email = _require_email(data)
        password = _require_password(data.get("senha"))
        name = require_text(data, "nome", "Nome")
        role_name = str(data.get("role_name") or "").strip()
        if role_name not in ROLE_NAMES:
            raise ServiceError("Tipo de usuário inválido.")
        establishment_id = str(data.get("estabelecimento_id") or "").strip() or None
        if role_name != ADMIN_ROLE_NAME and not establishment_id:
            raise ServiceError("ID do estabelecimento não encontrado.")

        role = self.client.select_one(ROLES_TABLE, columns="id", filters={"role_name": eq(role_name)})
        if role is None:
            raise ServiceError(f"Tipo de usuário {role_name} não cadastrado.")

        auth = self.client.sign_up(email, password, {"nome": name})
        user = auth.get("user") if isinstance(auth.get("user"), dict) else auth
        user_id = str((user or {}).get("id") or "").strip()
        if not user_id:
            raise ServiceError("Supabase não retornou o usuário criado.")

        profile = self.client.insert(
            self.table,
            {
                "user_id": user_id,
                "nome": name,
                "role_id": role.get("id"),
                "estabelecimento_id": establishment_id,
                "status": "active",
            },
        )
        logger.info("User %s created as %s by %s", email, role_name, self.profile.id)
        return profile


class UserTypesService(ScopedTableService):
    """The ``user_roles`` catalogue."""

    table = ROLES_TABLE
    key_column = "id"
    default_order = "id.asc"

    def list_user_types(self) -> list[dict[str, Any]]:
        self.check_requirement(USER_TYPES_MANAGEMENT)
        return self.list_rows()

    def create_user_type(self, data: dict[str, Any]) -> dict[str, Any]:
        self.check_requirement(USER_TYPES_MANAGEMENT)
        role_name = str(data.get("role_name") or "").strip().lower()
        if not re.fullmatch(r"[a-z][a-z0-9_]*", role_name):
            raise ServiceError("Nome interno deve conter apenas letras minúsculas, números e _.")
        if self.client.select_one(self.table, columns="id", filters={"role_name": eq(role_name)}):
            raise ServiceError("Já existe um tipo de usuário com este nome interno.")
        return self.client.insert(
            self.table,
            {
                "role_name": role_name,
                "role_display_name": require_text(data, "role_display_name", "Nome de exibição"),
                "description": str(data.get("description") or "").strip() or None,
            },
        )

    def delete_user_type(self, type_id: str) -> None:
        self.check_requirement(USER_TYPES_MANAGEMENT)
        user_type = self.get_row(type_id)
        if user_type.get("role_name") in ROLE_NAMES:
            raise ServiceError("Tipos de usuário do sistema não podem ser excluídos.")
        in_use = self.client.select_one(
            UsersService.table, columns="id", filters={"role_id": eq(type_id)}
        )
        if in_use:
            raise ServiceError("Existem usuários usando este tipo.")
        self.delete_row(type_id)
