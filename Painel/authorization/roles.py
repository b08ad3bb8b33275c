"""
Role and permission model.

Every access policy used by the dashboard is declared here as a named,
immutable ``PermissionRequirement``. Views and templates import these
constants instead of building ad hoc role lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable


LOGIN_ROUTE = "/login"
DASHBOARD_ROUTE = "/dashboard"
ORDERS_ROUTE = "/pedidos"


class Role(str, Enum):
    """Closed set of principals. Values match the names shown in the UI."""

    ADMINISTRATOR = "Administrator"
    ESTABLISHMENT = "Estabelecimento"
    ATTENDANT = "Atendente"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Resource(str, Enum):
    ORDERS = "pedidos"
    PRODUCTS = "produtos"
    CLIENTS = "clientes"
    ESTABLISHMENTS = "estabelecimentos"
    ATTENDANTS = "atendentes"


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Authenticated principal, built once per login and never mutated."""

    id: str
    role: Role
    establishment_id: str | None = None
    email: str = ""
    name: str = ""
    status: str = "active"
    created_at: str = ""
    updated_at: str = ""
    establishment_name: str = ""


@dataclass(frozen=True, slots=True)
class PermissionRequirement:
    allowed_roles: frozenset[Role]
    requires_establishment: bool = False
    allowed_establishment_ids: frozenset[str] = field(default_factory=frozenset)
    description: str = ""

    def __post_init__(self) -> None:
        if not self.allowed_roles:
            raise ValueError("PermissionRequirement needs at least one allowed role.")
        for role in self.allowed_roles:
            if not isinstance(role, Role):
                raise ValueError(f"Unknown role in PermissionRequirement: {role!r}")


@dataclass(frozen=True, slots=True)
class ResourceAction:
    action: Action
    resource: Resource
    establishment_id: str | None = None


def requirement(
    roles: Iterable[Role],
    *,
    requires_establishment: bool = False,
    allowed_establishment_ids: Iterable[str] = (),
    description: str = "",
) -> PermissionRequirement:
    return PermissionRequirement(
        allowed_roles=frozenset(roles),
        requires_establishment=requires_establishment,
        allowed_establishment_ids=frozenset(allowed_establishment_ids),
        description=description,
    )


# Full administrative dashboard: platform administrators only.
FULL_DASHBOARD = requirement(
    [Role.ADMINISTRATOR],
    description="Platform-wide dashboard, restricted to administrators.",
)

# Establishment dashboard: the owner must be linked to an establishment.
ESTABLISHMENT_DASHBOARD = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT],
    requires_establishment=True,
    description="Dashboard of a single establishment.",
)

# Order kanban: every role, always inside an establishment.
ORDERS_KANBAN = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT, Role.ATTENDANT],
    requires_establishment=True,
    description="Order kanban and order registration.",
)

# Products: owners manage their own catalogue; attendants are kept out.
PRODUCT_MANAGEMENT = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT],
    requires_establishment=True,
    description="Product catalogue management.",
)

# Categories: no establishment requirement so administrators work unscoped.
CATEGORY_MANAGEMENT = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT],
    description="Product category management.",
)

# Staff: owners manage the attendants of their own establishment.
STAFF_MANAGEMENT = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT],
    requires_establishment=True,
    description="Attendant management.",
)

# Screens every authenticated role may read.
READ_ONLY_FOR_ATTENDANT = requirement(
    [Role.ADMINISTRATOR, Role.ESTABLISHMENT, Role.ATTENDANT],
    description="Read-only screens open to every role.",
)

# System users: administrators only.
USER_MANAGEMENT = requirement(
    [Role.ADMINISTRATOR],
    description="Platform user management.",
)

# User types (roles catalogue): administrators only.
USER_TYPES_MANAGEMENT = requirement(
    [Role.ADMINISTRATOR],
    description="User type management.",
)

PERMISSION_CONFIGS = MappingProxyType(
    {
        "FULL_DASHBOARD": FULL_DASHBOARD,
        "ESTABLISHMENT_DASHBOARD": ESTABLISHMENT_DASHBOARD,
        "ORDERS_KANBAN": ORDERS_KANBAN,
        "PRODUCT_MANAGEMENT": PRODUCT_MANAGEMENT,
        "CATEGORY_MANAGEMENT": CATEGORY_MANAGEMENT,
        "STAFF_MANAGEMENT": STAFF_MANAGEMENT,
        "READ_ONLY_FOR_ATTENDANT": READ_ONLY_FOR_ATTENDANT,
        "USER_MANAGEMENT": USER_MANAGEMENT,
        "USER_TYPES_MANAGEMENT": USER_TYPES_MANAGEMENT,
    }
)
