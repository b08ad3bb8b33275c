from __future__ import annotations

from dataclasses import dataclass, field

from .session import AuthorizationSession


@dataclass(frozen=True, slots=True)
class MenuItem:
    id: str
    title: str
    path: str = ""
    submenu: tuple["MenuItem", ...] = field(default_factory=tuple)


MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("admin-dashboard", "Dashboard Administrativa", "/admin-dashboard"),
    MenuItem("dashboard", "Dashboard", "/dashboard"),
    MenuItem("estabelecimento", "Meu Estabelecimento", "/estabelecimento"),
    MenuItem(
        "cardapio",
        "Cardápio",
        submenu=(MenuItem("ver-cardapio", "Ver Cardápio", "/cardapio"),),
    ),
    MenuItem(
        "pedidos",
        "Pedidos",
        submenu=(
            MenuItem("cadastrar-pedido", "Cadastrar Pedido", "/pedidos/cadastrar"),
            MenuItem("listar-pedidos", "Listar Pedidos", "/pedidos/listar"),
        ),
    ),
    MenuItem(
        "categorias",
        "Categorias",
        submenu=(
            MenuItem("cadastrar-categoria", "Cadastrar Categoria", "/categorias/cadastrar"),
            MenuItem("listar-categorias", "Listar Categorias", "/categorias/listar"),
        ),
    ),
    MenuItem(
        "produtos",
        "Produtos",
        submenu=(
            MenuItem("cadastrar-produto", "Cadastrar Produto", "/produtos/cadastrar"),
            MenuItem("listar-produtos", "Listar Produtos", "/produtos/listar"),
        ),
    ),
    MenuItem(
        "clientes",
        "Clientes",
        submenu=(
            MenuItem("cadastrar-cliente", "Cadastrar Cliente", "/clientes/cadastrar"),
            MenuItem("listar-clientes", "Listar Clientes", "/clientes/listar"),
        ),
    ),
    MenuItem(
        "empresas",
        "Empresas",
        submenu=(
            MenuItem("cadastrar-empresa", "Cadastrar Empresa", "/empresas/cadastrar"),
            MenuItem("listar-empresas", "Listar Empresas", "/empresas/listar"),
        ),
    ),
    MenuItem(
        "entregadores",
        "Entregadores",
        submenu=(
            MenuItem("cadastrar-entregador", "Cadastrar Entregador", "/entregadores/cadastrar"),
            MenuItem("listar-entregadores", "Listar Entregadores", "/entregadores/listar"),
        ),
    ),
    MenuItem(
        "atendentes",
        "Atendentes",
        submenu=(
            MenuItem("gerenciar-atendentes", "Gerenciar Atendentes", "/atendentes"),
            MenuItem("convidar-atendente", "Convidar Atendente", "/atendentes/cadastrar"),
            MenuItem("convites-atendentes", "Convites", "/atendentes/convites"),
        ),
    ),
    MenuItem(
        "usuarios",
        "Usuários",
        submenu=(
            MenuItem("cadastrar-usuario", "Cadastrar Usuário", "/usuarios/cadastrar"),
            MenuItem("listar-usuarios", "Listar Usuários", "/usuarios"),
            MenuItem("tipos-usuarios", "Tipos de Usuários", "/usuarios/tipos"),
        ),
    ),
)

LOGOUT_ITEM = MenuItem("sair", "Sair", "/logout")


def visible_menu(authz: AuthorizationSession) -> list[MenuItem]:
    """Menu entries the session may open; sections left empty are dropped."""
    visible: list[MenuItem] = []
    for item in MENU_ITEMS:
        if item.submenu:
            children = tuple(child for child in item.submenu if authz.can_access_route(child.path))
            if children:
                visible.append(MenuItem(item.id, item.title, item.path, children))
        elif authz.can_access_route(item.path):
            visible.append(item)
    return visible
