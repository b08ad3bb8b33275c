from django.urls import path

from . import views

app_name = "Painel"

urlpatterns = [
    path("", views.home, name="home"),
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),
    path("perfil", views.profile_view, name="profile"),
    path("minha-conta", views.account_view, name="account"),
    path("ativar-atendente/<str:token>", views.activate_invite_view, name="activate_invite"),
    path("dashboard", views.dashboard, name="dashboard"),
    path("admin-dashboard", views.admin_dashboard, name="admin_dashboard"),
    path("integracao/saude", views.integration_health, name="integration_health"),
    path("estabelecimento", views.establishment_view, name="establishment"),
    path("pedidos", views.orders_kanban, name="orders"),
    path("pedidos/listar", views.orders_kanban, name="orders_list"),
    path("pedidos/cadastrar", views.order_create, name="order_create"),
    path("pedidos/<str:codigo>", views.order_detail, name="order_detail"),
    path("pedidos/<str:codigo>/status", views.order_update_status, name="order_update_status"),
    path("pedidos/<str:codigo>/excluir", views.order_delete, name="order_delete"),
    path("cardapio", views.menu_view, name="menu"),
    path("produtos", views.products_list, name="products"),
    path("produtos/listar", views.products_list, name="products_list"),
    path("produtos/cadastrar", views.product_create, name="product_create"),
    path("produtos/<str:codigo>/editar", views.product_edit, name="product_edit"),
    path("produtos/<str:codigo>/disponibilidade", views.product_toggle, name="product_toggle"),
    path("produtos/<str:codigo>/excluir", views.product_delete, name="product_delete"),
    path("categorias/listar", views.categories_list, name="categories"),
    path("categorias/cadastrar", views.category_create, name="category_create"),
    path("categorias/<str:codigo>/excluir", views.category_delete, name="category_delete"),
    path("clientes", views.clients_list, name="clients"),
    path("clientes/listar", views.clients_list, name="clients_list"),
    path("clientes/cadastrar", views.client_create, name="client_create"),
    path("clientes/<str:codigo>/editar", views.client_edit, name="client_edit"),
    path("clientes/<str:codigo>/excluir", views.client_delete, name="client_delete"),
    path("entregadores", views.couriers_list, name="couriers"),
    path("entregadores/listar", views.couriers_list, name="couriers_list"),
    path("entregadores/cadastrar", views.courier_create, name="courier_create"),
    path("entregadores/<str:codigo>/ativo", views.courier_toggle, name="courier_toggle"),
    path("empresas/listar", views.companies_list, name="companies"),
    path("empresas/cadastrar", views.company_create, name="company_create"),
    path("atendentes", views.attendants_list, name="attendants"),
    path("atendentes/cadastrar", views.attendant_invite, name="attendant_invite"),
    path("atendentes/convites", views.attendant_invites, name="attendant_invites"),
    path("atendentes/<str:attendant_id>/ativo", views.attendant_toggle, name="attendant_toggle"),
    path("usuarios", views.users_list, name="users"),
    path("usuarios/cadastrar", views.user_create, name="user_create"),
    path("usuarios/tipos", views.user_types_list, name="user_types"),
    path("usuarios/tipos/novo", views.user_type_create, name="user_type_create"),
    path("usuarios/tipos/<str:type_id>/excluir", views.user_type_delete, name="user_type_delete"),
]
