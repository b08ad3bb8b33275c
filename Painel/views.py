from __future__ import annotations

import logging
from decimal import Decimal

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .authorization.guards import (
    GuardOutcome,
    admin_only_guard,
    category_guard,
    establishment_guard,
    evaluate_guard,
    get_authz,
    login_required_guard,
    orders_guard,
    product_guard,
    staff_guard,
    user_management_guard,
    user_types_guard,
)
from .forms import (
    ActivateInviteForm,
    CategoryForm,
    ClientForm,
    CompanyForm,
    CourierForm,
    EstablishmentForm,
    InviteForm,
    LoginForm,
    OrderForm,
    ProductForm,
    UserForm,
    UserTypeForm,
)
from .integration.auth import SESSION_TOKEN_KEY, sign_in, sign_out
from .integration.client import SupabaseClient
from .integration.exceptions import ContractError, IntegrationError, UpstreamUnavailable
from .integration.health import integration_health_snapshot
from .services import (
    DELIVERY_METHODS,
    ORDER_STATUSES,
    PAYMENT_METHODS,
    AttendantsService,
    CategoriesService,
    ClientsService,
    CompaniesService,
    CouriersService,
    EstablishmentsService,
    OrdersService,
    ProductsService,
    ServiceError,
    UsersService,
    UserTypesService,
    activate_invite,
    validate_invite,
)

logger = logging.getLogger(__name__)


def _client(request) -> SupabaseClient:
    return SupabaseClient(access_token=request.session.get(SESSION_TOKEN_KEY))


def _service(request, service_cls):
    return service_cls(_client(request), get_authz(request).profile)


def _load(request, loader, default=None):
    """Run a read against Supabase, turning failures into a flash message."""
    try:
        return loader()
    except (ServiceError, IntegrationError) as exc:
        logger.warning("Could not load data for %s: %s", request.path, exc)
        messages.error(request, f"Não foi possível carregar os dados: {exc}")
        return default if default is not None else []


def _mutate(request, action, success_message: str) -> bool:
    try:
        action()
    except ServiceError as exc:
        messages.error(request, str(exc))
        return False
    except UpstreamUnavailable as exc:
        messages.error(request, f"Serviço temporariamente indisponível: {exc}")
        return False
    except ContractError as exc:
        logger.warning("Supabase rejected %s: %s", request.path, exc)
        messages.error(request, "A operação foi recusada pelo servidor.")
        return False
    messages.success(request, success_message)
    return True


def _safe_next(request, fallback: str) -> str:
    next_url = str(request.POST.get("next") or request.GET.get("next") or "").strip()
    if next_url and url_has_allowed_host_and_scheme(
        url=next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return fallback


# ==========================================
# SESSION
# ==========================================

def home(request):
    """Send the visitor to the landing page of their role."""
    authz = get_authz(request)
    decision = evaluate_guard(authz)
    if decision.outcome is GuardOutcome.LOADING:
        return render(request, "painel/loading.html")
    if decision.outcome is GuardOutcome.UNAUTHENTICATED:
        return redirect("Painel:login")
    return redirect(authz.get_default_route())


def login_view(request):
    authz = get_authz(request)
    if authz.profile is not None:
        return redirect(authz.get_default_route())

    form = LoginForm(request.POST or None)
    if request.method == "POST":
        if form.is_valid():
            email = form.cleaned_data["email"]
            try:
                profile = sign_in(request, email, form.cleaned_data["password"])
            except UpstreamUnavailable as exc:
                messages.error(request, f"Login temporariamente indisponível: {exc}")
            except ContractError as exc:
                logger.info("Login refused for %s: %s", email, exc)
                messages.error(request, "E-mail ou senha inválidos.")
            else:
                if profile is None:
                    return redirect("Painel:home")
                authz.update(profile)
                return redirect(_safe_next(request, authz.get_default_route()))
        else:
            messages.error(request, "E-mail ou senha inválidos.")

    return render(
        request,
        "painel/login.html",
        {"form": form, "next": request.GET.get("next", "")},
    )


def logout_view(request):
    sign_out(request)
    return redirect("Painel:login")


@login_required_guard
def profile_view(request):
    return render(request, "painel/profile.html", {"title": "Perfil"})


@login_required_guard
def account_view(request):
    return render(request, "painel/profile.html", {"title": "Minha Conta"})


# ==========================================
# DASHBOARDS
# ==========================================

@establishment_guard
def dashboard(request):
    orders = _load(request, _service(request, OrdersService).list_orders)
    by_status = {status: 0 for status in ORDER_STATUSES}
    revenue = Decimal("0")
    for order in orders:
        by_status[order["status"]] = by_status.get(order["status"], 0) + 1
        if order["status"] == "Pedido Entregue":
            revenue += order["total_pedido"]
    return render(
        request,
        "painel/dashboard.html",
        {"orders_total": len(orders), "orders_by_status": by_status, "revenue": revenue},
    )


@admin_only_guard
def admin_dashboard(request):
    companies = _load(request, _service(request, CompaniesService).list_companies)
    users = _load(request, _service(request, UsersService).list_users)
    return render(
        request,
        "painel/admin_dashboard.html",
        {"companies_total": len(companies), "users_total": len(users)},
    )


@admin_only_guard
def integration_health(request):
    return JsonResponse(integration_health_snapshot())


# ==========================================
# ORDERS
# ==========================================

@orders_guard
def orders_kanban(request):
    board = _load(request, _service(request, OrdersService).kanban, default={})
    return render(request, "painel/orders_kanban.html", {"board": board, "statuses": ORDER_STATUSES})


@orders_guard
@require_POST
def order_update_status(request, codigo):
    service = _service(request, OrdersService)
    status = str(request.POST.get("status") or "")
    _mutate(request, lambda: service.update_status(codigo, status), f"Pedido movido para {status}.")
    return redirect("Painel:orders")


@orders_guard
@require_POST
def order_delete(request, codigo):
    service = _service(request, OrdersService)
    _mutate(request, lambda: service.delete_order(codigo), "Pedido excluído.")
    return redirect("Painel:orders")


def _order_items(post) -> list[dict[str, str]]:
    """Quantities posted as ``qtd_<product code>`` fields."""
    return [
        {"codigo_produto": key[len("qtd_"):], "quantidade": value}
        for key, value in post.items()
        if key.startswith("qtd_") and value
    ]


@orders_guard
def order_create(request):
    form = OrderForm(
        request.POST or None,
        payment_methods=PAYMENT_METHODS,
        delivery_methods=DELIVERY_METHODS,
    )
    if request.method == "POST" and form.is_valid():
        service = _service(request, OrdersService)
        items = _order_items(request.POST)
        if _mutate(
            request,
            lambda: service.create_order(form.cleaned_data, items),
            "Pedido criado com sucesso.",
        ):
            return redirect("Painel:orders")

    products = _load(request, _service(request, ProductsService).list_products)
    return render(
        request,
        "painel/order_form.html",
        {"form": form, "products": [p for p in products if p.get("disponivel")]},
    )


@orders_guard
def order_detail(request, codigo):
    service = _service(request, OrdersService)
    try:
        order = service.get_order(codigo)
    except (ServiceError, IntegrationError) as exc:
        messages.error(request, str(exc))
        return redirect("Painel:orders")
    items = _load(request, lambda: service.list_items(codigo))
    return render(
        request,
        "painel/order_detail.html",
        {"order": order, "items": items, "statuses": ORDER_STATUSES},
    )


@orders_guard
def menu_view(request):
    products = _load(request, _service(request, ProductsService).list_products)
    categories = _load(request, _service(request, CategoriesService).list_categories)
    names = {c.get("codigo"): c.get("nome") for c in categories}
    sections: dict[str, list] = {}
    for product in products:
        if product.get("disponivel"):
            sections.setdefault(names.get(product.get("codigo_categoria"), "Outros"), []).append(product)
    return render(request, "painel/menu.html", {"sections": sections})


# ==========================================
# PRODUCTS & CATEGORIES
# ==========================================

@product_guard
def products_list(request):
    service = _service(request, ProductsService)
    term = str(request.GET.get("q") or "")
    products = _load(request, lambda: service.search_products(term))
    return render(request, "painel/products.html", {"products": products, "q": term})


@product_guard
def product_create(request):
    form = ProductForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, ProductsService)
        if _mutate(request, lambda: service.create_product(form.cleaned_data), "Produto cadastrado."):
            return redirect("Painel:products")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Produto"})


@product_guard
def product_edit(request, codigo):
    service = _service(request, ProductsService)
    try:
        product = service.get_product(codigo)
    except (ServiceError, IntegrationError) as exc:
        messages.error(request, str(exc))
        return redirect("Painel:products")

    form = ProductForm(request.POST or None, initial=product)
    if request.method == "POST" and form.is_valid():
        if _mutate(request, lambda: service.update_product(codigo, form.cleaned_data), "Produto atualizado."):
            return redirect("Painel:products")
    return render(request, "painel/form.html", {"form": form, "title": "Editar Produto"})


@product_guard
@require_POST
def product_toggle(request, codigo):
    service = _service(request, ProductsService)
    _mutate(request, lambda: service.toggle_availability(codigo), "Disponibilidade atualizada.")
    return redirect("Painel:products")


@product_guard
@require_POST
def product_delete(request, codigo):
    service = _service(request, ProductsService)
    _mutate(request, lambda: service.delete_product(codigo), "Produto excluído.")
    return redirect("Painel:products")


@category_guard
def categories_list(request):
    categories = _load(request, _service(request, CategoriesService).list_categories)
    return render(request, "painel/categories.html", {"categories": categories})


@category_guard
def category_create(request):
    form = CategoryForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, CategoriesService)
        if _mutate(request, lambda: service.create_category(form.cleaned_data), "Categoria cadastrada."):
            return redirect("Painel:categories")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Categoria"})


@category_guard
@require_POST
def category_delete(request, codigo):
    service = _service(request, CategoriesService)
    _mutate(request, lambda: service.delete_category(codigo), "Categoria excluída.")
    return redirect("Painel:categories")


# ==========================================
# CLIENTS, COURIERS, COMPANIES
# ==========================================

@orders_guard
def clients_list(request):
    service = _service(request, ClientsService)
    clients = _load(request, service.list_clients)
    return render(request, "painel/clients.html", {"clients": clients, "stats": service.stats(clients)})


@orders_guard
def client_create(request):
    form = ClientForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, ClientsService)
        if _mutate(request, lambda: service.create_client(form.cleaned_data), "Cliente cadastrado."):
            return redirect("Painel:clients")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Cliente"})


@orders_guard
def client_edit(request, codigo):
    service = _service(request, ClientsService)
    try:
        client = service.get_client(codigo)
    except (ServiceError, IntegrationError) as exc:
        messages.error(request, str(exc))
        return redirect("Painel:clients")

    form = ClientForm(request.POST or None, initial=client)
    if request.method == "POST" and form.is_valid():
        if _mutate(request, lambda: service.update_client(codigo, form.cleaned_data), "Cliente atualizado."):
            return redirect("Painel:clients")
    return render(request, "painel/form.html", {"form": form, "title": "Editar Cliente"})


@orders_guard
@require_POST
def client_delete(request, codigo):
    service = _service(request, ClientsService)
    _mutate(request, lambda: service.delete_client(codigo), "Cliente excluído.")
    return redirect("Painel:clients")


@establishment_guard
def couriers_list(request):
    couriers = _load(request, _service(request, CouriersService).list_couriers)
    return render(request, "painel/couriers.html", {"couriers": couriers})


@establishment_guard
def courier_create(request):
    form = CourierForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, CouriersService)
        if _mutate(request, lambda: service.create_courier(form.cleaned_data), "Entregador cadastrado."):
            return redirect("Painel:couriers")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Entregador"})


@establishment_guard
@require_POST
def courier_toggle(request, codigo):
    service = _service(request, CouriersService)
    active = request.POST.get("ativo") == "1"
    _mutate(
        request,
        lambda: service.set_active(codigo, active),
        "Entregador ativado." if active else "Entregador desativado.",
    )
    return redirect("Painel:couriers")


@admin_only_guard
def companies_list(request):
    companies = _load(request, _service(request, CompaniesService).list_companies)
    return render(request, "painel/companies.html", {"companies": companies})


@admin_only_guard
def company_create(request):
    form = CompanyForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, CompaniesService)
        if _mutate(request, lambda: service.create_company(form.cleaned_data), "Empresa cadastrada."):
            return redirect("Painel:companies")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Empresa"})


@establishment_guard
def establishment_view(request):
    """The owner's own establishment; administrators pick one with ``?codigo=``."""
    service = _service(request, EstablishmentsService)
    code = str(request.GET.get("codigo") or "").strip() or None
    try:
        establishment = service.get_establishment(code)
    except (ServiceError, IntegrationError) as exc:
        messages.error(request, str(exc))
        return redirect(get_authz(request).get_default_route())

    form = EstablishmentForm(request.POST or None, initial=establishment)
    if request.method == "POST" and form.is_valid():
        if _mutate(
            request,
            lambda: service.update_establishment(form.cleaned_data, establishment.get("codigo")),
            "Dados do estabelecimento atualizados.",
        ):
            return redirect(request.get_full_path())
    return render(request, "painel/form.html", {"form": form, "title": "Meu Estabelecimento"})


# ==========================================
# STAFF & USERS
# ==========================================

@staff_guard
def attendants_list(request):
    attendants = _load(request, _service(request, AttendantsService).list_attendants)
    return render(request, "painel/attendants.html", {"attendants": attendants})


@staff_guard
@require_POST
def attendant_toggle(request, attendant_id):
    service = _service(request, AttendantsService)
    active = request.POST.get("ativo") == "1"
    _mutate(
        request,
        lambda: service.set_active(attendant_id, active),
        "Atendente ativado." if active else "Atendente desativado.",
    )
    return redirect("Painel:attendants")


@staff_guard
def attendant_invite(request):
    form = InviteForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, AttendantsService)
        email = form.cleaned_data["email"]
        if _mutate(request, lambda: service.invite_attendant(form.cleaned_data), f"Convite enviado para {email}."):
            return redirect("Painel:attendant_invites")
    return render(request, "painel/form.html", {"form": form, "title": "Convidar Atendente"})


@staff_guard
def attendant_invites(request):
    invites = _load(request, _service(request, AttendantsService).list_invites)
    return render(request, "painel/invites.html", {"invites": invites})


def activate_invite_view(request, token):
    """Public page where an invited attendant chooses a password."""
    client = SupabaseClient()
    try:
        invite = validate_invite(client, token)
    except (ServiceError, IntegrationError) as exc:
        logger.info("Invite activation refused: %s", exc)
        return render(request, "painel/activate_invite.html", {"error": str(exc)}, status=400)

    form = ActivateInviteForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        if _mutate(
            request,
            lambda: activate_invite(client, token, form.cleaned_data["senha"]),
            "Conta ativada. Faça login para continuar.",
        ):
            return redirect("Painel:login")
    return render(request, "painel/activate_invite.html", {"invite": invite, "form": form})


@user_management_guard
def users_list(request):
    users = _load(request, _service(request, UsersService).list_users)
    return render(request, "painel/users.html", {"users": users})


@user_management_guard
def user_create(request):
    form = UserForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, UsersService)
        if _mutate(request, lambda: service.create_user(form.cleaned_data), "Usuário cadastrado."):
            return redirect("Painel:users")
    return render(request, "painel/form.html", {"form": form, "title": "Cadastrar Usuário"})


@user_types_guard
def user_types_list(request):
    user_types = _load(request, _service(request, UserTypesService).list_user_types)
    return render(request, "painel/user_types.html", {"user_types": user_types})


@user_types_guard
def user_type_create(request):
    form = UserTypeForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        service = _service(request, UserTypesService)
        if _mutate(request, lambda: service.create_user_type(form.cleaned_data), "Tipo de usuário cadastrado."):
            return redirect("Painel:user_types")
    return render(request, "painel/form.html", {"form": form, "title": "Novo Tipo de Usuário"})


@user_types_guard
@require_POST
def user_type_delete(request, type_id):
    service = _service(request, UserTypesService)
    _mutate(request, lambda: service.delete_user_type(type_id), "Tipo de usuário excluído.")
    return redirect("Painel:user_types")
