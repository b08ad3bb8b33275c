from unittest import mock

from django.test import SimpleTestCase, override_settings

from Painel.authorization.roles import Role
from Painel.integration.exceptions import ContractError, UpstreamUnavailable
from Painel.services import (
    AttendantsService,
    CategoriesService,
    ClientsService,
    CouriersService,
    EstablishmentsService,
    OrdersService,
    ProductsService,
    ServiceError,
    UsersService,
    UserTypesService,
)

from .helpers import login_as, make_profile


def _board(establishment_id="E1"):
    return {
        "Pedindo": [
            {
                "codigo": "O1",
                "numero_pedido": "42",
                "codigo_estabelecimento": establishment_id,
                "status": "Pedindo",
                "total_pedido": "25.00",
                "cliente_nome": "Ana",
            }
        ],
        "Pedido Pronto": [],
    }


class AnonymousAccessTests(SimpleTestCase):
    def test_home_redirects_to_login(self):
        response = self.client.get("/")
        self.assertRedirects(response, "/login", fetch_redirect_response=False)

    def test_guarded_page_keeps_requested_location(self):
        response = self.client.get("/pedidos")
        self.assertRedirects(response, "/login?next=%2Fpedidos", fetch_redirect_response=False)

    def test_login_page(self):
        response = self.client.get("/login")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Entrar")


class LoginViewTests(SimpleTestCase):
    @mock.patch("Painel.views.sign_in")
    def test_login_redirects_to_role_default(self, sign_in):
        sign_in.return_value = make_profile(Role.ATTENDANT, "E1")
        response = self.client.post("/login", {"email": "a@b.com", "password": "secret"})
        self.assertRedirects(response, "/pedidos", fetch_redirect_response=False)

    @mock.patch("Painel.views.sign_in")
    def test_login_honours_next(self, sign_in):
        sign_in.return_value = make_profile(Role.ESTABLISHMENT, "E1")
        response = self.client.post(
            "/login", {"email": "a@b.com", "password": "secret", "next": "/clientes"}
        )
        self.assertRedirects(response, "/clientes", fetch_redirect_response=False)

    @mock.patch("Painel.views.sign_in")
    def test_login_ignores_foreign_next(self, sign_in):
        sign_in.return_value = make_profile(Role.ESTABLISHMENT, "E1")
        response = self.client.post(
            "/login", {"email": "a@b.com", "password": "secret", "next": "https://evil.example.com/"}
        )
        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    @mock.patch("Painel.views.sign_in")
    def test_bad_credentials(self, sign_in):
        sign_in.side_effect = ContractError("400")
        response = self.client.post("/login", {"email": "a@b.com", "password": "nope"})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "E-mail ou senha inválidos.")

    @mock.patch("Painel.views.sign_in")
    def test_supabase_down(self, sign_in):
        sign_in.side_effect = UpstreamUnavailable("down")
        response = self.client.post("/login", {"email": "a@b.com", "password": "secret"})
        self.assertContains(response, "Login temporariamente indisponível")

    def test_signed_in_user_skips_login(self):
        login_as(self.client, make_profile(Role.ADMINISTRATOR, None))
        response = self.client.get("/login")
        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    @override_settings(PAINEL_SUPABASE_URL="", PAINEL_SUPABASE_ANON_KEY="")
    def test_logout_clears_session(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.get("/logout")
        self.assertRedirects(response, "/login", fetch_redirect_response=False)
        response = self.client.get("/pedidos")
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response["Location"].startswith("/login"))


class GuardedViewsTests(SimpleTestCase):
    def test_home_sends_attendant_to_orders(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        self.assertRedirects(self.client.get("/"), "/pedidos", fetch_redirect_response=False)

    def test_attendant_is_denied_products(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.get("/produtos")
        self.assertEqual(response.status_code, 403)
        self.assertContains(response, "Acesso Negado", status_code=403)
        self.assertContains(response, "Atendente", status_code=403)

    def test_establishment_is_denied_user_management(self):
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        response = self.client.get("/usuarios")
        self.assertContains(response, "Estabelecimento", status_code=403)

    def test_profile_page_is_open_to_every_role(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1", name="Bruna"))
        response = self.client.get("/perfil")
        self.assertContains(response, "Bruna")

    @mock.patch.object(OrdersService, "kanban")
    def test_attendant_kanban_hides_delete(self, kanban):
        kanban.return_value = _board()
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.get("/pedidos")
        self.assertContains(response, "#42")
        self.assertContains(response, "Mover")
        self.assertNotContains(response, "Excluir")

    @mock.patch.object(OrdersService, "kanban")
    def test_establishment_kanban_shows_delete(self, kanban):
        kanban.return_value = _board()
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        response = self.client.get("/pedidos/listar")
        self.assertContains(response, "Excluir")

    @mock.patch.object(OrdersService, "kanban")
    def test_kanban_survives_upstream_failure(self, kanban):
        kanban.side_effect = UpstreamUnavailable("down")
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.get("/pedidos")
        self.assertContains(response, "Não foi possível carregar os dados")

    @mock.patch.object(OrdersService, "update_status")
    def test_update_status(self, update_status):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.post("/pedidos/O1/status", {"status": "Pedido Pronto"})
        self.assertRedirects(response, "/pedidos", fetch_redirect_response=False)
        update_status.assert_called_once_with("O1", "Pedido Pronto")

    def test_unlinked_attendant_sees_access_denied_on_the_kanban(self):
        login_as(self.client, make_profile(Role.ATTENDANT, None))
        response = self.client.get("/pedidos")
        self.assertEqual(response.status_code, 403)
        self.assertContains(response, "Acesso Negado", status_code=403)

    def test_update_status_requires_post(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        self.assertEqual(self.client.get("/pedidos/O1/status").status_code, 405)

    @mock.patch("Painel.views.integration_health_snapshot")
    def test_integration_health_is_admin_only(self, snapshot):
        snapshot.return_value = {"configured": True, "healthy": True}
        login_as(self.client, make_profile(Role.ADMINISTRATOR, None))
        response = self.client.get("/integracao/saude")
        self.assertEqual(response.json(), {"configured": True, "healthy": True})

        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        self.assertEqual(self.client.get("/integracao/saude").status_code, 403)


class LoadingSessionTests(SimpleTestCase):
    @mock.patch("Painel.integration.auth.fetch_profile")
    def test_unreachable_profile_shows_loading_page(self, fetch_profile):
        fetch_profile.side_effect = UpstreamUnavailable("down")
        login_as(self.client, None, user={"id": "u1", "email": "a@b.com"})

        response = self.client.get("/produtos")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Verificando permissões")


class OrderPagesTests(SimpleTestCase):
    def setUp(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))

    @mock.patch.object(ProductsService, "list_products")
    def test_order_form_lists_available_products(self, list_products):
        list_products.return_value = [
            {"codigo": "P1", "nome": "Pizza", "preco": "30.00", "disponivel": True},
            {"codigo": "P2", "nome": "Suco", "preco": "7.50", "disponivel": False},
        ]
        response = self.client.get("/pedidos/cadastrar")
        self.assertContains(response, 'name="qtd_P1"')
        self.assertNotContains(response, 'name="qtd_P2"')

    @mock.patch.object(OrdersService, "create_order")
    def test_create_order(self, create_order):
        response = self.client.post(
            "/pedidos/cadastrar",
            {
                "cliente_nome": "Ana",
                "forma_pagamento": "Pix",
                "forma_entrega": "Entrega",
                "valor_entrega": "5",
                "qtd_P1": "2",
            },
        )
        self.assertRedirects(response, "/pedidos", fetch_redirect_response=False)
        data, items = create_order.call_args.args
        self.assertEqual(data["forma_pagamento"], "Pix")
        self.assertEqual(items, [{"codigo_produto": "P1", "quantidade": "2"}])

    @mock.patch.object(ProductsService, "list_products", return_value=[])
    @mock.patch.object(OrdersService, "create_order")
    def test_rejected_order_stays_on_the_form(self, create_order, _products):
        create_order.side_effect = ServiceError("Pedido deve ter pelo menos um item.")
        response = self.client.post(
            "/pedidos/cadastrar",
            {"cliente_nome": "Ana", "forma_pagamento": "Pix", "forma_entrega": "Retirada"},
        )
        self.assertContains(response, "Pedido deve ter pelo menos um item.")

    @mock.patch.object(OrdersService, "list_items")
    @mock.patch.object(OrdersService, "get_order")
    def test_order_detail(self, get_order, list_items):
        get_order.return_value = {
            "codigo": "O1",
            "numero_pedido": "42",
            "codigo_estabelecimento": "E1",
            "status": "Pedindo",
            "cliente_nome": "Ana",
        }
        list_items.return_value = [{"qtde_item": 2, "nome_item": "Pizza", "total_produto": "60.00"}]
        response = self.client.get("/pedidos/O1")
        self.assertContains(response, "Pedido #42")
        self.assertContains(response, "Pizza")
        self.assertContains(response, "Mover")

    @mock.patch.object(OrdersService, "get_order")
    def test_missing_order_goes_back_to_the_kanban(self, get_order):
        get_order.side_effect = ServiceError("Registro O9 não encontrado em pedidos.")
        response = self.client.get("/pedidos/O9")
        self.assertRedirects(response, "/pedidos", fetch_redirect_response=False)


class CatalogPagesTests(SimpleTestCase):
    def setUp(self):
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))

    @mock.patch.object(ProductsService, "update_product")
    @mock.patch.object(ProductsService, "get_product")
    def test_edit_product(self, get_product, update_product):
        get_product.return_value = {"codigo": "P1", "nome": "Pizza", "preco": "30.00"}
        self.assertContains(self.client.get("/produtos/P1/editar"), 'value="Pizza"')

        response = self.client.post("/produtos/P1/editar", {"nome": "Pizza Grande", "preco": "45.00"})
        self.assertRedirects(response, "/produtos", fetch_redirect_response=False)
        code, data = update_product.call_args.args
        self.assertEqual(code, "P1")
        self.assertEqual(data["nome"], "Pizza Grande")

    @mock.patch.object(CategoriesService, "delete_category")
    def test_delete_category(self, delete_category):
        response = self.client.post("/categorias/C1/excluir")
        self.assertRedirects(response, "/categorias/listar", fetch_redirect_response=False)
        delete_category.assert_called_once_with("C1")

    def test_attendant_cannot_reach_category_delete(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        self.assertEqual(self.client.post("/categorias/C1/excluir").status_code, 403)

    @mock.patch.object(CouriersService, "set_active")
    def test_toggle_courier(self, set_active):
        response = self.client.post("/entregadores/K1/ativo", {"ativo": "0"})
        self.assertRedirects(response, "/entregadores", fetch_redirect_response=False)
        set_active.assert_called_once_with("K1", False)


class ClientPagesTests(SimpleTestCase):
    @mock.patch.object(ClientsService, "list_clients")
    def test_clients_list_shows_stats(self, list_clients):
        list_clients.return_value = [
            {"codigo": "C1", "nome": "Ana", "ativo": True, "cidade": "Recife", "codigo_estabelecimento": "E1"},
            {"codigo": "C2", "nome": "Rui", "ativo": False, "cidade": "Olinda", "codigo_estabelecimento": "E1"},
        ]
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.get("/clientes")
        self.assertContains(response, "Total: 2")
        self.assertContains(response, "Cidades atendidas: 2")
        self.assertContains(response, "Editar")
        self.assertNotContains(response, "Excluir")

    @mock.patch.object(ClientsService, "update_client")
    @mock.patch.object(ClientsService, "get_client")
    def test_edit_client(self, get_client, update_client):
        get_client.return_value = {"codigo": "C1", "nome": "Ana", "whatsapp": "11999990000"}
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        response = self.client.post("/clientes/C1/editar", {"nome": "Ana Paula", "whatsapp": "11999990000"})
        self.assertRedirects(response, "/clientes", fetch_redirect_response=False)
        self.assertEqual(update_client.call_args.args[1]["nome"], "Ana Paula")

    @mock.patch.object(ClientsService, "delete_client")
    def test_delete_client(self, delete_client):
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        response = self.client.post("/clientes/C1/excluir")
        self.assertRedirects(response, "/clientes", fetch_redirect_response=False)
        delete_client.assert_called_once_with("C1")

    def test_attendant_cannot_delete_clients(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        self.assertEqual(self.client.post("/clientes/C1/excluir").status_code, 403)


class EstablishmentPageTests(SimpleTestCase):
    @mock.patch.object(EstablishmentsService, "update_establishment")
    @mock.patch.object(EstablishmentsService, "get_establishment")
    def test_owner_edits_own_establishment(self, get_establishment, update_establishment):
        get_establishment.return_value = {"codigo": "E1", "nome": "Pizzaria"}
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        self.assertContains(self.client.get("/estabelecimento"), "Meu Estabelecimento")

        response = self.client.post("/estabelecimento", {"nome": "Pizzaria Central", "uf": "PE"})
        self.assertRedirects(response, "/estabelecimento", fetch_redirect_response=False)
        data, code = update_establishment.call_args.args
        self.assertEqual(data["nome"], "Pizzaria Central")
        self.assertEqual(code, "E1")

    def test_attendant_is_denied(self):
        login_as(self.client, make_profile(Role.ATTENDANT, "E1"))
        self.assertEqual(self.client.get("/estabelecimento").status_code, 403)


class StaffPagesTests(SimpleTestCase):
    @mock.patch.object(AttendantsService, "invite_attendant")
    def test_invite_attendant(self, invite_attendant):
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        response = self.client.post("/atendentes/cadastrar", {"nome": "Bia", "email": "bia@pizzaria.com"})
        self.assertRedirects(response, "/atendentes/convites", fetch_redirect_response=False)
        self.assertEqual(invite_attendant.call_args.args[0]["email"], "bia@pizzaria.com")

    @mock.patch.object(AttendantsService, "list_invites")
    def test_invites_page(self, list_invites):
        list_invites.return_value = [{"email": "bia@pizzaria.com", "nome_convidado": "Bia", "status": "pendente"}]
        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        self.assertContains(self.client.get("/atendentes/convites"), "bia@pizzaria.com")

    @mock.patch("Painel.views.validate_invite")
    def test_activation_page_is_public(self, validate):
        validate.return_value = {"nome_convidado": "Bia", "email": "bia@pizzaria.com"}
        response = self.client.get("/ativar-atendente/tok")
        self.assertContains(response, "Ativar Conta")
        self.assertContains(response, "bia@pizzaria.com")

    @mock.patch("Painel.views.validate_invite")
    def test_expired_invite(self, validate):
        validate.side_effect = ServiceError("Token inválido ou expirado.")
        response = self.client.get("/ativar-atendente/old")
        self.assertContains(response, "Token inválido ou expirado.", status_code=400)

    @mock.patch("Painel.views.activate_invite")
    @mock.patch("Painel.views.validate_invite")
    def test_activate_account(self, validate, activate):
        validate.return_value = {"email": "bia@pizzaria.com"}
        mismatch = self.client.post("/ativar-atendente/tok", {"senha": "segredo1", "confirmar_senha": "outra123"})
        self.assertContains(mismatch, "As senhas não coincidem.")
        activate.assert_not_called()

        response = self.client.post("/ativar-atendente/tok", {"senha": "segredo1", "confirmar_senha": "segredo1"})
        self.assertRedirects(response, "/login", fetch_redirect_response=False)
        self.assertEqual(activate.call_args.args[1:], ("tok", "segredo1"))


class UserPagesTests(SimpleTestCase):
    @mock.patch.object(UsersService, "create_user")
    def test_create_user(self, create_user):
        login_as(self.client, make_profile(Role.ADMINISTRATOR, None))
        response = self.client.post(
            "/usuarios/cadastrar",
            {
                "nome": "Carla",
                "email": "carla@pizzaria.com",
                "senha": "segredo1",
                "role_name": "estabelecimento",
                "estabelecimento_id": "E1",
            },
        )
        self.assertRedirects(response, "/usuarios", fetch_redirect_response=False)
        self.assertEqual(create_user.call_args.args[0]["role_name"], "estabelecimento")

    @mock.patch.object(UserTypesService, "list_user_types")
    def test_user_types_are_admin_only(self, list_user_types):
        list_user_types.return_value = [{"id": 7, "role_name": "gerente", "role_display_name": "Gerente"}]
        login_as(self.client, make_profile(Role.ADMINISTRATOR, None))
        self.assertContains(self.client.get("/usuarios/tipos"), "Gerente")

        login_as(self.client, make_profile(Role.ESTABLISHMENT, "E1"))
        self.assertEqual(self.client.get("/usuarios/tipos").status_code, 403)

    @mock.patch.object(UserTypesService, "delete_user_type")
    def test_delete_user_type(self, delete_user_type):
        login_as(self.client, make_profile(Role.ADMINISTRATOR, None))
        response = self.client.post("/usuarios/tipos/7/excluir")
        self.assertRedirects(response, "/usuarios/tipos", fetch_redirect_response=False)
        delete_user_type.assert_called_once_with("7")
