from django.test import SimpleTestCase

from Painel.authorization.evaluator import (
    can_access_route,
    can_perform_action,
    get_default_route_for_role,
    has_permission,
)
from Painel.authorization.roles import (
    CATEGORY_MANAGEMENT,
    FULL_DASHBOARD,
    ORDERS_KANBAN,
    PERMISSION_CONFIGS,
    Action,
    Resource,
    Role,
    requirement,
)

from .helpers import make_profile


class HasPermissionTests(SimpleTestCase):
    def test_missing_profile_is_denied_for_every_requirement(self):
        for name, config in PERMISSION_CONFIGS.items():
            with self.subTest(name=name):
                self.assertFalse(has_permission(None, config))

    def test_administrator_bypasses_establishment_scoping(self):
        admin = make_profile(Role.ADMINISTRATOR, establishment_id=None)
        scoped = requirement(
            [Role.ADMINISTRATOR, Role.ESTABLISHMENT],
            requires_establishment=True,
            allowed_establishment_ids=["E9"],
        )
        self.assertTrue(has_permission(admin, scoped))
        for name, config in PERMISSION_CONFIGS.items():
            with self.subTest(name=name):
                self.assertTrue(has_permission(admin, config))

    def test_role_outside_allowed_roles_is_denied(self):
        establishment = make_profile(Role.ESTABLISHMENT, "E1")
        self.assertFalse(has_permission(establishment, FULL_DASHBOARD))

    def test_requires_establishment_denies_unlinked_users(self):
        for role in (Role.ESTABLISHMENT, Role.ATTENDANT):
            with self.subTest(role=role):
                self.assertFalse(has_permission(make_profile(role, None), ORDERS_KANBAN))

    def test_category_management_does_not_require_establishment(self):
        self.assertTrue(has_permission(make_profile(Role.ESTABLISHMENT, None), CATEGORY_MANAGEMENT))

    def test_allowed_establishment_list_is_enforced(self):
        only_e2 = requirement([Role.ESTABLISHMENT], allowed_establishment_ids=["E2"])
        self.assertFalse(has_permission(make_profile(Role.ESTABLISHMENT, "E1"), only_e2))
        self.assertTrue(has_permission(make_profile(Role.ESTABLISHMENT, "E2"), only_e2))
        self.assertFalse(has_permission(make_profile(Role.ESTABLISHMENT, None), only_e2))

    def test_establishment_scenarios(self):
        profile = make_profile(Role.ESTABLISHMENT, "E1")
        owner_policy = requirement(
            [Role.ESTABLISHMENT, Role.ADMINISTRATOR], requires_establishment=True
        )
        self.assertTrue(has_permission(profile, owner_policy))
        self.assertFalse(has_permission(profile, requirement([Role.ADMINISTRATOR])))

    def test_status_is_not_consulted(self):
        inactive = make_profile(Role.ESTABLISHMENT, "E1", status="inactive")
        self.assertTrue(has_permission(inactive, ORDERS_KANBAN))

    def test_repeated_calls_give_the_same_answer(self):
        profile = make_profile(Role.ATTENDANT, "E1")
        first = has_permission(profile, ORDERS_KANBAN)
        self.assertEqual(first, has_permission(profile, ORDERS_KANBAN))
        self.assertTrue(first)


class CanPerformActionTests(SimpleTestCase):
    def test_missing_profile_is_denied(self):
        self.assertFalse(can_perform_action(None, Action.READ, Resource.ORDERS))

    def test_administrator_can_do_anything(self):
        admin = make_profile(Role.ADMINISTRATOR, None)
        for resource in Resource:
            for action in Action:
                self.assertTrue(can_perform_action(admin, action, resource, "E5"))

    def test_attendant_never_deletes_orders(self):
        for establishment_id in ("E1", "E2", None):
            profile = make_profile(Role.ATTENDANT, establishment_id)
            self.assertFalse(
                can_perform_action(profile, Action.DELETE, Resource.ORDERS, profile.establishment_id)
            )

    def test_attendant_order_scenarios(self):
        profile = make_profile(Role.ATTENDANT, "E1")
        self.assertFalse(can_perform_action(profile, "delete", "pedidos", "E1"))
        self.assertTrue(can_perform_action(profile, "update", "pedidos", "E1"))
        self.assertFalse(can_perform_action(profile, "update", "pedidos", "E2"))

    def test_establishment_orders_are_scoped(self):
        profile = make_profile(Role.ESTABLISHMENT, "E1")
        self.assertTrue(can_perform_action(profile, Action.DELETE, Resource.ORDERS, "E1"))
        self.assertTrue(can_perform_action(profile, Action.DELETE, Resource.ORDERS))
        self.assertFalse(can_perform_action(profile, Action.DELETE, Resource.ORDERS, "E2"))

    def test_attendant_products_are_read_only(self):
        profile = make_profile(Role.ATTENDANT, "E1")
        self.assertTrue(can_perform_action(profile, Action.READ, Resource.PRODUCTS, "E1"))
        self.assertFalse(can_perform_action(profile, Action.UPDATE, Resource.PRODUCTS, "E1"))
        self.assertFalse(can_perform_action(profile, Action.DELETE, Resource.PRODUCTS, "E1"))
        self.assertFalse(can_perform_action(profile, Action.CREATE, Resource.PRODUCTS))

    def test_attendant_clients_everything_but_delete(self):
        profile = make_profile(Role.ATTENDANT, "E1")
        self.assertTrue(can_perform_action(profile, Action.CREATE, Resource.CLIENTS, "E1"))
        self.assertTrue(can_perform_action(profile, Action.UPDATE, Resource.CLIENTS))
        self.assertFalse(can_perform_action(profile, Action.UPDATE, Resource.CLIENTS, "E2"))
        self.assertFalse(can_perform_action(profile, Action.DELETE, Resource.CLIENTS, "E1"))

    def test_establishment_products_and_clients_are_scoped(self):
        profile = make_profile(Role.ESTABLISHMENT, "E1")
        for resource in (Resource.PRODUCTS, Resource.CLIENTS):
            self.assertTrue(can_perform_action(profile, Action.DELETE, resource, "E1"))
            self.assertFalse(can_perform_action(profile, Action.CREATE, resource, "E2"))

    def test_establishment_may_only_update_itself(self):
        profile = make_profile(Role.ESTABLISHMENT, "E1")
        self.assertTrue(can_perform_action(profile, Action.UPDATE, Resource.ESTABLISHMENTS, "E1"))
        self.assertFalse(can_perform_action(profile, Action.UPDATE, Resource.ESTABLISHMENTS, "E2"))
        self.assertFalse(can_perform_action(profile, Action.UPDATE, Resource.ESTABLISHMENTS))
        self.assertFalse(can_perform_action(profile, Action.DELETE, Resource.ESTABLISHMENTS, "E1"))
        attendant = make_profile(Role.ATTENDANT, "E1")
        self.assertFalse(can_perform_action(attendant, Action.UPDATE, Resource.ESTABLISHMENTS, "E1"))

    def test_unlinked_establishment_cannot_update_an_unknown_record(self):
        profile = make_profile(Role.ESTABLISHMENT, None)
        self.assertFalse(can_perform_action(profile, Action.UPDATE, Resource.ESTABLISHMENTS))

    def test_staff_is_managed_by_establishments_only(self):
        owner = make_profile(Role.ESTABLISHMENT, "E1")
        self.assertTrue(can_perform_action(owner, Action.CREATE, Resource.ATTENDANTS, "E1"))
        self.assertFalse(can_perform_action(owner, Action.CREATE, Resource.ATTENDANTS, "E2"))
        attendant = make_profile(Role.ATTENDANT, "E1")
        self.assertFalse(can_perform_action(attendant, Action.READ, Resource.ATTENDANTS, "E1"))

    def test_unknown_resource_or_action_is_denied(self):
        profile = make_profile(Role.ESTABLISHMENT, "E1")
        self.assertFalse(can_perform_action(profile, "read", "fornecedores"))
        self.assertFalse(can_perform_action(profile, "archive", "pedidos"))


class DefaultRouteTests(SimpleTestCase):
    def test_routes_per_role(self):
        self.assertEqual(get_default_route_for_role(None), "/login")
        self.assertEqual(get_default_route_for_role(make_profile(Role.ADMINISTRATOR, None)), "/dashboard")
        self.assertEqual(get_default_route_for_role(make_profile(Role.ESTABLISHMENT)), "/dashboard")
        self.assertEqual(get_default_route_for_role(make_profile(Role.ATTENDANT)), "/pedidos")


class CanAccessRouteTests(SimpleTestCase):
    def test_missing_profile_is_denied(self):
        self.assertFalse(can_access_route(None, "/perfil"))

    def test_account_routes_are_open_to_every_role(self):
        for role in Role:
            for route in ("/perfil", "/minha-conta"):
                self.assertTrue(can_access_route(make_profile(role), route))

    def test_prefix_matching(self):
        self.assertTrue(can_access_route(make_profile(Role.ATTENDANT), "/pedidos/listar"))
        self.assertTrue(can_access_route(make_profile(Role.ESTABLISHMENT), "/pedidos/listar"))
        self.assertTrue(can_access_route(make_profile(Role.ADMINISTRATOR, None), "/pedidos/listar"))

    def test_routes_outside_the_allow_list(self):
        attendant = make_profile(Role.ATTENDANT)
        self.assertFalse(can_access_route(attendant, "/produtos"))
        self.assertFalse(can_access_route(attendant, "/dashboard"))
        owner = make_profile(Role.ESTABLISHMENT)
        self.assertFalse(can_access_route(owner, "/usuarios"))
        self.assertFalse(can_access_route(owner, "/admin-dashboard"))
        self.assertTrue(can_access_route(make_profile(Role.ADMINISTRATOR, None), "/usuarios"))
