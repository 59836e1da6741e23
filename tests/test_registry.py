import unittest

from pydantic import ValidationError

from matte.application.controller import EntityController
from matte.application.registry import Matte
from matte.domain.exceptions import RegistrationException
from matte.domain.fields import TypeTag
from matte.domain.models import Entity, field
from matte.infrastructure.repository import InMemoryRepository


class _User(Entity):
    name = field("name", TypeTag.STRING)
    email = field("email", TypeTag.STRING)


class _Product(Entity):
    name = field("name", TypeTag.STRING)
    price = field("price", TypeTag.INT32)


class TestMatteRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.app = Matte(port=9090).register("users", _User).register("products", _Product)

    def test_defaults(self) -> None:
        app = Matte()

        self.assertEqual(app.port, 8080)
        self.assertEqual(app.resource_names(), [])

    def test_register_creates_repository_and_controller(self) -> None:
        self.assertIsInstance(self.app.get_repository("users"), InMemoryRepository)
        self.assertIsInstance(self.app.get_controller("users"), EntityController)
        self.assertEqual(self.app.get_controller("users").base_path, "/api/users")
        self.assertEqual(self.app.resource_names(), ["users", "products"])

    def test_unknown_resource_returns_none(self) -> None:
        self.assertIsNone(self.app.get_repository("orders"))
        self.assertIsNone(self.app.get_controller("orders"))

    def test_duplicate_and_invalid_names_are_rejected(self) -> None:
        for name in ["users", "", "a/b", "entities"]:
            with self.assertRaises(RegistrationException):
                self.app.register(name, _User)

    def test_binding_is_frozen(self) -> None:
        binding = self.app.get_binding("users")

        self.assertIs(binding.factory, _User)
        with self.assertRaises(ValidationError):
            binding.resource_name = "people"

    def test_entities_json(self) -> None:
        self.assertEqual(self.app.entities_json(), '["users","products"]')

    def test_dispatch_users_scenario(self) -> None:
        created = self.app.dispatch("POST", "/api/users", '{"name":"Jane","email":"jane@x.com"}')
        self.assertEqual(created, '{"id":1,"name":"Jane","email":"jane@x.com"}')

        self.assertEqual(self.app.dispatch("GET", "/api/users/1"), created)

        self.assertEqual(
            self.app.dispatch("DELETE", "/api/users/1"),
            '{"message":"Users deleted successfully"}',
        )
        self.assertEqual(
            self.app.dispatch("GET", "/api/users/1"),
            '{"error":"Users not found","status":404}',
        )

    def test_resources_are_isolated(self) -> None:
        self.app.dispatch("POST", "/api/users", '{"name":"Jane"}')
        product = self.app.dispatch("POST", "/api/products", '{"name":"Mug","price":"15"}')

        self.assertEqual(product, '{"id":1,"name":"Mug","price":15}')
        self.assertEqual(self.app.get_repository("users").count(), 1)
        self.assertEqual(self.app.get_repository("products").count(), 1)

    def test_dispatch_unowned_path_returns_none(self) -> None:
        self.assertIsNone(self.app.dispatch("GET", "/api/orders"))
        self.assertIsNone(self.app.dispatch("GET", "/api/usersx"))
        self.assertIsNone(self.app.dispatch("GET", "/"))
