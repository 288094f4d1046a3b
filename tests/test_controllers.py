"""
Tests for controller method lookup.
"""

import pytest

from xizlr import BaseController, Operation
from xizlr.exceptions import InvalidMethodError
from tests.sample_app import OrderController, ProductController, UserController, UserRepository


class TestGetMethod:
    """Test how a controller finds the method for a call."""

    def test_camel_case_method(self):
        controller = UserController(UserRepository())
        method = controller.get_method("getUsers", Operation.GET_COLLECTION)
        assert method == controller.getUsers

    def test_snake_case_alias(self):
        controller = OrderController()
        method = controller.get_method("getOrders", Operation.GET_COLLECTION)
        assert method == controller.get_orders

    def test_interface_override_wins(self):
        controller = ProductController()
        method = controller.get_method("getProducts", Operation.GET_COLLECTION)
        assert method == controller.get_collection

    def test_interface_override_needs_operation(self):
        controller = ProductController()
        assert controller.get_method("getProducts") is None

    def test_missing_method(self):
        controller = OrderController()
        assert controller.get_method("deleteOrder", Operation.DELETE_ITEM) is None

    def test_base_controller_attributes_are_not_methods(self):
        """Derived names that collide with BaseController attributes are ignored."""
        controller = BaseController()
        # "methods" resource, GET item -> getMethod -> get_method
        assert controller.get_method("getMethod", Operation.GET_ITEM) is None
        assert controller.get_method("get", None) is None

    def test_private_names_are_ignored(self):
        class SecretController(BaseController):
            def _secret(self, request, response):
                return "secret"

        assert SecretController().get_method("_secret") is None

    def test_non_callable_attribute_is_ignored(self):
        class AttributeController(BaseController):
            getUsers = "not callable"

        assert AttributeController().get_method("getUsers") is None


class TestOperationInterface:
    """Test the default operation implementations."""

    def test_default_operations_raise_invalid_method(self):
        controller = BaseController()
        with pytest.raises(InvalidMethodError):
            controller.get_collection("request", "response")
        with pytest.raises(InvalidMethodError):
            controller.item_exists("1", "request", "response")

    def test_operation_names_match_interface(self):
        for operation in Operation:
            assert callable(getattr(BaseController, operation.value))

    def test_takes_id(self):
        assert Operation.GET_ITEM.takes_id
        assert Operation.ITEM_EXISTS.takes_id
        assert not Operation.GET_COLLECTION.takes_id
        assert not Operation.GET_CHILD_COLLECTION.takes_id
