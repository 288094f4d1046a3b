"""Tests for the inflector service."""

from xizlr import Inflector


class TestInflector:

    def setup_method(self):
        self.inflector = Inflector()

    def test_camelize(self):
        assert self.inflector.camelize("users") == "Users"
        assert self.inflector.camelize("user_accounts") == "UserAccounts"

    def test_camelize_treats_hyphens_as_separators(self):
        assert self.inflector.camelize("user-accounts") == "UserAccounts"

    def test_camelize_lower_first_letter(self):
        assert self.inflector.camelize("user_account", False) == "userAccount"

    def test_singularize(self):
        assert self.inflector.singularize("users") == "user"
        assert self.inflector.singularize("people") == "person"
        assert self.inflector.singularize("categories") == "category"

    def test_pluralize(self):
        assert self.inflector.pluralize("user") == "users"
        assert self.inflector.pluralize("Users") == "Users"

    def test_underscore(self):
        assert self.inflector.underscore("getUserOrders") == "get_user_orders"
        assert self.inflector.underscore("userExists") == "user_exists"
