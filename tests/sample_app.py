"""
Sample controllers and services used across the dispatcher tests.
"""

from xizlr import BaseController, ServiceProvider


class UserRepository:
    """In-memory user store injected into UserController."""

    def __init__(self):
        self.users = {"1": {"id": "1", "name": "Ada"}}
        self.closed = False

    def close(self):
        self.closed = True


class AccountsServiceProvider(ServiceProvider):
    def get_services(self):
        return {"user_repository": UserRepository}


class UserController(BaseController):
    """Controller using the camelCase method names."""

    def __init__(self, user_repository):
        self.repository = user_repository

    def getUsers(self, request, response):
        return response.set_json(list(self.repository.users.values()))

    def createUser(self, request, response):
        data = request.get_json() or {}
        user_id = str(len(self.repository.users) + 1)
        self.repository.users[user_id] = {"id": user_id, **data}
        return response.set_json(self.repository.users[user_id], status_code=201)

    def getUser(self, id, request, response):
        return response.set_json(self.repository.users[id])

    def editUser(self, id, request, response):
        self.repository.users[id].update(request.get_json() or {})
        return response.set_json(self.repository.users[id])

    def userExists(self, id, request, response):
        response.status_code = 200 if id in self.repository.users else 404
        return response

    def deleteUser(self, id, request, response):
        self.repository.users.pop(id, None)
        response.status_code = 204
        return response

    def getUserOrders(self, request, response):
        return response.set_json({"user": request.path_params["id"], "orders": []})

    def createUserOrder(self, request, response):
        return response.set_json({"user": request.path_params["id"], "order": request.get_json()}, status_code=201)


class OrderController(BaseController):
    """Controller using snake_case method names and plain return values."""

    def get_orders(self, request, response):
        return [{"id": "o1"}]

    def get_order(self, id, request, response):
        return {"id": id}


class ProductController(BaseController):
    """Controller overriding the operation interface."""

    def get_collection(self, request, response):
        return response.set_json(["widget"])

    def get_item(self, id, request, response):
        return response.set_json({"product": id})


class NotAController:
    pass


CONTROLLERS = {
    "users": UserController,
    "orders": OrderController,
    "products": ProductController,
    "gadgets": NotAController,
}
