"""
Controller base class and the fixed set of resource operations.
"""

from enum import Enum
from typing import Any, Callable, Optional

from .container import ContainerAware
from .exceptions import InvalidMethodError
from .inflector import Inflector


class Operation(Enum):
    """Operations a controller can implement for its resource.

    The value is the name of the ``BaseController`` method implementing it.
    """

    GET_COLLECTION = "get_collection"
    CREATE_ITEM = "create_item"
    GET_ITEM = "get_item"
    EDIT_ITEM = "edit_item"
    DELETE_ITEM = "delete_item"
    ITEM_EXISTS = "item_exists"
    GET_CHILD_COLLECTION = "get_child_collection"
    CREATE_CHILD_ITEM = "create_child_item"

    @property
    def takes_id(self) -> bool:
        """Whether the operation receives the resource id as first argument."""
        return self in (Operation.GET_ITEM, Operation.EDIT_ITEM, Operation.DELETE_ITEM, Operation.ITEM_EXISTS)


class BaseController(ContainerAware):
    """Base class for resource controllers.

    A controller implements an operation either by overriding its interface
    method or by defining the conventionally named method, in camelCase or
    snake_case::

        class UserController(BaseController):
            def get_collection(self, request, response):
                return response.set_json([...])

            def get_user(self, id, request, response):    # or getUser
                return response.set_json({"id": id})

            def user_exists(self, id, request, response):  # or userExists
                response.status_code = 404
                return response
    """

    _inflector = Inflector()

    def get_method(self, method_name: str, operation: Optional[Operation] = None) -> Optional[Callable[..., Any]]:
        """Find the bound method implementing a call.

        An override of the operation's interface method is used first, then the
        conventional name, then its snake_case form. Attributes defined by
        BaseController itself never count as conventional methods.

        Args:
            method_name: Conventional camelCase name (e.g. "getUsers")
            operation: The operation being dispatched, if known

        Returns:
            The bound method, or None if the controller does not implement it
        """
        if operation is not None:
            interface_name = operation.value
            if getattr(type(self), interface_name) is not getattr(BaseController, interface_name):
                return getattr(self, interface_name)

        for name in (method_name, self._inflector.underscore(method_name)):
            if not name or name.startswith("_") or hasattr(BaseController, name):
                continue
            method = getattr(self, name, None)
            if callable(method):
                return method

        return None

    def _not_implemented(self, operation: Operation) -> Any:
        raise InvalidMethodError(
            f"The operation {operation.value} is not implemented by {type(self).__name__}"
        )

    def get_collection(self, request, response):
        return self._not_implemented(Operation.GET_COLLECTION)

    def create_item(self, request, response):
        return self._not_implemented(Operation.CREATE_ITEM)

    def get_item(self, id, request, response):
        return self._not_implemented(Operation.GET_ITEM)

    def edit_item(self, id, request, response):
        return self._not_implemented(Operation.EDIT_ITEM)

    def delete_item(self, id, request, response):
        return self._not_implemented(Operation.DELETE_ITEM)

    def item_exists(self, id, request, response):
        return self._not_implemented(Operation.ITEM_EXISTS)

    def get_child_collection(self, request, response):
        return self._not_implemented(Operation.GET_CHILD_COLLECTION)

    def create_child_item(self, request, response):
        return self._not_implemented(Operation.CREATE_CHILD_ITEM)
