"""
Resource dispatching by REST naming convention.

A request for ``/{resource}``, ``/{resource}/{id}`` or
``/{resource}/{id}/{child}`` is mapped to a controller operation and a
conventional method name derived from the resource name:

=================  ===========  =========================================
Shape              Verb         Method name (resource "users")
=================  ===========  =========================================
collection         GET          getUsers
collection         POST, PUT    createUser
item               GET          getUser
item               POST, PUT    editUser
item               HEAD         userExists
item               DELETE       deleteUser
child collection   GET          getUserOrders   (child "orders")
child collection   POST, PUT    createUserOrder (child "orders")
=================  ===========  =========================================

HEAD and DELETE on collection and child collection paths are not allowed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Tuple

from .container import Container
from .controllers import BaseController, Operation
from .exceptions import (
    ContainerNotFoundError,
    ControllerNotFoundError,
    InvalidControllerError,
    InvalidMethodError,
    MethodNotAllowedError,
)
from .inflector import Inflector
from .models import HTTPMethod
from .services import CoreServiceProvider

logger = logging.getLogger(__name__)


class RouteShape(Enum):
    """Structural pattern of a matched route."""

    COLLECTION = "collection"
    ITEM = "item"
    CHILD_COLLECTION = "child_collection"


SUPPORTED_VERBS = (HTTPMethod.GET, HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.HEAD, HTTPMethod.DELETE)

# None marks a combination that is intentionally not allowed
ROUTE_OPERATIONS: Mapping[Tuple[RouteShape, HTTPMethod], Optional[Operation]] = MappingProxyType({
    (RouteShape.COLLECTION, HTTPMethod.GET): Operation.GET_COLLECTION,
    (RouteShape.COLLECTION, HTTPMethod.POST): Operation.CREATE_ITEM,
    (RouteShape.COLLECTION, HTTPMethod.PUT): Operation.CREATE_ITEM,
    (RouteShape.COLLECTION, HTTPMethod.HEAD): None,
    (RouteShape.COLLECTION, HTTPMethod.DELETE): None,
    (RouteShape.ITEM, HTTPMethod.GET): Operation.GET_ITEM,
    (RouteShape.ITEM, HTTPMethod.POST): Operation.EDIT_ITEM,
    (RouteShape.ITEM, HTTPMethod.PUT): Operation.EDIT_ITEM,
    (RouteShape.ITEM, HTTPMethod.HEAD): Operation.ITEM_EXISTS,
    (RouteShape.ITEM, HTTPMethod.DELETE): Operation.DELETE_ITEM,
    (RouteShape.CHILD_COLLECTION, HTTPMethod.GET): Operation.GET_CHILD_COLLECTION,
    (RouteShape.CHILD_COLLECTION, HTTPMethod.POST): Operation.CREATE_CHILD_ITEM,
    (RouteShape.CHILD_COLLECTION, HTTPMethod.PUT): Operation.CREATE_CHILD_ITEM,
    (RouteShape.CHILD_COLLECTION, HTTPMethod.HEAD): None,
    (RouteShape.CHILD_COLLECTION, HTTPMethod.DELETE): None,
})


@dataclass(frozen=True)
class RouteRequest:
    """The parts of a request that select a controller method."""

    verb: HTTPMethod
    resource_name: str
    id: Optional[str] = None
    child_resource_name: Optional[str] = None

    def __post_init__(self):
        if self.verb not in SUPPORTED_VERBS:
            raise ValueError(f"Unsupported verb {self.verb!r}")
        if not self.resource_name:
            raise ValueError("A resource name is required")
        if self.child_resource_name is not None and self.id is None:
            raise ValueError("A child resource requires the id of its parent")

    @property
    def shape(self) -> RouteShape:
        if self.id is None:
            return RouteShape.COLLECTION
        if self.child_resource_name is None:
            return RouteShape.ITEM
        return RouteShape.CHILD_COLLECTION

    @property
    def operation(self) -> Optional[Operation]:
        """The operation for this verb and shape, or None if it is not allowed."""
        return ROUTE_OPERATIONS[(self.shape, self.verb)]

    @classmethod
    def from_route_args(cls, verb: HTTPMethod, args: Mapping[str, str]) -> "RouteRequest":
        """Build a route request from the captures of the route templates."""
        return cls(
            verb=verb,
            resource_name=args["resourceNamePlural"],
            id=args.get("id"),
            child_resource_name=args.get("childNamePlural"),
        )


@dataclass(frozen=True)
class MethodResolution:
    """The controller call computed for one request."""

    operation: Operation
    method_name: str
    arguments: Tuple[Any, ...]


def derive_method_name(
    operation: Operation,
    resource_name: str,
    child_resource_name: Optional[str] = None,
    inflector: Optional[Inflector] = None,
) -> str:
    """Derive the conventional controller method name for an operation.

    Args:
        operation: The operation being dispatched
        resource_name: Plural resource name from the URL (e.g. "users")
        child_resource_name: Plural child resource name for child collections
        inflector: Inflector to use, a default one if omitted

    Returns:
        The camelCase method name, e.g. "getUsers" or "userExists"
    """
    inflector = inflector or Inflector()
    singular = inflector.singularize(resource_name)

    if operation is Operation.GET_COLLECTION:
        return "get" + inflector.pluralize(inflector.camelize(resource_name))
    if operation is Operation.CREATE_ITEM:
        return "create" + inflector.camelize(singular)
    if operation is Operation.GET_ITEM:
        return "get" + inflector.camelize(singular)
    if operation is Operation.EDIT_ITEM:
        return "edit" + inflector.camelize(singular)
    if operation is Operation.ITEM_EXISTS:
        return inflector.camelize(singular, False) + "Exists"
    if operation is Operation.DELETE_ITEM:
        return "delete" + inflector.camelize(singular)

    if child_resource_name is None:
        raise ValueError(f"The operation {operation.value} requires a child resource name")
    if operation is Operation.GET_CHILD_COLLECTION:
        return "get" + inflector.camelize(singular) + inflector.camelize(child_resource_name)
    if operation is Operation.CREATE_CHILD_ITEM:
        return (
            "create" + inflector.camelize(singular)
            + inflector.camelize(inflector.singularize(child_resource_name))
        )

    raise ValueError(f"Unknown operation {operation}")


def operation_for_method_name(method_name: str, resource_name: str,
                              inflector: Optional[Inflector] = None) -> Optional[Operation]:
    """Find the operation a conventional method name stands for.

    The inverse of derive_method_name for callers that only know the method
    name. Child operations are recognised by their prefix since the child
    resource name is not known (``getUserOrders`` for "users").

    Returns:
        The operation, or None if the name is not conventional for the resource
    """
    inflector = inflector or Inflector()

    for operation in Operation:
        if operation in (Operation.GET_CHILD_COLLECTION, Operation.CREATE_CHILD_ITEM):
            continue
        if derive_method_name(operation, resource_name, inflector=inflector) == method_name:
            return operation

    singular = inflector.camelize(inflector.singularize(resource_name))
    for prefix, operation in (("get" + singular, Operation.GET_CHILD_COLLECTION),
                              ("create" + singular, Operation.CREATE_CHILD_ITEM)):
        if method_name.startswith(prefix) and method_name[len(prefix):][:1].isupper():
            return operation

    return None


def resolve(route_request: RouteRequest, request: Any, response: Any,
            inflector: Optional[Inflector] = None) -> MethodResolution:
    """Compute the method name and argument list for a route request.

    Item routes pass ``(id, request, response)``; collection and child
    collection routes pass ``(request, response)``.

    Raises:
        MethodNotAllowedError: If the verb is not allowed for the route shape
    """
    operation = route_request.operation
    if operation is None:
        raise MethodNotAllowedError("You are not allowed to call that method")

    method_name = derive_method_name(
        operation, route_request.resource_name, route_request.child_resource_name, inflector
    )

    arguments: Tuple[Any, ...]
    if operation.takes_id:
        arguments = (route_request.id, request, response)
    else:
        arguments = (request, response)

    return MethodResolution(operation=operation, method_name=method_name, arguments=arguments)


class ControllerRegistry(Mapping[str, Callable[..., Any]]):
    """Read-only mapping of plural resource names to controller factories.

    A factory is a controller class or any callable returning a controller;
    its parameters are injected from the container by name.
    """

    def __init__(self, controllers: Mapping[str, Callable[..., Any]]):
        for resource_name, factory in controllers.items():
            if not isinstance(resource_name, str) or not resource_name:
                raise ValueError(f"Invalid resource name {resource_name!r}")
            if not callable(factory):
                raise TypeError(f'The controller factory for "{resource_name}" is not callable')
        self._controllers: Mapping[str, Callable[..., Any]] = MappingProxyType(dict(controllers))

    def lookup(self, resource_name: str) -> Optional[Callable[..., Any]]:
        return self._controllers.get(resource_name)

    def __getitem__(self, resource_name: str) -> Callable[..., Any]:
        return self._controllers[resource_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._controllers)

    def __len__(self) -> int:
        return len(self._controllers)


class ResourceDispatcher:
    """Resolves controllers for resources and calls their methods."""

    def __init__(self, registry: Mapping[str, Callable[..., Any]], container: Optional[Container] = None):
        if not isinstance(registry, ControllerRegistry):
            registry = ControllerRegistry(registry)
        self.registry = registry
        self.container = container

    def get_container(self) -> Container:
        if self.container is None:
            raise ContainerNotFoundError(
                "The container cannot be found. Have you forgotten to bootstrap your application?"
            )
        return self.container

    def get_inflector(self) -> Inflector:
        return self.get_container().get(CoreServiceProvider.INFLECTOR)

    def resolve_controller(self, resource_name: str) -> BaseController:
        """Create a new controller for a resource.

        Args:
            resource_name: The plural resource name (e.g. "users" for /users)

        Raises:
            ControllerNotFoundError: If no controller is registered for the resource
            InvalidControllerError: If the factory does not produce a BaseController
        """
        factory = self.registry.lookup(resource_name)
        if factory is None:
            raise ControllerNotFoundError(f'The controller for "{resource_name}" does not exist')

        controller = self.get_container().create_new(factory)

        if not isinstance(controller, BaseController):
            name = getattr(factory, "__name__", repr(factory))
            raise InvalidControllerError(f'The controller "{name}" is not an instance of BaseController')

        return controller

    def invoke(self, resource_name: str, method_name: str, arguments: Sequence[Any] = (),
               operation: Optional[Operation] = None) -> Any:
        """Call a method on the controller of a resource.

        Without an operation, the operation is recovered from the method name
        so controllers overriding the interface methods are reachable too.

        Returns:
            Whatever the controller method returns

        Raises:
            InvalidMethodError: If the controller does not implement the method
        """
        controller = self.resolve_controller(resource_name)

        if operation is None:
            operation = operation_for_method_name(method_name, resource_name, self.get_inflector())

        method = controller.get_method(method_name, operation)
        if method is None:
            raise InvalidMethodError(
                f"The method ({method_name}) does not exist for the class {type(controller).__name__}"
            )

        logger.debug(f"Calling {type(controller).__name__}.{method.__name__} for {resource_name}")
        return method(*arguments)

    def dispatch(self, route_request: RouteRequest, request: Any, response: Any) -> Any:
        """Resolve and invoke the controller method for a route request.

        Raises:
            ContainerNotFoundError: If the dispatcher has no container
            MethodNotAllowedError: If the verb is not allowed for the route shape
        """
        resolution = resolve(route_request, request, response, self.get_inflector())
        return self.invoke(
            route_request.resource_name,
            resolution.method_name,
            resolution.arguments,
            operation=resolution.operation,
        )

    @staticmethod
    def method_not_allowed(*args: Any, **kwargs: Any) -> Any:
        """Handler for verbs that are never allowed on a route."""
        raise MethodNotAllowedError("You are not allowed to call that method")
