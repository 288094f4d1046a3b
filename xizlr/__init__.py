"""
A tiny REST-convention dispatcher.

Requests for ``/{resource}``, ``/{resource}/{id}`` and
``/{resource}/{id}/{child}`` are dispatched to controller methods named after
the HTTP verb and the inflected resource name (``GET /users`` calls
``getUsers``), with controllers and services created through a
dependency-injection container.
"""

from http import HTTPStatus

from .adapters import ASGIAdapter, create_asgi_app
from .application import RestApplication
from .container import Container, ContainerAware
from .controllers import BaseController, Operation
from .dispatcher import (
    ControllerRegistry,
    MethodResolution,
    ResourceDispatcher,
    RouteRequest,
    RouteShape,
    derive_method_name,
    operation_for_method_name,
)
from .error_models import ErrorResponse
from .exceptions import (
    ContainerClosedError,
    ContainerNotFoundError,
    ControllerNotFoundError,
    DependencyResolutionError,
    InvalidControllerError,
    InvalidMethodError,
    InvalidModuleError,
    MethodNotAllowedError,
    RouteNotFoundError,
    ServiceNotFoundError,
    XizlrError,
)
from .inflector import Inflector
from .models import HTTPMethod, Request, Response
from .modules import Module
from .router import RouteCollection
from .runtime import ApplicationRuntime
from .services import CoreServiceProvider, ServiceProvider
from .util import uuid_v4

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "RestApplication",
    "ResourceDispatcher",
    "ControllerRegistry",
    "RouteRequest",
    "RouteShape",
    "MethodResolution",
    "derive_method_name",
    "operation_for_method_name",
    "BaseController",
    "Operation",
    "Container",
    "ContainerAware",
    "ServiceProvider",
    "CoreServiceProvider",
    "Module",
    "ApplicationRuntime",
    "Inflector",
    "RouteCollection",
    "Request",
    "Response",
    "HTTPMethod",
    "HTTPStatus",
    "ErrorResponse",
    "ASGIAdapter",
    "create_asgi_app",
    "XizlrError",
    "ContainerClosedError",
    "ControllerNotFoundError",
    "InvalidControllerError",
    "InvalidMethodError",
    "MethodNotAllowedError",
    "InvalidModuleError",
    "ContainerNotFoundError",
    "RouteNotFoundError",
    "ServiceNotFoundError",
    "DependencyResolutionError",
    "uuid_v4",
]
