"""
Main application class for the dispatcher.
"""

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from .container import Container, ContainerAware
from .dispatcher import (
    ROUTE_OPERATIONS,
    ControllerRegistry,
    ResourceDispatcher,
    RouteRequest,
    RouteShape,
)
from .controllers import BaseController
from .error_models import ErrorResponse
from .exceptions import ContainerNotFoundError, DependencyResolutionError, InvalidModuleError, XizlrError
from .models import Request, Response
from .modules import Module
from .router import RouteCollection
from .runtime import ApplicationRuntime
from .services import CoreServiceProvider, ServiceProvider
from .util import uuid_v4

# Set up logger for this module
logger = logging.getLogger(__name__)

ROUTE_TEMPLATES = {
    RouteShape.COLLECTION: "/{resourceNamePlural}",
    RouteShape.ITEM: "/{resourceNamePlural}/{id}",
    RouteShape.CHILD_COLLECTION: "/{resourceNamePlural}/{id}/{childNamePlural}",
}

REQUEST_ID_HEADER = "X-Request-ID"


class RestApplication(ContainerAware):
    """Application dispatching REST requests to resource controllers.

    Example::

        app = RestApplication({"users": UserController}, name="accounts")
        app.bootstrap(AccountsServiceProvider())
        app.register_modules([BillingModule])

        response = app.execute(Request(method=HTTPMethod.GET, path="/users"))
    """

    def __init__(self, controllers: Mapping[str, Callable[..., Any]],
                 name: Optional[str] = None, root_directory: Optional[str] = None):
        """
        Args:
            controllers: Plural resource names mapped to controller factories
            name: Application name, see ApplicationRuntime.from_environment
            root_directory: Application root directory
        """
        if isinstance(controllers, ControllerRegistry):
            self.registry = controllers
        else:
            self.registry = ControllerRegistry(controllers)
        self._runtime_name = name
        self._runtime_root_directory = root_directory
        self._resource_dispatcher: Optional[ResourceDispatcher] = None
        self._route_collection: Optional[RouteCollection] = None

    def bootstrap(self, service_provider: Optional[ServiceProvider] = None) -> None:
        """Create the container and register the services.

        Services of the optional provider take precedence over the core
        services registered after it.

        Args:
            service_provider: An optional application service provider
        """
        container = Container()

        if service_provider is not None:
            container.register_services(service_provider)

        container.register_services(CoreServiceProvider(self._runtime_name, self._runtime_root_directory))

        self.set_container(container)
        self._resource_dispatcher = ResourceDispatcher(self.registry, container)
        logger.debug(f"Bootstrapped application with resources: {', '.join(self.registry) or '(none)'}")

    def register_modules(self, modules: Iterable[Any] = ()) -> None:
        """Register the service providers of some modules.

        Args:
            modules: Module instances, or factories the container creates modules from

        Raises:
            ContainerNotFoundError: If the application has not been bootstrapped
            InvalidModuleError: If an entry does not produce a Module
        """
        container = self.get_container()

        for position, entry in enumerate(modules, start=1):
            if isinstance(entry, Module):
                module = entry
            elif callable(entry):
                try:
                    module = container.create_new(entry)
                except (TypeError, DependencyResolutionError) as e:
                    raise InvalidModuleError(f"The module at position {position} is invalid") from e
            else:
                module = None

            if not isinstance(module, Module):
                raise InvalidModuleError(f"The module at position {position} is invalid")

            container.register_services(module.get_service_provider())
            logger.debug(f"Registered module {type(module).__name__}")

    def _get_runtime(self) -> ApplicationRuntime:
        return self.get(CoreServiceProvider.APPLICATION_RUNTIME)

    @property
    def name(self) -> str:
        return self._get_runtime().get_name()

    @name.setter
    def name(self, name: str) -> None:
        self._get_runtime().set_name(name)

    @property
    def root_directory(self) -> str:
        return self._get_runtime().get_root_directory()

    def get_resource_dispatcher(self) -> ResourceDispatcher:
        if self._resource_dispatcher is None:
            raise ContainerNotFoundError(
                "The container cannot be found. Have you forgotten to bootstrap your application?"
            )
        return self._resource_dispatcher

    def create_route_collection(self) -> RouteCollection:
        """Create the route table.

        Every supported verb is routed for each of the three path templates.
        Combinations without an operation go to call_method_not_allowed.
        """
        route_collection = RouteCollection()

        for (shape, verb), operation in ROUTE_OPERATIONS.items():
            handler = self.call_resource if operation is not None else self.call_method_not_allowed
            route_collection.add_route(verb, ROUTE_TEMPLATES[shape], handler)

        return route_collection

    def get_route_collection(self) -> RouteCollection:
        if self._route_collection is None:
            self._route_collection = self.create_route_collection()
        return self._route_collection

    def create_controller(self, resource_name: str) -> BaseController:
        """Create a new controller given a resource name.

        Args:
            resource_name: The name of the resource (e.g. 'users' for /users)
        """
        return self.get_resource_dispatcher().resolve_controller(resource_name)

    def call_method(self, resource_name: str, method_name: str, arguments: Sequence[Any] = ()) -> Any:
        """Call a method on the controller of a resource."""
        return self.get_resource_dispatcher().invoke(resource_name, method_name, arguments)

    def call_resource(self, request: Request, response: Response, args: Mapping[str, str]) -> Any:
        """Route handler calling the conventional controller method.

        Args:
            request: The request object
            response: The response object
            args: The arguments captured by the route template
        """
        route_request = RouteRequest.from_route_args(request.method, args)
        return self.get_resource_dispatcher().dispatch(route_request, request, response)

    def call_method_not_allowed(self, request: Request, response: Response, args: Mapping[str, str]) -> Any:
        """Route handler for verbs you are not allowed to perform on a resource."""
        return ResourceDispatcher.method_not_allowed(request, response, args)

    def dispatch(self, request: Request, response: Optional[Response] = None) -> Any:
        """Dispatch a request to its controller.

        Args:
            request: The request to dispatch
            response: The response context handed to the controller, a new one if omitted

        Returns:
            Whatever the controller returns, unmodified

        Raises:
            ContainerNotFoundError: If the application has not been bootstrapped
            RouteNotFoundError: If the path matches no route template
            MethodNotAllowedError: If the verb is not allowed for the path
        """
        self.get_resource_dispatcher()

        handler, args = self.get_route_collection().get_dispatcher().dispatch(request.method, request.path)
        request.path_params = dict(args)

        if response is None:
            response = Response(status_code=200, request=request)

        logger.debug(f"Dispatching {request.method.value} {request.path}")
        return handler(request, response, args)

    def execute(self, request: Request) -> Response:
        """Dispatch a request and turn the outcome into a response.

        Controller results that are not a Response are rendered as JSON into the
        response context; None leaves the response context as the controller
        filled it in. Failures become JSON error responses.
        """
        request_id = request.get_header(REQUEST_ID_HEADER) or uuid_v4()
        response = Response(status_code=200, request=request)

        try:
            result = self.dispatch(request, response)

            if isinstance(result, Response):
                final = result
            elif result is None:
                final = response
            else:
                final = response.set_json(result)
        except XizlrError as e:
            status_code = int(e.status_code)
            if status_code >= 500:
                logger.error(f"Error processing {request.method.value} {request.path}: {e}", exc_info=True)
            else:
                logger.warning(f"{type(e).__name__} for {request.method.value} {request.path}: {e}")
            return self._error_response(ErrorResponse.from_exception(e, request_id), status_code, request)
        except Exception as e:
            logger.error(f"Unhandled exception processing {request.method.value} {request.path}: {e}", exc_info=True)
            error = ErrorResponse(error="Internal server error", request_id=request_id)
            return self._error_response(error, 500, request)

        final.set_header(REQUEST_ID_HEADER, request_id)
        return final

    def _error_response(self, error: ErrorResponse, status_code: int, request: Request) -> Response:
        response = Response(
            status_code,
            error.model_dump_json(),
            content_type="application/json",
            request=request,
        )
        if error.request_id:
            response.set_header(REQUEST_ID_HEADER, error.request_id)
        return response

    def shutdown(self) -> None:
        """Tear down the services of the container."""
        if self._container is not None:
            self._container.close()

    def run(self, host: str = "127.0.0.1", port: int = 8000, server: str = "uvicorn", **kwargs) -> None:
        """Serve the application over HTTP.

        Raises:
            ContainerNotFoundError: If the application has not been bootstrapped
        """
        self.get_container()

        from .servers import serve
        serve(self, server=server, host=host, port=port, **kwargs)
