"""
Service container with name-based dependency injection.

Services are registered through service providers as ``{service_id: factory}``
pairs. Factories (and anything created through ``create_new``) receive their
dependencies by parameter name, the same way route handlers receive injected
values in pytest-style frameworks::

    class UserRepository:
        def __init__(self, application_runtime):
            self.root = application_runtime.root_directory

    class UserController(BaseController):
        def __init__(self, user_repository):
            self.users = user_repository
"""

import inspect
import logging
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .exceptions import (
    ContainerClosedError,
    ContainerNotFoundError,
    DependencyResolutionError,
    ServiceNotFoundError,
)

logger = logging.getLogger(__name__)


class ServiceCache:
    """Cache for instantiated services.

    Services live for the lifetime of the container (session scope) and are
    kept in creation order so they can be torn down in reverse.
    """

    def __init__(self):
        self._session_cache: Dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._session_cache

    def get(self, key: str) -> Any:
        """Get a cached service, or None if it has not been created yet."""
        return self._session_cache.get(key)

    def set(self, key: str, value: Any) -> None:
        self._session_cache[key] = value

    def items(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._session_cache.items()))

    def clear(self) -> None:
        self._session_cache.clear()


class ContainerAware:
    """Mixin for objects that look services up in a container."""

    _container: Optional["Container"] = None

    def set_container(self, container: "Container") -> None:
        self._container = container

    def get_container(self) -> "Container":
        if self._container is None:
            raise ContainerNotFoundError(
                "The container cannot be found. Have you forgotten to bootstrap your application?"
            )
        return self._container

    def get(self, service_id: str) -> Any:
        """Get a service from the container."""
        return self.get_container().get(service_id)

    def create_new(self, factory: Callable, **overrides: Any) -> Any:
        """Create a new object through the container."""
        return self.get_container().create_new(factory, **overrides)


class Container:
    """Registry of service factories and the services they produced.

    Services are created under a reentrant lock, so concurrent requests
    share one instance of each service. Cycle detection is tracked per thread.
    """

    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self._services = ServiceCache()
        self._lock = threading.RLock()
        self._local = threading.local()
        self._closed = False

    @property
    def _resolving(self) -> List[str]:
        stack = getattr(self._local, "resolving", None)
        if stack is None:
            stack = self._local.resolving = []
        return stack

    def _ensure_open(self) -> None:
        if self._closed:
            raise ContainerClosedError("The container has been closed")

    def register_services(self, service_provider: Any) -> None:
        """Register every service of a service provider.

        The first registration of a service id wins, so providers registered
        earlier take precedence over the ones registered after them.

        Args:
            service_provider: Object with a ``get_services()`` method returning
                a dict of service id to factory

        Raises:
            TypeError: If the provider or one of its factories has the wrong shape
        """
        get_services = getattr(service_provider, "get_services", None)
        if not callable(get_services):
            raise TypeError(f"{type(service_provider).__name__} is not a service provider")

        for service_id, factory in get_services().items():
            if not callable(factory):
                raise TypeError(f'The factory for service "{service_id}" is not callable')
            if service_id in self._factories:
                logger.debug(f"Service {service_id} already registered, keeping the first registration")
                continue
            self._factories[service_id] = factory
            logger.debug(f"Registered service {service_id}")

    def has(self, service_id: str) -> bool:
        return service_id in self._factories

    def get(self, service_id: str) -> Any:
        """Get a service, creating it on first use.

        Raises:
            ContainerClosedError: If the container has been closed
            ServiceNotFoundError: If no factory is registered for the id
            DependencyResolutionError: If the service depends on itself
        """
        self._ensure_open()

        if service_id in self._services:
            return self._services.get(service_id)

        factory = self._factories.get(service_id)
        if factory is None:
            raise ServiceNotFoundError(f'The service "{service_id}" does not exist')

        with self._lock:
            # Another thread may have created it while we waited
            if service_id in self._services:
                return self._services.get(service_id)

            resolving = self._resolving
            if service_id in resolving:
                chain = " -> ".join(resolving + [service_id])
                raise DependencyResolutionError(f"Circular service dependency: {chain}")

            resolving.append(service_id)
            try:
                service = self._call_with_injection(factory, {})
            finally:
                resolving.pop()

            self._services.set(service_id, service)
            return service

    def create_new(self, factory: Callable, **overrides: Any) -> Any:
        """Create a new object, injecting its parameters by name.

        Parameters are taken from ``overrides`` first, then from registered
        services, then from the parameter default. The result is never cached.

        Raises:
            ContainerClosedError: If the container has been closed
            TypeError: If the factory is not callable
            DependencyResolutionError: If a required parameter cannot be resolved
        """
        self._ensure_open()
        instance = self._call_with_injection(factory, overrides)
        if isinstance(instance, ContainerAware) and instance._container is None:
            instance.set_container(self)
        return instance

    def _call_with_injection(self, factory: Callable, overrides: Dict[str, Any]) -> Any:
        """Call a factory with dependency injection."""
        if not callable(factory):
            raise TypeError(f"{type(factory).__name__} object is not a callable factory")

        try:
            sig = inspect.signature(factory)
        except (TypeError, ValueError):
            # Builtins without an introspectable signature
            return factory(**overrides)

        kwargs: Dict[str, Any] = {}
        accepts_var_keyword = False

        for param_name, param in sig.parameters.items():
            if param.kind == inspect.Parameter.VAR_KEYWORD:
                accepts_var_keyword = True
                continue
            if param.kind == inspect.Parameter.VAR_POSITIONAL:
                continue

            if param_name in overrides:
                kwargs[param_name] = overrides[param_name]
            elif param_name in self._factories:
                kwargs[param_name] = self.get(param_name)
            elif param.default is inspect.Parameter.empty:
                name = getattr(factory, "__name__", repr(factory))
                raise DependencyResolutionError(
                    f'Cannot resolve parameter "{param_name}" of {name}'
                )

        if accepts_var_keyword:
            for key, value in overrides.items():
                kwargs.setdefault(key, value)

        return factory(**kwargs)

    def close(self) -> None:
        """Tear down created services in reverse creation order.

        A closed container refuses to create further services.

        Services with a ``close()`` method have it called. Failures are logged
        and do not stop the remaining services from closing.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

            for service_id, service in reversed(list(self._services.items())):
                close = getattr(service, "close", None)
                if not callable(close):
                    continue
                try:
                    close()
                except Exception as e:
                    logger.error(f"Error closing service {service_id}: {e}", exc_info=True)

            self._services.clear()
