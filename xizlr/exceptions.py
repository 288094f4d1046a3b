"""
Custom exceptions for the xizlr dispatcher.

Every error carries the HTTP status code the application uses when it turns
the failure into an error response.
"""

from http import HTTPStatus


class XizlrError(Exception):
    """Base exception for xizlr errors."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR


class ControllerNotFoundError(XizlrError):
    """Raised when no controller is registered for a resource name."""

    status_code = HTTPStatus.NOT_FOUND


class InvalidControllerError(XizlrError):
    """Raised when a controller factory produces something that is not a controller."""

    pass


class InvalidMethodError(XizlrError):
    """Raised when a controller does not expose the resolved method."""

    status_code = HTTPStatus.METHOD_NOT_ALLOWED


class MethodNotAllowedError(XizlrError):
    """Raised for verb and route shape combinations that are not supported."""

    status_code = HTTPStatus.METHOD_NOT_ALLOWED


class InvalidModuleError(XizlrError):
    """Raised when a registered module does not provide a service provider."""

    pass


class ContainerNotFoundError(XizlrError):
    """Raised when the container is used before the application is bootstrapped."""

    pass


class ContainerClosedError(ContainerNotFoundError):
    """Raised when services are requested from a container that has been closed."""

    pass


class RouteNotFoundError(XizlrError):
    """Raised when no route matches the request path."""

    status_code = HTTPStatus.NOT_FOUND


class ServiceNotFoundError(XizlrError):
    """Raised when a service id is not registered in the container."""

    pass


class DependencyResolutionError(XizlrError):
    """Raised when a dependency cannot be resolved."""

    pass
