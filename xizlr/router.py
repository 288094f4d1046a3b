"""Route table and matching for the dispatcher."""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import MethodNotAllowedError, RouteNotFoundError
from .models import HTTPMethod

logger = logging.getLogger(__name__)

RouteHandler = Callable[..., object]


class RouteNode:
    """A node in the route trie structure.

    Each node represents a path segment and can have:
    - static_children: Dict mapping exact segment strings to child nodes
    - param_child: Single child node for path parameters (e.g., {id})
    - handlers: Dict mapping HTTP methods to handlers at this path
    """

    def __init__(self):
        self.static_children: Dict[str, "RouteNode"] = {}
        self.param_child: Optional[Tuple[str, "RouteNode"]] = None  # (param_name, node)
        self.handlers: Dict[HTTPMethod, RouteHandler] = {}

    def add_route(self, segments: List[str], method: HTTPMethod, handler: RouteHandler) -> None:
        """Add a route to the trie.

        Args:
            segments: Path segments (e.g., ['{resourceNamePlural}', '{id}'])
            method: HTTP method
            handler: Callable invoked when the route matches
        """
        if not segments:
            self.handlers[method] = handler
            return

        segment = segments[0]
        remaining = segments[1:]

        if segment.startswith('{') and segment.endswith('}'):
            param_name = segment[1:-1]
            if self.param_child is None:
                self.param_child = (param_name, RouteNode())
            elif self.param_child[0] != param_name:
                raise ValueError(
                    f"Conflicting parameter names '{self.param_child[0]}' and '{param_name}' at the same position"
                )
            _, child_node = self.param_child
            child_node.add_route(remaining, method, handler)
        else:
            if segment not in self.static_children:
                self.static_children[segment] = RouteNode()
            self.static_children[segment].add_route(remaining, method, handler)

    def find(self, segments: List[str]) -> Optional[Tuple["RouteNode", Dict[str, str]]]:
        """Find the node for a path, regardless of method.

        Static segments are tried before parameters. A node only counts as a
        match when it has at least one handler.

        Returns:
            Tuple of (node, path_params) if the path is known, None otherwise
        """
        if not segments:
            if self.handlers:
                return (self, {})
            return None

        segment = segments[0]
        remaining = segments[1:]

        if segment in self.static_children:
            result = self.static_children[segment].find(remaining)
            if result:
                return result

        if self.param_child:
            param_name, child_node = self.param_child
            result = child_node.find(remaining)
            if result:
                node, params = result
                params[param_name] = segment
                return (node, params)

        return None


def split_path(path: str) -> List[str]:
    """Split a URL path into its non-empty segments."""
    return [s for s in path.split('/') if s]


class Dispatcher:
    """Matches a (method, path) pair against a route trie."""

    def __init__(self, root: RouteNode):
        self._root = root

    def dispatch(self, method: HTTPMethod, path: str) -> Tuple[RouteHandler, Dict[str, str]]:
        """Find the handler for a request.

        Args:
            method: HTTP method of the request
            path: Request path (e.g., "/users/123")

        Returns:
            Tuple of (handler, path_params)

        Raises:
            RouteNotFoundError: If no route template matches the path
            MethodNotAllowedError: If the path matches but not for this method
        """
        result = self._root.find(split_path(path))
        if result is None:
            logger.debug(f"No route matches {path}")
            raise RouteNotFoundError(f'No route matches "{path}"')

        node, params = result
        handler = node.handlers.get(method)
        if handler is None:
            allowed = ", ".join(sorted(m.value for m in node.handlers))
            logger.debug(f"{method.value} not routed for {path} (allowed: {allowed})")
            raise MethodNotAllowedError(f"{method.value} is not allowed for {path}, allowed methods: {allowed}")

        return handler, params

    def get_methods_for_path(self, path: str) -> List[HTTPMethod]:
        """Get all HTTP methods that have registered routes at this path."""
        result = self._root.find(split_path(path))
        if result is None:
            return []
        node, _ = result
        return sorted(node.handlers.keys(), key=lambda m: m.value)


class RouteCollection:
    """Collection of (method, path template, handler) routes.

    Path templates use ``{name}`` segments for captured parameters::

        routes = RouteCollection()
        routes.add_route(HTTPMethod.GET, "/{resourceNamePlural}", handler)
        handler, args = routes.get_dispatcher().dispatch(HTTPMethod.GET, "/users")
        # args == {"resourceNamePlural": "users"}
    """

    def __init__(self):
        self._routes: List[Tuple[HTTPMethod, str, RouteHandler]] = []
        self._route_tree = RouteNode()

    def add_route(self, method: HTTPMethod, path: str, handler: RouteHandler) -> None:
        """Register a handler for a method and path template."""
        self._routes.append((method, path, handler))
        self._route_tree.add_route(split_path(path), method, handler)

    def get_routes(self) -> List[Tuple[HTTPMethod, str, RouteHandler]]:
        """Get all registered routes in registration order."""
        return list(self._routes)

    def get_dispatcher(self) -> Dispatcher:
        return Dispatcher(self._route_tree)
