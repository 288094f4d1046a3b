"""
ASGI adapter for running xizlr applications on ASGI servers.

The adapter converts between the ASGI protocol and the dispatcher's
Request/Response objects, and closes the application's services when the
server shuts down.
"""

import json
import logging
import urllib.parse
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

import anyio.to_thread

from .models import HTTPMethod, Request, Response

if TYPE_CHECKING:
    from .application import RestApplication

logger = logging.getLogger(__name__)


class ASGIAdapter:
    """
    ASGI 3.0 adapter for xizlr applications.

    The application stays synchronous: each request is executed in a worker
    thread, so controllers are free to block.

    Example:
        ```python
        app = RestApplication({"users": UserController})
        app.bootstrap()
        asgi_app = ASGIAdapter(app)

        # uvicorn module:asgi_app
        ```
    """

    def __init__(self, app: "RestApplication"):
        """Initialize the ASGI adapter with a bootstrapped application."""
        self.app = app

    async def __call__(self, scope: Dict[str, Any], receive: Callable[[], Awaitable[Dict[str, Any]]],
                       send: Callable[[Dict[str, Any]], Awaitable[None]]):
        """ASGI application entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            await self._send_plain(send, 404, b"Not Found - Only HTTP protocol is supported")
            return

        try:
            method = HTTPMethod(scope["method"].upper())
        except ValueError:
            await self._send_plain(send, 405, b"Method Not Allowed")
            return

        request = await self._asgi_to_request(scope, method, receive)

        try:
            response = await anyio.to_thread.run_sync(self.app.execute, request)
        except Exception as e:
            logger.error(f"Unexpected error executing {method.value} {request.path}: {e}", exc_info=True)
            response = Response(
                status_code=500,
                body=json.dumps({"error": "Internal Server Error"}),
                content_type="application/json",
            )

        await self._response_to_asgi(response, send, head=method == HTTPMethod.HEAD)

    async def _handle_lifespan(self, receive, send):
        """
        Handle the ASGI lifespan protocol.

        Startup has nothing to do since the application is bootstrapped before
        it is served; shutdown closes the container's services.
        """
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})

            elif message["type"] == "lifespan.shutdown":
                try:
                    self.app.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                except Exception as e:
                    logger.error(f"Error during shutdown: {e}", exc_info=True)
                    await send({
                        "type": "lifespan.shutdown.failed",
                        "message": str(e)
                    })
                return

    async def _asgi_to_request(self, scope: Dict[str, Any], method: HTTPMethod, receive) -> Request:
        """Convert ASGI scope and body to a Request."""
        query_string = scope.get("query_string", b"").decode("utf-8")

        # Header names are normalized to lowercase
        headers = {}
        for header_name, header_value in scope.get("headers", []):
            headers[header_name.decode("latin-1").lower()] = header_value.decode("latin-1")

        query_params = {}
        if query_string:
            query_params = dict(urllib.parse.parse_qsl(query_string))

        body = b""
        more_body = True
        while more_body:
            message = await receive()
            body += message.get("body", b"")
            more_body = message.get("more_body", False)

        body_content: Optional[str] = None
        if body:
            try:
                body_content = body.decode("utf-8")
            except UnicodeDecodeError:
                body_content = body.decode("latin-1")

        return Request(
            method=method,
            path=scope["path"],
            headers=headers,
            query_params=query_params,
            body=body_content
        )

    async def _response_to_asgi(self, response: Response, send, head: bool = False):
        """Convert a Response to ASGI messages.

        Content-Length always reflects the encoded body. HEAD responses keep
        their headers but send no body.
        """
        body = response.get_body_bytes()

        headers: List[List[bytes]] = []
        for name, value in (response.headers or {}).items():
            if name.lower() == "content-length":
                continue
            headers.append([name.encode("latin-1"), str(value).encode("latin-1")])
        headers.append([b"content-length", str(len(body)).encode("latin-1")])

        await send({
            "type": "http.response.start",
            "status": response.status_code,
            "headers": headers,
        })
        await send({
            "type": "http.response.body",
            "body": b"" if head else body,
        })

    async def _send_plain(self, send, status: int, body: bytes):
        await send({
            "type": "http.response.start",
            "status": status,
            "headers": [[b"content-type", b"text/plain"], [b"content-length", str(len(body)).encode("latin-1")]],
        })
        await send({
            "type": "http.response.body",
            "body": body,
        })


def create_asgi_app(app: "RestApplication") -> ASGIAdapter:
    """
    Create an ASGI application from a xizlr application.

    Args:
        app: The bootstrapped application to wrap

    Returns:
        An ASGI-compatible application
    """
    return ASGIAdapter(app)
