"""
HTTP server drivers for xizlr applications.

This module provides drivers for running applications with Uvicorn or
Hypercorn through the ASGI adapter.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .adapters import create_asgi_app

if TYPE_CHECKING:
    from .application import RestApplication

logger = logging.getLogger(__name__)


class ServerDriver(ABC):
    """Base class for HTTP server drivers."""

    name = ""

    def __init__(self, app: "RestApplication", host: str = "127.0.0.1", port: int = 8000):
        """
        Initialize the server driver.

        Args:
            app: The bootstrapped application to serve
            host: Host to bind to
            port: Port to bind to
        """
        self.app = app
        self.host = host
        self.port = port
        self.asgi_app = create_asgi_app(app)

    @abstractmethod
    def run(self, **kwargs):
        """Run the server."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the server implementation is available."""
        pass


class UvicornDriver(ServerDriver):
    """Uvicorn server driver."""

    name = "uvicorn"

    def is_available(self) -> bool:
        """Check if Uvicorn is available."""
        try:
            import uvicorn  # noqa: F401  # type: ignore
            return True
        except ImportError:
            return False

    def run(self,
            log_level: str = "info",
            ssl_keyfile: Optional[str] = None,
            ssl_certfile: Optional[str] = None,
            **kwargs):
        """
        Run the Uvicorn server.

        Args:
            log_level: Logging level
            ssl_keyfile: SSL key file for HTTPS
            ssl_certfile: SSL certificate file for HTTPS
            **kwargs: Additional Uvicorn configuration options
        """
        import uvicorn

        config_kwargs = {
            "host": self.host,
            "port": self.port,
            "log_level": log_level,
            **kwargs
        }
        if ssl_keyfile and ssl_certfile:
            config_kwargs.update({
                "ssl_keyfile": ssl_keyfile,
                "ssl_certfile": ssl_certfile,
            })

        logger.info(f"Starting Uvicorn server on {self.host}:{self.port}")
        uvicorn.run(self.asgi_app, **config_kwargs)


class HypercornDriver(ServerDriver):
    """Hypercorn server driver."""

    name = "hypercorn"

    def is_available(self) -> bool:
        """Check if Hypercorn is available."""
        try:
            import hypercorn  # noqa: F401  # type: ignore
            return True
        except ImportError:
            return False

    def run(self,
            log_level: str = "info",
            ssl_keyfile: Optional[str] = None,
            ssl_certfile: Optional[str] = None,
            **kwargs):
        """
        Run the Hypercorn server.

        Args:
            log_level: Logging level
            ssl_keyfile: SSL key file for HTTPS
            ssl_certfile: SSL certificate file for HTTPS
            **kwargs: Additional Hypercorn configuration options
        """
        import hypercorn.asyncio  # type: ignore
        from hypercorn import Config  # type: ignore

        config = Config()
        config.bind = [f"{self.host}:{self.port}"]
        config.loglevel = log_level.upper()
        if ssl_keyfile and ssl_certfile:
            config.keyfile = ssl_keyfile
            config.certfile = ssl_certfile

        for key, value in kwargs.items():
            if hasattr(config, key):
                setattr(config, key, value)

        logger.info(f"Starting Hypercorn server on {self.host}:{self.port}")
        asyncio.run(hypercorn.asyncio.serve(self.asgi_app, config))  # type: ignore[arg-type]


DRIVERS = {
    UvicornDriver.name: UvicornDriver,
    HypercornDriver.name: HypercornDriver,
}


def create_driver(app: "RestApplication", server: str = "uvicorn",
                  host: str = "127.0.0.1", port: int = 8000) -> ServerDriver:
    """
    Create the driver for a server implementation.

    Raises:
        ValueError: If an invalid server is specified
    """
    driver_class = DRIVERS.get(server)
    if driver_class is None:
        raise ValueError(f"Unknown server: {server}. Supported servers: {', '.join(DRIVERS)}")
    return driver_class(app, host, port)


def serve(app: "RestApplication",
          server: str = "uvicorn",
          host: str = "127.0.0.1",
          port: int = 8000,
          **kwargs) -> None:
    """
    Serve an application with the specified HTTP server.

    Args:
        app: The bootstrapped application to serve
        server: Server implementation to use ("uvicorn" or "hypercorn")
        host: Host to bind to
        port: Port to bind to
        **kwargs: Additional server-specific configuration options

    Raises:
        ValueError: If an invalid server is specified
        ImportError: If the specified server is not installed
    """
    driver = create_driver(app, server, host, port)

    if not driver.is_available():
        raise ImportError(f"{server} is not installed. Install with: pip install 'xizlr[{server}]'")

    driver.run(**kwargs)
