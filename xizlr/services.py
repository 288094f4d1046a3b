"""
Service providers supply the container with service factories.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from .inflector import Inflector
from .runtime import ApplicationRuntime


class ServiceProvider(ABC):
    """Abstract base class for service providers."""

    @abstractmethod
    def get_services(self) -> Dict[str, Callable]:
        """Get the details of the services we are providing.

        Returns:
            Services in the format ``{service_id: factory}``. Factory parameters
            are injected by name from other services.
        """
        pass


class CoreServiceProvider(ServiceProvider):
    """Provides the services the dispatcher itself relies on."""

    INFLECTOR = "inflector"
    APPLICATION_RUNTIME = "application_runtime"

    def __init__(self, name: Optional[str] = None, root_directory: Optional[str] = None):
        self.name = name
        self.root_directory = root_directory

    def get_services(self) -> Dict[str, Callable]:
        return {
            self.INFLECTOR: Inflector,
            self.APPLICATION_RUNTIME: lambda: ApplicationRuntime.from_environment(
                name=self.name, root_directory=self.root_directory
            ),
        }
