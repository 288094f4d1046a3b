"""
Modules bundle services that an application registers at startup.
"""

from abc import ABC, abstractmethod

from .services import ServiceProvider


class Module(ABC):
    """Abstract base class for application modules.

    Example::

        class BillingModule(Module):
            def get_service_provider(self):
                return BillingServiceProvider()

        app.register_modules([BillingModule])
    """

    @abstractmethod
    def get_service_provider(self) -> ServiceProvider:
        """Get the service provider with the services of this module."""
        pass
