"""
Shared fixtures for the dispatcher tests.
"""

import pytest

from xizlr import RestApplication
from tests.sample_app import CONTROLLERS, AccountsServiceProvider


@pytest.fixture
def anyio_backend():
    """Run anyio tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def app():
    """A bootstrapped application with the sample controllers."""
    application = RestApplication(CONTROLLERS, name="test-app", root_directory="/srv/test")
    application.bootstrap(AccountsServiceProvider())
    return application
