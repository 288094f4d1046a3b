"""
Tests for the HTTP server drivers.
"""

import pytest

from xizlr import RestApplication
from xizlr.adapters import ASGIAdapter
from xizlr.exceptions import ContainerNotFoundError
from xizlr.servers import HypercornDriver, UvicornDriver, create_driver, serve


@pytest.fixture
def bootstrapped():
    app = RestApplication({})
    app.bootstrap()
    return app


class TestCreateDriver:
    """Test selecting a server driver."""

    def test_uvicorn(self, bootstrapped):
        driver = create_driver(bootstrapped, "uvicorn", "0.0.0.0", 9000)
        assert isinstance(driver, UvicornDriver)
        assert driver.host == "0.0.0.0"
        assert driver.port == 9000
        assert isinstance(driver.asgi_app, ASGIAdapter)
        assert driver.asgi_app.app is bootstrapped

    def test_hypercorn(self, bootstrapped):
        assert isinstance(create_driver(bootstrapped, "hypercorn"), HypercornDriver)

    def test_unknown_server(self, bootstrapped):
        with pytest.raises(ValueError) as exc_info:
            create_driver(bootstrapped, "gunicorn")
        assert "uvicorn, hypercorn" in str(exc_info.value)


class TestServe:
    """Test serving an application."""

    def test_server_not_installed(self, bootstrapped, monkeypatch):
        monkeypatch.setattr(UvicornDriver, "is_available", lambda self: False)
        with pytest.raises(ImportError) as exc_info:
            serve(bootstrapped, server="uvicorn")
        assert "pip install 'xizlr[uvicorn]'" in str(exc_info.value)

    def test_runs_driver_with_options(self, bootstrapped, monkeypatch):
        calls = []
        monkeypatch.setattr(HypercornDriver, "is_available", lambda self: True)
        monkeypatch.setattr(HypercornDriver, "run", lambda self, **kwargs: calls.append((self.port, kwargs)))

        bootstrapped.run(port=8123, server="hypercorn", log_level="debug")

        assert calls == [(8123, {"log_level": "debug"})]

    def test_run_requires_bootstrap(self):
        with pytest.raises(ContainerNotFoundError):
            RestApplication({}).run()
