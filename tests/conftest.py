"""
Pytest configuration and fixtures for sitebridge tests
"""
import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sitebridge.config import Settings  # noqa: E402
from sitebridge.main import create_app  # noqa: E402
from sitebridge.services.encrypter import Encrypter  # noqa: E402
from sitebridge.services.events import EventDispatcher  # noqa: E402
from sitebridge.services.site_loader import SiteRegistry  # noqa: E402
from sitebridge.utils.session_manager import SessionManager  # noqa: E402
from tests.environment import MAIN_DOMAIN, ModelRepo, sites_config  # noqa: E402

SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    assets = tmp_path / "assets"
    (assets / "foo" / "css").mkdir(parents=True)
    (assets / "foo" / "css" / "app.css").write_text("body { color: red; }")
    (assets / "bar" / "css").mkdir(parents=True)
    (assets / "bar" / "css" / "app.css").write_text("body { color: blue; }")
    return Settings(
        main_domain=MAIN_DOMAIN,
        secret_key=SECRET,
        sites_config=tmp_path / "missing.yaml",
        routes_package="tests.routes",
        assets_path=assets,
        debug=True,
    )


@pytest.fixture
def registry():
    registry = SiteRegistry()
    registry.load(sites_config(), ModelRepo())
    return registry


@pytest.fixture
def sessions():
    return SessionManager()


@pytest.fixture
def events():
    return EventDispatcher()


@pytest.fixture
def encrypter():
    return Encrypter.from_secret(SECRET)


@pytest.fixture
def app(settings, registry, sessions, events):
    return create_app(settings=settings, registry=registry, sessions=sessions, events=events)


@pytest.fixture
def client(app):
    return TestClient(app)
