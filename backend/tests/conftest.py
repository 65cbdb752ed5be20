"""Pytest fixtures building an isolated application per test.

Each test gets a fresh in-memory SQLite database, a fresh FakeRedis and an
in-memory product catalog, all wired through the application factory.
"""

from __future__ import annotations

import os

import fakeredis
import pytest
from favapi.core.config import TestingConfig
from favapi.core.container import get_container, shutdown
from favapi.core.extensions import db as _db
from favapi.factory import create_app
from favapi.services._shared.ports.product_catalog import (
    CatalogProduct,
    InMemoryProductCatalog,
)


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Quiet logs; tests assert on behavior, not output.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"
    USE_PROXYFIX = False
    CORS_ORIGINS = "*"


CATALOG_PRODUCTS = [
    CatalogProduct(
        id=1,
        title="Fjallraven Backpack",
        image="https://catalog.test/img/1.jpg",
        price=109.95,
        rating=3.9,
        category="men's clothing",
    ),
    CatalogProduct(id=2, title="Slim Fit T-Shirt", image=None, price=22.3, rating=4.1),
    CatalogProduct(id=3, title="Cotton Jacket", price=55.99, rating=None),
]


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def catalog() -> InMemoryProductCatalog:
    return InMemoryProductCatalog(list(CATALOG_PRODUCTS))


@pytest.fixture
def app(fake_redis, catalog):
    """Create a Flask application with its schema created inside an app context."""
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestConfig, redis_client=fake_redis, catalog=catalog)
    with application.app_context():
        _db.create_all()
        yield application
        _db.session.remove()
        _db.drop_all()
    shutdown(application)


@pytest.fixture
def session(app):
    """The Flask-SQLAlchemy scoped session used by the application code."""
    return _db.session


@pytest.fixture
def container(app):
    return get_container(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the application session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    if "app" not in request.fixturenames:
        yield
        return
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
