# tests/unit/services/test_client_service.py
from __future__ import annotations

import pytest
from favapi.repositories.cached_favorite_product import client_list_key
from favapi.services._shared.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from favapi.services._shared.ports.cache import InMemoryCache
from favapi.services.clients.dto import ClientCreateIn, ClientUpdateIn
from favapi.services.clients.service import ClientService

from tests.factories.client import ClientFactory


@pytest.fixture()
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture()
def service(app, cache) -> ClientService:
    return ClientService(cache=cache)


def test_create_client_returns_public_view(service):
    out = service.create_client(
        ClientCreateIn(name="Bruno", email="Bruno@Example.com", password="secret1")
    )
    assert out.id is not None
    assert out.email == "bruno@example.com"
    assert not hasattr(out, "password")
    assert out.created_at is not None


def test_create_client_with_taken_email_conflicts(service):
    ClientFactory(email="dup@example.com")
    with pytest.raises(ConflictError, match="Email already exists"):
        service.create_client(ClientCreateIn(name="X", email="DUP@example.com", password="secret1"))


def test_get_missing_client(service):
    with pytest.raises(NotFoundError, match="Client not found"):
        service.get_client(404)


def test_list_clients_newest_first(service):
    older = ClientFactory()
    newer = ClientFactory()
    assert [c.id for c in service.list_clients()] == [newer.id, older.id]


def test_update_own_record(service):
    me = ClientFactory(name="Old")
    out = service.update_client(me.id, me.id, ClientUpdateIn(name="New"))
    assert out.name == "New"
    assert out.email == me.email


def test_update_someone_else_is_forbidden(service):
    me, other = ClientFactory(), ClientFactory()
    with pytest.raises(ForbiddenError, match="not authorized to update this client"):
        service.update_client(me.id, other.id, ClientUpdateIn(name="Hijack"))


def test_update_without_fields_is_rejected(service):
    me = ClientFactory()
    with pytest.raises(ValidationError, match="No data provided for update"):
        service.update_client(me.id, me.id, ClientUpdateIn())


def test_update_email_to_someone_elses_conflicts(service):
    me = ClientFactory()
    other = ClientFactory()
    with pytest.raises(ConflictError):
        service.update_client(me.id, me.id, ClientUpdateIn(email=other.email))


def test_update_email_to_own_email_is_allowed(service):
    me = ClientFactory()
    out = service.update_client(me.id, me.id, ClientUpdateIn(email=me.email.upper()))
    assert out.email == me.email


def test_update_password_is_hashed(service, session):
    from favapi.models.client import Client

    me = ClientFactory()
    service.update_client(me.id, me.id, ClientUpdateIn(password="another-one"))
    assert session.get(Client, me.id).verify_password("another-one")


def test_delete_drops_record_and_cached_favorites(service, cache):
    me = ClientFactory()
    cache.set(client_list_key(me.id), [{"id": 1}])
    cache.set(f"favorites:exists:{me.id}:1", True)

    out = service.delete_client(me.id, me.id)

    assert out.id == me.id
    assert cache.keys() == []
    with pytest.raises(NotFoundError):
        service.get_client(me.id)


def test_delete_someone_else_is_forbidden(service):
    me, other = ClientFactory(), ClientFactory()
    with pytest.raises(ForbiddenError):
        service.delete_client(me.id, other.id)
