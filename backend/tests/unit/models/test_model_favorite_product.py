# tests/unit/models/test_model_favorite_product.py
from __future__ import annotations

from datetime import UTC, datetime

import pytest
from favapi.models.favorite_product import FavoriteProduct
from favapi.services._shared.errors import ValidationError

from tests.factories.favorite_product import FavoriteProductFactory


def _build(**overrides):
    data = {
        "client_id": 1,
        "product_id": 7,
        "product_title": "Backpack",
        "product_image": None,
        "product_price": 10.5,
        "product_rating": 4.5,
    }
    data.update(overrides)
    return FavoriteProduct(**data)


@pytest.mark.parametrize("product_id", [0, -1])
def test_product_id_must_be_positive(app, product_id):
    with pytest.raises(ValidationError, match="product_id must be positive"):
        _build(product_id=product_id)


def test_rating_outside_range_is_rejected(app):
    with pytest.raises(ValidationError):
        _build(product_rating=5.1)


def test_negative_price_is_rejected(app):
    with pytest.raises(ValidationError):
        _build(product_price=-0.01)


def test_blank_title_is_rejected(app):
    with pytest.raises(ValidationError, match="title"):
        _build(product_title="  ")


def test_title_is_stored_as_given(app):
    assert _build(product_title=" Backpack ").product_title == " Backpack "


def test_overlong_title_is_rejected_not_truncated(app):
    with pytest.raises(ValidationError, match="must not exceed 500"):
        _build(product_title="t" * 501)


def test_empty_image_is_stored_as_none(app):
    assert _build(product_image="").product_image is None


def test_duplicate_client_product_violates_unique_constraint(app, session):
    from sqlalchemy.exc import IntegrityError

    favorite = FavoriteProductFactory(product_id=5)
    with pytest.raises(IntegrityError):
        FavoriteProductFactory(client=favorite.client, product_id=5)
    session.rollback()


def test_restore_rebuilds_snapshot_without_validation(app):
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    snapshot = {
        "id": 10,
        "client_id": 3,
        "product_id": 42,
        "product_title": "Lamp",
        "product_image": None,
        "product_price": None,
        "product_rating": 2.5,
        "created_at": created.isoformat(),
    }

    restored = FavoriteProduct.restore(snapshot)

    assert restored.id == 10
    assert restored.product_id == 42
    assert restored.product_rating == 2.5
    assert restored.created_at == created
    assert restored.to_snapshot() == snapshot
