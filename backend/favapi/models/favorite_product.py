"""FavoriteProduct model: an immutable snapshot of a catalog product a client likes."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, attributes, mapped_column, relationship, validates

from favapi.core.extensions import db
from favapi.services._shared.errors import ValidationError

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:
    from .client import Client

TITLE_MAX_LENGTH = 500
IMAGE_MAX_LENGTH = 1024
RATING_MIN = 0.0
RATING_MAX = 5.0

# Columns carried in cache snapshots, in serialization order
SNAPSHOT_FIELDS = (
    "id",
    "client_id",
    "product_id",
    "product_title",
    "product_image",
    "product_price",
    "product_rating",
    "created_at",
)


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class FavoriteProduct(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    Denormalized product snapshot taken when a client marks it as favorite.

    The snapshot is never updated in place. ``(client_id, product_id)`` is
    unique; the service pre-checks and the constraint resolves races.

    Fields
    ------
    client_id : int
        Owning client.
    product_id : int
        Identifier in the external catalog, strictly positive.
    product_title : str
        Non-blank, at most 500 characters.
    product_image : str | None
        Image URL, optional.
    product_price : float | None
        Non-negative when present.
    product_rating : float | None
        In ``[0, 5]`` when present.
    """

    __tablename__ = "favorite_products"

    client_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    product_title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    product_image: Mapped[str | None] = mapped_column(String(IMAGE_MAX_LENGTH), nullable=True)
    product_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    product_rating: Mapped[float | None] = mapped_column(Float, nullable=True)

    client: Mapped[Client] = relationship(back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("client_id", "product_id", name="uq_favorite_products_client_product"),
        Index("ix_favorite_products_client_id", "client_id"),
    )

    # -------------------- Validators --------------------
    @validates("client_id")
    def _validate_client_id(self, key: str, value: int) -> int:
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValidationError("client_id must be positive")
        return value

    @validates("product_id")
    def _validate_product_id(self, key: str, value: int) -> int:
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValidationError("product_id must be positive")
        return value

    @validates("product_title")
    def _validate_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Product title is required")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Product title must not exceed {TITLE_MAX_LENGTH} characters")
        return value

    @validates("product_image")
    def _validate_image(self, key: str, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if not isinstance(value, str) or len(value) > IMAGE_MAX_LENGTH:
            raise ValidationError(f"Product image must not exceed {IMAGE_MAX_LENGTH} characters")
        return value

    @validates("product_price")
    def _validate_price(self, key: str, value: float | None) -> float | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
            raise ValidationError("Product price must be a non-negative number")
        return float(value)

    @validates("product_rating")
    def _validate_rating(self, key: str, value: float | None) -> float | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValidationError("Product rating must be a number")
        if not RATING_MIN <= value <= RATING_MAX:
            raise ValidationError("Product rating must be between 0 and 5")
        return float(value)

    # -------------------- Snapshots --------------------
    def to_snapshot(self) -> dict[str, Any]:
        """Return a JSON-safe mapping of the persisted columns."""
        data = {name: getattr(self, name) for name in SNAPSHOT_FIELDS}
        created = data["created_at"]
        data["created_at"] = created.isoformat() if created is not None else None
        return data

    @classmethod
    def restore(cls, data: dict[str, Any]) -> FavoriteProduct:
        """
        Rebuild an instance from a snapshot produced by :meth:`to_snapshot`.

        Trusted path for data that already passed validation when it was
        written to the store. It skips the ``@validates`` hooks and returns a
        transient object that is not attached to any session. Never call it
        with request input.
        """
        instance = sa_inspect(cls).class_manager.new_instance()
        for name in SNAPSHOT_FIELDS:
            value = data.get(name)
            if name == "created_at":
                value = _parse_datetime(value)
            attributes.set_committed_value(instance, name, value)
        return instance
