"""HTTP client for the external product catalog."""

from __future__ import annotations

import logging
from typing import Any

import requests

from favapi.services._shared.errors import UpstreamError
from favapi.services._shared.ports.product_catalog import CatalogProduct

log = logging.getLogger(__name__)


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_product(payload: Any) -> CatalogProduct | None:
    """
    Normalize a catalog JSON object into :class:`CatalogProduct`.

    Returns ``None`` when the payload is empty or lacks an ``id``/``title``.
    The rating is read from ``rating.rate``.
    """
    if not isinstance(payload, dict) or not payload:
        return None
    raw_id = payload.get("id")
    title = payload.get("title")
    if raw_id is None or not title:
        return None
    try:
        product_id = int(raw_id)
    except (TypeError, ValueError):
        return None
    rating = payload.get("rating")
    rate = rating.get("rate") if isinstance(rating, dict) else None
    return CatalogProduct(
        id=product_id,
        title=str(title),
        image=payload.get("image") or None,
        price=_as_float(payload.get("price")),
        rating=_as_float(rate),
        description=payload.get("description"),
        category=payload.get("category"),
    )


class HTTPProductCatalog:
    """
    ``requests``-based catalog client with bounded timeouts.

    :param base_url: Catalog root, e.g. ``https://fakestoreapi.com``.
    :param connect_timeout: Seconds to establish the connection.
    :param read_timeout: Seconds to wait for the response.
    :param session: Optional pre-configured :class:`requests.Session`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = (connect_timeout, read_timeout)
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")

    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("catalog.request_failed: %s url=%s", exc, url)
            raise UpstreamError() from exc

    @staticmethod
    def _json(response: requests.Response) -> Any:
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            log.warning("catalog.invalid_json url=%s", response.url)
            raise UpstreamError() from exc

    def get_product(self, product_id: int) -> CatalogProduct | None:
        """Fetch one product; ``None`` when the catalog does not know it."""
        if product_id <= 0:
            return None
        response = self._get(f"/products/{product_id}")
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            log.warning(
                "catalog.bad_status status=%s product_id=%s", response.status_code, product_id
            )
            raise UpstreamError()
        # The catalog answers 200 with an empty body for unknown ids
        return parse_product(self._json(response))

    def list_products(self) -> list[CatalogProduct]:
        response = self._get("/products")
        if response.status_code >= 400:
            log.warning("catalog.bad_status status=%s", response.status_code)
            raise UpstreamError()
        payload = self._json(response)
        if not isinstance(payload, list):
            return []
        return [p for p in (parse_product(item) for item in payload) if p is not None]

    def close(self) -> None:
        self.session.close()
