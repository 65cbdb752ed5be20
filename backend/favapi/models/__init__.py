from favapi.models.client import Client
from favapi.models.favorite_product import FavoriteProduct
from favapi.models.user_session import UserSession

__all__ = [
    "Client",
    "FavoriteProduct",
    "UserSession",
]
