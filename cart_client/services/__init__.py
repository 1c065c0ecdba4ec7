# Client services

from .cart_api import CartAPIClient, CartAPIError, CartUnauthorizedError

__all__ = ["CartAPIClient", "CartAPIError", "CartUnauthorizedError"]
