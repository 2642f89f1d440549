"""Domain exceptions for the Orders bounded context.

Collects every error the application layer can raise so that callers
(routes, tests) import them from one place. The presentation layer maps
them to HTTP status codes.
"""

from orders.domain.exceptions import InvalidOrderError, OrderAlreadyCancelledError


class OrderNotFoundError(Exception):
    """Raised when an order cannot be found."""

    pass


__all__ = [
    "InvalidOrderError",
    "OrderAlreadyCancelledError",
    "OrderNotFoundError",
]
