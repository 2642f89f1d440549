"""Business rule violations raised by the Order aggregate."""


class InvalidOrderError(ValueError):
    """Raised when an order or order line would violate its invariants."""

    pass


class OrderAlreadyCancelledError(Exception):
    """Raised when cancelling an order that is already cancelled."""

    pass
