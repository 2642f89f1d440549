"""Value objects for the Orders domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

from orders.domain.exceptions import InvalidOrderError


@dataclass(frozen=True)
class OrderId:
    """Identifier for an Order aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> OrderId:
        """Generate a new OrderId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> OrderId:
        """Create OrderId from string value.

        Args:
            value: ULID string

        Returns:
            OrderId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid OrderId: {value}") from e

        return cls(value=value)


class OrderStatus(StrEnum):
    """Lifecycle status of an order."""

    PLACED = "placed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderLine:
    """A single line of an order.

    Prices are integer cents to avoid floating point rounding.
    """

    sku: str
    quantity: int
    unit_price_cents: int

    def __post_init__(self) -> None:
        if not self.sku:
            raise InvalidOrderError("Order line sku must not be empty")
        if self.quantity <= 0:
            raise InvalidOrderError(
                f"Order line quantity must be positive: {self.quantity}"
            )
        if self.unit_price_cents < 0:
            raise InvalidOrderError(
                f"Order line unit price must not be negative: {self.unit_price_cents}"
            )

    @property
    def total_cents(self) -> int:
        return self.quantity * self.unit_price_cents
