"""HTTP routes for orders."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from orders.application.services import OrderService
from orders.dependencies import get_order_service
from orders.domain.value_objects import OrderId
from orders.ports.exceptions import (
    InvalidOrderError,
    OrderAlreadyCancelledError,
    OrderNotFoundError,
)
from orders.presentation.models import (
    CancelOrderRequest,
    OrderResponse,
    PlaceOrderRequest,
)

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
)


def _parse_order_id(order_id: str) -> OrderId:
    try:
        return OrderId.from_string(order_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid order ID format",
        )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Order placed"},
        422: {"description": "Invalid order"},
        500: {"description": "Internal server error"},
    },
)
async def place_order(
    request: PlaceOrderRequest,
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Place an order.

    The order and its OrderPlaced event are committed in one transaction;
    the event reaches the broker through the outbox relay.

    Raises:
        HTTPException: 422 if the order violates a business rule
        HTTPException: 500 for unexpected errors
    """
    try:
        order = await service.place_order(
            customer_id=request.customer_id,
            lines=[line.to_domain() for line in request.lines],
        )
        return OrderResponse.from_domain(order)

    except InvalidOrderError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to place order",
        )


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderResponse:
    """Get an order by ID.

    Raises:
        HTTPException: 400 if the order ID is not a valid ULID
        HTTPException: 404 if the order does not exist
        HTTPException: 500 for unexpected errors
    """
    parsed_id = _parse_order_id(order_id)

    try:
        order = await service.get_order(parsed_id)
        return OrderResponse.from_domain(order)

    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get order",
        )


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    service: Annotated[OrderService, Depends(get_order_service)],
    request: CancelOrderRequest | None = None,
) -> OrderResponse:
    """Cancel an order.

    Raises:
        HTTPException: 400 if the order ID is not a valid ULID
        HTTPException: 404 if the order does not exist
        HTTPException: 409 if the order is already cancelled
        HTTPException: 500 for unexpected errors
    """
    parsed_id = _parse_order_id(order_id)

    try:
        reason = request.reason if request else ""
        order = await service.cancel_order(parsed_id, reason=reason)
        return OrderResponse.from_domain(order)

    except OrderNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    except OrderAlreadyCancelledError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Order is already cancelled",
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to cancel order",
        )
