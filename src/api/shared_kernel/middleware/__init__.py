"""Shared middleware for cross-cutting concerns.

Contains the correlation id middleware shared by all bounded contexts.
"""

from shared_kernel.middleware.correlation import (
    CORRELATION_ID_HEADER,
    CorrelationIdMiddleware,
    get_correlation_id,
    is_valid_correlation_id,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "CorrelationIdMiddleware",
    "get_correlation_id",
    "is_valid_correlation_id",
]
