"""Infrastructure layer for the outbox pattern.

Contains SQLAlchemy models, the repository implementation, the composite
serializer/translator registries, and the relay that publishes entries.
"""

from infrastructure.outbox.composite import CompositeSerializer, CompositeTranslator
from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.outbox.repository import OutboxRepository

__all__ = [
    "CompositeSerializer",
    "CompositeTranslator",
    "OutboxModel",
    "OutboxRelay",
    "OutboxRepository",
]
