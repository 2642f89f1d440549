"""Composite handlers for the outbox pattern.

These classes aggregate context-specific translators and serializers,
delegating to the one registered for an event type. Each bounded context
registers its own handlers at application startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from shared_kernel.outbox.ports import EventSerializer, MessageTranslator
from shared_kernel.outbox.value_objects import OutboundMessage

if TYPE_CHECKING:
    from shared_kernel.outbox.observability import OutboxRelayProbe


class _SupportsEventTypes(Protocol):
    def supported_event_types(self) -> frozenset[str]: ...


_H = TypeVar("_H", bound=_SupportsEventTypes)


class _EventTypeRegistry(Generic[_H]):
    """Maps event type names to the handler that owns them."""

    def __init__(self, kind: str) -> None:
        self._kind = kind
        self._by_type: dict[str, _H] = {}

    def add(self, handler: _H) -> frozenset[str]:
        event_types = handler.supported_event_types()
        clashes = sorted(t for t in event_types if t in self._by_type)
        if clashes:
            raise ValueError(
                f"Event types already have a registered {self._kind}: {clashes}"
            )
        for event_type in event_types:
            self._by_type[event_type] = handler
        return event_types

    def get(self, event_type: str) -> _H:
        handler = self._by_type.get(event_type)
        if handler is None:
            raise ValueError(
                f"No {self._kind} registered for event type: {event_type}. "
                f"Registered types: {sorted(self._by_type.keys())}"
            )
        return handler

    def event_types(self) -> frozenset[str]:
        return frozenset(self._by_type)


class CompositeTranslator:
    """Delegates translation to context-specific translators.

    Implements the MessageTranslator protocol by routing to the translator
    registered for the event type.
    """

    def __init__(self, probe: "OutboxRelayProbe | None" = None) -> None:
        """Initialize with no translators.

        Args:
            probe: Optional observability probe for logging registrations
        """
        self._registry: _EventTypeRegistry[MessageTranslator] = _EventTypeRegistry(
            "translator"
        )
        self._probe = probe

    def register(
        self, translator: MessageTranslator, context_name: str | None = None
    ) -> None:
        """Register a context-specific translator.

        Args:
            translator: The translator to register
            context_name: Optional bounded context name (defaults to class name)

        Raises:
            ValueError: If one of its event types is already registered
        """
        event_types = self._registry.add(translator)

        if self._probe is not None:
            name = (
                context_name if context_name is not None else type(translator).__name__
            )
            self._probe.translator_registered(name, event_types)

    def supported_event_types(self) -> frozenset[str]:
        """Return all supported event types across all translators."""
        return self._registry.event_types()

    def translate(
        self,
        event_type: str,
        payload: dict[str, Any],
    ) -> list[OutboundMessage]:
        """Translate an event payload to broker messages.

        Raises:
            ValueError: If no translator is registered for the event type
        """
        return self._registry.get(event_type).translate(event_type, payload)


class CompositeSerializer:
    """Delegates serialization to context-specific serializers.

    Implements the EventSerializer protocol by routing to the serializer
    registered for the event's class name.
    """

    def __init__(self) -> None:
        """Initialize with no serializers."""
        self._registry: _EventTypeRegistry[EventSerializer] = _EventTypeRegistry(
            "serializer"
        )

    def register(self, serializer: EventSerializer) -> None:
        """Register a context-specific serializer.

        Raises:
            ValueError: If one of its event types is already registered
        """
        self._registry.add(serializer)

    def supported_event_types(self) -> frozenset[str]:
        """Return all supported event types across all serializers."""
        return self._registry.event_types()

    def serialize(self, event: Any) -> dict[str, Any]:
        """Serialize a domain event to a dictionary.

        Raises:
            ValueError: If no serializer is registered for the event type
        """
        return self._registry.get(type(event).__name__).serialize(event)
