"""Unit tests for CompositeTranslator and CompositeSerializer."""

from dataclasses import dataclass
from unittest.mock import Mock

import pytest

from infrastructure.outbox.composite import CompositeSerializer, CompositeTranslator
from shared_kernel.outbox.observability import OutboxRelayProbe
from shared_kernel.outbox.value_objects import OutboundMessage


class StubTranslator:
    def __init__(self, event_types: frozenset[str], stream: str = "orders"):
        self._event_types = event_types
        self._stream = stream

    def supported_event_types(self) -> frozenset[str]:
        return self._event_types

    def translate(self, event_type: str, payload: dict) -> list[OutboundMessage]:
        return [OutboundMessage(stream=self._stream, key="k", body={"type": event_type})]


@dataclass(frozen=True)
class ParcelShipped:
    parcel_id: str


class ParcelSerializer:
    def supported_event_types(self) -> frozenset[str]:
        return frozenset({"ParcelShipped"})

    def serialize(self, event) -> dict:
        return {"parcel_id": event.parcel_id}


class TestCompositeTranslator:
    """Tests for routing translation by event type."""

    def test_delegates_to_registered_translator(self):
        composite = CompositeTranslator()
        composite.register(StubTranslator(frozenset({"OrderPlaced"}), stream="orders"))
        composite.register(StubTranslator(frozenset({"ParcelShipped"}), stream="parcels"))

        messages = composite.translate("ParcelShipped", {})

        assert [m.stream for m in messages] == ["parcels"]

    def test_supported_event_types_is_union(self):
        composite = CompositeTranslator()
        composite.register(StubTranslator(frozenset({"A", "B"})))
        composite.register(StubTranslator(frozenset({"C"})))

        assert composite.supported_event_types() == frozenset({"A", "B", "C"})

    def test_unknown_event_type_raises(self):
        composite = CompositeTranslator()
        composite.register(StubTranslator(frozenset({"OrderPlaced"})))

        with pytest.raises(ValueError, match="No translator registered"):
            composite.translate("Unknown", {})

    def test_duplicate_event_type_is_rejected(self):
        composite = CompositeTranslator()
        composite.register(StubTranslator(frozenset({"OrderPlaced"})))

        with pytest.raises(ValueError, match="already have a registered translator"):
            composite.register(StubTranslator(frozenset({"OrderPlaced", "Other"})))

        assert composite.supported_event_types() == frozenset({"OrderPlaced"})


class TestCompositeTranslatorObservability:
    """Tests for CompositeTranslator probe integration."""

    def test_register_calls_probe_with_context_name(self):
        probe = Mock(spec=OutboxRelayProbe)
        composite = CompositeTranslator(probe=probe)

        composite.register(
            StubTranslator(frozenset({"OrderPlaced", "OrderCancelled"})),
            context_name="orders",
        )

        probe.translator_registered.assert_called_once_with(
            "orders", frozenset({"OrderPlaced", "OrderCancelled"})
        )

    def test_register_without_context_name_uses_class_name(self):
        probe = Mock(spec=OutboxRelayProbe)
        composite = CompositeTranslator(probe=probe)

        composite.register(StubTranslator(frozenset({"OrderPlaced"})))

        probe.translator_registered.assert_called_once_with(
            "StubTranslator", frozenset({"OrderPlaced"})
        )

    def test_register_without_probe_does_not_raise(self):
        composite = CompositeTranslator()

        composite.register(StubTranslator(frozenset({"OrderPlaced"})))

        assert "OrderPlaced" in composite.supported_event_types()


class TestCompositeSerializer:
    """Tests for routing serialization by event class name."""

    def test_serializes_by_class_name(self):
        composite = CompositeSerializer()
        composite.register(ParcelSerializer())

        assert composite.serialize(ParcelShipped(parcel_id="p-1")) == {
            "parcel_id": "p-1"
        }

    def test_unregistered_event_raises(self):
        composite = CompositeSerializer()

        with pytest.raises(ValueError, match="No serializer registered"):
            composite.serialize(ParcelShipped(parcel_id="p-1"))

    def test_duplicate_registration_is_rejected(self):
        composite = CompositeSerializer()
        composite.register(ParcelSerializer())

        with pytest.raises(ValueError):
            composite.register(ParcelSerializer())
