"""Unit tests for the change relay broker helpers and consumer middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notehub.backend.events import broker as broker_module
from notehub.backend.events.broker import channel_for, stop_change_relay
from notehub.backend.events.middleware import relay_context
from notehub.backend.events.schemas import DocumentChange, DocumentChanged


class TestChannelFor:
    def test_collection_channel(self, mock_app_config):
        with patch("notehub.backend.core.config.get_app_config", return_value=mock_app_config):
            assert channel_for("notes") == "changes.notes"
            assert channel_for("*") == "changes.*"


class TestRelayContext:
    def test_from_relayed_body(self):
        event = DocumentChanged(
            source="web",
            correlation_id="req-42",
            payload=DocumentChange(collection="ratings", operation="changed", document_id="r-1"),
        )

        context = relay_context(event.model_dump(mode="json"))

        assert context["correlation_id"] == "req-42"
        assert context["event_id"] == event.event_id
        assert context["collection"] == "ratings"
        assert context["operation"] == "changed"
        assert context["document_id"] == "r-1"
        assert context["source"] == "relay"

    def test_accepts_model(self):
        event = DocumentChanged(
            source="web",
            correlation_id="req-7",
            payload=DocumentChange(collection="notes", operation="removed", document_id="n-9"),
        )
        assert relay_context(event)["document_id"] == "n-9"

    @pytest.mark.parametrize("body", [b"not json", None, {"payload": "oops"}])
    def test_unknown_shapes_use_placeholders(self, body):
        context = relay_context(body)
        assert context["collection"] == "unknown"
        assert context["correlation_id"] == "unknown"


class TestStopChangeRelay:
    @pytest.mark.asyncio
    async def test_closes_and_forgets_broker(self):
        fake = MagicMock()
        fake.close = AsyncMock()

        with patch.object(broker_module, "_broker", fake):
            await stop_change_relay()
            assert broker_module._broker is None

        fake.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_noop_without_broker(self):
        with patch.object(broker_module, "_broker", None):
            await stop_change_relay()
            assert broker_module._broker is None
