"""Unit tests for event schemas and the change publisher."""

import uuid
from unittest.mock import AsyncMock, patch

import aiobreaker
import pytest
from pydantic import ValidationError

from notehub.backend.events import publishers
from notehub.backend.events.publishers import (
    ChangePublisher,
    discard_staged_changes,
    publish_staged_changes,
    stage_change,
    staged_changes,
)
from notehub.backend.events.schemas import DocumentChange, DocumentChanged, EventEnvelope


class TestEventEnvelope:
    def test_auto_generates_fields(self):
        """EventEnvelope should auto-generate event_id and timestamp."""
        event = EventEnvelope(event_type="test", source="unit", correlation_id="abc", payload={})

        uuid.UUID(event.event_id)
        assert event.event_version == 1
        assert "T" in event.timestamp

    def test_document_changed_round_trips_through_json(self):
        change = DocumentChange(collection="notes", operation="removed", document_id="n-1")
        event = DocumentChanged(source="web", correlation_id="req-1", payload=change)

        restored = DocumentChanged(**event.model_dump(mode="json"))

        assert restored.event_type == "publications.document.changed"
        assert restored.payload == change

    def test_rejects_unknown_operation(self):
        with pytest.raises(ValidationError):
            DocumentChange(collection="notes", operation="upserted", document_id="n-1")


class TestStaging:
    def test_stage_and_discard(self, mock_db_session):
        stage_change(mock_db_session, "notes", "added", "n-1", {"title": "Sorting"})
        stage_change(mock_db_session, "notes", "removed", "n-1")

        assert [c.operation for c in staged_changes(mock_db_session)] == ["added", "removed"]

        discard_staged_changes(mock_db_session)

        assert staged_changes(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_publish_nothing_staged(self, mock_db_session):
        assert await publish_staged_changes(mock_db_session) == 0

    @pytest.mark.asyncio
    async def test_publish_delivers_locally_when_relay_disabled(self, mock_db_session, publication_hub):
        subscription = publication_hub.subscribe("notes")
        stage_change(mock_db_session, "notes", "added", "n-1", {"title": "Sorting"})
        stage_change(mock_db_session, "courses", "added", "c-1", {"name": "Algorithms"})

        published = await publish_staged_changes(mock_db_session)

        assert published == 2
        assert staged_changes(mock_db_session) == []
        change = await subscription.get()
        assert change.document_id == "n-1"
        assert subscription.pending() == 0


class TestChangePublisherRedis:
    """Publishing through the Redis relay."""

    @pytest.fixture(autouse=True)
    def _relay_config(self, mock_app_config):
        publishers._publish_breaker = None
        with patch("notehub.backend.core.config.get_app_config", return_value=mock_app_config):
            yield
        publishers._publish_breaker = None

    @pytest.mark.asyncio
    async def test_publishes_envelope_on_collection_channel(self, publication_hub):
        mock_broker = AsyncMock()
        change = DocumentChange(collection="notes", operation="added", document_id="n-1", fields={})

        with patch("notehub.backend.events.broker.get_event_broker", return_value=mock_broker):
            await ChangePublisher().publish(change)

        mock_broker.publish.assert_awaited_once()
        payload = mock_broker.publish.call_args[0][0]
        assert mock_broker.publish.call_args[1]["channel"] == "changes.notes"
        assert payload["event_type"] == "publications.document.changed"
        assert payload["payload"]["document_id"] == "n-1"
        # Local subscribers are fed by the relay consumer, not directly
        assert publication_hub.subscriber_count() == 0

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, publication_hub):
        mock_broker = AsyncMock()
        mock_broker.publish.side_effect = [ConnectionError("reset"), None]
        change = DocumentChange(collection="notes", operation="added", document_id="n-1")

        with patch("notehub.backend.events.broker.get_event_broker", return_value=mock_broker):
            await ChangePublisher().publish(change)

        assert mock_broker.publish.await_count == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_local_hub_when_redis_down(self, publication_hub, mock_logger):
        mock_broker = AsyncMock()
        mock_broker.publish.side_effect = ConnectionError("redis down")
        subscription = publication_hub.subscribe("notes")
        change = DocumentChange(collection="notes", operation="changed", document_id="n-1")

        with patch("notehub.backend.events.broker.get_event_broker", return_value=mock_broker), \
             patch("notehub.backend.events.publishers.logger", mock_logger):
            await ChangePublisher().publish(change)

        mock_logger.error.assert_called_once()
        assert (await subscription.get()).document_id == "n-1"

    def test_publish_breaker_built_once_from_config(self, mock_app_config):
        breaker = publishers._get_publish_breaker()

        assert isinstance(breaker, aiobreaker.CircuitBreaker)
        assert breaker.fail_max == mock_app_config.events.circuit_breaker.fail_max
        assert publishers._get_publish_breaker() is breaker
