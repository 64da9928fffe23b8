"""
Unit Test Fixtures.

Mocks for the session, the YAML configuration and module loggers. Service
tests that need real SQL use the in-memory ``db_session`` from the root
conftest instead.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notehub.backend.core.config_schema import (
    EventCircuitBreakerSchema,
    EventRetrySchema,
    EventsSchema,
    FeaturesSchema,
    PublicationsSchema,
)


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    AsyncSession stand-in with a real ``info`` dict, so staged change
    deltas can be inspected with staged_changes(session).
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.info = {}
    return session


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    Configuration with the Redis relay switched on in both directions.

        with patch("notehub.backend.core.config.get_app_config", return_value=mock_app_config):
            ...
    """
    config = MagicMock()
    config.features = FeaturesSchema(
        api_docs_enabled=False,
        events_enabled=True,
        events_publish_enabled=True,
        publications_live_enabled=True,
    )
    config.events = EventsSchema(
        channel_prefix="changes",
        circuit_breaker=EventCircuitBreakerSchema(fail_max=5, timeout_duration=30),
        retry=EventRetrySchema(max_attempts=2, backoff_multiplier=0, backoff_max=0),
        publications=PublicationsSchema(subscriber_queue_size=8),
    )
    return config


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()
