"""
Event Schemas.

Change deltas pushed to live subscribers and the envelope they travel in
when relayed between processes through Redis.

Naming convention for event_type: domain.entity.action (dot notation)
Channel naming convention: {channel_prefix}.{collection}

Usage:
    from notehub.backend.events.schemas import DocumentChange, DocumentChanged

    change = DocumentChange(
        collection="notes",
        operation="added",
        document_id=note.id,
        fields={"title": note.title},
    )
    event = DocumentChanged(source="web", correlation_id=request_id, payload=change)
"""

from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from notehub.backend.core.utils import utc_now

ChangeOperation = Literal["added", "changed", "removed"]

# Collection names as they appear in deltas and channel names
PROFILES = "profiles"
COURSES = "courses"
NOTES = "notes"
RATINGS = "ratings"
RATING_SUMMARIES = "rating_summaries"
PROJECTS = "projects"
ROLE_ASSIGNMENTS = "role_assignments"


class DocumentChange(BaseModel):
    """One insert, update or delete of a document in a collection.

    Fields:
        collection: Collection the document belongs to
        operation: added, changed or removed
        document_id: Identifier of the document
        fields: Full document for added, changed fields for changed, None for removed
    """

    collection: str
    operation: ChangeOperation
    document_id: str
    fields: dict[str, Any] | None = None


class EventEnvelope(BaseModel):
    """Base event envelope. Every event relayed through Redis inherits from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Process or module that published the event
        correlation_id: Request ID of the mutation that caused the event
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    correlation_id: str
    payload: dict


class DocumentChanged(EventEnvelope):
    """Published after commit for every change delta of a mutation."""

    event_type: str = "publications.document.changed"
    payload: DocumentChange
