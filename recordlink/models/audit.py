"""
Resolution Event Models

Every notable step of a resolution run produces an event:
1. Per-field option fetches (success, failure, timeout)
2. Per-value outcomes (resolved with a strategy, or left unresolved)
3. A summary when the batch completes

DESIGN DECISION: Events are plain data. The logger decides where they go
(structured log lines, in-memory collection); builders keep the wording
of descriptions consistent across the codebase.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResolutionEventType(str, Enum):
    """Types of events emitted while resolving relation references."""
    # Option index
    OPTIONS_FETCHED = "options_fetched"
    OPTIONS_FETCH_FAILED = "options_fetch_failed"
    OPTIONS_FETCH_TIMED_OUT = "options_fetch_timed_out"

    # Per value
    VALUE_RESOLVED = "value_resolved"
    VALUE_UNRESOLVED = "value_unresolved"

    # Batch
    RESOLUTION_COMPLETED = "resolution_completed"


class EventSeverity(str, Enum):
    """Severity level for resolution events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ResolutionEvent(BaseModel):
    """A single resolution event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: ResolutionEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )

    # What the event is about
    field_key: Optional[str] = Field(
        default=None,
        description="Relation field the event relates to"
    )
    related_dataset: Optional[str] = Field(
        default=None,
        description="Dataset the relation points into"
    )

    description: str = Field(
        ...,
        description="Human-readable description"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = Field(
        default=None,
        description="Error message for failure events"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Groups the events of one resolution run"
    )

    def to_log_dict(self) -> dict:
        """Convert to a flat dictionary for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "field_key": self.field_key,
            "related_dataset": self.related_dataset,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
        }


class ResolutionEventBuilder:
    """Helper to build common resolution events."""

    @staticmethod
    def options_fetched(
        field_key: str,
        related_dataset: str,
        option_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        return ResolutionEvent(
            event_type=ResolutionEventType.OPTIONS_FETCHED,
            severity=EventSeverity.DEBUG,
            field_key=field_key,
            related_dataset=related_dataset,
            description=f"Loaded {option_count} options from {related_dataset}",
            details={"option_count": option_count},
            correlation_id=correlation_id,
        )

    @staticmethod
    def options_fetch_failed(
        field_key: str,
        related_dataset: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        return ResolutionEvent(
            event_type=ResolutionEventType.OPTIONS_FETCH_FAILED,
            severity=EventSeverity.ERROR,
            field_key=field_key,
            related_dataset=related_dataset,
            description=f"Error fetching relation data for {related_dataset}",
            error_message=error_message,
            correlation_id=correlation_id,
        )

    @staticmethod
    def options_fetch_timed_out(
        field_key: str,
        related_dataset: str,
        timeout: float,
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        return ResolutionEvent(
            event_type=ResolutionEventType.OPTIONS_FETCH_TIMED_OUT,
            severity=EventSeverity.WARNING,
            field_key=field_key,
            related_dataset=related_dataset,
            description=f"Fetching {related_dataset} took longer than {timeout}s",
            details={"timeout_seconds": timeout},
            error_message="timed out",
            correlation_id=correlation_id,
        )

    @staticmethod
    def value_resolved(
        field_key: str,
        raw_value: Any,
        option_id: str,
        option_label: str,
        strategy: str,
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        return ResolutionEvent(
            event_type=ResolutionEventType.VALUE_RESOLVED,
            severity=EventSeverity.DEBUG,
            field_key=field_key,
            description=f'Found {strategy} match for "{raw_value}" with "{option_label}"',
            details={
                "raw_value": str(raw_value),
                "option_id": option_id,
                "strategy": strategy,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def value_unresolved(
        field_key: str,
        raw_value: Any,
        related_dataset: Optional[str] = None,
        record_index: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        return ResolutionEvent(
            event_type=ResolutionEventType.VALUE_UNRESOLVED,
            severity=EventSeverity.WARNING,
            field_key=field_key,
            related_dataset=related_dataset,
            description=f'No relation match found for {field_key}: "{raw_value}"',
            details={"raw_value": str(raw_value), "record_index": record_index},
            correlation_id=correlation_id,
        )

    @staticmethod
    def resolution_completed(
        record_count: int,
        resolved_count: int,
        unresolved_count: int,
        failed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> ResolutionEvent:
        severity = EventSeverity.WARNING if unresolved_count or failed_fields else EventSeverity.INFO
        return ResolutionEvent(
            event_type=ResolutionEventType.RESOLUTION_COMPLETED,
            severity=severity,
            description=(
                f"Resolved {resolved_count} relation values across {record_count} records "
                f"({unresolved_count} unresolved)"
            ),
            details={
                "record_count": record_count,
                "resolved_count": resolved_count,
                "unresolved_count": unresolved_count,
                "failed_fields": failed_fields,
            },
            correlation_id=correlation_id,
        )
