"""
Resolution Audit Logger

DESIGN DECISION: Every fetch outcome and every resolved or unresolved
value of a run is recorded. This provides:
1. Structured local logs for debugging imports
2. An in-memory trail callers can inspect after a run
3. Correlation IDs to group the events of one run

The logger never raises: a failure to log must not abort resolution.
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from recordlink.config import get_settings
from recordlink.models.audit import (
    EventSeverity,
    ResolutionEvent,
    ResolutionEventBuilder,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOGGER_NAME = "recordlink"


def configure_logging(level: str) -> logging.Logger:
    """
    Apply a log level to the package logger.

    A stdout handler is attached only when no handler exists up the
    logger tree.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not logger.hasHandlers():
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger


class ResolutionAuditLogger:
    """
    Central logging service for resolution runs.

    Logs events both to:
    1. Structured local log (structlog)
    2. An in-memory list (`events`) of the latest `max_events` events
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        keep_events: bool = True,
        max_events: Optional[int] = None,
    ):
        """
        Initialize the logger.

        Args:
            correlation_id: Groups the events of one run. Generated if omitted.
            keep_events: Whether to keep events in memory.
            max_events: Keep at most this many of the latest events.
                       Defaults to the `max_audit_events` setting.
        """
        settings = get_settings().resolver
        configure_logging(settings.log_level)
        self.correlation_id = correlation_id or create_correlation_id()
        self._keep_events = keep_events
        self._max_events = settings.max_audit_events if max_events is None else max_events
        self._events: list[ResolutionEvent] = []
        self._logger = structlog.get_logger(LOGGER_NAME)

    @property
    def events(self) -> list[ResolutionEvent]:
        return list(self._events)

    def log(self, event: ResolutionEvent) -> bool:
        """
        Log a resolution event.

        Returns False if writing the log line failed.
        """
        if event.correlation_id is None:
            event.correlation_id = self.correlation_id

        if self._keep_events:
            self._events.append(event)
            if self._max_events is not None and len(self._events) > self._max_events:
                del self._events[: len(self._events) - self._max_events]

        try:
            log_dict = event.to_log_dict()
            if event.severity == EventSeverity.ERROR:
                self._logger.error("resolution_event", **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning("resolution_event", **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug("resolution_event", **log_dict)
            else:
                self._logger.info("resolution_event", **log_dict)
        except Exception:
            return False

        return True

    def log_options_fetched(
        self,
        field_key: str,
        related_dataset: str,
        option_count: int,
    ) -> None:
        """Log a successful option fetch."""
        self.log(ResolutionEventBuilder.options_fetched(
            field_key=field_key,
            related_dataset=related_dataset,
            option_count=option_count,
        ))

    def log_options_fetch_failed(
        self,
        field_key: str,
        related_dataset: str,
        error_message: str,
    ) -> None:
        """Log a failed option fetch."""
        self.log(ResolutionEventBuilder.options_fetch_failed(
            field_key=field_key,
            related_dataset=related_dataset,
            error_message=error_message,
        ))

    def log_options_fetch_timed_out(
        self,
        field_key: str,
        related_dataset: str,
        timeout: float,
    ) -> None:
        """Log an option fetch that exceeded its timeout."""
        self.log(ResolutionEventBuilder.options_fetch_timed_out(
            field_key=field_key,
            related_dataset=related_dataset,
            timeout=timeout,
        ))

    def log_value_resolved(
        self,
        field_key: str,
        raw_value: Any,
        option_id: str,
        option_label: str,
        strategy: str,
    ) -> None:
        """Log a value rewritten to an option id."""
        self.log(ResolutionEventBuilder.value_resolved(
            field_key=field_key,
            raw_value=raw_value,
            option_id=option_id,
            option_label=option_label,
            strategy=strategy,
        ))

    def log_value_unresolved(
        self,
        field_key: str,
        raw_value: Any,
        related_dataset: Optional[str] = None,
        record_index: Optional[int] = None,
    ) -> None:
        """Log a value no strategy could resolve."""
        self.log(ResolutionEventBuilder.value_unresolved(
            field_key=field_key,
            raw_value=raw_value,
            related_dataset=related_dataset,
            record_index=record_index,
        ))

    def log_resolution_completed(
        self,
        record_count: int,
        resolved_count: int,
        unresolved_count: int,
        failed_fields: list[str],
    ) -> None:
        """Log the summary of a batch run."""
        self.log(ResolutionEventBuilder.resolution_completed(
            record_count=record_count,
            resolved_count=resolved_count,
            unresolved_count=unresolved_count,
            failed_fields=failed_fields,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per resolution run (e.g. one CSV import).
    """
    return uuid4()
