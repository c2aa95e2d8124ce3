"""
Audit Logger

Every mutation of the expense collection, every recovered storage failure,
and every export is logged as an AuditEvent.

The audit logger:
- Is synchronous, like the rest of the core
- Never raises; storage failures are reported here instead of propagating
- Keeps a bounded history of recent events for inspection
"""

import logging
from collections import deque
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


LOGGER_NAME = "expense_tracker.audit"

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


def configure_logging(level: str = "INFO") -> None:
    """Route structured logs to stderr at the given stdlib level."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("expense_tracker").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. Structured local log (structlog, JSON lines)
    2. An in-memory history of the most recent events
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: Number of recent events to keep. 0 keeps none.
        """
        self._logger = structlog.get_logger(LOGGER_NAME)
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_expense_added(self, expense_id: str, amount: float, category: str) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.expense_added(expense_id, amount, category))

    def log_expense_updated(self, expense_id: str, fields: list[str]) -> None:
        """Log an expense update."""
        self.log(AuditEventBuilder.expense_updated(expense_id, fields))

    def log_expense_deleted(self, expense_id: str, found: bool) -> None:
        """Log an expense deletion."""
        self.log(AuditEventBuilder.expense_deleted(expense_id, found))

    def log_expenses_cleared(self, storage_key: str) -> None:
        """Log removal of the whole collection."""
        self.log(AuditEventBuilder.expenses_cleared(storage_key))

    def log_storage_read_failed(self, storage_key: str, error: str) -> None:
        """Log an unreadable or malformed stored collection."""
        self.log(AuditEventBuilder.storage_read_failed(storage_key, error))

    def log_storage_write_failed(
        self,
        storage_key: str,
        error: str,
        record_count: int,
    ) -> None:
        """Log a failed write (e.g. quota exceeded)."""
        self.log(AuditEventBuilder.storage_write_failed(storage_key, error, record_count))

    def log_validation_failed(self, fields: dict[str, str]) -> None:
        """Log rejected form data."""
        self.log(AuditEventBuilder.validation_failed(fields))

    def log_export_generated(self, fmt: str, filename: str, record_count: int) -> None:
        """Log a successful export."""
        self.log(AuditEventBuilder.export_generated(fmt, filename, record_count))

    def log_export_failed(self, fmt: str, error: str) -> None:
        """Log a failed export."""
        self.log(AuditEventBuilder.export_failed(fmt, error))


_default_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Shared process-wide audit logger, created on first use."""
    global _default_logger
    if _default_logger is None:
        _default_logger = AuditLogger()
    return _default_logger
