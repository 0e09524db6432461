"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of account and data changes
2. Debugging capability

The audit logger:
- Logs structured events locally through structlog
- Never receives passwords or PINs
"""

import logging
from typing import Optional

import structlog

from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
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


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at ``level``."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Every helper builds an AuditEvent and hands it to ``log``.
    """

    def __init__(self):
        self._logger = structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> AuditEvent:
        """Log an audit event locally and return it."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return event

    def _event(
        self,
        event_type: AuditEventType,
        description: str,
        username: Optional[str] = None,
        severity: AuditSeverity = AuditSeverity.INFO,
        **details,
    ) -> AuditEvent:
        return self.log(AuditEvent(
            event_type=event_type,
            severity=severity,
            username=username,
            entity_id=details.pop("entity_id", None),
            error_message=details.pop("error_message", None),
            description=description,
            details=details,
        ))

    # Accounts

    def log_user_registered(self, username: str) -> None:
        self._event(AuditEventType.USER_REGISTERED, "Account created", username)

    def log_registration_rejected(self, username: str, reason: str) -> None:
        self._event(
            AuditEventType.REGISTRATION_REJECTED,
            f"Registration rejected: {reason}",
            username,
            AuditSeverity.WARNING,
            reason=reason,
        )

    def log_login(self, username: str, success: bool) -> None:
        """Log a login attempt without saying why it failed."""
        if success:
            self._event(AuditEventType.LOGIN_SUCCEEDED, "Login succeeded", username)
        else:
            self._event(
                AuditEventType.LOGIN_FAILED,
                "Login failed",
                username,
                AuditSeverity.WARNING,
            )

    def log_session_restored(self, username: str) -> None:
        self._event(AuditEventType.SESSION_RESTORED, "Previous session restored", username)

    def log_logged_out(self, username: str, removed_keys: int) -> None:
        self._event(
            AuditEventType.LOGGED_OUT,
            "Logged out and removed user data",
            username,
            removed_keys=removed_keys,
        )

    # Ledger

    def log_data_loaded(self, username: str, expense_count: int) -> None:
        self._event(
            AuditEventType.DATA_LOADED,
            "Expenses and settings loaded",
            username,
            expense_count=expense_count,
        )

    def log_expense_added(self, username: str, expense_id: str, category: str) -> None:
        self._event(
            AuditEventType.EXPENSE_ADDED,
            "Expense added",
            username,
            entity_id=expense_id,
            category=category,
        )

    def log_expense_deleted(self, username: str, expense_id: str, index: int) -> None:
        self._event(
            AuditEventType.EXPENSE_DELETED,
            "Expense deleted",
            username,
            entity_id=expense_id,
            index=index,
        )

    def log_expense_restored(self, username: str, expense_id: str, index: int) -> None:
        self._event(
            AuditEventType.EXPENSE_RESTORED,
            "Deleted expense put back",
            username,
            entity_id=expense_id,
            index=index,
        )

    def log_data_cleared(self, username: str) -> None:
        self._event(
            AuditEventType.DATA_CLEARED,
            "All expenses and settings cleared",
            username,
            AuditSeverity.WARNING,
        )

    # Backup

    def log_backup_exported(self, username: str, expense_count: int) -> None:
        self._event(
            AuditEventType.BACKUP_EXPORTED,
            "Backup exported",
            username,
            expense_count=expense_count,
        )

    def log_backup_restored(self, username: str, expense_count: int) -> None:
        self._event(
            AuditEventType.BACKUP_RESTORED,
            "Ledger replaced from backup",
            username,
            expense_count=expense_count,
        )

    def log_backup_rejected(self, username: str, error_message: str) -> None:
        self._event(
            AuditEventType.BACKUP_REJECTED,
            "Backup rejected: invalid format",
            username,
            AuditSeverity.WARNING,
            error_message=error_message,
        )

    # Settings and lock

    def log_settings_changed(self, username: str, field: str) -> None:
        self._event(
            AuditEventType.SETTINGS_CHANGED,
            f"Setting changed: {field}",
            username,
            field=field,
        )

    def log_pin_set(self, username: str) -> None:
        self._event(AuditEventType.PIN_SET, "PIN lock enabled", username)

    def log_pin_removed(self, username: str) -> None:
        self._event(AuditEventType.PIN_REMOVED, "PIN lock disabled", username)

    def log_unlock_failed(self, username: str) -> None:
        self._event(
            AuditEventType.UNLOCK_FAILED,
            "Incorrect PIN entered",
            username,
            AuditSeverity.WARNING,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        username: Optional[str] = None,
    ) -> None:
        """Log an error."""
        self._event(
            AuditEventType.SYSTEM_ERROR,
            f"Error: {error_type}",
            username,
            AuditSeverity.ERROR,
            error_type=error_type,
            error_message=error_message,
        )
