"""
Audit Models for Expense Tracker

Every significant action in the system produces an audit event.
This provides:
1. Traceability of logins, edits and restores
2. Debugging information when things go wrong

DESIGN DECISION: Events never carry secrets. Passwords and PINs are not
part of any event's details.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    SESSION_RESTORED = "session_restored"
    LOGGED_OUT = "logged_out"

    # Ledger
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_RESTORED = "expense_restored"
    DATA_LOADED = "data_loaded"
    DATA_CLEARED = "data_cleared"

    # Backup
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_RESTORED = "backup_restored"
    BACKUP_REJECTED = "backup_rejected"

    # Settings and lock
    SETTINGS_CHANGED = "settings_changed"
    PIN_SET = "pin_set"
    PIN_REMOVED = "pin_removed"
    UNLOCK_FAILED = "unlock_failed"

    # System
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which account the event belongs to, if any
    username: Optional[str] = None

    # What entity is this about?
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity (e.g. an expense id)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }
