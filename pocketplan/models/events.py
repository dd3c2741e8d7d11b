"""
Change Event Models for PocketPlan

Every mutation of the ledger produces a LedgerEvent. Events are how
consumers learn that state changed (they re-render from the store's new
snapshot) and what the change logger writes to the structured log.

DESIGN DECISION: Events describe what happened; they never carry the whole
snapshot. Subscribers read current state from the store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of changes the store reports."""
    # Lifecycle
    LEDGER_LOADED = "ledger_loaded"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_CLEARED = "transactions_cleared"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_DELETED = "budget_deleted"

    # Goals
    GOAL_ADDED = "goal_added"
    GOAL_AMOUNT_UPDATED = "goal_amount_updated"
    GOAL_DELETED = "goal_deleted"

    # Singletons
    MORTGAGE_SET = "mortgage_set"
    MORTGAGE_CLEARED = "mortgage_cleared"
    SUPER_SET = "super_set"
    SUPER_CLEARED = "super_cleared"

    # Insurance
    INSURANCE_ADDED = "insurance_added"
    INSURANCE_DELETED = "insurance_deleted"

    # Profile
    PROFILE_MODE_SET = "profile_mode_set"
    PARTNER_NAME_SET = "partner_name_set"


class LedgerEventSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single change to the ledger."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the change was applied in memory"
    )

    event_type: LedgerEventType
    severity: LedgerEventSeverity = LedgerEventSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="e.g. 'transaction', 'goal', 'mortgage'"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.added("transaction", tx.id, LedgerEventType.TRANSACTION_ADDED)
        event = LedgerEventBuilder.goal_amount_updated(goal_id, delta, new_amount)
    """

    @staticmethod
    def loaded(counts: dict[str, int], failed_keys: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            severity=LedgerEventSeverity.WARNING if failed_keys else LedgerEventSeverity.INFO,
            entity_type="ledger",
            description="Ledger loaded from storage",
            details={
                "counts": counts,
                "failed_keys": failed_keys,
            },
        )

    @staticmethod
    def added(
        entity_type: str,
        entity_id: str,
        event_type: LedgerEventType,
        details: Optional[dict] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added",
            details=details or {},
        )

    @staticmethod
    def deleted(
        entity_type: str,
        entity_id: str,
        event_type: LedgerEventType,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def transactions_cleared(removed: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTIONS_CLEARED,
            entity_type="transaction",
            description=f"Cleared {removed} transactions",
            details={"removed": removed},
        )

    @staticmethod
    def goal_amount_updated(
        goal_id: str,
        delta: str,
        new_amount: str,
        clamped: bool,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.GOAL_AMOUNT_UPDATED,
            entity_type="goal",
            entity_id=goal_id,
            description="Goal amount updated",
            details={
                "delta": delta,
                "current_amount": new_amount,
                "clamped_at_zero": clamped,
            },
        )

    @staticmethod
    def singleton_changed(entity_type: str, event_type: LedgerEventType) -> LedgerEvent:
        verb = "cleared" if event_type.value.endswith("_cleared") else "set"
        return LedgerEvent(
            event_type=event_type,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} {verb}",
        )

    @staticmethod
    def profile_changed(event_type: LedgerEventType, value: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=event_type,
            entity_type="profile",
            description=f"Profile setting changed: {event_type.value}",
            details={"value": value},
        )
