"""
Data Models Package

This package contains all Pydantic models used by the PocketPlan ledger.
Everything the store holds or emits conforms to these schemas.
"""

from pocketplan.models.ledger import (
    DEFAULT_PARTNER_NAME,
    Budget,
    BudgetDraft,
    InsurancePolicy,
    InsurancePolicyDraft,
    InsuranceType,
    LedgerModel,
    LedgerSnapshot,
    MortgageDetails,
    Numeric,
    Owner,
    PremiumFrequency,
    ProfileMode,
    RepaymentType,
    SavingsGoal,
    SavingsGoalDraft,
    SuperDetails,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from pocketplan.models.validation import ValidationIssue, ValidationResult
from pocketplan.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventSeverity,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "DEFAULT_PARTNER_NAME",
    "Budget",
    "BudgetDraft",
    "InsurancePolicy",
    "InsurancePolicyDraft",
    "InsuranceType",
    "LedgerModel",
    "LedgerSnapshot",
    "MortgageDetails",
    "Numeric",
    "Owner",
    "PremiumFrequency",
    "ProfileMode",
    "RepaymentType",
    "SavingsGoal",
    "SavingsGoalDraft",
    "SuperDetails",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    # Event models
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventSeverity",
    "LedgerEventType",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
