"""
Call-Site Validation

DESIGN DECISION: The Entity Store trusts its input. Field-level rules
(positive amounts, known enum values) are enforced when the caller builds
a model. Rules that need the rest of the ledger or the clock live here:

- One budget per category (the ledger's only cross-entity invariant)
- Dates that are probably typos (far future transactions, past renewals)
- Combinations that silently do nothing (extra repayment on interest-only)

Screens run the matching validate_* method, show the issues, and only call
the store when there are no errors. Validation NEVER raises and NEVER
modifies what it is given.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

from pocketplan.config import get_settings
from pocketplan.models.ledger import (
    BudgetDraft,
    InsurancePolicyDraft,
    MortgageDetails,
    RepaymentType,
    SavingsGoalDraft,
    TransactionDraft,
)
from pocketplan.models.validation import ValidationIssue, ValidationResult
from pocketplan.queries import has_budget_for
from pocketplan.utils.clock import Clock, SystemClock
from pocketplan.utils.dates import parse_iso


class LedgerValidator:
    """
    Validates proposed mutations against current ledger state.

    Usage:
        result = validator.validate_budget(draft)
        if result.is_valid:
            store.add_budget(draft)
    """

    def __init__(
        self,
        store,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            store: The EntityStore whose snapshot is checked against
            clock: Defaults to the store's clock
        """
        self._store = store
        self._clock = clock or getattr(store, "clock", None) or SystemClock()
        self._settings = get_settings().app

    def _parse_date(
        self,
        field: str,
        value: str,
        issues: list[ValidationIssue],
    ):
        try:
            return parse_iso(value)
        except ValueError:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"'{value}' is not an ISO-8601 date",
                severity="error",
                suggested_fix="Use a date like 2025-03-01",
            ))
            return None

    def validate_transaction(self, draft: TransactionDraft) -> ValidationResult:
        issues: list[ValidationIssue] = []
        now = self._clock.now()

        if draft.amount == Decimal("0"):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="Amount is zero",
                severity="warning",
                suggested_fix="Please verify the amount",
            ))

        if not draft.category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        when = self._parse_date("date", draft.date, issues)
        max_future = now + timedelta(days=self._settings.future_date_tolerance_days)
        if when is not None and when > max_future:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Transaction date ({draft.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return ValidationResult(entity_type="transaction", issues=issues)

    def validate_budget(self, draft: BudgetDraft) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if not draft.category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))
        elif has_budget_for(self._store.snapshot, draft.category):
            issues.append(ValidationIssue(
                field="category",
                issue_type="duplicate_budget",
                message=f"A budget for '{draft.category}' already exists",
                severity="error",
                suggested_fix="Delete the existing budget first",
            ))

        return ValidationResult(entity_type="budget", issues=issues)

    def validate_goal(self, draft: SavingsGoalDraft) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if not draft.name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Goal name is required",
                severity="error",
            ))

        target = self._parse_date("target_date", draft.target_date, issues)
        if target is not None and target < self._clock.now():
            issues.append(ValidationIssue(
                field="target_date",
                issue_type="past_date",
                message="Target date has already passed",
                severity="warning",
                suggested_fix="Pick a date in the future",
            ))

        return ValidationResult(entity_type="goal", issues=issues)

    def validate_insurance(self, draft: InsurancePolicyDraft) -> ValidationResult:
        issues: list[ValidationIssue] = []

        if not draft.provider.strip():
            issues.append(ValidationIssue(
                field="provider",
                issue_type="missing",
                message="Provider is required",
                severity="error",
            ))

        renewal = self._parse_date("renewal_date", draft.renewal_date, issues)
        if renewal is not None and renewal < self._clock.now():
            issues.append(ValidationIssue(
                field="renewal_date",
                issue_type="past_date",
                message="Renewal date has already passed",
                severity="warning",
                suggested_fix="Enter the next renewal date",
            ))

        return ValidationResult(entity_type="insurance", issues=issues)

    def validate_mortgage(self, details: MortgageDetails) -> ValidationResult:
        issues: list[ValidationIssue] = []

        self._parse_date("start_date", details.start_date, issues)

        if (
            details.repayment_type == RepaymentType.INTEREST_ONLY
            and details.extra_repayment > 0
        ):
            issues.append(ValidationIssue(
                field="extra_repayment",
                issue_type="inconsistent",
                message="Extra repayments are not modelled for interest-only loans",
                severity="warning",
            ))

        if details.property_value > 0 and details.loan_amount > details.property_value:
            issues.append(ValidationIssue(
                field="loan_amount",
                issue_type="suspicious_value",
                message="Loan is larger than the property value",
                severity="warning",
                suggested_fix="Please verify both amounts",
            ))

        return ValidationResult(entity_type="mortgage", issues=issues)
