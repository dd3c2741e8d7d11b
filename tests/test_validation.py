"""
Tests for call-site validation
"""

from decimal import Decimal

import pytest

from pocketplan.models.ledger import (
    BudgetDraft,
    InsurancePolicyDraft,
    InsuranceType,
    MortgageDetails,
    RepaymentType,
    SavingsGoalDraft,
    TransactionDraft,
    TransactionType,
)
from pocketplan.validation import LedgerValidator


def draft_transaction(**overrides) -> TransactionDraft:
    fields = dict(
        type=TransactionType.EXPENSE,
        amount=Decimal("25"),
        category="Food",
        date="2025-03-14",
    )
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestTransactionValidation:
    """Tests for validate_transaction."""

    @pytest.mark.asyncio
    async def test_valid_transaction(self, store):
        """Test that an ordinary transaction has no issues."""
        result = LedgerValidator(store).validate_transaction(draft_transaction())
        assert result.is_valid
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_zero_amount_warns(self, store):
        """Test that a zero amount is allowed with a warning."""
        result = LedgerValidator(store).validate_transaction(draft_transaction(amount=Decimal("0")))
        assert result.is_valid
        assert result.warning_count == 1

    @pytest.mark.asyncio
    async def test_blank_category_is_error(self, store):
        """Test that a blank category blocks the mutation."""
        result = LedgerValidator(store).validate_transaction(draft_transaction(category="  "))
        assert not result.is_valid
        assert result.issues[0].field == "category"

    @pytest.mark.asyncio
    async def test_far_future_date_warns(self, store):
        """Test dates beyond the future tolerance."""
        validator = LedgerValidator(store)
        assert validator.validate_transaction(draft_transaction(date="2025-03-20")).issues == []
        result = validator.validate_transaction(draft_transaction(date="2025-05-01"))
        assert result.issues[0].issue_type == "future_date"

    @pytest.mark.asyncio
    async def test_unparseable_date_is_error(self, store):
        """Test that a non-ISO date is rejected."""
        result = LedgerValidator(store).validate_transaction(draft_transaction(date="14/03/2025"))
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_format"


class TestBudgetValidation:
    """Tests for validate_budget."""

    @pytest.mark.asyncio
    async def test_duplicate_category_is_error(self, store):
        """Test that a second budget for a category is blocked."""
        validator = LedgerValidator(store)
        draft = BudgetDraft(category="Groceries", limit=Decimal("300"))
        assert validator.validate_budget(draft).is_valid

        store.add_budget(draft)
        result = validator.validate_budget(BudgetDraft(category="Groceries", limit=Decimal("100")))
        assert not result.is_valid
        assert result.issues[0].issue_type == "duplicate_budget"

    @pytest.mark.asyncio
    async def test_category_match_is_case_sensitive(self, store):
        """Test that differently-cased categories are distinct budgets."""
        store.add_budget(BudgetDraft(category="Groceries", limit=Decimal("300")))
        result = LedgerValidator(store).validate_budget(
            BudgetDraft(category="groceries", limit=Decimal("100"))
        )
        assert result.is_valid


class TestOtherValidation:
    """Tests for goal, insurance and mortgage validation."""

    @pytest.mark.asyncio
    async def test_goal_in_the_past_warns(self, store):
        """Test that a passed target date is a warning."""
        result = LedgerValidator(store).validate_goal(SavingsGoalDraft(
            name="Trip", target_amount=Decimal("500"), target_date="2024-12-01",
        ))
        assert result.is_valid
        assert result.issues[0].issue_type == "past_date"

    @pytest.mark.asyncio
    async def test_insurance_without_provider(self, store):
        """Test that a blank provider is an error."""
        result = LedgerValidator(store).validate_insurance(InsurancePolicyDraft(
            type=InsuranceType.CAR,
            provider="",
            premium=Decimal("60"),
            renewal_date="2025-08-01",
        ))
        assert result.error_count == 1

    @pytest.mark.asyncio
    async def test_mortgage_warnings(self, store):
        """Test interest-only extra repayment and over-valued loan warnings."""
        result = LedgerValidator(store).validate_mortgage(MortgageDetails(
            loan_amount=Decimal("700000"),
            interest_rate=Decimal("6"),
            loan_term_years=30,
            repayment_type=RepaymentType.INTEREST_ONLY,
            extra_repayment=Decimal("200"),
            property_value=Decimal("600000"),
            start_date="2024-01-01",
        ))
        assert result.is_valid
        assert {issue.field for issue in result.issues} == {"extra_repayment", "loan_amount"}

    @pytest.mark.asyncio
    async def test_validation_never_mutates(self, store):
        """Test that validating leaves the ledger untouched."""
        before = store.snapshot
        LedgerValidator(store).validate_budget(BudgetDraft(category="X", limit=Decimal("1")))
        assert store.snapshot is before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
