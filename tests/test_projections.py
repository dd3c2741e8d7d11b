"""
Tests for mortgage, retirement and wealth projections

Projections use float arithmetic, so values are compared with
pytest.approx.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from pocketplan.models.ledger import (
    LedgerSnapshot,
    MortgageDetails,
    RepaymentType,
    SavingsGoal,
    SuperDetails,
    TransactionDraft,
    TransactionType,
)
from pocketplan.projections import (
    SUPER_GROWTH_RATE,
    YEARS_TO_RETIREMENT,
    ProjectionEngine,
    base_monthly_payment,
    calculate_mortgage_repayment,
    calculate_super_projection,
    equity,
    extra_repayment_scenario,
    loan_to_value,
    next_milestone,
    project_wealth,
    salary_sacrifice_gain,
)
from tests.conftest import NOW


def make_mortgage(**overrides) -> MortgageDetails:
    fields = dict(
        loan_amount=Decimal("500000"),
        interest_rate=Decimal("6"),
        loan_term_years=30,
        property_value=Decimal("600000"),
        start_date="2020-01-15",
    )
    fields.update(overrides)
    return MortgageDetails(**fields)


def make_super(**overrides) -> SuperDetails:
    fields = dict(
        balance=Decimal("1000"),
        employer_rate=Decimal("0"),
        salary=Decimal("0"),
        last_updated="2025-03-01",
    )
    fields.update(overrides)
    return SuperDetails(**fields)


class TestMortgageRepayment:
    """Tests for calculate_mortgage_repayment."""

    def test_amortizing_payment(self):
        """Test the standard annuity payment for 500k at 6% over 30 years."""
        result = calculate_mortgage_repayment(make_mortgage(), NOW)
        assert result.monthly == pytest.approx(2997.75, abs=0.01)
        assert result.total_payment == pytest.approx(result.monthly * 360)
        assert result.total_interest == pytest.approx(result.monthly * 360 - 500000)

    def test_zero_rate_is_straight_line(self):
        """Test that a 0% loan repays principal evenly."""
        result = calculate_mortgage_repayment(
            make_mortgage(loan_amount=Decimal("360000"), interest_rate=Decimal("0")), NOW
        )
        assert result.monthly == 1000.0
        assert result.total_interest == 0.0

    def test_interest_only(self):
        """Test that interest-only repays P*r each month."""
        mortgage = make_mortgage(repayment_type=RepaymentType.INTEREST_ONLY)
        assert base_monthly_payment(mortgage) == pytest.approx(2500.0)

    def test_extra_repayment_added_without_shortening_term(self):
        """Test that totals still span the full original term."""
        plain = calculate_mortgage_repayment(make_mortgage(), NOW)
        extra = calculate_mortgage_repayment(make_mortgage(extra_repayment=Decimal("200")), NOW)
        assert extra.monthly == pytest.approx(plain.monthly + 200)
        assert extra.total_payment == pytest.approx(extra.monthly * 360)

    def test_years_remaining(self):
        """Test elapsed whole months and years remaining."""
        result = calculate_mortgage_repayment(make_mortgage(), NOW)
        assert result.months_elapsed == 62
        assert result.years_remaining == pytest.approx(298 / 12)

    def test_years_remaining_floor(self):
        """Test that a loan past its term has zero years remaining."""
        result = calculate_mortgage_repayment(
            make_mortgage(loan_term_years=1), datetime(2030, 1, 1)
        )
        assert result.years_remaining == 0.0

    def test_unreadable_start_date_counts_as_new_loan(self):
        """Test that a blank or malformed start date does not break the projection."""
        for start in ("", "sometime in 2020"):
            result = calculate_mortgage_repayment(make_mortgage(start_date=start), NOW)
            assert result.months_elapsed == 0
            assert result.years_remaining == pytest.approx(30.0)
            assert result.monthly == pytest.approx(2997.75, abs=0.01)

    def test_no_mortgage_is_all_zeros(self):
        """Test the result when no mortgage exists."""
        result = calculate_mortgage_repayment(None, NOW)
        assert result.monthly == 0
        assert result.total_payment == 0
        assert result.total_interest == 0
        assert result.years_remaining == 0

    def test_lvr_and_equity(self):
        """Test loan-to-value and equity."""
        mortgage = make_mortgage()
        assert loan_to_value(mortgage) == pytest.approx(83.333, abs=0.001)
        assert equity(mortgage) == Decimal("100000")
        assert loan_to_value(make_mortgage(property_value=Decimal("0"))) == 0.0


class TestExtraRepaymentScenario:
    """Tests for the extra-repayment payoff simulation."""

    def test_extra_repayment_saves_interest_and_time(self):
        """Test that paying more pays off sooner with less interest."""
        scenario = extra_repayment_scenario(make_mortgage(), 500)
        assert scenario.years_saved > 0
        assert scenario.saved_life > 0
        assert scenario.saved_10yr <= scenario.saved_life

    def test_larger_extra_saves_more(self):
        """Test monotonic savings."""
        small = extra_repayment_scenario(make_mortgage(), 100)
        large = extra_repayment_scenario(make_mortgage(), 1000)
        assert large.saved_life > small.saved_life
        assert large.years_saved > small.years_saved

    def test_interest_only_uses_flat_heuristic(self):
        """Test the heuristic used when payoff cannot be simulated."""
        scenario = extra_repayment_scenario(
            make_mortgage(repayment_type=RepaymentType.INTEREST_ONLY), 100
        )
        assert scenario.saved_per_year == pytest.approx(60.0)
        assert scenario.saved_10yr == pytest.approx(600.0)
        assert scenario.saved_life == 0.0
        assert scenario.years_saved == 0.0


class TestRetirementProjection:
    """Tests for calculate_super_projection."""

    def test_no_super_is_all_zeros(self):
        """Test the result without super details."""
        result = calculate_super_projection(None)
        assert result.at_retirement == 0
        assert result.monthly_in_retirement == 0

    def test_empty_balance_and_salary(self):
        """Test that nothing compounds to nothing."""
        result = calculate_super_projection(make_super(balance=Decimal("0")))
        assert result.at_retirement == 0
        assert result.monthly_in_retirement == 0

    def test_balance_compounds_yearly(self):
        """Test pure compounding of an existing balance."""
        result = calculate_super_projection(make_super())
        expected = 1000 * (1 + SUPER_GROWTH_RATE) ** YEARS_TO_RETIREMENT
        assert result.at_retirement == pytest.approx(expected)
        assert result.monthly_in_retirement == pytest.approx(expected * 0.04 / 12)

    def test_contribution_added_before_growth(self):
        """Test that each year's contribution grows in the same year."""
        details = make_super(
            balance=Decimal("0"), salary=Decimal("100000"), employer_rate=Decimal("10"),
        )
        result = calculate_super_projection(details)
        rate = 1 + SUPER_GROWTH_RATE
        expected = 10000 * rate * (rate ** YEARS_TO_RETIREMENT - 1) / SUPER_GROWTH_RATE
        assert result.annual_contribution == pytest.approx(10000)
        assert result.at_retirement == pytest.approx(expected)

    def test_salary_sacrifice_gain(self):
        """Test that extra contributions raise the projected balance."""
        gain = salary_sacrifice_gain(make_super(), 100)
        assert gain.balance_gain > 0
        assert gain.monthly_income_gain == pytest.approx(gain.balance_gain * 0.04 / 12)

    def test_next_milestone(self):
        """Test the milestone ladder."""
        milestone = next_milestone(85000)
        assert milestone.label == "$100K"
        assert milestone.progress == pytest.approx(85.0)
        assert next_milestone(100000).amount == 250000
        assert next_milestone(2_500_000) is None


class TestWealthProjection:
    """Tests for project_wealth."""

    def test_one_point_per_year(self):
        """Test that year 0 through the horizon is covered."""
        points = project_wealth(LedgerSnapshot(), 0, 0, 10)
        assert [p.year for p in points] == list(range(11))
        assert all(p.wealth == 0 for p in points)

    def test_savings_growth(self):
        """Test yearly savings accumulation and growth."""
        points = project_wealth(LedgerSnapshot(), 1000, 0, 2)
        assert points[0].savings == 0
        assert points[1].savings == pytest.approx(12480)
        assert points[2].savings == pytest.approx(25459.2)

    def test_negative_savings_ignored(self):
        """Test that a month in deficit does not draw down savings."""
        snapshot = LedgerSnapshot(goals=[SavingsGoal(
            id="g", name="Fund", target_amount=Decimal("10"),
            current_amount=Decimal("100"), target_date="2026-01-01",
        )])
        points = project_wealth(snapshot, -500, 0, 1)
        assert points[0].savings == 100
        assert points[1].savings == pytest.approx(104)

    def test_property_equity(self):
        """Test property growth with an interest-only loan."""
        snapshot = LedgerSnapshot(mortgage=make_mortgage(repayment_type=RepaymentType.INTEREST_ONLY))
        points = project_wealth(snapshot, 0, 2500, 1)
        assert points[0].property_equity == pytest.approx(100000)
        assert points[1].property_equity == pytest.approx(124000)


class TestProjectionEngine:
    """Tests for the store-bound projection facade."""

    @pytest.mark.asyncio
    async def test_recomputes_from_current_state(self, store):
        """Test that projections follow store mutations."""
        engine = ProjectionEngine(store)
        assert engine.calculate_mortgage_repayment().monthly == 0
        assert engine.extra_repayment_scenarios() == []

        store.set_mortgage(make_mortgage())
        assert engine.calculate_mortgage_repayment().monthly == pytest.approx(2997.75, abs=0.01)
        assert len(engine.extra_repayment_scenarios()) == 4

        store.clear_mortgage()
        assert engine.calculate_mortgage_repayment().monthly == 0

    @pytest.mark.asyncio
    async def test_super_helpers(self, store):
        """Test super projection helpers with and without details."""
        engine = ProjectionEngine(store)
        assert engine.salary_sacrifice_options() == []
        assert engine.next_super_milestone() is None

        store.set_super_details(make_super(balance=Decimal("85000")))
        assert len(engine.salary_sacrifice_options()) == 4
        assert engine.next_super_milestone().amount == 100000
        assert engine.calculate_super_projection().at_retirement > 85000

    @pytest.mark.asyncio
    async def test_wealth_with_unreadable_mortgage_start(self, store):
        """Test that a stored mortgage with a blank start date still projects."""
        store.set_mortgage(make_mortgage(start_date=""))
        points = ProjectionEngine(store).wealth_projection(horizon_years=5)
        assert len(points) == 6
        assert points[0].property_equity == pytest.approx(100000)

    @pytest.mark.asyncio
    async def test_wealth_uses_current_month_savings(self, store):
        """Test that this month's net savings feed the wealth projection."""
        engine = ProjectionEngine(store)
        store.add_transaction(TransactionDraft(
            type=TransactionType.INCOME,
            amount=Decimal("1000"),
            category="Salary",
            date="2025-03-01",
        ))
        points = engine.wealth_projection(horizon_years=1)
        assert len(points) == 2
        assert points[1].savings == pytest.approx(12480)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
