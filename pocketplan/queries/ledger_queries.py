"""
Ledger Query Engine

DESIGN DECISION: Queries are PURE functions of a LedgerSnapshot.
They never touch storage and never mutate anything, so a screen can call
them as often as it re-renders. LedgerQueries binds them to a live store
and a clock for convenience.

Month windows are 'YYYY-MM' strings matched as a PREFIX of each
transaction's stored date string. This is not a calendar
range: '2025-03' matches both '2025-03-31' and '2025-03-31T23:59:59Z',
regardless of timezone.

Sums are exact Decimal additions of stored amounts; nothing is rounded.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from pocketplan.config import get_settings
from pocketplan.models.ledger import (
    InsurancePolicy,
    LedgerSnapshot,
    Transaction,
    TransactionType,
)
from pocketplan.utils.clock import Clock, SystemClock
from pocketplan.utils.dates import current_month, days_until, trailing_months


OCCURRENCES_PER_YEAR: dict[str, int] = {
    "weekly": 52,
    "fortnightly": 26,
    "monthly": 12,
    "quarterly": 4,
    "annually": 1,
}
DEFAULT_OCCURRENCES_PER_YEAR = 12

ZERO = Decimal("0")


# =============================================================================
# RESULT MODELS
# =============================================================================

class BudgetProgress(BaseModel):
    budget_id: str
    category: str
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    percent: float
    is_over: bool


class GoalProgress(BaseModel):
    goal_id: str
    name: str
    current_amount: Decimal
    target_amount: Decimal
    percent: float
    days_left: int


class UpcomingRenewal(BaseModel):
    policy: InsurancePolicy
    days_until_renewal: int
    annual_cost: Decimal


class MonthSummary(BaseModel):
    month: str
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


# =============================================================================
# PURE QUERIES
# =============================================================================

def monthly_transactions(snapshot: LedgerSnapshot, month: str) -> list[Transaction]:
    """Transactions whose date string starts with `month`, in stored order."""
    return [t for t in snapshot.transactions if t.date.startswith(month)]


def _sum_by_type(transactions: list[Transaction], kind: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type == kind), ZERO)


def total_income(snapshot: LedgerSnapshot, month: str) -> Decimal:
    return _sum_by_type(monthly_transactions(snapshot, month), TransactionType.INCOME)


def total_expenses(snapshot: LedgerSnapshot, month: str) -> Decimal:
    return _sum_by_type(monthly_transactions(snapshot, month), TransactionType.EXPENSE)


def spent_by_category(snapshot: LedgerSnapshot, category: str, month: str) -> Decimal:
    """Expenses in `month` whose category equals `category` exactly."""
    return sum(
        (
            t.amount
            for t in monthly_transactions(snapshot, month)
            if t.type == TransactionType.EXPENSE and t.category == category
        ),
        ZERO,
    )


def occurrences_per_year(frequency: str) -> int:
    """How many premiums a frequency implies per year; unknown -> 12."""
    key = getattr(frequency, "value", frequency)
    return OCCURRENCES_PER_YEAR.get(key, DEFAULT_OCCURRENCES_PER_YEAR)


def annual_premium(policy: InsurancePolicy) -> Decimal:
    return policy.premium * occurrences_per_year(policy.premium_frequency)


def total_insurance_cost(snapshot: LedgerSnapshot) -> Decimal:
    """Annualized cost of every policy."""
    return sum((annual_premium(p) for p in snapshot.insurance_policies), ZERO)


def budget_progress(snapshot: LedgerSnapshot, month: str) -> list[BudgetProgress]:
    """Spend against each budget for a month, in budget order."""
    rows = []
    for budget in snapshot.budgets:
        spent = spent_by_category(snapshot, budget.category, month)
        percent = float(spent / budget.limit * 100) if budget.limit > 0 else 0.0
        rows.append(BudgetProgress(
            budget_id=budget.id,
            category=budget.category,
            limit=budget.limit,
            spent=spent,
            remaining=budget.limit - spent,
            percent=percent,
            is_over=percent > 100,
        ))
    return rows


def has_budget_for(snapshot: LedgerSnapshot, category: str) -> bool:
    return any(b.category == category for b in snapshot.budgets)


def goal_progress(snapshot: LedgerSnapshot, now: datetime) -> list[GoalProgress]:
    rows = []
    for goal in snapshot.goals:
        percent = (
            float(goal.current_amount / goal.target_amount * 100)
            if goal.target_amount > 0
            else 0.0
        )
        rows.append(GoalProgress(
            goal_id=goal.id,
            name=goal.name,
            current_amount=goal.current_amount,
            target_amount=goal.target_amount,
            percent=percent,
            days_left=max(0, days_until(goal.target_date, now)),
        ))
    return rows


def upcoming_renewals(
    snapshot: LedgerSnapshot,
    now: datetime,
    within_days: int,
) -> list[UpcomingRenewal]:
    """Policies renewing in 1..within_days days, soonest first."""
    upcoming = []
    for policy in snapshot.insurance_policies:
        days = days_until(policy.renewal_date, now)
        if 0 < days <= within_days:
            upcoming.append(UpcomingRenewal(
                policy=policy,
                days_until_renewal=days,
                annual_cost=annual_premium(policy),
            ))
    upcoming.sort(key=lambda r: r.days_until_renewal)
    return upcoming


def income_expense_history(
    snapshot: LedgerSnapshot,
    now: datetime,
    months: int,
) -> list[MonthSummary]:
    """Income and expenses for the trailing months, oldest first."""
    return [
        MonthSummary(
            month=key,
            income=total_income(snapshot, key),
            expenses=total_expenses(snapshot, key),
        )
        for key in trailing_months(now, months)
    ]


# =============================================================================
# FACADE
# =============================================================================

class LedgerQueries:
    """
    Queries bound to a live store.

    Every call reads the store's current snapshot, so results always
    reflect the latest mutation. `month` defaults to the clock's current
    month.
    """

    def __init__(self, store, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or getattr(store, "clock", None) or SystemClock()
        self._settings = get_settings().app

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._store.snapshot

    def current_month(self) -> str:
        return current_month(self._clock.now())

    def _month(self, month: Optional[str]) -> str:
        return month or self.current_month()

    def monthly_transactions(self, month: Optional[str] = None) -> list[Transaction]:
        return monthly_transactions(self.snapshot, self._month(month))

    def total_income(self, month: Optional[str] = None) -> Decimal:
        return total_income(self.snapshot, self._month(month))

    def total_expenses(self, month: Optional[str] = None) -> Decimal:
        return total_expenses(self.snapshot, self._month(month))

    def net_savings(self, month: Optional[str] = None) -> Decimal:
        month = self._month(month)
        return self.total_income(month) - self.total_expenses(month)

    def spent_by_category(self, category: str) -> Decimal:
        """Current-month expenses for a category (not parameterizable by month)."""
        return spent_by_category(self.snapshot, category, self.current_month())

    def total_insurance_cost(self) -> Decimal:
        return total_insurance_cost(self.snapshot)

    def monthly_insurance_cost(self) -> Decimal:
        return self.total_insurance_cost() / 12

    def budget_progress(self) -> list[BudgetProgress]:
        return budget_progress(self.snapshot, self.current_month())

    def total_budget_limit(self) -> Decimal:
        return sum((b.limit for b in self.snapshot.budgets), ZERO)

    def has_budget_for(self, category: str) -> bool:
        return has_budget_for(self.snapshot, category)

    def goal_progress(self) -> list[GoalProgress]:
        return goal_progress(self.snapshot, self._clock.now())

    def total_saved(self) -> Decimal:
        return sum((g.current_amount for g in self.snapshot.goals), ZERO)

    def total_goal_target(self) -> Decimal:
        return sum((g.target_amount for g in self.snapshot.goals), ZERO)

    def upcoming_renewals(self, within_days: Optional[int] = None) -> list[UpcomingRenewal]:
        window = within_days if within_days is not None else self._settings.renewal_window_days
        return upcoming_renewals(self.snapshot, self._clock.now(), window)

    def income_expense_history(self, months: Optional[int] = None) -> list[MonthSummary]:
        count = months if months is not None else self._settings.history_months
        return income_expense_history(self.snapshot, self._clock.now(), count)
