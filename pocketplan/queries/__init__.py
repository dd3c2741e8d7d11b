"""Ledger query package."""

from pocketplan.queries.ledger_queries import (
    OCCURRENCES_PER_YEAR,
    BudgetProgress,
    GoalProgress,
    LedgerQueries,
    MonthSummary,
    UpcomingRenewal,
    annual_premium,
    budget_progress,
    goal_progress,
    has_budget_for,
    income_expense_history,
    monthly_transactions,
    occurrences_per_year,
    spent_by_category,
    total_expenses,
    total_income,
    total_insurance_cost,
    upcoming_renewals,
)

__all__ = [
    "OCCURRENCES_PER_YEAR",
    "BudgetProgress",
    "GoalProgress",
    "LedgerQueries",
    "MonthSummary",
    "UpcomingRenewal",
    "annual_premium",
    "budget_progress",
    "goal_progress",
    "has_budget_for",
    "income_expense_history",
    "monthly_transactions",
    "occurrences_per_year",
    "spent_by_category",
    "total_expenses",
    "total_income",
    "total_insurance_cost",
    "upcoming_renewals",
]
