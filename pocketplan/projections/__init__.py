"""Financial projection package."""

from pocketplan.projections.engine import ProjectionEngine
from pocketplan.projections.mortgage import (
    EXTRA_REPAYMENT_OPTIONS,
    ExtraRepaymentScenario,
    MortgageRepayment,
    base_monthly_payment,
    calculate_mortgage_repayment,
    equity,
    extra_repayment_scenario,
    loan_to_value,
)
from pocketplan.projections.retirement import (
    CURRENT_AGE,
    DRAWDOWN_RATE,
    RETIREMENT_AGE,
    SALARY_SACRIFICE_OPTIONS,
    SUPER_GROWTH_RATE,
    YEARS_TO_RETIREMENT,
    Milestone,
    RetirementProjection,
    SalarySacrificeGain,
    calculate_super_projection,
    next_milestone,
    salary_sacrifice_gain,
)
from pocketplan.projections.wealth import PLANNING_HORIZONS, WealthPoint, project_wealth

__all__ = [
    "ProjectionEngine",
    # Mortgage
    "EXTRA_REPAYMENT_OPTIONS",
    "ExtraRepaymentScenario",
    "MortgageRepayment",
    "base_monthly_payment",
    "calculate_mortgage_repayment",
    "equity",
    "extra_repayment_scenario",
    "loan_to_value",
    # Retirement
    "CURRENT_AGE",
    "DRAWDOWN_RATE",
    "RETIREMENT_AGE",
    "SALARY_SACRIFICE_OPTIONS",
    "SUPER_GROWTH_RATE",
    "YEARS_TO_RETIREMENT",
    "Milestone",
    "RetirementProjection",
    "SalarySacrificeGain",
    "calculate_super_projection",
    "next_milestone",
    "salary_sacrifice_gain",
    # Wealth
    "PLANNING_HORIZONS",
    "WealthPoint",
    "project_wealth",
]
