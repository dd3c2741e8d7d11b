"""
Retirement (superannuation) balance projection.

The ledger has no birth date, so age is assumed rather than read from the
profile. These constants are a known product limitation, not inputs.
"""

from typing import Optional

from pydantic import BaseModel

from pocketplan.models.ledger import SuperDetails


CURRENT_AGE = 30
RETIREMENT_AGE = 67
YEARS_TO_RETIREMENT = RETIREMENT_AGE - CURRENT_AGE

SUPER_GROWTH_RATE = 0.07
DRAWDOWN_RATE = 0.04

SALARY_SACRIFICE_OPTIONS = (50, 100, 250, 500)

SUPER_MILESTONES: tuple[tuple[int, str], ...] = (
    (100_000, "$100K"),
    (250_000, "$250K"),
    (500_000, "$500K"),
    (1_000_000, "$1M"),
    (2_000_000, "$2M"),
)


class RetirementProjection(BaseModel):
    at_retirement: float = 0.0
    monthly_in_retirement: float = 0.0
    annual_contribution: float = 0.0


class SalarySacrificeGain(BaseModel):
    extra_monthly: float
    projected_balance: float
    balance_gain: float
    monthly_income_gain: float


class Milestone(BaseModel):
    amount: int
    label: str
    progress: float


def annual_contribution(details: SuperDetails) -> float:
    return float(details.salary) * (float(details.employer_rate) / 100)


def monthly_income(balance: float) -> float:
    """Monthly retirement income from a balance at the drawdown rate."""
    return balance * DRAWDOWN_RATE / 12


def calculate_super_projection(
    details: Optional[SuperDetails],
    extra_monthly: float = 0.0,
) -> RetirementProjection:
    """
    Compound the balance once a year until retirement.

    Each year the year's contributions are added first, then growth is
    applied. Zeros without super details.
    """
    if details is None:
        return RetirementProjection()

    contribution = annual_contribution(details) + float(extra_monthly) * 12
    balance = float(details.balance)
    for _ in range(YEARS_TO_RETIREMENT):
        balance = (balance + contribution) * (1 + SUPER_GROWTH_RATE)

    return RetirementProjection(
        at_retirement=balance,
        monthly_in_retirement=monthly_income(balance),
        annual_contribution=contribution,
    )


def salary_sacrifice_gain(details: SuperDetails, extra_monthly: float) -> SalarySacrificeGain:
    """What an extra monthly contribution adds at retirement."""
    base = calculate_super_projection(details).at_retirement
    projected = calculate_super_projection(details, extra_monthly).at_retirement
    gain = projected - base
    return SalarySacrificeGain(
        extra_monthly=float(extra_monthly),
        projected_balance=projected,
        balance_gain=gain,
        monthly_income_gain=monthly_income(gain),
    )


def next_milestone(balance: float) -> Optional[Milestone]:
    """The first milestone above the balance, or None once all are passed."""
    for amount, label in SUPER_MILESTONES:
        if amount > balance:
            return Milestone(amount=amount, label=label, progress=balance / amount * 100)
    return None
