"""
Mortgage repayment projection.

DESIGN DECISION: The extra monthly repayment is ADDED to the scheduled
payment but the schedule length is NOT shortened when computing total
payment and total interest. Those totals are therefore computed against
the original term.

The payoff simulation in `extra_repayment_scenario` is the separate,
month-by-month model used to show what an extra repayment saves.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from pocketplan.models.ledger import MortgageDetails, RepaymentType
from pocketplan.utils.dates import months_between, parse_iso


EXTRA_REPAYMENT_OPTIONS = (100, 250, 500, 1000)

# Heuristic yield used when a payoff simulation is meaningless
# (interest-only or zero-rate loans).
FLAT_SAVING_RATE = 0.05


class MortgageRepayment(BaseModel):
    monthly: float = 0.0
    total_payment: float = 0.0
    total_interest: float = 0.0
    years_remaining: float = 0.0
    months_elapsed: int = 0


class ExtraRepaymentScenario(BaseModel):
    extra: float
    saved_per_year: float
    saved_10yr: float
    saved_life: float
    years_saved: float


def _monthly_rate(mortgage: MortgageDetails) -> float:
    return float(mortgage.interest_rate) / 100 / 12


def _term_months(mortgage: MortgageDetails) -> int:
    return mortgage.loan_term_years * 12


def base_monthly_payment(mortgage: MortgageDetails) -> float:
    """
    Scheduled monthly payment before any extra repayment.

    Interest-only: P*r. Principal and interest: the amortizing annuity
    formula, or straight-line P/n when the rate is zero.
    """
    principal = float(mortgage.loan_amount)
    r = _monthly_rate(mortgage)
    n = _term_months(mortgage)

    if mortgage.repayment_type == RepaymentType.INTEREST_ONLY:
        return principal * r
    if r == 0:
        return principal / n
    growth = (1 + r) ** n
    return principal * r * growth / (growth - 1)


def _months_elapsed(mortgage: MortgageDetails, now: datetime) -> int:
    """Whole months since the loan started; 0 when the start date is unreadable."""
    try:
        start = parse_iso(mortgage.start_date)
    except ValueError:
        return 0
    return months_between(start, now)


def calculate_mortgage_repayment(
    mortgage: Optional[MortgageDetails],
    now: datetime,
) -> MortgageRepayment:
    """Monthly payment, lifetime totals and time remaining. Zeros without a mortgage."""
    if mortgage is None:
        return MortgageRepayment()

    n = _term_months(mortgage)
    monthly = base_monthly_payment(mortgage) + float(mortgage.extra_repayment)
    total_payment = monthly * n
    total_interest = max(0.0, total_payment - float(mortgage.loan_amount))

    elapsed = _months_elapsed(mortgage, now)
    years_remaining = max(0.0, (n - elapsed) / 12)

    return MortgageRepayment(
        monthly=monthly,
        total_payment=total_payment,
        total_interest=total_interest,
        years_remaining=years_remaining,
        months_elapsed=elapsed,
    )


def loan_to_value(mortgage: MortgageDetails) -> float:
    """Loan as a percentage of property value; 0 when the value is unknown."""
    if mortgage.property_value <= 0:
        return 0.0
    return float(mortgage.loan_amount / mortgage.property_value * 100)


def equity(mortgage: MortgageDetails) -> Decimal:
    return mortgage.property_value - mortgage.loan_amount


def extra_repayment_scenario(mortgage: MortgageDetails, extra: float) -> ExtraRepaymentScenario:
    """
    Simulate paying `extra` on top of the scheduled payment every month.

    The simulation stops when the balance reaches zero or after twice the
    scheduled term, whichever comes first.
    """
    extra = float(extra)
    r = _monthly_rate(mortgage)
    n = _term_months(mortgage)

    if mortgage.repayment_type == RepaymentType.INTEREST_ONLY or r == 0:
        return ExtraRepaymentScenario(
            extra=extra,
            saved_per_year=extra * 12 * FLAT_SAVING_RATE,
            saved_10yr=extra * 12 * 10 * FLAT_SAVING_RATE,
            saved_life=0.0,
            years_saved=0.0,
        )

    principal = float(mortgage.loan_amount)
    base = base_monthly_payment(mortgage)
    base_total_interest = base * n - principal

    payment = base + extra
    balance = principal
    months_paid = 0
    total_paid = 0.0
    while balance > 0 and months_paid < n * 2:
        interest = balance * r
        reduction = min(payment - interest, balance)
        if reduction <= 0:
            break
        balance -= reduction
        total_paid += payment
        months_paid += 1

    interest_paid = total_paid - principal
    saved_life = max(0.0, base_total_interest - interest_paid)
    saved_per_year = saved_life / mortgage.loan_term_years if mortgage.loan_term_years > 0 else 0.0

    return ExtraRepaymentScenario(
        extra=extra,
        saved_per_year=saved_per_year,
        saved_10yr=min(saved_life, saved_per_year * 10),
        saved_life=saved_life,
        years_saved=max(0.0, (n - months_paid) / 12),
    )
