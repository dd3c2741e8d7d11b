"""
Net wealth projection across property, super and savings.

Yearly model, year 0 being today:
- property grows at PROPERTY_GROWTH_RATE; the loan is paid down once a
  year by the annual repayment less a year of interest
- super compounds as in the retirement projection
- savings grow by a year of positive monthly savings, then
  SAVINGS_GROWTH_RATE
"""

from pydantic import BaseModel

from pocketplan.models.ledger import LedgerSnapshot
from pocketplan.projections.retirement import SUPER_GROWTH_RATE, annual_contribution


PROPERTY_GROWTH_RATE = 0.04
SAVINGS_GROWTH_RATE = 0.04

PLANNING_HORIZONS = (5, 10, 20, 30)


class WealthPoint(BaseModel):
    year: int
    wealth: float
    property_equity: float
    super_balance: float
    savings: float


def project_wealth(
    snapshot: LedgerSnapshot,
    monthly_savings: float,
    monthly_repayment: float,
    horizon_years: int,
) -> list[WealthPoint]:
    """One point per year from 0 to horizon_years inclusive."""
    mortgage = snapshot.mortgage
    super_details = snapshot.super_details

    property_value = float(mortgage.property_value) if mortgage else 0.0
    loan_balance = float(mortgage.loan_amount) if mortgage else 0.0
    mortgage_rate = float(mortgage.interest_rate) / 100 if mortgage else 0.0
    annual_repayment = float(monthly_repayment) * 12

    super_balance = float(super_details.balance) if super_details else 0.0
    super_contribution = annual_contribution(super_details) if super_details else 0.0

    savings = float(sum(g.current_amount for g in snapshot.goals))
    annual_savings = max(0.0, float(monthly_savings) * 12)

    points = []
    for year in range(horizon_years + 1):
        property_equity = property_value - loan_balance
        points.append(WealthPoint(
            year=year,
            wealth=property_equity + super_balance + savings,
            property_equity=property_equity,
            super_balance=super_balance,
            savings=savings,
        ))

        property_value *= 1 + PROPERTY_GROWTH_RATE
        if mortgage and loan_balance > 0:
            interest = loan_balance * mortgage_rate
            principal = min(loan_balance, annual_repayment - interest)
            loan_balance = max(0.0, loan_balance - principal)
        super_balance = (super_balance + super_contribution) * (1 + SUPER_GROWTH_RATE)
        savings = (savings + annual_savings) * (1 + SAVINGS_GROWTH_RATE)

    return points
