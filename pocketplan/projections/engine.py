"""
Projection Engine

Binds the stateless projection functions to a live store and a clock.
Every call computes from the store's current snapshot; nothing is cached.
"""

from typing import Iterable, Optional

from pocketplan.projections.mortgage import (
    EXTRA_REPAYMENT_OPTIONS,
    ExtraRepaymentScenario,
    MortgageRepayment,
    calculate_mortgage_repayment,
    extra_repayment_scenario,
)
from pocketplan.projections.retirement import (
    SALARY_SACRIFICE_OPTIONS,
    Milestone,
    RetirementProjection,
    SalarySacrificeGain,
    calculate_super_projection,
    next_milestone,
    salary_sacrifice_gain,
)
from pocketplan.projections.wealth import WealthPoint, project_wealth
from pocketplan.queries import LedgerQueries
from pocketplan.utils.clock import Clock, SystemClock


class ProjectionEngine:
    """
    On-demand financial projections.

    Usage:
        engine = ProjectionEngine(store)
        engine.calculate_mortgage_repayment().monthly
        engine.wealth_projection(horizon_years=20)
    """

    def __init__(self, store, clock: Optional[Clock] = None):
        self._store = store
        self._clock = clock or getattr(store, "clock", None) or SystemClock()
        self._queries = LedgerQueries(store, self._clock)

    def calculate_mortgage_repayment(self) -> MortgageRepayment:
        return calculate_mortgage_repayment(self._store.snapshot.mortgage, self._clock.now())

    def calculate_super_projection(self) -> RetirementProjection:
        return calculate_super_projection(self._store.snapshot.super_details)

    def extra_repayment_scenarios(
        self,
        extras: Iterable[float] = EXTRA_REPAYMENT_OPTIONS,
    ) -> list[ExtraRepaymentScenario]:
        """Savings for each candidate extra repayment; empty without a mortgage."""
        mortgage = self._store.snapshot.mortgage
        if mortgage is None:
            return []
        return [extra_repayment_scenario(mortgage, extra) for extra in extras]

    def salary_sacrifice_options(
        self,
        extras: Iterable[float] = SALARY_SACRIFICE_OPTIONS,
    ) -> list[SalarySacrificeGain]:
        details = self._store.snapshot.super_details
        if details is None:
            return []
        return [salary_sacrifice_gain(details, extra) for extra in extras]

    def next_super_milestone(self) -> Optional[Milestone]:
        details = self._store.snapshot.super_details
        if details is None:
            return None
        return next_milestone(float(details.balance))

    def wealth_projection(self, horizon_years: int = 10) -> list[WealthPoint]:
        """Project wealth using this month's net savings and mortgage repayment."""
        return project_wealth(
            self._store.snapshot,
            monthly_savings=float(self._queries.net_savings()),
            monthly_repayment=self.calculate_mortgage_repayment().monthly,
            horizon_years=horizon_years,
        )
