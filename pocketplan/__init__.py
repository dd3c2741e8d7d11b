"""
PocketPlan - Ledger Core

A local-first personal-finance ledger: transactions, budgets, savings
goals, a mortgage, a retirement account and insurance policies, held
on-device, with monthly aggregates and multi-year projections.

DESIGN PRINCIPLES:
1. In-memory state is the source of truth for the session
2. Mutations never block on, or fail because of, storage
3. Queries and projections are pure functions of a snapshot
4. Every change is observable (subscriptions) and logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "PocketPlan Team"
