"""
Core Data Models for PocketPlan

These models define the schemas for every entity the ledger holds.
They are designed to:
1. Be plain data - no entity references another by id
2. Serialize to the same camelCase JSON the mobile app has always stored
3. Carry their own field constraints so callers can validate by constructing them

DESIGN DECISION: The Entity Store never rejects a model it is given.
Constraints below (ge/gt) fire when the CALLER builds the model, which is
where input validation belongs. Persisted data that no longer satisfies them
is skipped item by item at load time rather than failing the whole slot.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Owner(str, Enum):
    """Who a transaction belongs to when the profile is a couple."""
    ME = "me"
    PARTNER = "partner"


class ProfileMode(str, Enum):
    INDIVIDUAL = "individual"
    COUPLE = "couple"


class RepaymentType(str, Enum):
    PRINCIPAL_INTEREST = "principal_interest"
    INTEREST_ONLY = "interest_only"


class InsuranceType(str, Enum):
    HOME = "home"
    CAR = "car"
    HEALTH = "health"
    LIFE = "life"
    INCOME_PROTECTION = "income_protection"
    CONTENTS = "contents"
    TRAVEL = "travel"


class PremiumFrequency(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


DEFAULT_PARTNER_NAME = "Partner"

# Exact in memory, a plain JSON number on disk. Strings are still accepted
# on input.
Numeric = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class LedgerModel(BaseModel):
    """
    Base for every ledger entity.

    Entities are immutable; the store replaces them instead of editing.
    Python code uses snake_case, persisted JSON uses camelCase, and both
    are accepted on input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict:
        """JSON-ready dict in the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# TRANSACTIONS & BUDGETS
# =============================================================================

class TransactionDraft(LedgerModel):
    """A transaction as entered by the user, before the store assigns an id."""

    type: TransactionType
    amount: Numeric = Field(
        ...,
        ge=0,
        description="Non-negative amount; direction comes from `type`"
    )
    category: str = Field(
        ...,
        description="Free-text label, matched case-sensitively"
    )
    note: str = ""
    date: str = Field(
        ...,
        description="ISO-8601 date or instant, kept verbatim"
    )
    owner: Owner = Owner.ME


class Transaction(TransactionDraft):
    """
    A recorded transaction.

    Never updated after creation - only deleted.
    """
    id: str


class BudgetDraft(LedgerModel):
    category: str = Field(
        ...,
        description="At most one budget per category (enforced by callers)"
    )
    limit: Numeric = Field(
        ...,
        gt=0,
        description="Monthly spending limit"
    )
    color: str = Field(
        default="#6B7280",
        description="Presentation hint only"
    )


class Budget(BudgetDraft):
    id: str


# =============================================================================
# SAVINGS GOALS
# =============================================================================

class SavingsGoalDraft(LedgerModel):
    name: str
    target_amount: Numeric = Field(..., gt=0)
    current_amount: Numeric = Field(
        default=Decimal("0"),
        ge=0,
        description="May exceed target_amount; never below zero"
    )
    target_date: str
    icon: str = "cash-outline"


class SavingsGoal(SavingsGoalDraft):
    id: str


# =============================================================================
# SINGLETON PROFILES
# =============================================================================

class MortgageDetails(LedgerModel):
    """
    The user's home loan. At most one exists; edits replace it wholesale.
    """
    loan_amount: Numeric = Field(..., gt=0)
    interest_rate: Numeric = Field(
        ...,
        ge=0,
        description="Annual rate in percent, e.g. 6 for 6%"
    )
    loan_term_years: int = Field(..., gt=0)
    repayment_type: RepaymentType = RepaymentType.PRINCIPAL_INTEREST
    extra_repayment: Numeric = Field(
        default=Decimal("0"),
        ge=0,
        description="Monthly amount paid on top of the scheduled repayment"
    )
    property_value: Numeric = Field(default=Decimal("0"), ge=0)
    start_date: str
    lender: str = ""


class SuperDetails(LedgerModel):
    """
    The user's superannuation (retirement) account. At most one exists.
    """
    balance: Numeric = Field(..., ge=0)
    fund: str = ""
    employer_rate: Numeric = Field(
        ...,
        ge=0,
        description="Employer contribution in percent of salary"
    )
    salary: Numeric = Field(
        ...,
        ge=0,
        description="Annual salary"
    )
    investment_option: str = ""
    last_updated: str


# =============================================================================
# INSURANCE
# =============================================================================

class InsurancePolicyDraft(LedgerModel):
    type: InsuranceType
    provider: str
    policy_number: Optional[str] = None
    premium: Numeric = Field(..., gt=0)
    premium_frequency: PremiumFrequency = PremiumFrequency.MONTHLY
    renewal_date: str
    cover_amount: Numeric = Field(default=Decimal("0"), ge=0)


class InsurancePolicy(InsurancePolicyDraft):
    id: str


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Everything the ledger holds at one instant.

    Queries and projections are pure functions of a snapshot. The store
    builds a new snapshot on every mutation, so a snapshot handed out
    earlier never changes underneath its holder.
    """
    model_config = ConfigDict(frozen=True)

    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Most recent first"
    )
    budgets: list[Budget] = Field(default_factory=list)
    goals: list[SavingsGoal] = Field(default_factory=list)
    insurance_policies: list[InsurancePolicy] = Field(default_factory=list)
    mortgage: Optional[MortgageDetails] = None
    super_details: Optional[SuperDetails] = None
    profile_mode: ProfileMode = ProfileMode.INDIVIDUAL
    partner_name: str = DEFAULT_PARTNER_NAME
