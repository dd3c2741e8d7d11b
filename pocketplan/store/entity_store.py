"""
Entity Store

The single authoritative, mutable view of the ledger. It bridges the
in-memory snapshot and durable storage.

GUARANTEES:
- Startup reads every key once, concurrently, and flips LOADING -> READY
  exactly once, only after every read has settled
- A failed, absent or undecodable key yields that slot's default
- Mutations apply synchronously and never raise on persistence failure
- Writes for the same key land in mutation order

IMPORTANT: The store does not validate input. Callers construct models
(which carry their own constraints) and run LedgerValidator for
cross-entity rules such as one budget per category.
"""

import asyncio
import json
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from pocketplan.config import get_settings
from pocketplan.models.events import LedgerEvent, LedgerEventBuilder, LedgerEventType
from pocketplan.models.ledger import (
    DEFAULT_PARTNER_NAME,
    Budget,
    BudgetDraft,
    InsurancePolicy,
    InsurancePolicyDraft,
    LedgerModel,
    LedgerSnapshot,
    MortgageDetails,
    ProfileMode,
    SavingsGoal,
    SavingsGoalDraft,
    SuperDetails,
    Transaction,
    TransactionDraft,
)
from pocketplan.services.storage import CorruptPayloadError, PersistenceAdapter
from pocketplan.store.persist_queue import PersistQueue
from pocketplan.utils.clock import Clock, SystemClock
from pocketplan.utils.ids import generate_id


Subscriber = Callable[[LedgerEvent], None]


class LoadState(str, Enum):
    LOADING = "loading"
    READY = "ready"


class LedgerNotReadyError(RuntimeError):
    """A mutation was attempted before the initial load finished."""
    pass


class StorageKeys(BaseModel):
    """Every storage key the ledger uses, scoped by the application prefix."""
    model_config = ConfigDict(frozen=True)

    transactions: str
    budgets: str
    goals: str
    mortgage: str
    super_details: str
    insurance: str
    profile_mode: str
    partner_name: str

    @classmethod
    def for_prefix(cls, prefix: str) -> "StorageKeys":
        return cls(
            transactions=f"{prefix}_transactions",
            budgets=f"{prefix}_budgets",
            goals=f"{prefix}_goals",
            mortgage=f"{prefix}_mortgage",
            super_details=f"{prefix}_super",
            insurance=f"{prefix}_insurance",
            profile_mode=f"{prefix}_profileMode",
            partner_name=f"{prefix}_partnerName",
        )


class EntityStore:
    """
    In-memory authoritative state for the whole ledger.

    Usage:
        store = await EntityStore.open(adapter)
        tx = store.add_transaction(TransactionDraft(...))
        store.delete_transaction(tx.id)
        await store.flush()
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        clock: Optional[Clock] = None,
        key_prefix: Optional[str] = None,
    ):
        self._adapter = adapter
        self._clock = clock or SystemClock()
        self._keys = StorageKeys.for_prefix(key_prefix or get_settings().storage.key_prefix)
        self._queue = PersistQueue(adapter)
        self._snapshot = LedgerSnapshot()
        self._state = LoadState.LOADING
        self._load_task: Optional[asyncio.Future] = None
        self._subscribers: list[Subscriber] = []
        self._logger = structlog.get_logger(__name__)

    @classmethod
    async def open(
        cls,
        adapter: PersistenceAdapter,
        clock: Optional[Clock] = None,
        key_prefix: Optional[str] = None,
    ) -> "EntityStore":
        """Construct a store and wait for its initial load."""
        store = cls(adapter, clock=clock, key_prefix=key_prefix)
        await store.load()
        return store

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is LoadState.LOADING

    @property
    def is_ready(self) -> bool:
        return self._state is LoadState.READY

    @property
    def keys(self) -> StorageKeys:
        return self._keys

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._snapshot

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._snapshot.transactions)

    @property
    def budgets(self) -> list[Budget]:
        return list(self._snapshot.budgets)

    @property
    def goals(self) -> list[SavingsGoal]:
        return list(self._snapshot.goals)

    @property
    def insurance_policies(self) -> list[InsurancePolicy]:
        return list(self._snapshot.insurance_policies)

    @property
    def mortgage(self) -> Optional[MortgageDetails]:
        return self._snapshot.mortgage

    @property
    def super_details(self) -> Optional[SuperDetails]:
        return self._snapshot.super_details

    @property
    def profile_mode(self) -> ProfileMode:
        return self._snapshot.profile_mode

    @property
    def partner_name(self) -> str:
        return self._snapshot.partner_name

    @property
    def persist_failures(self) -> int:
        return self._queue.failures

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> LedgerSnapshot:
        """
        Read every key from storage and become READY.

        Safe to call more than once or concurrently; the reads happen once.
        """
        if self._state is LoadState.READY:
            return self._snapshot
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        await self._load_task
        return self._snapshot

    async def _load(self) -> None:
        keys = self._keys
        ordered = [
            keys.transactions,
            keys.budgets,
            keys.goals,
            keys.insurance,
            keys.mortgage,
            keys.super_details,
            keys.profile_mode,
            keys.partner_name,
        ]
        results = await asyncio.gather(
            *(self._adapter.get(key) for key in ordered),
            return_exceptions=True,
        )
        raw = dict(zip(ordered, results))

        failed_keys: list[str] = []
        for key, result in raw.items():
            if isinstance(result, BaseException):
                failed_keys.append(key)
                self._logger.error(
                    "load_failed",
                    key=key,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                raw[key] = None

        def collection(key: str, model: type[LedgerModel]) -> list:
            try:
                return self._decode_collection(key, raw[key], model)
            except CorruptPayloadError as e:
                failed_keys.append(key)
                self._logger.error("load_failed", key=key, error=str(e))
                return []

        def singleton(key: str, model: type[LedgerModel]):
            try:
                return self._decode_singleton(raw[key], model)
            except CorruptPayloadError as e:
                failed_keys.append(key)
                self._logger.error("load_failed", key=key, error=str(e))
                return None

        snapshot = LedgerSnapshot(
            transactions=collection(keys.transactions, Transaction),
            budgets=collection(keys.budgets, Budget),
            goals=collection(keys.goals, SavingsGoal),
            insurance_policies=collection(keys.insurance, InsurancePolicy),
            mortgage=singleton(keys.mortgage, MortgageDetails),
            super_details=singleton(keys.super_details, SuperDetails),
            profile_mode=self._decode_profile_mode(raw[keys.profile_mode]),
            partner_name=self._decode_text(raw[keys.partner_name]) or DEFAULT_PARTNER_NAME,
        )

        # Single assignment: callers never observe a half-loaded ledger.
        self._snapshot = snapshot
        self._state = LoadState.READY

        counts = {
            "transactions": len(snapshot.transactions),
            "budgets": len(snapshot.budgets),
            "goals": len(snapshot.goals),
            "insurance_policies": len(snapshot.insurance_policies),
            "mortgage": int(snapshot.mortgage is not None),
            "super": int(snapshot.super_details is not None),
        }
        self._emit(LedgerEventBuilder.loaded(counts, sorted(set(failed_keys))))

    def _decode_collection(
        self,
        key: str,
        raw: Optional[str],
        model: type[LedgerModel],
    ) -> list:
        if raw is None:
            return []
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptPayloadError(f"{key} is not valid JSON: {e}")
        if not isinstance(items, list):
            raise CorruptPayloadError(f"{key} does not hold a JSON array")

        decoded = []
        for index, item in enumerate(items):
            try:
                decoded.append(model.model_validate(item))
            except ValidationError as e:
                # Skip malformed items, keep the rest
                self._logger.warning(
                    "malformed_item_skipped",
                    key=key,
                    index=index,
                    error_count=e.error_count(),
                )
        return decoded

    def _decode_singleton(self, raw: Optional[str], model: type[LedgerModel]):
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptPayloadError(f"Invalid {model.__name__}: {e.error_count()} errors")

    @staticmethod
    def _decode_text(raw: Optional[str]) -> Optional[str]:
        """Profile values may be JSON strings or, from older app builds, bare text."""
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            return raw
        return value if isinstance(value, str) else raw

    def _decode_profile_mode(self, raw: Optional[str]) -> ProfileMode:
        value = self._decode_text(raw)
        if value is None:
            return ProfileMode.INDIVIDUAL
        try:
            return ProfileMode(value)
        except ValueError:
            self._logger.warning("unknown_profile_mode", value=value)
            return ProfileMode.INDIVIDUAL

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for change events.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, event: LedgerEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                self._logger.error(
                    "subscriber_failed",
                    event_type=event.event_type.value,
                    subscriber=getattr(callback, "__qualname__", repr(callback)),
                    error=str(e),
                )

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _require_ready(self) -> None:
        if self._state is not LoadState.READY:
            raise LedgerNotReadyError("Ledger is still loading; wait for load() before mutating")

    def _commit(self, **changes) -> None:
        self._snapshot = self._snapshot.model_copy(update=changes)

    def _persist_collection(self, key: str, items: list[LedgerModel]) -> None:
        payload = json.dumps([item.to_payload() for item in items])
        self._queue.submit_set(key, payload)

    def _persist_singleton(self, key: str, item: Optional[LedgerModel]) -> None:
        if item is None:
            self._queue.submit_delete(key)
        else:
            self._queue.submit_set(key, json.dumps(item.to_payload()))

    def _persist_text(self, key: str, value: str) -> None:
        self._queue.submit_set(key, json.dumps(value))

    async def flush(self) -> None:
        """Wait for every scheduled write to finish (successfully or not)."""
        await self._queue.drain()

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        """Record a transaction; newest transactions come first."""
        self._require_ready()
        transaction = Transaction(id=generate_id(), **draft.model_dump(exclude={"id"}))
        self._commit(transactions=[transaction, *self._snapshot.transactions])
        self._persist_collection(self._keys.transactions, self._snapshot.transactions)
        self._emit(LedgerEventBuilder.added(
            "transaction",
            transaction.id,
            LedgerEventType.TRANSACTION_ADDED,
            {"type": transaction.type.value, "category": transaction.category},
        ))
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns False (and does nothing) if absent."""
        self._require_ready()
        remaining = [t for t in self._snapshot.transactions if t.id != transaction_id]
        if len(remaining) == len(self._snapshot.transactions):
            return False
        self._commit(transactions=remaining)
        self._persist_collection(self._keys.transactions, remaining)
        self._emit(LedgerEventBuilder.deleted(
            "transaction", transaction_id, LedgerEventType.TRANSACTION_DELETED
        ))
        return True

    def clear_transactions(self) -> int:
        """Delete every transaction. Returns how many were removed."""
        self._require_ready()
        removed = len(self._snapshot.transactions)
        self._commit(transactions=[])
        self._persist_collection(self._keys.transactions, [])
        self._emit(LedgerEventBuilder.transactions_cleared(removed))
        return removed

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def add_budget(self, draft: BudgetDraft) -> Budget:
        """Add a budget. One-per-category is the caller's check, not ours."""
        self._require_ready()
        budget = Budget(id=generate_id(), **draft.model_dump(exclude={"id"}))
        budgets = [*self._snapshot.budgets, budget]
        self._commit(budgets=budgets)
        self._persist_collection(self._keys.budgets, budgets)
        self._emit(LedgerEventBuilder.added(
            "budget", budget.id, LedgerEventType.BUDGET_ADDED, {"category": budget.category}
        ))
        return budget

    def delete_budget(self, budget_id: str) -> bool:
        self._require_ready()
        remaining = [b for b in self._snapshot.budgets if b.id != budget_id]
        if len(remaining) == len(self._snapshot.budgets):
            return False
        self._commit(budgets=remaining)
        self._persist_collection(self._keys.budgets, remaining)
        self._emit(LedgerEventBuilder.deleted("budget", budget_id, LedgerEventType.BUDGET_DELETED))
        return True

    # =========================================================================
    # GOALS
    # =========================================================================

    def add_goal(self, draft: SavingsGoalDraft) -> SavingsGoal:
        self._require_ready()
        goal = SavingsGoal(id=generate_id(), **draft.model_dump(exclude={"id"}))
        goals = [*self._snapshot.goals, goal]
        self._commit(goals=goals)
        self._persist_collection(self._keys.goals, goals)
        self._emit(LedgerEventBuilder.added("goal", goal.id, LedgerEventType.GOAL_ADDED))
        return goal

    def update_goal_amount(
        self,
        goal_id: str,
        delta: Union[Decimal, int, float, str],
    ) -> Optional[SavingsGoal]:
        """
        Deposit (positive delta) into or withdraw (negative delta) from a goal.

        The balance is floored at zero and may exceed the target.
        Returns the updated goal, or None if no goal has this id.
        """
        self._require_ready()
        amount = delta if isinstance(delta, Decimal) else Decimal(str(delta))

        updated: Optional[SavingsGoal] = None
        clamped = False
        goals = []
        for goal in self._snapshot.goals:
            if goal.id == goal_id:
                raw_total = goal.current_amount + amount
                goal = goal.model_copy(update={"current_amount": max(Decimal("0"), raw_total)})
                updated = goal
                clamped = raw_total < 0
            goals.append(goal)

        if updated is None:
            return None

        self._commit(goals=goals)
        self._persist_collection(self._keys.goals, goals)
        self._emit(LedgerEventBuilder.goal_amount_updated(
            goal_id, str(amount), str(updated.current_amount), clamped
        ))
        return updated

    def delete_goal(self, goal_id: str) -> bool:
        self._require_ready()
        remaining = [g for g in self._snapshot.goals if g.id != goal_id]
        if len(remaining) == len(self._snapshot.goals):
            return False
        self._commit(goals=remaining)
        self._persist_collection(self._keys.goals, remaining)
        self._emit(LedgerEventBuilder.deleted("goal", goal_id, LedgerEventType.GOAL_DELETED))
        return True

    # =========================================================================
    # SINGLETONS
    # =========================================================================

    def set_mortgage(self, details: MortgageDetails) -> None:
        """Replace the mortgage wholesale."""
        self._require_ready()
        self._commit(mortgage=details)
        self._persist_singleton(self._keys.mortgage, details)
        self._emit(LedgerEventBuilder.singleton_changed("mortgage", LedgerEventType.MORTGAGE_SET))

    def clear_mortgage(self) -> None:
        """Remove the mortgage and its persisted key."""
        self._require_ready()
        self._commit(mortgage=None)
        self._persist_singleton(self._keys.mortgage, None)
        self._emit(LedgerEventBuilder.singleton_changed("mortgage", LedgerEventType.MORTGAGE_CLEARED))

    def set_super_details(self, details: SuperDetails) -> None:
        self._require_ready()
        self._commit(super_details=details)
        self._persist_singleton(self._keys.super_details, details)
        self._emit(LedgerEventBuilder.singleton_changed("super", LedgerEventType.SUPER_SET))

    def clear_super(self) -> None:
        self._require_ready()
        self._commit(super_details=None)
        self._persist_singleton(self._keys.super_details, None)
        self._emit(LedgerEventBuilder.singleton_changed("super", LedgerEventType.SUPER_CLEARED))

    # =========================================================================
    # INSURANCE
    # =========================================================================

    def add_insurance(self, draft: InsurancePolicyDraft) -> InsurancePolicy:
        self._require_ready()
        policy = InsurancePolicy(id=generate_id(), **draft.model_dump(exclude={"id"}))
        policies = [*self._snapshot.insurance_policies, policy]
        self._commit(insurance_policies=policies)
        self._persist_collection(self._keys.insurance, policies)
        self._emit(LedgerEventBuilder.added(
            "insurance", policy.id, LedgerEventType.INSURANCE_ADDED, {"type": policy.type.value}
        ))
        return policy

    def delete_insurance(self, policy_id: str) -> bool:
        self._require_ready()
        remaining = [p for p in self._snapshot.insurance_policies if p.id != policy_id]
        if len(remaining) == len(self._snapshot.insurance_policies):
            return False
        self._commit(insurance_policies=remaining)
        self._persist_collection(self._keys.insurance, remaining)
        self._emit(LedgerEventBuilder.deleted(
            "insurance", policy_id, LedgerEventType.INSURANCE_DELETED
        ))
        return True

    # =========================================================================
    # PROFILE
    # =========================================================================

    def set_profile_mode(self, mode: Union[ProfileMode, str]) -> None:
        self._require_ready()
        mode = ProfileMode(mode)
        self._commit(profile_mode=mode)
        self._persist_text(self._keys.profile_mode, mode.value)
        self._emit(LedgerEventBuilder.profile_changed(LedgerEventType.PROFILE_MODE_SET, mode.value))

    def set_partner_name(self, name: str) -> None:
        self._require_ready()
        self._commit(partner_name=name)
        self._persist_text(self._keys.partner_name, name)
        self._emit(LedgerEventBuilder.profile_changed(LedgerEventType.PARTNER_NAME_SET, name))
