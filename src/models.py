from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional

# Smallest representable unit of money.
AMOUNT_PRECISION = Decimal("0.0001")


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    IGNORED = "ignored"
    MALFORMED = "malformed"


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"

    def can_transition_to(self, target: "DisputeState") -> bool:
        return target in _DISPUTE_TRANSITIONS[self]


# Resolve returns a disputed record to NORMAL; CHARGED_BACK is terminal.
_DISPUTE_TRANSITIONS: Dict[DisputeState, FrozenSet[DisputeState]] = {
    DisputeState.NORMAL: frozenset({DisputeState.DISPUTED}),
    DisputeState.DISPUTED: frozenset({DisputeState.NORMAL, DisputeState.CHARGED_BACK}),
    DisputeState.CHARGED_BACK: frozenset(),
}


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionRecord:
    """Stored deposit, kept for dispute lookups."""

    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.NORMAL

    @property
    def disputed(self) -> bool:
        return self.state is not DisputeState.NORMAL


class AccountSnapshot(NamedTuple):
    client: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(self.client_id, self.available, self.held, self.total, self.locked)


class ProcessingStats:
    """Counters for tracking processing outcomes."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.ignored = 0
        self.malformed = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        elif result == ProcessingResult.REJECTED:
            self.rejected += 1
        elif result == ProcessingResult.IGNORED:
            self.ignored += 1
        elif result == ProcessingResult.MALFORMED:
            self.malformed += 1

    def __str__(self) -> str:
        return f"Processed: {self.processed}, Rejected: {self.rejected}, Ignored: {self.ignored}, Malformed: {self.malformed}"
