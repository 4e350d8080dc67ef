import logging
from decimal import Decimal, Inexact, InvalidOperation, localcontext
from typing import Dict, Iterator, Optional, Set, Tuple

from errors import (
    AccountLocked,
    BalanceLimitExceeded,
    DuplicateTransactionId,
    InsufficientFunds,
    UnknownOrIneligibleDispute,
)
from models import AMOUNT_PRECISION, AccountSnapshot, ClientAccount, DisputeState, TransactionRecord

logger = logging.getLogger(__name__)


class Ledger:
    """
    Owns client accounts and stored deposits for dispute lookups.
    All balance mutation goes through the apply_* methods; a failing call raises
    a TransactionError and leaves state untouched.
    Single owner, not thread-safe.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._records: Dict[int, TransactionRecord] = {}
        # Withdrawals are not disputable but still claim their transaction id.
        self._seen_transaction_ids: Set[int] = set()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_record(self, transaction_id: int) -> Optional[TransactionRecord]:
        """Retrieve stored deposit by ID."""
        return self._records.get(transaction_id)

    def apply_deposit(self, client_id: int, transaction_id: int, amount: Decimal) -> None:
        account = self.get_or_create_account(client_id)
        if account.locked:
            raise AccountLocked(client_id, transaction_id)
        if transaction_id in self._seen_transaction_ids:
            raise DuplicateTransactionId(client_id, transaction_id)
        self._check_representable(account, transaction_id, amount, Decimal("0"))

        account.credit(amount)
        self._seen_transaction_ids.add(transaction_id)
        self._records[transaction_id] = TransactionRecord(client_id=client_id, amount=amount)

    def apply_withdrawal(self, client_id: int, transaction_id: int, amount: Decimal) -> None:
        account = self.get_or_create_account(client_id)
        if account.locked:
            raise AccountLocked(client_id, transaction_id)
        if transaction_id in self._seen_transaction_ids:
            raise DuplicateTransactionId(client_id, transaction_id)
        if account.available < amount:
            raise InsufficientFunds(client_id, transaction_id, account.available, amount)
        self._check_representable(account, transaction_id, -amount, Decimal("0"))

        account.debit(amount)
        self._seen_transaction_ids.add(transaction_id)

    def apply_dispute(self, client_id: int, transaction_id: int) -> None:
        record, account = self._eligible_record(client_id, transaction_id, DisputeState.DISPUTED)
        self._check_representable(account, transaction_id, -record.amount, record.amount)

        record.state = DisputeState.DISPUTED
        account.hold(record.amount)
        if account.available < 0:
            # Funds were withdrawn after the deposit; the hold exceeds what is left.
            logger.warning(
                f"Dispute for tx {transaction_id}: client {client_id} available balance is now negative ({account.available})"
            )

    def apply_resolve(self, client_id: int, transaction_id: int) -> None:
        record, account = self._eligible_record(client_id, transaction_id, DisputeState.NORMAL)
        self._check_representable(account, transaction_id, record.amount, -record.amount)

        record.state = DisputeState.NORMAL
        account.release_hold(record.amount)

    def apply_chargeback(self, client_id: int, transaction_id: int) -> None:
        record, account = self._eligible_record(client_id, transaction_id, DisputeState.CHARGED_BACK)
        self._check_representable(account, transaction_id, Decimal("0"), -record.amount)

        record.state = DisputeState.CHARGED_BACK
        account.remove_held(record.amount)
        account.locked = True

    def _eligible_record(
        self, client_id: int, transaction_id: int, target: DisputeState
    ) -> Tuple[TransactionRecord, ClientAccount]:
        """
        Look up a stored deposit and check that it may move to `target`.
        Returns the record and its owning account; raises UnknownOrIneligibleDispute
        when the transition is not allowed. Does not mutate anything.
        """
        record = self._records.get(transaction_id)
        if record is None:
            raise UnknownOrIneligibleDispute(client_id, transaction_id, "no disputable transaction with this id")

        if record.client_id != client_id:
            raise UnknownOrIneligibleDispute(
                client_id, transaction_id, f"client mismatch (transaction belongs to client {record.client_id})"
            )

        if not record.state.can_transition_to(target):
            raise UnknownOrIneligibleDispute(
                client_id, transaction_id, f"cannot move from {record.state.value} to {target.value}"
            )

        return record, self._accounts[record.client_id]

    @staticmethod
    def _check_representable(
        account: ClientAccount, transaction_id: int, available_delta: Decimal, held_delta: Decimal
    ) -> None:
        """
        Raise BalanceLimitExceeded unless the resulting available, held and total
        balances are exact to AMOUNT_PRECISION in the current decimal context.
        """
        with localcontext() as ctx:
            ctx.traps[Inexact] = True
            try:
                available = account.available + available_delta
                held = account.held + held_delta
                for value in (available, held, available + held):
                    value.quantize(AMOUNT_PRECISION)
            except (Inexact, InvalidOperation):
                raise BalanceLimitExceeded(account.client_id, transaction_id) from None

    def accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshots(self) -> Iterator[AccountSnapshot]:
        for account in self._accounts.values():
            yield account.snapshot()

    def __len__(self) -> int:
        return len(self._accounts)
