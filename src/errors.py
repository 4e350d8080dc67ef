"""Exceptions raised while replaying a transaction log."""

from decimal import Decimal
from typing import Mapping, Optional


class PaymentsError(Exception):
    """Base exception for the payments ledger."""


class ConfigurationError(PaymentsError):
    """Raised when engine configuration is invalid."""


class SourceReadFailure(PaymentsError):
    """Raised when the record source cannot produce further records. Fatal."""


class TransactionError(PaymentsError):
    """
    A single transaction could not be applied.
    Never fatal: the transaction is dropped and processing continues.
    """

    def __init__(self, message: str, client_id: Optional[int] = None, transaction_id: Optional[int] = None):
        super().__init__(message)
        self.client_id = client_id
        self.transaction_id = transaction_id


class MalformedRecord(TransactionError):
    def __init__(self, reason: str, row: Optional[Mapping] = None):
        super().__init__(f"Malformed record {dict(row) if row is not None else None}: {reason}")
        self.reason = reason
        self.row = row


class DuplicateTransactionId(TransactionError):
    def __init__(self, client_id: int, transaction_id: int):
        super().__init__(f"tx {transaction_id}: transaction id already used", client_id, transaction_id)


class AccountLocked(TransactionError):
    def __init__(self, client_id: int, transaction_id: int):
        super().__init__(f"tx {transaction_id}: account {client_id} is locked", client_id, transaction_id)


class InsufficientFunds(TransactionError):
    def __init__(self, client_id: int, transaction_id: int, available: Decimal, requested: Decimal):
        super().__init__(
            f"tx {transaction_id}: insufficient funds (available {available}, requested {requested})",
            client_id,
            transaction_id,
        )
        self.available = available
        self.requested = requested


class UnknownOrIneligibleDispute(TransactionError):
    def __init__(self, client_id: int, transaction_id: int, reason: str):
        super().__init__(f"tx {transaction_id}: {reason}", client_id, transaction_id)
        self.reason = reason


class BalanceLimitExceeded(TransactionError):
    def __init__(self, client_id: int, transaction_id: int):
        super().__init__(
            f"tx {transaction_id}: resulting balance for client {client_id} cannot be represented exactly",
            client_id,
            transaction_id,
        )
