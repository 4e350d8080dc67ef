import logging
from typing import Callable, Optional

from errors import TransactionError, UnknownOrIneligibleDispute
from ledger import Ledger
from models import ProcessingResult, Transaction, TransactionType

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[TransactionError], None]


class TransactionProcessor:
    """
    Applies transactions to a ledger.
    Returns ProcessingResult to indicate the outcome; per-transaction errors are
    logged and forwarded to error_handler, never raised.
    """

    def __init__(self, ledger: Ledger, error_handler: Optional[ErrorHandler] = None):
        self._ledger = ledger
        self._error_handler = error_handler

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the ledger
            REJECTED: Deposit or withdrawal refused (duplicate id, locked account, insufficient funds)
            IGNORED: Dispute, resolve or chargeback that does not apply to any eligible deposit
        """
        try:
            self._dispatch(transaction)
        except UnknownOrIneligibleDispute as e:
            logger.info(f"{transaction.transaction_type.value.capitalize()} ignored: {e}")
            self.report_error(e)
            return ProcessingResult.IGNORED
        except TransactionError as e:
            logger.warning(f"{transaction.transaction_type.value.capitalize()} rejected: {e}")
            self.report_error(e)
            return ProcessingResult.REJECTED
        return ProcessingResult.SUCCESS

    def report_error(self, error: TransactionError) -> None:
        if self._error_handler is not None:
            self._error_handler(error)

    def _dispatch(self, transaction: Transaction) -> None:
        client_id = transaction.client_id
        transaction_id = transaction.transaction_id

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._ledger.apply_deposit(client_id, transaction_id, transaction.amount)
            case TransactionType.WITHDRAWAL:
                self._ledger.apply_withdrawal(client_id, transaction_id, transaction.amount)
            case TransactionType.DISPUTE:
                self._ledger.apply_dispute(client_id, transaction_id)
            case TransactionType.RESOLVE:
                self._ledger.apply_resolve(client_id, transaction_id)
            case TransactionType.CHARGEBACK:
                self._ledger.apply_chargeback(client_id, transaction_id)
