from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Dict, Mapping, Optional

from errors import MalformedRecord
from models import AMOUNT_PRECISION, Transaction, TransactionType

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionNormalizer:
    """
    Converts raw CSV rows into Transactions.
    Raises MalformedRecord for anything that cannot be trusted; never mutates state.
    """

    def normalize(self, row: Mapping[Optional[str], Optional[str]]) -> Transaction:
        # Extra columns land under the None key as a list, short rows have None values.
        fields: Dict[str, str] = {
            key.strip().lower(): (value or "").strip()
            for key, value in row.items()
            if key is not None and not isinstance(value, list)
        }

        type_str = self._required(fields, "type", row).lower()
        try:
            transaction_type = TransactionType(type_str)
        except ValueError:
            raise MalformedRecord(f"unknown transaction type {type_str!r}", row) from None

        client_id = self._parse_id(fields, "client", MAX_CLIENT_ID, row)
        transaction_id = self._parse_id(fields, "tx", MAX_TRANSACTION_ID, row)

        amount = None
        if transaction_type.carries_amount:
            amount = self._parse_amount(self._required(fields, "amount", row), row)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )

    @staticmethod
    def _required(fields: Dict[str, str], name: str, row: Mapping) -> str:
        value = fields.get(name, "")
        if not value:
            raise MalformedRecord(f"missing required field '{name}'", row)
        return value

    def _parse_id(self, fields: Dict[str, str], name: str, upper_bound: int, row: Mapping) -> int:
        value = self._required(fields, name, row)
        if not value.isdecimal():
            raise MalformedRecord(f"field '{name}' must be an unsigned integer, got {value!r}", row)
        parsed = int(value)
        if parsed > upper_bound:
            raise MalformedRecord(f"field '{name}' out of range: {parsed}", row)
        return parsed

    @staticmethod
    def _parse_amount(value: str, row: Mapping) -> Decimal:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise MalformedRecord(f"amount is not a number: {value!r}", row) from None

        if not amount.is_finite():
            raise MalformedRecord(f"amount is not finite: {value!r}", row)

        # Anything past 4 fractional digits is truncated, never rounded up.
        try:
            amount = amount.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)
        except InvalidOperation:
            raise MalformedRecord(f"amount exceeds supported precision: {value!r}", row) from None
        if amount <= 0:
            raise MalformedRecord(f"amount must be positive, got {value!r}", row)
        return amount
