import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import MalformedRecord
from models import Transaction, TransactionType
from normalizer import TransactionNormalizer


def row(type_="deposit", client="1", tx="1", amount="1.0"):
    return {"type": type_, "client": client, "tx": tx, "amount": amount}


class TestTransactionNormalizer:
    def setup_method(self):
        self.normalizer = TransactionNormalizer()

    def test_deposit(self):
        transaction = self.normalizer.normalize(row(amount="10.5"))

        assert transaction == Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("10.5"))

    def test_whitespace_in_keys_and_values(self):
        raw = {"type": "  withdrawal ", " client": " 55     ", " tx": "     123 ", " amount": "    17.64  "}

        transaction = self.normalizer.normalize(raw)

        assert transaction == Transaction(TransactionType.WITHDRAWAL, 55, 123, Decimal("17.64"))

    def test_type_case_insensitive(self):
        assert self.normalizer.normalize(row(type_="ChargeBack", amount="")).transaction_type == TransactionType.CHARGEBACK

    @pytest.mark.parametrize("type_", ["dispute", "resolve", "chargeback"])
    def test_amount_ignored_for_dispute_kinds(self, type_):
        assert self.normalizer.normalize(row(type_=type_, amount="99")).amount is None
        assert self.normalizer.normalize(row(type_=type_, amount=None)).amount is None

    def test_short_row_without_amount(self):
        raw = {"type": "dispute", "client": "2", "tx": "8", "amount": None}

        assert self.normalizer.normalize(raw) == Transaction(TransactionType.DISPUTE, 2, 8)

    def test_extra_columns_ignored(self):
        raw = {"type": "deposit", "client": "2", "tx": "8", "amount": "1", None: ["surplus"]}

        assert self.normalizer.normalize(raw).amount == Decimal("1")

    @pytest.mark.parametrize("amount, expected", [
        ("5.7245462362", "5.7245"),
        ("5.72459", "5.7245"),
        ("5.72451", "5.7245"),
        ("3", "3.0000"),
        ("1e2", "100.0000"),
    ])
    def test_amount_truncated_to_four_places(self, amount, expected):
        assert self.normalizer.normalize(row(amount=amount)).amount == Decimal(expected)

    def test_id_bounds_accepted(self):
        transaction = self.normalizer.normalize(row(client="65535", tx="4294967295"))

        assert transaction.client_id == 65535
        assert transaction.transaction_id == 4294967295

    @pytest.mark.parametrize("raw, reason", [
        (row(type_="bacon"), "unknown transaction type"),
        (row(type_=""), "missing required field 'type'"),
        (row(client=""), "missing required field 'client'"),
        (row(tx=None), "missing required field 'tx'"),
        (row(amount=""), "missing required field 'amount'"),
        (row(type_="withdrawal", amount=None), "missing required field 'amount'"),
        (row(client="invalidclient"), "unsigned integer"),
        (row(client="-100"), "unsigned integer"),
        (row(client="1.0"), "unsigned integer"),
        (row(client="65536"), "out of range"),
        (row(tx="4294967296"), "out of range"),
        (row(amount="invalidamount"), "not a number"),
        (row(amount="  13  122   . 99 , 5"), "not a number"),
        (row(amount="-1"), "must be positive"),
        (row(amount="0"), "must be positive"),
        (row(amount="0.00001"), "must be positive"),
        (row(amount="NaN"), "not finite"),
        (row(amount="Infinity"), "not finite"),
        (row(amount="1e40"), "precision"),
        ({}, "missing required field 'type'"),
    ])
    def test_malformed(self, raw, reason):
        with pytest.raises(MalformedRecord) as exc_info:
            self.normalizer.normalize(raw)

        assert reason in exc_info.value.reason
        assert exc_info.value.row == raw
