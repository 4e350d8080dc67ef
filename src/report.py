import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import AMOUNT_PRECISION, AccountSnapshot

REPORT_FIELDS = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 fractional digits."""
    return f"{value.quantize(AMOUNT_PRECISION):f}"


def write_report(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> int:
    """Write one CSV row per account. Returns the number of accounts written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(REPORT_FIELDS)
    count = 0
    for snapshot in snapshots:
        writer.writerow([
            snapshot.client,
            format_decimal(snapshot.available),
            format_decimal(snapshot.held),
            format_decimal(snapshot.total),
            str(snapshot.locked).lower(),
        ])
        count += 1
    return count
