import logging
from typing import Dict, Iterable, Mapping, Optional

from config import EngineConfig
from errors import MalformedRecord
from ledger import Ledger
from models import ClientAccount, ProcessingResult, ProcessingStats
from normalizer import TransactionNormalizer
from record_source import CsvRecordSource
from transaction_processor import ErrorHandler, TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a transaction log against a ledger, one record at a time, in source order.
    Malformed and rejected records are skipped; a SourceReadFailure aborts the run.
    """

    def __init__(self, config: Optional[EngineConfig] = None, error_handler: Optional[ErrorHandler] = None):
        self._config = config or EngineConfig()
        self._ledger = Ledger()
        self._normalizer = TransactionNormalizer()
        self._processor = TransactionProcessor(self._ledger, error_handler)
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        source = CsvRecordSource(filepath, buffer_size=self._config.buffer_size)
        return self.process_source(source)

    def process_source(self, records: Iterable[Mapping]) -> Dict[int, ClientAccount]:
        logger.info(f"Starting processing (buffer_size={self._config.buffer_size})")
        for row in records:
            self.process_record(row)
        logger.info(f"Processing complete. {self._stats}")
        return self._ledger.accounts()

    def process_record(self, row: Mapping) -> ProcessingResult:
        try:
            transaction = self._normalizer.normalize(row)
        except MalformedRecord as e:
            logger.warning(f"Skipping row: {e}")
            self._processor.report_error(e)
            result = ProcessingResult.MALFORMED
        else:
            result = self._processor.process_transaction(transaction)

        self._stats.record(result)
        return result
