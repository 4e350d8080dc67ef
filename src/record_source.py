import csv
import logging
from contextlib import nullcontext
from itertools import islice
from typing import Dict, Iterator, List, Optional, TextIO

from errors import SourceReadFailure

logger = logging.getLogger(__name__)

RawRecord = Dict[Optional[str], Optional[str]]


class CsvRecordSource:
    """
    Lazy, forward-only reader over a CSV transaction log.

    At most `buffer_size` rows are pulled from the underlying reader at a time.
    Iterating a file-backed source reopens the file, so it can be replayed from
    scratch; a stream-backed source can only be consumed once.
    Any I/O or decoding failure is raised as SourceReadFailure.
    """

    def __init__(self, filepath: Optional[str] = None, buffer_size: int = 1000, stream: Optional[TextIO] = None):
        if (filepath is None) == (stream is None):
            raise ValueError("Exactly one of filepath or stream is required")
        self._filepath = filepath
        self._stream = stream
        self._buffer_size = buffer_size

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    def _open(self):
        if self._stream is not None:
            return nullcontext(self._stream)
        return open(self._filepath, "r", newline="", encoding="utf-8")

    def chunks(self) -> Iterator[List[RawRecord]]:
        """Yield lists of at most buffer_size raw rows."""
        source_name = self._filepath or "<stream>"
        try:
            with self._open() as f:
                reader = csv.DictReader(f)
                while True:
                    chunk = list(islice(reader, self._buffer_size))
                    if not chunk:
                        break
                    logger.debug(f"Read chunk of {len(chunk)} rows from {source_name}")
                    yield chunk
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            raise SourceReadFailure(f"Failed to read records from {source_name}: {e}") from e

    def __iter__(self) -> Iterator[RawRecord]:
        for chunk in self.chunks():
            yield from chunk
