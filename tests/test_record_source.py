import sys
import os
import io

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import SourceReadFailure
from record_source import CsvRecordSource


def write_rows(path, count):
    lines = ["type, client, tx, amount"]
    lines += [f"deposit, 1, {tx_id}, 1.0" for tx_id in range(1, count + 1)]
    path.write_text("\n".join(lines))


class TestCsvRecordSource:
    def test_chunks_bounded_by_buffer_size(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        write_rows(csv_file, 7)

        source = CsvRecordSource(str(csv_file), buffer_size=3)
        chunk_sizes = [len(chunk) for chunk in source.chunks()]

        assert chunk_sizes == [3, 3, 1]
        assert max(chunk_sizes) == source.buffer_size

    def test_iterates_rows_in_order(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        write_rows(csv_file, 5)

        source = CsvRecordSource(str(csv_file), buffer_size=2)
        tx_ids = [row[" tx"].strip() for row in source]

        assert tx_ids == ["1", "2", "3", "4", "5"]

    def test_file_source_can_be_replayed(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        write_rows(csv_file, 4)

        source = CsvRecordSource(str(csv_file), buffer_size=3)

        assert len(list(source)) == 4
        assert len(list(source)) == 4

    def test_is_lazy(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        write_rows(csv_file, 10)

        chunks = CsvRecordSource(str(csv_file), buffer_size=4).chunks()

        assert len(next(chunks)) == 4
        chunks.close()

    def test_header_only(self, tmp_path):
        csv_file = tmp_path / "test.csv"
        write_rows(csv_file, 0)

        assert list(CsvRecordSource(str(csv_file))) == []

    def test_stream_source(self):
        stream = io.StringIO("type,client,tx,amount\ndeposit,1,1,2.0\ndispute,1,1\n")

        rows = list(CsvRecordSource(stream=stream, buffer_size=1))

        assert rows[0] == {"type": "deposit", "client": "1", "tx": "1", "amount": "2.0"}
        assert rows[1]["amount"] is None

    def test_missing_file(self, tmp_path):
        source = CsvRecordSource(str(tmp_path / "missing.csv"))

        with pytest.raises(SourceReadFailure) as exc_info:
            list(source)

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_undecodable_file(self, tmp_path):
        csv_file = tmp_path / "binary.csv"
        csv_file.write_bytes(b"type,client,tx,amount\n\xff\xfe\xfa,1,1,1\n")

        with pytest.raises(SourceReadFailure):
            list(CsvRecordSource(str(csv_file)))

    def test_requires_exactly_one_input(self):
        with pytest.raises(ValueError):
            CsvRecordSource()
        with pytest.raises(ValueError):
            CsvRecordSource("a.csv", stream=io.StringIO())
