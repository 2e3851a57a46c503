import csv
import logging
from typing import TextIO

from httping.sample import Sample

logger = logging.getLogger(__name__)

HEADERS = ["timestamp", "status_code", "latency"]


class OutputError(OSError):
    """The output stream rejected a row; there is no point in probing further."""


class CsvWriter:
    stream: TextIO

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._writer = csv.writer(stream, lineterminator="\n")

    def write_header(self) -> None:
        self._write_row(HEADERS)

    def write_sample(self, sample: Sample) -> None:
        """write_sample writes one row and flushes it, so anyone tailing the stream sees it right away."""
        self._write_row(sample.to_row())

    def _write_row(self, row: list[str]) -> None:
        try:
            self._writer.writerow(row)
            self.stream.flush()
        except OSError as e:
            raise OutputError(f"failed to write {row}: {e}") from e
        logger.debug(f"wrote row {row}")
