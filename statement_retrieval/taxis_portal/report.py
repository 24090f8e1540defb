"""
Accumulated report of extracted financial records.
"""

import csv
from pathlib import Path
from typing import Iterable, Iterator

from statement_retrieval.taxis_portal.models import FinancialRecord

REPORT_HEADER = ["name", "Year", "totalIncome", "profit", "employeeCount", "netPayCosts", "averagePay"]


class ReportAccumulator:
    """Append-only, insertion-ordered collection of records; no deduplication."""

    def __init__(self) -> None:
        self._records: list[FinancialRecord] = []

    def append(self, record: FinancialRecord) -> None:
        self._records.append(record)

    def all(self) -> list[FinancialRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FinancialRecord]:
        return iter(self._records)


class CsvReportWriter:
    """
    Writes records as CSV, flushing after every batch.

    The header is written when the file is opened, so an interrupted run
    still leaves a well-formed report of the rows written so far.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._file = None
        self._writer = None

    def open(self) -> "CsvReportWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8", newline="")
        csv.writer(self._file).writerow(REPORT_HEADER)
        # Strings (the entity name) are quoted, numbers are not
        self._writer = csv.writer(self._file, quoting=csv.QUOTE_NONNUMERIC)
        self._file.flush()
        return self

    def write(self, records: Iterable[FinancialRecord]) -> int:
        """Append rows and flush; returns the number of rows written."""
        if self._writer is None:
            raise RuntimeError("Report writer is not open")
        count = 0
        for record in records:
            self._writer.writerow(record.to_row())
            count += 1
        self._file.flush()
        return count

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self) -> "CsvReportWriter":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

