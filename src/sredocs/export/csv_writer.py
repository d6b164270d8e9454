"""CSV serialization for parsed tables."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
import logging
from pathlib import Path

from sredocs.parsing.batch import BatchResult
from sredocs.parsing.config import OutputGranularity
from sredocs.parsing.models import Table

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TableWriteError(Exception):
    """A table could not be written to its destination."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


def output_name(document_name: str) -> str:
    return f"{document_name}.csv"


def write_table(table: Table, destination: str | Path) -> Path:
    """Write header plus rows to ``destination``, replacing any existing file."""

    target = Path(destination)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.writer(handle)
            writer.writerow(table.header)
            writer.writerows(table.rows)
    except OSError as exc:
        raise TableWriteError(target, f"Failed to write table: {exc}") from exc

    logger.info("Wrote %d rows to %s", len(table), target)
    return target


@dataclass(slots=True)
class BatchWriteResult:
    """Paths that were written plus the outputs that failed."""

    written: list[Path] = field(default_factory=list)
    failures: list[TableWriteError] = field(default_factory=list)

    def error_details(self) -> list[dict[str, str]]:
        return [{"path": str(failure.path), "error": failure.message} for failure in self.failures]


def write_batch(
    result: BatchResult,
    output_dir: str | Path,
    granularity: OutputGranularity = OutputGranularity.DOCUMENT,
) -> BatchWriteResult:
    """Write a batch either as one CSV per document or one CSV per kind.

    A failed output is recorded and the remaining outputs are still written.
    """

    root = Path(output_dir)
    if granularity is OutputGranularity.KIND:
        outputs = [(table, root / output_name(kind.value)) for kind, table in result.tables.items()]
    else:
        outputs = [
            (Table(header=parsed.header, rows=[parsed.record]), root / output_name(parsed.name))
            for parsed in result.documents
        ]

    report = BatchWriteResult()
    for table, destination in outputs:
        try:
            report.written.append(write_table(table, destination))
        except TableWriteError as exc:
            logger.error("Write failed for %s: %s", exc.path, exc.message)
            report.failures.append(exc)
    return report
