"""Batch parsing orchestrator: classify, extract and accumulate tables."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Iterable, Mapping

from sredocs.parsing.classifier import classify_document
from sredocs.parsing.config import ParseKind, ParseSettings
from sredocs.parsing.errors import ConfigurationError, DocumentReadError, ExtractionError
from sredocs.parsing.extractor import extract_document
from sredocs.parsing.models import Document, DocumentKind, FieldSchema, ParsedDocument, Table
from sredocs.parsing.schemas import SCHEMA_KINDS, load_schemas

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParseRunStats:
    scanned: int = 0
    parsed: int = 0
    skipped: int = 0
    errors: int = 0
    duration_ms: int = 0
    error_details: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, int | list[dict[str, str]]]:
        return {
            "scanned": self.scanned,
            "parsed": self.parsed,
            "skipped": self.skipped,
            "errors": self.errors,
            "duration_ms": self.duration_ms,
            "error_details": self.error_details,
        }


@dataclass(slots=True)
class BatchResult:
    """Tables per kind plus the per-document records in processing order."""

    tables: dict[DocumentKind, Table] = field(default_factory=dict)
    documents: list[ParsedDocument] = field(default_factory=list)
    stats: ParseRunStats = field(default_factory=ParseRunStats)


def collect_documents(target: Path) -> list[Path]:
    """List regular, non-hidden files directly under ``target`` sorted by name."""

    if not target.exists():
        raise ConfigurationError(f"Parse path does not exist: {target}")
    if not target.is_dir():
        raise ConfigurationError(f"Parse path is not a directory: {target}")

    files = sorted(
        (path for path in target.iterdir() if path.is_file() and not path.name.startswith(".")),
        key=lambda path: path.name,
    )
    if not files:
        raise ConfigurationError(f"No files found in {target}")
    return files


def read_document(path: Path) -> Document:
    """Read a source file into a ``Document`` named after the file."""

    try:
        return Document(name=path.name, content=path.read_bytes())
    except OSError as exc:
        raise DocumentReadError(path, f"Failed to read source file: {exc}") from exc


class BatchParser:
    """Drive extraction across documents and accumulate one table per kind."""

    def __init__(
        self,
        kind: ParseKind = ParseKind.AUTO,
        schemas: Mapping[DocumentKind, FieldSchema] | None = None,
    ) -> None:
        self._kind = kind
        self._schemas = dict(schemas) if schemas is not None else load_schemas()

        required = SCHEMA_KINDS if kind is ParseKind.AUTO else (DocumentKind(kind.value),)
        missing = [item.value for item in required if item not in self._schemas]
        if missing:
            raise ConfigurationError(f"No schema configured for document kind: {', '.join(missing)}")

    @classmethod
    def from_settings(cls, settings: ParseSettings) -> "BatchParser":
        try:
            schemas = load_schemas(settings.schema_dir)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(kind=settings.kind, schemas=schemas)

    @property
    def schemas(self) -> dict[DocumentKind, FieldSchema]:
        return dict(self._schemas)

    def resolve_kind(self, name: str) -> DocumentKind:
        """Return the kind to parse ``name`` as, or UNKNOWN when it does not apply."""

        if self._kind is ParseKind.AUTO:
            return classify_document(name)
        return DocumentKind(self._kind.value)

    def parse_directory(self, path: str | Path) -> BatchResult:
        """Parse every file in a directory listing."""

        started = time.perf_counter()
        result = BatchResult()
        files = collect_documents(Path(path))

        for file_path in files:
            result.stats.scanned += 1
            kind = self.resolve_kind(file_path.name)
            if kind is DocumentKind.UNKNOWN:
                self._skip(result, file_path.name)
                continue
            try:
                document = read_document(file_path)
            except DocumentReadError as exc:
                self._record_error(result, str(file_path), exc)
                continue
            self._parse_one(result, document, kind)

        result.stats.duration_ms = int((time.perf_counter() - started) * 1000)
        return result

    def parse_documents(self, documents: Iterable[Document]) -> BatchResult:
        """Parse already-loaded documents in the given order."""

        started = time.perf_counter()
        result = BatchResult()

        for document in documents:
            result.stats.scanned += 1
            kind = self.resolve_kind(document.name)
            if kind is DocumentKind.UNKNOWN:
                self._skip(result, document.name)
                continue
            self._parse_one(result, document, kind)

        result.stats.duration_ms = int((time.perf_counter() - started) * 1000)
        return result

    def _parse_one(self, result: BatchResult, document: Document, kind: DocumentKind) -> None:
        schema = self._schemas[kind]
        try:
            record = extract_document(document, schema)
        except ExtractionError as exc:
            self._record_error(result, document.name, exc)
            return

        table = result.tables.get(kind)
        if table is None:
            table = Table.for_schema(schema)
            result.tables[kind] = table
        table.append(record)
        result.documents.append(
            ParsedDocument(name=document.name, kind=kind, header=schema.header, record=record)
        )
        result.stats.parsed += 1
        logger.debug("Parsed %s as %s", document.name, kind.value)

    def _skip(self, result: BatchResult, name: str) -> None:
        result.stats.skipped += 1
        logger.info("Skipping %s: matches no document kind", name)

    def _record_error(self, result: BatchResult, source: str, exc: Exception) -> None:
        result.stats.errors += 1
        result.stats.error_details.append({"source_path": source, "error": str(exc)})
        logger.warning("Skipping %s: %s", source, exc)
