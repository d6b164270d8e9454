"""Canonical data structures shared by the extractor, batch parser and writers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from sredocs.parsing.rules import Rule

Record = tuple[str, ...]


class DocumentKind(str, Enum):
    """Closed set of document kinds a filename can classify into."""

    CHARTER = "charter"
    POSTMORTEM = "postmortem"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """A named extraction target and the rule that locates it."""

    name: str
    rule: Rule


@dataclass(frozen=True, slots=True)
class FieldSchema:
    """Ordered field definitions for one document kind.

    Field order fixes the output column order. ``end_markers`` are headings that
    terminate any open section (e.g. an appendix) without being fields themselves.
    """

    kind: str
    fields: tuple[FieldDefinition, ...]
    end_markers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError(f"Schema '{self.kind}' must define at least one field")

        seen: set[str] = set()
        for definition in self.fields:
            if not definition.name:
                raise ValueError(f"Schema '{self.kind}' contains a field without a name")
            if definition.name in seen:
                raise ValueError(f"Schema '{self.kind}' defines field '{definition.name}' more than once")
            seen.add(definition.name)

    @property
    def header(self) -> tuple[str, ...]:
        return tuple(definition.name for definition in self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self.fields)


@dataclass(frozen=True, slots=True)
class Document:
    """Raw document payload addressed by its source filename."""

    name: str
    content: bytes


@dataclass(slots=True)
class Table:
    """Header plus the records accumulated during a batch run."""

    header: tuple[str, ...]
    rows: list[Record] = field(default_factory=list)

    @classmethod
    def for_schema(cls, schema: FieldSchema) -> "Table":
        return cls(header=schema.header)

    def append(self, record: Record) -> None:
        """Append a record, rejecting rows that do not match the header width."""

        if len(record) != len(self.header):
            raise ValueError(f"Record has {len(record)} values, table header has {len(self.header)} columns")
        self.rows.append(tuple(record))

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """One successfully extracted document."""

    name: str
    kind: DocumentKind
    header: tuple[str, ...]
    record: Record
