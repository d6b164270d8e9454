"""Locate schema fields inside document text and emit one record per document.

Each field's rule finds its earliest start boundary. The value then runs until
the first boundary that follows it, where boundaries are the start positions of
every marker or regex field in the schema, every explicit end marker of a marker
field, and the schema's end markers. Fields
whose start boundary is absent yield an empty string, so record width always
equals schema length.
"""

from __future__ import annotations

from bisect import bisect_left

from sredocs.parsing.decoding import decode_document
from sredocs.parsing.models import Document, FieldSchema, Record
from sredocs.parsing.normalization import clean_span, normalize_newlines
from sredocs.parsing.rules import compile_heading


def extract_record(text: str, schema: FieldSchema) -> Record:
    """Extract one value per schema field from ``text``."""

    text = normalize_newlines(text)
    boundaries = _collect_boundaries(text, schema)

    values: list[str] = []
    for definition in schema:
        match = definition.rule.find(text)
        if match is None:
            values.append("")
            continue

        end = match.content_end
        if match.section:
            index = bisect_left(boundaries, match.content_start)
            limit = boundaries[index] if index < len(boundaries) else len(text)
            end = limit if end is None else min(end, limit)
        values.append(clean_span(text[match.content_start:end]))

    return tuple(values)


def extract_document(document: Document, schema: FieldSchema) -> Record:
    """Decode a raw document and extract its record.

    Raises ``ExtractionError`` naming the document when the payload is not text.
    """

    text = decode_document(document.content, document.name)
    return extract_record(text, schema)


def _collect_boundaries(text: str, schema: FieldSchema) -> list[int]:
    positions: set[int] = set()
    for definition in schema:
        positions.update(definition.rule.boundaries(text))
    if schema.end_markers:
        pattern = compile_heading(tuple(schema.end_markers))
        positions.update(match.start() for match in pattern.finditer(text))
    return sorted(positions)
