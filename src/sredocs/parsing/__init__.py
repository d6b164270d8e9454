"""Document parsing: schemas, rules, extraction and batch accumulation."""

from .batch import BatchParser, BatchResult, ParseRunStats
from .classifier import classify_document
from .errors import ConfigurationError, DocumentReadError, ExtractionError
from .extractor import extract_document, extract_record
from .models import Document, DocumentKind, FieldDefinition, FieldSchema, ParsedDocument, Record, Table
from .rules import FixedPositionRule, MarkerRule, RegexRule, Rule

__all__ = [
    "BatchParser",
    "BatchResult",
    "ConfigurationError",
    "Document",
    "DocumentKind",
    "DocumentReadError",
    "ExtractionError",
    "FieldDefinition",
    "FieldSchema",
    "FixedPositionRule",
    "MarkerRule",
    "ParseRunStats",
    "ParsedDocument",
    "Record",
    "RegexRule",
    "Rule",
    "Table",
    "classify_document",
    "extract_document",
    "extract_record",
]
