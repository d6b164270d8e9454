"""Field schema loading from JSON definitions shipped with the package."""

from __future__ import annotations

from functools import lru_cache
import json
from pathlib import Path
from typing import Any, Mapping

from sredocs.parsing.models import DocumentKind, FieldDefinition, FieldSchema
from sredocs.parsing.rules import rule_from_dict

_SCHEMA_DIR = Path(__file__).parent / "definitions"
SCHEMA_KINDS = (DocumentKind.CHARTER, DocumentKind.POSTMORTEM)


def schema_from_dict(data: Mapping[str, Any]) -> FieldSchema:
    """Build a schema from its JSON representation."""

    kind = str(data.get("kind") or "").strip()
    if not kind:
        raise ValueError("Schema requires a non-empty 'kind'")

    raw_fields = data.get("fields")
    if not isinstance(raw_fields, list):
        raise ValueError(f"Schema '{kind}' requires a 'fields' list")

    fields: list[FieldDefinition] = []
    for raw_field in raw_fields:
        if not isinstance(raw_field, dict):
            raise ValueError(f"Schema '{kind}' has a field entry that is not an object")
        name = str(raw_field.get("name") or "").strip()
        rule_data = raw_field.get("rule")
        if rule_data is None:
            rule_data = {"type": "marker", "start": name}
        if not isinstance(rule_data, dict):
            raise ValueError(f"Schema '{kind}' field '{name}' has an invalid rule")
        fields.append(FieldDefinition(name=name, rule=rule_from_dict(rule_data)))

    end_markers = tuple(str(marker) for marker in data.get("end_markers") or ())
    return FieldSchema(kind=kind, fields=tuple(fields), end_markers=end_markers)


def load_schema(path: str | Path) -> FieldSchema:
    """Load a schema JSON file."""

    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Failed to load schema {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Schema {source} must contain a JSON object")
    return schema_from_dict(data)


@lru_cache(maxsize=None)
def default_schema(kind: DocumentKind) -> FieldSchema:
    """Return the packaged schema for a document kind."""

    if kind not in SCHEMA_KINDS:
        raise ValueError(f"No schema defined for document kind: {kind.value}")
    return load_schema(_SCHEMA_DIR / f"{kind.value}.json")


def load_schemas(schema_dir: str | Path | None = None) -> dict[DocumentKind, FieldSchema]:
    """Return schemas for every kind, preferring ``<kind>.json`` in ``schema_dir``."""

    schemas: dict[DocumentKind, FieldSchema] = {}
    for kind in SCHEMA_KINDS:
        override = Path(schema_dir) / f"{kind.value}.json" if schema_dir is not None else None
        if override is not None and override.is_file():
            schemas[kind] = load_schema(override)
        else:
            schemas[kind] = default_schema(kind)
    return schemas
