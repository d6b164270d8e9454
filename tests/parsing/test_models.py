from __future__ import annotations

import pytest

from sredocs.parsing.models import FieldDefinition, FieldSchema, Table
from sredocs.parsing.rules import MarkerRule


def _schema() -> FieldSchema:
    return FieldSchema(
        kind="test",
        fields=(
            FieldDefinition(name="Summary", rule=MarkerRule("Summary")),
            FieldDefinition(name="Owner", rule=MarkerRule("Owner")),
        ),
    )


def test_schema_exposes_header_in_field_order() -> None:
    schema = _schema()

    assert schema.header == ("Summary", "Owner")
    assert len(schema) == 2
    assert [definition.name for definition in schema] == ["Summary", "Owner"]


def test_schema_rejects_duplicate_and_empty_names() -> None:
    with pytest.raises(ValueError, match="more than once"):
        FieldSchema(
            kind="test",
            fields=(
                FieldDefinition(name="Owner", rule=MarkerRule("Owner")),
                FieldDefinition(name="Owner", rule=MarkerRule("Owners")),
            ),
        )
    with pytest.raises(ValueError, match="without a name"):
        FieldSchema(kind="test", fields=(FieldDefinition(name="", rule=MarkerRule("Owner")),))
    with pytest.raises(ValueError, match="at least one field"):
        FieldSchema(kind="test", fields=())


def test_table_rejects_rows_of_wrong_width() -> None:
    table = Table.for_schema(_schema())
    table.append(("Reduce latency.", "Alice"))

    with pytest.raises(ValueError, match="2 columns"):
        table.append(("only one",))

    assert table.header == ("Summary", "Owner")
    assert table.rows == [("Reduce latency.", "Alice")]
    assert len(table) == 1
