from __future__ import annotations

import pytest

from sredocs.parsing.errors import ExtractionError
from sredocs.parsing.extractor import extract_document, extract_record
from sredocs.parsing.models import Document, FieldDefinition, FieldSchema
from sredocs.parsing.rules import FixedPositionRule, MarkerRule, RegexRule


def _schema(*names: str, end_markers: tuple[str, ...] = ()) -> FieldSchema:
    return FieldSchema(
        kind="test",
        fields=tuple(FieldDefinition(name=name, rule=MarkerRule(name)) for name in names),
        end_markers=end_markers,
    )


def test_sections_run_until_next_heading() -> None:
    record = extract_record("Summary\nReduce latency.\nOwner\nAlice", _schema("Summary", "Owner"))

    assert record == ("Reduce latency.", "Alice")


def test_missing_section_yields_empty_value() -> None:
    record = extract_record("Owner\nAlice", _schema("Summary", "Owner"))

    assert record == ("", "Alice")


def test_document_without_boundaries_yields_all_empty_record() -> None:
    schema = _schema("Summary", "Owner", "Impact")

    record = extract_record("Just some prose.\nNothing that looks like a heading.", schema)

    assert record == ("", "", "")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Summary\nonly one",
        "Impact\nx\nOwner\ny\nSummary\nz",
        "\n\n\n",
    ],
)
def test_record_width_always_matches_schema(text: str) -> None:
    schema = _schema("Summary", "Owner", "Impact")

    assert len(extract_record(text, schema)) == len(schema)


_MIXED_SCHEMA = FieldSchema(
    kind="test",
    fields=(
        FieldDefinition(name="Title", rule=FixedPositionRule()),
        FieldDefinition(name="Date", rule=RegexRule(r"^date:\s*(?P<value>.+)$")),
        FieldDefinition(name="Impact", rule=MarkerRule("Impact", end="Timeline")),
        FieldDefinition(name="Owner", rule=MarkerRule("Owner", aliases=("Owners",))),
    ),
    end_markers=("Appendix",),
)


@pytest.mark.parametrize(
    ("text", "schema"),
    [
        ("Summary\nReduce latency.\nOwner\nAlice", _schema("Summary", "Owner")),
        ("## Summary\r\nReduce latency.\r\n\r\n\r\n## Owner\r\n**Alice**\r\n", _schema("Summary", "Owner")),
        ("Summary\nReal summary.\nAppendix\nraw logs", _schema("Summary", end_markers=("Appendix",))),
        (
            "Outage of the frontend\nDate: 2023-04-01\nImpact\nUsers saw errors.\n"
            "Owners: SRE\nTimeline\n10:00 page\nAppendix\nlogs",
            _MIXED_SCHEMA,
        ),
    ],
)
def test_extraction_is_repeatable(text: str, schema: FieldSchema) -> None:
    first = extract_record(text, schema)

    assert extract_record(text, schema) == first
    assert len(first) == len(schema)


def test_earliest_heading_wins_and_later_duplicate_ends_section() -> None:
    text = "Summary\nfirst\nOwner\nAlice\nSummary\nsecond"

    record = extract_record(text, _schema("Summary", "Owner"))

    assert record == ("first", "Alice")


def test_label_form_captures_same_line_and_continuation() -> None:
    text = "Incident review\nOwner: Alice\nSummary: Fix it.\nMore detail.\n"

    record = extract_record(text, _schema("Owner", "Summary"))

    assert record == ("Alice", "Fix it.\nMore detail.")


def test_markdown_headings_and_emphasis_are_trimmed() -> None:
    text = "## Summary\n\nReduce latency.\n\n\n\n## Owner\n**Alice**\n"

    record = extract_record(text, _schema("Summary", "Owner"))

    assert record == ("Reduce latency.", "Alice")


def test_blank_line_runs_collapse_inside_values() -> None:
    text = "Summary\nFirst paragraph.   \n\n\n\nSecond paragraph.\n"

    record = extract_record(text, _schema("Summary"))

    assert record == ("First paragraph.\n\nSecond paragraph.",)


def test_heading_words_inside_prose_are_not_boundaries() -> None:
    text = "Summary\nThe owner of this was unclear.\nOwner\nBob"

    record = extract_record(text, _schema("Summary", "Owner"))

    assert record == ("The owner of this was unclear.", "Bob")


def test_heading_followed_by_more_words_is_not_a_match() -> None:
    record = extract_record("Summary of work done\nOwner\nBob", _schema("Summary", "Owner"))

    assert record == ("", "Bob")


def test_end_markers_terminate_sections() -> None:
    schema = _schema("Summary", end_markers=("Appendix",))

    record = extract_record("Summary\nReal summary.\nAppendix\nraw logs", schema)

    assert record == ("Real summary.",)


def test_explicit_end_marker_closes_section() -> None:
    schema = FieldSchema(
        kind="test",
        fields=(FieldDefinition(name="Impact", rule=MarkerRule("Impact", end="Timeline")),),
    )

    record = extract_record("Impact\nUsers saw errors.\nTimeline\n10:00 page", schema)

    assert record == ("Users saw errors.",)


def test_explicit_end_marker_does_not_run_past_next_heading() -> None:
    schema = FieldSchema(
        kind="test",
        fields=(
            FieldDefinition(name="Impact", rule=MarkerRule("Impact", end="Timeline")),
            FieldDefinition(name="Owner", rule=MarkerRule("Owner")),
        ),
    )

    record = extract_record("Impact\nUsers saw errors.\nOwner\nBob\nTimeline\n10:00", schema)

    assert record == ("Users saw errors.", "Bob")


def test_mixed_schema_with_end_markers_and_crlf() -> None:
    text = (
        "Outage of the frontend\r\nDate: 2023-04-01\r\nImpact\r\nUsers saw errors.\r\n"
        "Owners: SRE\r\nTimeline\r\n10:00 page\r\nAppendix\r\nlogs"
    )

    record = extract_record(text, _MIXED_SCHEMA)

    assert record == ("Outage of the frontend", "2023-04-01", "Users saw errors.", "SRE")


def test_windows_line_endings_are_normalized() -> None:
    record = extract_record("Summary\r\nReduce latency.\r\nOwner\r\nAlice\r\n", _schema("Summary", "Owner"))

    assert record == ("Reduce latency.", "Alice")


def test_mixed_rule_variants() -> None:
    schema = FieldSchema(
        kind="test",
        fields=(
            FieldDefinition(name="Title", rule=FixedPositionRule()),
            FieldDefinition(name="Date", rule=RegexRule(r"^date:\s*(?P<value>.+)$")),
            FieldDefinition(name="Summary", rule=MarkerRule("Summary")),
        ),
    )
    text = "\nOutage of the frontend\nDate: 2023-04-01\nSummary\nShort outage."

    record = extract_record(text, schema)

    assert record == ("Outage of the frontend", "2023-04-01", "Short outage.")


def test_regex_match_is_a_section_boundary() -> None:
    schema = FieldSchema(
        kind="test",
        fields=(
            FieldDefinition(name="Summary", rule=MarkerRule("Summary")),
            FieldDefinition(name="Date", rule=RegexRule(r"^date:\s*(?P<value>.+)$")),
        ),
    )

    record = extract_record("Summary\nShort.\nDate: 2023-04-01", schema)

    assert record == ("Short.", "2023-04-01")


def test_extract_document_decodes_bytes() -> None:
    document = Document(name="q3-charter.txt", content="Summary\nReduce latency.\nOwner\nAlice".encode("utf-8"))

    assert extract_document(document, _schema("Summary", "Owner")) == ("Reduce latency.", "Alice")


def test_extract_document_rejects_binary_and_names_document() -> None:
    document = Document(name="broken-postmortem.txt", content=b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")

    with pytest.raises(ExtractionError) as excinfo:
        extract_document(document, _schema("Summary"))

    assert excinfo.value.name == "broken-postmortem.txt"
    assert "broken-postmortem.txt" in str(excinfo.value)
