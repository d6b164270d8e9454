"""Runtime configuration for batch document parsing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
from typing import Mapping

from sredocs.parsing.errors import ConfigurationError


class ParseKind(str, Enum):
    """Kind selector: classify per filename, or force one schema for all files."""

    AUTO = "auto"
    CHARTER = "charter"
    POSTMORTEM = "postmortem"


class OutputGranularity(str, Enum):
    """Write one CSV per document, or one CSV per document kind."""

    DOCUMENT = "document"
    KIND = "kind"


DEFAULT_PARSE_KIND = ParseKind.AUTO
DEFAULT_GRANULARITY = OutputGranularity.DOCUMENT


def _parse_choice(enum_type: type[Enum], *, name: str, raw_value: str) -> Enum:
    try:
        return enum_type(raw_value.lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"{name} must be one of: {choices} (got {raw_value!r})") from None


@dataclass(frozen=True, slots=True)
class ParseSettings:
    """Validated settings for one parse run."""

    input_path: Path
    output_path: Path
    kind: ParseKind = DEFAULT_PARSE_KIND
    granularity: OutputGranularity = DEFAULT_GRANULARITY
    schema_dir: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ParseSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        input_raw = (source.get("SREDOCS_PARSE_PATH") or "").strip()
        output_raw = (source.get("SREDOCS_PARSE_OUTPUT_PATH") or "").strip()
        kind_raw = (source.get("SREDOCS_PARSE_KIND") or DEFAULT_PARSE_KIND.value).strip()
        granularity_raw = (source.get("SREDOCS_OUTPUT_GRANULARITY") or DEFAULT_GRANULARITY.value).strip()
        schema_dir_raw = (source.get("SREDOCS_SCHEMA_DIR") or "").strip()

        missing: list[str] = []
        if not input_raw:
            missing.append("SREDOCS_PARSE_PATH")
        if not output_raw:
            missing.append("SREDOCS_PARSE_OUTPUT_PATH")
        if missing:
            missing_text = ", ".join(missing)
            raise ConfigurationError(f"Missing required parse settings: {missing_text}")

        kind = _parse_choice(ParseKind, name="SREDOCS_PARSE_KIND", raw_value=kind_raw)
        granularity = _parse_choice(
            OutputGranularity,
            name="SREDOCS_OUTPUT_GRANULARITY",
            raw_value=granularity_raw,
        )

        schema_dir = Path(schema_dir_raw) if schema_dir_raw else None
        if schema_dir is not None and not schema_dir.is_dir():
            raise ConfigurationError(f"SREDOCS_SCHEMA_DIR must be an existing directory: {schema_dir}")

        return cls(
            input_path=Path(input_raw),
            output_path=Path(output_raw),
            kind=kind,
            granularity=granularity,
            schema_dir=schema_dir,
        )
