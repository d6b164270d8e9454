"""CLI entrypoint for parsing charters and postmortems into CSV tables."""

from __future__ import annotations

import argparse
import json
import logging
import os

from dotenv import load_dotenv

from sredocs.export.csv_writer import write_batch
from sredocs.parsing.batch import BatchParser
from sredocs.parsing.config import ParseSettings
from sredocs.parsing.errors import ConfigurationError


load_dotenv()

LOGGER = logging.getLogger(__name__)

_ARG_TO_ENV = {
    "kind": "SREDOCS_PARSE_KIND",
    "path": "SREDOCS_PARSE_PATH",
    "output_path": "SREDOCS_PARSE_OUTPUT_PATH",
    "granularity": "SREDOCS_OUTPUT_GRANULARITY",
    "schema_dir": "SREDOCS_SCHEMA_DIR",
}


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract charter and postmortem fields into CSV files")
    parser.add_argument("--kind", help="auto, charter or postmortem (default: auto)")
    parser.add_argument("--path", help="Directory with documents to be parsed")
    parser.add_argument("--output-path", help="Directory to save CSV output to")
    parser.add_argument(
        "--granularity",
        help="document writes <document-name>.csv per file, kind writes <kind>.csv (default: document)",
    )
    parser.add_argument("--schema-dir", help="Directory with charter.json/postmortem.json schema overrides")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SREDOCS_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def _settings_from_args(args: argparse.Namespace) -> ParseSettings:
    environ = dict(os.environ)
    for arg_name, env_name in _ARG_TO_ENV.items():
        value = getattr(args, arg_name)
        if value is not None:
            environ[env_name] = value
    return ParseSettings.from_env(environ)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
    )

    try:
        settings = _settings_from_args(args)
        parser = BatchParser.from_settings(settings)
        result = parser.parse_directory(settings.input_path)
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    payload: dict[str, object] = {
        "path": str(settings.input_path),
        "kind": settings.kind.value,
        "granularity": settings.granularity.value,
        **result.stats.to_dict(),
    }

    report = write_batch(result, settings.output_path, settings.granularity)
    payload["written"] = [str(path) for path in report.written]
    payload["write_errors"] = report.error_details()
    if report.failures:
        LOGGER.error("%d output(s) failed to write, re-run to retry", len(report.failures))

    exit_code = 0 if result.stats.errors == 0 and not report.failures else 1
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
