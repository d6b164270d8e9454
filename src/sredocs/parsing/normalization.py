"""Text normalization helpers used before matching and after capture."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_LEADING_ARTIFACT_RE = re.compile(r"^(?:\s|:|\*\*|__)+")
_TRAILING_ARTIFACT_RE = re.compile(r"(?:\s|\*\*|__)+$")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_newlines(text: str) -> str:
    """Convert CRLF/CR line endings to LF and drop invisible formatting characters."""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return _INVISIBLE_RE.sub("", text).replace("\u00a0", " ")


def clean_span(text: str) -> str:
    """Trim a captured section to its meaningful content.

    Leading colons and emphasis markers left over from a label heading are
    removed, trailing spaces are stripped per line and blank-line runs collapse
    to a single empty line. Inner line breaks are kept.
    """

    text = _TRAILING_SPACE_RE.sub("", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    text = _LEADING_ARTIFACT_RE.sub("", text)
    return _TRAILING_ARTIFACT_RE.sub("", text)
