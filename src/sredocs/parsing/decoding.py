"""Turn raw document bytes into line-oriented text, with charset and HTML handling."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from charset_normalizer import from_bytes

from sredocs.parsing.errors import ExtractionError
from sredocs.parsing.normalization import normalize_newlines, normalize_whitespace

_UTF8_BOM = b"\xef\xbb\xbf"
_HTML_START_RE = re.compile(r"^\s*(?:<!doctype\s+html|<html|<body)", re.IGNORECASE)
_BLOCK_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "td", "th", "pre", "blockquote"]
_ALLOWED_CONTROL = {"\t", "\n", "\r", "\f"}
_MAX_CONTROL_RATIO = 0.1


def decode_document(raw: bytes, name: str) -> str:
    """Decode a document payload, rejecting binary content."""

    if b"\x00" in raw:
        raise ExtractionError(name, "Document contains binary content")
    if raw.startswith(_UTF8_BOM):
        raw = raw[len(_UTF8_BOM):]

    text = _decode_text(raw, name)
    if _control_ratio(text) > _MAX_CONTROL_RATIO:
        raise ExtractionError(name, "Document contains binary content")

    if is_html(text):
        text = html_to_text(text)
    return normalize_newlines(text)


def is_html(text: str) -> bool:
    """Return True for rich-text HTML exports."""

    return bool(_HTML_START_RE.match(text))


def html_to_text(markup: str) -> str:
    """Flatten an HTML export so each block element lands on its own line."""

    soup = BeautifulSoup(markup, "html.parser")
    for node in soup(["script", "style", "head"]):
        node.decompose()
    for line_break in soup.find_all("br"):
        line_break.replace_with("\n")
    body = soup.body or soup

    lines: list[str] = []
    for node in body.find_all(_BLOCK_TAGS):
        if node.find(_BLOCK_TAGS) is not None:
            continue
        if node.name == "pre":
            lines.append(node.get_text().strip("\n"))
            continue
        text = normalize_whitespace(node.get_text())
        if text:
            lines.append(text)

    if lines:
        return "\n".join(lines)
    return body.get_text("\n", strip=True)


def _decode_text(raw: bytes, name: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is None or not best.encoding:
        raise ExtractionError(name, "Could not detect document encoding")
    try:
        return raw.decode(best.encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise ExtractionError(name, f"Failed to decode document as {best.encoding}: {exc}") from exc


def _control_ratio(text: str) -> float:
    if not text:
        return 0.0
    control = sum(1 for char in text if ord(char) < 32 and char not in _ALLOWED_CONTROL)
    return control / len(text)
