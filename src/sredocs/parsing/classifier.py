"""Keyword-based document kind classification from filenames."""

from __future__ import annotations

from typing import Mapping

from sredocs.parsing.models import DocumentKind

DEFAULT_KIND_KEYWORDS: Mapping[DocumentKind, tuple[str, ...]] = {
    DocumentKind.CHARTER: ("charter",),
    DocumentKind.POSTMORTEM: ("postmortem", "post-mortem"),
}


def classify_document(
    name: str,
    *,
    keywords: Mapping[DocumentKind, tuple[str, ...]] = DEFAULT_KIND_KEYWORDS,
) -> DocumentKind:
    """Return the document kind whose keyword appears in ``name``.

    Matching is a case-insensitive substring test. Kinds are checked in mapping
    order, so a name containing both keywords resolves to the first kind.
    """
    lowered = name.casefold()
    for kind, kind_keywords in keywords.items():
        if any(keyword.casefold() in lowered for keyword in kind_keywords):
            return kind
    return DocumentKind.UNKNOWN
