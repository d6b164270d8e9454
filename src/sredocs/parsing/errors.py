"""Domain errors raised while reading and extracting documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class ConfigurationError(ValueError):
    """Invalid invocation: missing parameters, unknown selectors or unusable paths."""


@dataclass(slots=True)
class DocumentReadError(Exception):
    """A source document could not be read from disk."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class ExtractionError(Exception):
    """A document's content could not be turned into text for extraction."""

    name: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (document={self.name})"
