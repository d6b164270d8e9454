"""Boundary-detection rules that locate a field inside document text."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import re
from typing import Any, Mapping, Protocol, runtime_checkable

# Optional markdown hashes, list numbering and emphasis before a heading label.
_HEADING_PREFIX = r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\d+[.)][ \t]+)?[*_]{0,2}"
# A heading ends the line or is followed by a colon (label form, "Owner: Alice").
_HEADING_SUFFIX = r"[*_]{0,2}[ \t]*(?::[*_]{0,2}|$)"


@lru_cache(maxsize=256)
def compile_heading(markers: tuple[str, ...]) -> re.Pattern[str]:
    """Compile heading/label markers into one case-insensitive line pattern."""

    alternatives: list[str] = []
    for marker in markers:
        words = marker.split()
        if not words:
            raise ValueError("Heading markers cannot be empty")
        alternatives.append(r"[ \t]+".join(re.escape(word) for word in words))
    return re.compile(
        _HEADING_PREFIX + "(?:" + "|".join(alternatives) + ")" + _HEADING_SUFFIX,
        re.IGNORECASE | re.MULTILINE,
    )


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """Located field span.

    ``start`` is where the boundary itself begins, ``content_start`` is where the
    field value begins. ``content_end`` is ``None`` when the value runs until the
    next recognized boundary. For a ``section`` match an explicit ``content_end``
    is only an upper limit, so the next recognized boundary still closes the
    value when it comes first. Otherwise ``content_end`` is exact.
    """

    start: int
    content_start: int
    content_end: int | None = None
    section: bool = True


@runtime_checkable
class Rule(Protocol):
    """Protocol that every boundary-detection rule must implement."""

    def find(self, text: str) -> RuleMatch | None:
        """Return the earliest match of this rule in ``text``."""

    def boundaries(self, text: str) -> list[int]:
        """Return every offset where this rule opens or explicitly closes a section."""


@dataclass(frozen=True, slots=True)
class MarkerRule:
    """Heading or label delimited section, optionally closed by an end marker."""

    start: str
    aliases: tuple[str, ...] = ()
    end: str | None = None
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _end_pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_pattern", compile_heading((self.start, *self.aliases)))
        object.__setattr__(self, "_end_pattern", compile_heading((self.end,)) if self.end else None)

    def find(self, text: str) -> RuleMatch | None:
        match = self._pattern.search(text)
        if match is None:
            return None

        content_end: int | None = None
        if self._end_pattern is not None:
            end_match = self._end_pattern.search(text, match.end())
            if end_match is not None:
                content_end = end_match.start()
        return RuleMatch(start=match.start(), content_start=match.end(), content_end=content_end)

    def boundaries(self, text: str) -> list[int]:
        positions = [match.start() for match in self._pattern.finditer(text)]
        if self._end_pattern is not None:
            positions.extend(match.start() for match in self._end_pattern.finditer(text))
        return sorted(positions)


@dataclass(frozen=True, slots=True)
class FixedPositionRule:
    """Take ``lines`` non-blank lines starting at non-blank line index ``line``."""

    line: int = 0
    lines: int = 1

    def __post_init__(self) -> None:
        if self.line < 0:
            raise ValueError("Fixed position line must be >= 0")
        if self.lines < 1:
            raise ValueError("Fixed position lines must be >= 1")

    def find(self, text: str) -> RuleMatch | None:
        offset = 0
        index = 0
        start: int | None = None
        taken = 0

        for raw_line in text.splitlines(keepends=True):
            line_start = offset
            line_end = line_start + len(raw_line.rstrip("\r\n"))
            offset += len(raw_line)
            if not raw_line.strip():
                continue

            if index == self.line:
                start = line_start
            index += 1
            if start is None:
                continue

            taken += 1
            if taken == self.lines:
                return RuleMatch(start=start, content_start=start, content_end=line_end, section=False)

        if start is None:
            return None
        return RuleMatch(start=start, content_start=start, content_end=len(text), section=False)

    def boundaries(self, text: str) -> list[int]:
        return []


@dataclass(frozen=True, slots=True)
class RegexRule:
    """First regex match; a ``value`` group (or group 1) captures the field value.

    Without a capture group, the section following the match is captured the same
    way a marker section is.
    """

    pattern: str
    ignore_case: bool = True
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.MULTILINE | (re.IGNORECASE if self.ignore_case else 0)
        try:
            compiled = re.compile(self.pattern, flags)
        except re.error as exc:
            raise ValueError(f"Invalid regex pattern {self.pattern!r}: {exc}") from exc
        object.__setattr__(self, "_compiled", compiled)

    def find(self, text: str) -> RuleMatch | None:
        match = self._compiled.search(text)
        if match is None:
            return None

        if not self._compiled.groups:
            return RuleMatch(start=match.start(), content_start=match.end())

        group: int | str = "value" if "value" in self._compiled.groupindex else 1
        content_start, content_end = match.span(group)
        if content_start < 0:
            return RuleMatch(start=match.start(), content_start=match.end(), content_end=match.end(), section=False)
        return RuleMatch(start=match.start(), content_start=content_start, content_end=content_end, section=False)

    def boundaries(self, text: str) -> list[int]:
        return [match.start() for match in self._compiled.finditer(text)]


def rule_from_dict(data: Mapping[str, Any]) -> Rule:
    """Build a rule from its JSON representation."""

    rule_type = str(data.get("type", "marker")).strip().lower()
    if rule_type == "marker":
        start = str(data.get("start") or "").strip()
        if not start:
            raise ValueError("Marker rule requires a non-empty 'start'")
        aliases = tuple(str(alias) for alias in data.get("aliases") or ())
        end = data.get("end")
        return MarkerRule(start=start, aliases=aliases, end=str(end) if end else None)
    if rule_type == "position":
        return FixedPositionRule(line=int(data.get("line", 0)), lines=int(data.get("lines", 1)))
    if rule_type == "regex":
        pattern = str(data.get("pattern") or "")
        if not pattern:
            raise ValueError("Regex rule requires a non-empty 'pattern'")
        return RegexRule(pattern=pattern, ignore_case=bool(data.get("ignore_case", True)))
    raise ValueError(f"Unknown rule type: {rule_type}")
