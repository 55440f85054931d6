"""Pattern catalog: named secret-detection rules and their compiled forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

import regex

from secretguard.severity import Severity


class CatalogError(ValueError):
    """Raised when a set of patterns cannot be turned into a usable catalog."""


def normalize_extension(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


@dataclass(frozen=True)
class Pattern:
    """A single detection rule.

    ``file_extensions`` restricts the rule to files with one of the given
    extensions (compared case-insensitively, without the leading dot). An
    empty set means the rule applies to every file.
    """

    id: str
    name: str
    expression: str
    description: str
    severity: Severity = Severity.HIGH
    remediation: Optional[str] = None
    file_extensions: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        extensions = frozenset(
            normalize_extension(ext) for ext in self.file_extensions if normalize_extension(ext)
        )
        object.__setattr__(self, "file_extensions", extensions)
        if not isinstance(self.severity, Severity):
            object.__setattr__(self, "severity", Severity.parse(self.severity))

    def applies_to(self, extension: str) -> bool:
        """Return True when the rule should run against files with ``extension``."""

        if not self.file_extensions:
            return True
        return normalize_extension(extension) in self.file_extensions


class PatternCatalog:
    """Immutable, validated, ordered collection of patterns.

    Every expression is compiled up front; a duplicate id or an expression
    that does not compile raises :class:`CatalogError` here rather than
    during a scan.
    """

    def __init__(self, patterns: Iterable[Pattern]) -> None:
        ordered: list[Pattern] = []
        compiled: Dict[str, "regex.Pattern[str]"] = {}
        for pattern in patterns:
            if not isinstance(pattern, Pattern):
                raise CatalogError(f"Expected a Pattern, got {type(pattern).__name__}")
            if not pattern.id or not pattern.id.strip():
                raise CatalogError("Pattern id must be a non-empty string")
            if pattern.id in compiled:
                raise CatalogError(f"Duplicate pattern id: {pattern.id}")
            try:
                compiled[pattern.id] = regex.compile(pattern.expression)
            except (regex.error, TypeError) as exc:
                raise CatalogError(f"Pattern {pattern.id!r} does not compile: {exc}") from exc
            ordered.append(pattern)
        self._patterns: Tuple[Pattern, ...] = tuple(ordered)
        self._compiled = compiled

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def all(self) -> Tuple[Pattern, ...]:
        return self._patterns

    def entries(self) -> Iterator[Tuple[Pattern, "regex.Pattern[str]"]]:
        """Yield ``(pattern, compiled_expression)`` pairs in catalog order."""

        for pattern in self._patterns:
            yield pattern, self._compiled[pattern.id]


from .defaults import DEFAULT_PATTERNS  # noqa: E402

DEFAULT_CATALOG = PatternCatalog(DEFAULT_PATTERNS)


def get_all_patterns() -> Tuple[Pattern, ...]:
    """Return the built-in patterns in catalog order."""

    return DEFAULT_CATALOG.all()


__all__ = [
    "CatalogError",
    "DEFAULT_CATALOG",
    "DEFAULT_PATTERNS",
    "Pattern",
    "PatternCatalog",
    "get_all_patterns",
    "normalize_extension",
]
