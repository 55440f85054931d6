"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Sequence, Tuple

from .patterns import Pattern
from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)

DEFAULT_REMEDIATION = "Remove this secret and load it from an environment variable instead."


def redact(text: str) -> str:
    """Mask ``text`` for display, keeping the first and last four characters.

    Values of eight characters or fewer are masked completely. The result
    always has the same length as the input.
    """

    if len(text) <= 8:
        return "*" * len(text)
    return f"{text[:4]}{'*' * (len(text) - 8)}{text[-4:]}"


@dataclass(frozen=True)
class Finding:
    """A single located match of a pattern.

    ``matched_text`` and ``line_content`` hold the raw secret and are kept
    out of ``repr``; use :attr:`redacted` for anything shown to a user.
    """

    pattern: Pattern = field(repr=False)
    source: str
    line_number: int
    column: int
    matched_text: str = field(repr=False)
    line_content: str = field(repr=False)

    @property
    def pattern_id(self) -> str:
        return self.pattern.id

    @property
    def severity(self) -> Severity:
        return self.pattern.severity

    @property
    def redacted(self) -> str:
        return redact(self.matched_text)

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": self.pattern.id,
            "name": self.pattern.name,
            "file": self.source,
            "line": self.line_number,
            "column": self.column,
            "severity": self.pattern.severity.value,
            "match": self.redacted,
        }


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value.lower())) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value.lower()) for severity in SEVERITY_ORDER)


@dataclass
class ScanResult:
    """Bundle scan summary and findings list."""

    summary: Summary = field(default_factory=Summary)
    findings: List[Finding] = field(default_factory=list)
    files_scanned: int = 0

    @property
    def passed(self) -> bool:
        return not self.findings

    def add_finding(self, finding: Finding) -> None:
        self.summary.increment(finding.severity)
        self.findings.append(finding)

    def by_source(self) -> Dict[str, List[Finding]]:
        """Group findings by source, preserving discovery order."""

        grouped: Dict[str, List[Finding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.source, []).append(finding)
        return grouped

    def to_dict(self) -> Dict[str, object]:
        return {
            "count": len(self.findings),
            "summary": self.summary.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def top_findings(self, limit: int = 5) -> List[Finding]:
        """Return findings ordered by severity ranking."""

        ordered = sorted(
            self.findings,
            key=lambda finding: (-finding.severity.rank, finding.source, finding.line_number, finding.column),
        )
        return ordered[:limit]


def format_finding(finding: Finding) -> str:
    """Render one finding as an indented, human-readable block.

    The caret row marks where the match sits in the line without
    reproducing the secret itself.
    """

    raw_line = finding.line_content
    stripped = raw_line.strip()
    offset = max(finding.column - 1 - (len(raw_line) - len(raw_line.lstrip())), 0)
    shown_line = stripped[:offset] + finding.redacted + stripped[offset + len(finding.matched_text):]
    remediation = finding.pattern.remediation or DEFAULT_REMEDIATION

    lines: List[str] = []
    lines.append(f"[{finding.severity.value}] {finding.pattern.name} detected")
    lines.append(f"  File: {finding.source}")
    lines.append(f"  Line: {finding.line_number}, Column: {finding.column}")
    lines.append(f"  Match: {finding.redacted}")
    lines.append("")
    lines.append(f"    {shown_line}")
    lines.append(f"    {' ' * offset}{'^' * len(finding.matched_text)}")
    lines.append("")
    lines.append("  How to fix:")
    for remediation_line in remediation.splitlines():
        lines.append(f"    {remediation_line}".rstrip())
    return "\n".join(lines)


def format_summary_table(result: ScanResult, max_findings: int = 5) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Scan Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if result.passed else "FAIL"
    lines.append(f"Status    : {status}")
    lines.append(f"Files     : {result.files_scanned}")
    lines.append(f"Findings  : {result.summary.total}")

    findings = result.top_findings(max_findings)
    if findings:
        lines.append("")
        lines.append("Top Findings")
        lines.append("-" * 40)
        for finding in findings:
            lines.append(
                f"[{finding.severity.value}] {finding.pattern.id} {finding.pattern.name} -> {finding.redacted}"
            )
            lines.append(f"  Location: {finding.source}:{finding.line_number}:{finding.column}")
    return "\n".join(lines)


def format_pattern_table(patterns: Iterable[Pattern]) -> str:
    """List patterns sorted by id, one row each."""

    rows = sorted(patterns, key=lambda pattern: pattern.id)
    id_width = max([len("ID")] + [len(pattern.id) for pattern in rows])
    name_width = max([len("Name")] + [len(pattern.name) for pattern in rows])
    header = f"{'ID':<{id_width}} | {'Name':<{name_width}} | {'Severity':<8} | Description"
    lines: List[str] = [header, "-" * len(header)]
    for pattern in rows:
        description = pattern.description
        if len(description) > 50:
            description = description[:47] + "..."
        lines.append(
            f"{pattern.id:<{id_width}} | {pattern.name:<{name_width}} | {pattern.severity.value:<8} | {description}"
        )
    lines.append("")
    lines.append(f"{len(rows)} patterns loaded")
    return "\n".join(lines)
