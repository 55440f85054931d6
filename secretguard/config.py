"""Load ``.gitsecretguard.yml`` and apply its ignore and allowlist rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path, PurePath
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import yaml

from .patterns import DEFAULT_PATTERNS, Pattern
from .result import Finding
from .severity import Severity
from .utils import read_yaml_file

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".gitsecretguard.yml"


class ConfigError(ValueError):
    """Raised when the configuration file is malformed."""


@dataclass(frozen=True)
class AllowlistEntry:
    pattern: str
    path: str
    reason: str = ""


@dataclass
class GuardConfig:
    """Settings read from the configuration file."""

    ignore: List[str] = field(default_factory=list)
    patterns: List[Pattern] = field(default_factory=list)
    allowlist: List[AllowlistEntry] = field(default_factory=list)
    source: Optional[Path] = None

    def merged_patterns(self, base: Iterable[Pattern] = DEFAULT_PATTERNS) -> Tuple[Pattern, ...]:
        """Return ``base`` with custom patterns applied.

        A custom pattern with the id of a base pattern replaces it in place;
        the rest are appended in file order.
        """

        custom = {pattern.id: pattern for pattern in self.patterns}
        merged: List[Pattern] = []
        for pattern in base:
            merged.append(custom.pop(pattern.id, pattern))
        merged.extend(pattern for pattern in self.patterns if pattern.id in custom)
        return tuple(merged)

    def is_ignored(self, relative_path: str) -> bool:
        return any(_glob_match(relative_path, glob) for glob in self.ignore)

    def is_allowlisted(self, pattern_id: str, relative_path: str) -> bool:
        return any(
            entry.pattern == pattern_id and _glob_match(relative_path, entry.path) for entry in self.allowlist
        )


def _glob_match(relative_path: str, glob: str) -> bool:
    if fnmatchcase(relative_path, glob):
        return True
    # "**/name" also matches at the top level
    while glob.startswith("**/"):
        glob = glob[3:]
        if fnmatchcase(relative_path, glob):
            return True
    return False


def _relative(source: str, root: Optional[Path]) -> str:
    path = PurePath(source)
    if root is not None:
        try:
            path = Path(source).resolve().relative_to(root.resolve())
        except (ValueError, OSError):
            pass
    return path.as_posix()


def filter_findings(
    findings: Iterable[Finding],
    config: GuardConfig,
    root: Optional[Path] = None,
) -> Iterator[Finding]:
    """Lazily drop findings that are ignored or allowlisted by ``config``."""

    for finding in findings:
        relative_path = _relative(finding.source, root)
        if config.is_ignored(relative_path):
            logger.debug("Ignoring %s finding in %s (ignore rule)", finding.pattern_id, relative_path)
            continue
        if config.is_allowlisted(finding.pattern_id, relative_path):
            logger.debug("Ignoring %s finding in %s (allowlist)", finding.pattern_id, relative_path)
            continue
        yield finding


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def load_config(path: Optional[Path]) -> GuardConfig:
    """Load the configuration at ``path``; a missing file yields defaults."""

    if path is None:
        return GuardConfig()
    try:
        data = read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: cannot be read: {exc}") from exc
    if data is None:
        return GuardConfig(source=path if path.exists() else None)
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: configuration must be a mapping")

    raw_patterns = _as_list(data.get("patterns"), "patterns", path)
    raw_allowlist = _as_list(data.get("allowlist"), "allowlist", path)
    config = GuardConfig(
        ignore=_parse_string_list(data.get("ignore"), "ignore", path),
        patterns=[_parse_pattern(item, index, path) for index, item in enumerate(raw_patterns)],
        allowlist=[_parse_allow_entry(item, index, path) for index, item in enumerate(raw_allowlist)],
        source=path,
    )
    logger.debug(
        "Loaded %s: %d ignore globs, %d custom patterns, %d allowlist entries",
        path,
        len(config.ignore),
        len(config.patterns),
        len(config.allowlist),
    )
    return config


def find_config(directory: Path) -> Optional[Path]:
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _as_list(value: Any, key: str, path: Path) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{path}: '{key}' must be a list")
    return value


def _parse_string_list(value: Any, key: str, path: Path) -> List[str]:
    return [str(item) for item in _as_list(value, key, path)]


def _parse_pattern(item: Any, index: int, path: Path) -> Pattern:
    if not isinstance(item, dict):
        raise ConfigError(f"{path}: patterns[{index}] must be a mapping")
    for key in ("id", "pattern"):
        if not item.get(key):
            raise ConfigError(f"{path}: patterns[{index}] is missing '{key}'")
    try:
        severity = Severity.parse(item.get("severity", "high"))
    except ValueError as exc:
        raise ConfigError(f"{path}: patterns[{index}]: {exc}") from exc
    extensions = item.get("file_extensions") or []
    if isinstance(extensions, str):
        extensions = [extensions]
    pattern_id = str(item["id"])
    return Pattern(
        id=pattern_id,
        name=str(item.get("name") or pattern_id),
        expression=str(item["pattern"]),
        description=str(item.get("description") or ""),
        severity=severity,
        remediation=str(item["remediation"]) if item.get("remediation") else None,
        file_extensions=frozenset(str(ext) for ext in extensions),
    )


def _parse_allow_entry(item: Any, index: int, path: Path) -> AllowlistEntry:
    if not isinstance(item, dict):
        raise ConfigError(f"{path}: allowlist[{index}] must be a mapping")
    fields: Dict[str, str] = {}
    for key in ("pattern", "path"):
        if not item.get(key):
            raise ConfigError(f"{path}: allowlist[{index}] is missing '{key}'")
        fields[key] = str(item[key])
    return AllowlistEntry(pattern=fields["pattern"], path=fields["path"], reason=str(item.get("reason") or ""))
