"""Line-oriented secret scanner.

The scanner applies every pattern of a :class:`PatternCatalog` to every
line of a file, a directory tree or an in-memory buffer, drops matches
that look like placeholders, and yields :class:`Finding` objects as they
are discovered. Nothing is buffered: a caller that only needs to know
whether any secret exists can stop after the first finding.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Protocol

import regex

from .patterns import DEFAULT_PATTERNS, Pattern, PatternCatalog
from .result import Finding, redact
from .utils import is_binary_file, iter_files, iter_text_lines

logger = logging.getLogger(__name__)

DEFAULT_MATCH_TIMEOUT = 5.0

PLACEHOLDER_INDICATORS = (
    "example",
    "sample",
    "your",
    "xxx",
    "test",
    "fake",
    "dummy",
    "placeholder",
    "changeme",
    "todo",
    "fixme",
    "insert",
    "<",
    ">",
)

SKIP_DIRECTORIES = frozenset(
    {
        "node_modules",
        ".git",
        "bin",
        "obj",
        ".vs",
        ".idea",
        "__pycache__",
        "venv",
        ".venv",
        "dist",
        "build",
        ".next",
        "coverage",
    }
)


class CancelToken(Protocol):
    def is_set(self) -> bool:
        ...


def is_repetitive(value: str) -> bool:
    """Return True for values of six or more characters built from at most two distinct ones."""

    return len(value) >= 6 and len(set(value)) <= 2


def is_likely_placeholder(value: str) -> bool:
    """Return True when ``value`` looks like sample data rather than a real secret."""

    lowered = value.lower()
    if any(indicator in lowered for indicator in PLACEHOLDER_INDICATORS):
        return True
    return is_repetitive(value)


def should_skip_path(path: Path, root: Optional[Path] = None) -> bool:
    """Return True if any directory segment of ``path`` is on the skip list.

    Only whole segments count, so ``binary.txt`` or ``build_utils.py`` are
    never skipped. When ``root`` is given, segments above it are ignored.
    """

    if root is not None:
        try:
            path = path.relative_to(root)
        except ValueError:
            pass
    return any(part in SKIP_DIRECTORIES for part in path.parent.parts)


def _cancelled(cancel: Optional[CancelToken]) -> bool:
    return cancel is not None and cancel.is_set()


def _require_path(path: object, what: str) -> Path:
    if path is None or (isinstance(path, str) and not path.strip()):
        raise ValueError(f"{what} must be a non-empty path")
    return Path(path)


class SecretScanner:
    """Apply a pattern catalog to files, directory trees and text buffers.

    ``patterns`` may mix built-in and user-supplied rules; they are
    validated and compiled once here, and the scanner holds no other state,
    so one instance can serve concurrent scans.
    """

    def __init__(
        self,
        patterns: Optional[Iterable[Pattern]] = None,
        *,
        match_timeout: Optional[float] = DEFAULT_MATCH_TIMEOUT,
    ) -> None:
        self._catalog = PatternCatalog(DEFAULT_PATTERNS if patterns is None else patterns)
        self._match_timeout = match_timeout

    @property
    def catalog(self) -> PatternCatalog:
        return self._catalog

    @property
    def patterns(self):
        return self._catalog.all()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def scan_file(self, path, cancel: Optional[CancelToken] = None) -> Iterator[Finding]:
        """Scan one file. Missing and binary files yield nothing."""

        return self._iter_file(_require_path(path, "File path"), cancel)

    def scan_directory(self, path, cancel: Optional[CancelToken] = None) -> Iterator[Finding]:
        """Scan every eligible file beneath ``path``. A missing directory yields nothing."""

        return self._iter_directory(_require_path(path, "Directory path"), cancel)

    def scan_content(
        self,
        content: str,
        source_name: str,
        cancel: Optional[CancelToken] = None,
    ) -> Iterator[Finding]:
        """Scan an in-memory buffer, attributing findings to ``source_name``.

        Every pattern is evaluated, including extension-restricted ones.
        """

        if not isinstance(content, str):
            raise TypeError(f"content must be a str, not {type(content).__name__}")
        if not source_name or not str(source_name).strip():
            raise ValueError("source_name must be a non-empty string")
        lines = (line[:-1] if line.endswith("\r") else line for line in content.split("\n"))
        return self._scan_lines(lines, str(source_name), None, cancel)

    def scan_path(self, path, cancel: Optional[CancelToken] = None) -> Iterator[Finding]:
        """Dispatch to :meth:`scan_directory` or :meth:`scan_file`."""

        target = _require_path(path, "Path")
        if target.is_dir():
            return self._iter_directory(target, cancel)
        return self._iter_file(target, cancel)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def _iter_directory(self, root: Path, cancel: Optional[CancelToken]) -> Iterator[Finding]:
        if not root.is_dir():
            logger.debug("Directory %s does not exist; nothing to scan", root)
            return
        for file_path in iter_files(root, skip_dirs=SKIP_DIRECTORIES):
            if _cancelled(cancel):
                logger.debug("Directory scan of %s cancelled", root)
                return
            if should_skip_path(file_path, root):
                continue
            yield from self._iter_file(file_path, cancel)

    def _iter_file(self, path: Path, cancel: Optional[CancelToken]) -> Iterator[Finding]:
        if not path.is_file():
            logger.debug("File %s does not exist; nothing to scan", path)
            return
        if is_binary_file(path):
            logger.debug("Skipping binary file %s", path)
            return
        try:
            handle = path.open("r", encoding="utf-8-sig", errors="replace")
        except OSError as exc:
            logger.warning("Could not open %s: %s", path, exc)
            return
        with handle:
            try:
                yield from self._scan_lines(iter_text_lines(handle), str(path), path.suffix, cancel)
            except OSError as exc:
                logger.warning("Stopped reading %s: %s", path, exc)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def _scan_lines(
        self,
        lines: Iterable[str],
        source: str,
        extension: Optional[str],
        cancel: Optional[CancelToken],
    ) -> Iterator[Finding]:
        entries = [
            (pattern, compiled)
            for pattern, compiled in self._catalog.entries()
            if extension is None or pattern.applies_to(extension)
        ]
        for line_number, line in enumerate(lines, start=1):
            if _cancelled(cancel):
                logger.debug("Scan of %s cancelled at line %d", source, line_number)
                return
            for pattern, compiled in entries:
                for match in self._find_matches(pattern, compiled, line, source, line_number):
                    matched = match.group(0)
                    if is_likely_placeholder(matched):
                        logger.debug(
                            "Ignoring placeholder %s for %s at %s:%d", redact(matched), pattern.id, source, line_number
                        )
                        continue
                    yield Finding(
                        pattern=pattern,
                        source=source,
                        line_number=line_number,
                        column=match.start() + 1,
                        matched_text=matched,
                        line_content=line,
                    )

    def _find_matches(
        self,
        pattern: Pattern,
        compiled: "regex.Pattern[str]",
        line: str,
        source: str,
        line_number: int,
    ) -> List["regex.Match[str]"]:
        try:
            matches = list(compiled.finditer(line, timeout=self._match_timeout))
        except TimeoutError:
            logger.warning(
                "Pattern %s timed out after %ss on %s:%d; treating as no match",
                pattern.id,
                self._match_timeout,
                source,
                line_number,
            )
            return []
        return [match for match in matches if match.group(0)]
