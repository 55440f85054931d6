"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import yaml

BINARY_SAMPLE_SIZE = 8192


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def is_binary_file(path: Path, sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
    """Return True if the first ``sample_size`` bytes contain a NUL byte.

    A file that cannot be opened or read counts as binary.
    """

    try:
        with path.open("rb") as handle:
            sample = handle.read(sample_size)
    except OSError:
        return True
    return b"\x00" in sample


def iter_text_lines(handle) -> Iterator[str]:
    """Yield lines from a text handle without their line terminators."""

    for line in handle:
        yield line.rstrip("\r\n")
