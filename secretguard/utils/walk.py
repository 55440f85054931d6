"""Directory traversal helpers."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Collection, Generator

logger = logging.getLogger(__name__)

_HIDDEN_ATTRIBUTES = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0) | getattr(stat, "FILE_ATTRIBUTE_SYSTEM", 0)


def is_hidden(path: Path) -> bool:
    """Return True for dot-prefixed entries and, on Windows, hidden or system entries."""

    if path.name.startswith("."):
        return True
    if not _HIDDEN_ATTRIBUTES:
        return False
    try:
        attributes = getattr(path.lstat(), "st_file_attributes", 0)
    except OSError:
        return False
    return bool(attributes & _HIDDEN_ATTRIBUTES)


def iter_files(root: Path, skip_dirs: Collection[str] = ()) -> Generator[Path, None, None]:
    """Yield regular files beneath ``root`` in a stable order.

    Directories named in ``skip_dirs`` and hidden entries are pruned.
    Entries that cannot be listed or inspected are skipped.
    """

    def _on_error(error: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", getattr(error, "filename", "?"), error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name for name in dirnames if name not in skip_dirs and not is_hidden(current / name)
        )
        for name in sorted(filenames):
            path = current / name
            if is_hidden(path):
                continue
            try:
                if not path.is_file():
                    continue
            except OSError as exc:
                logger.debug("Skipping unreadable entry %s: %s", path, exc)
                continue
            yield path
