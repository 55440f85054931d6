"""Utility helpers for the scanner."""

from .fileio import is_binary_file, iter_text_lines, read_yaml_file
from .walk import iter_files

__all__ = [
    "is_binary_file",
    "iter_text_lines",
    "read_yaml_file",
    "iter_files",
]
