"""git-secret-guard: find credentials in text before they are committed."""

from importlib.metadata import version, PackageNotFoundError

from .patterns import CatalogError, Pattern, PatternCatalog, get_all_patterns
from .result import Finding, redact
from .scanner import SecretScanner
from .severity import Severity

try:
    __version__ = version("git-secret-guard")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "CatalogError",
    "Finding",
    "Pattern",
    "PatternCatalog",
    "SecretScanner",
    "Severity",
    "get_all_patterns",
    "redact",
]
