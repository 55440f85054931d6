"""Install the pre-commit hook and the starter configuration file."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILENAME

logger = logging.getLogger(__name__)

HOOK_SCRIPT = """#!/bin/sh
# git-secret-guard pre-commit hook
# Scans the working tree for secrets before allowing a commit

echo "git-secret-guard: scanning for secrets..."

if command -v git-secret-guard > /dev/null 2>&1; then
    git-secret-guard scan .
    exit_code=$?

    if [ $exit_code -ne 0 ]; then
        echo ""
        echo "Commit blocked: secrets detected!"
        echo "Please remove the secrets and try again."
        exit 1
    fi

    echo "No secrets detected"
    exit 0
else
    echo "git-secret-guard not found in PATH"
    echo "Install it or remove this hook to continue"
    exit 1
fi
"""

CONFIG_TEMPLATE = """# git-secret-guard configuration

# Paths to ignore (glob patterns relative to the scanned directory)
ignore:
  - "**/*.test.js"
  - "**/*.spec.ts"
  - "**/fixtures/**"

# Custom patterns (in addition to the built-in patterns)
# patterns:
#   - id: my-company-token
#     name: "My Company API Token"
#     pattern: "myco_[a-zA-Z0-9]{32}"
#     severity: high
#     description: "Internal API token for My Company services"
#     file_extensions: [py, js]

# Allowlist specific findings (use with caution!)
# allowlist:
#   - pattern: aws-access-key-id
#     path: "**/test/**"
#     reason: "Test fixtures use fake AWS keys"
"""

_EXECUTABLE = (
    stat.S_IRUSR | stat.S_IWUSR | stat.S_IXUSR | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


class NotAGitRepository(RuntimeError):
    """Raised when ``init`` runs outside a git work tree."""


@dataclass
class InitResult:
    hook_path: Path
    config_path: Path
    config_created: bool


def install_hook(repo_root: Path) -> Path:
    """Write an executable ``pre-commit`` hook into ``repo_root/.git/hooks``."""

    git_dir = repo_root / ".git"
    if not git_dir.is_dir():
        raise NotAGitRepository(f"Not a git repository: {repo_root}. Run 'git init' first.")
    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "pre-commit"
    if hook_path.exists():
        logger.warning("Overwriting existing pre-commit hook at %s", hook_path)
    hook_path.write_text(HOOK_SCRIPT, encoding="utf-8", newline="\n")
    hook_path.chmod(_EXECUTABLE)
    return hook_path


def write_default_config(repo_root: Path) -> bool:
    """Create the starter configuration file; return False if one already exists."""

    config_path = repo_root / CONFIG_FILENAME
    if config_path.exists():
        return False
    config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    return True


def initialize(repo_root: Path) -> InitResult:
    hook_path = install_hook(repo_root)
    created = write_default_config(repo_root)
    return InitResult(hook_path=hook_path, config_path=repo_root / CONFIG_FILENAME, config_created=created)
