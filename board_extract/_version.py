"""Version information for board-extract.

The version is defined here and must match pyproject.toml. When running from
a git checkout the short commit SHA is appended for bug reports.
"""

import subprocess
from functools import lru_cache
from pathlib import Path

__version__ = "0.1.0"

PACKAGE_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=1)
def get_git_sha() -> tuple[str | None, bool]:
    """Return (short SHA, dirty flag) for the checkout holding this package."""
    try:
        sha = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=PACKAGE_DIR,
            capture_output=True,
            text=True,
            timeout=5,
        )
        if sha.returncode != 0:
            return None, False
        status = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=PACKAGE_DIR,
            capture_output=True,
            text=True,
            timeout=5,
        )
        return sha.stdout.strip() or None, bool(status.stdout.strip())
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return None, False


def get_version() -> str:
    return __version__


def get_full_version_string() -> str:
    """Version with build details, e.g. "board-extract 0.1.0 (abc1234, dirty)"."""
    sha, dirty = get_git_sha()
    details = [d for d in (sha, "dirty" if sha and dirty else None) if d]
    if details:
        return f"board-extract {__version__} ({', '.join(details)})"
    return f"board-extract {__version__}"
