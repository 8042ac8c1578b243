"""Extraction configuration.

Configuration hierarchy (highest priority first):
1. Command-line flags
2. Environment variables (API_URL, API_KEY, BOARD_ID, OUTPUT_DIR, PAGE_LIMIT),
   including those loaded from a .env file
3. User-level config (~/.board-extract/config.toml, [monday] table)
4. Defaults
"""

import os
import tempfile
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

BOARD_EXTRACT_HOME = Path.home() / ".board-extract"
CONFIG_FILE = BOARD_EXTRACT_HOME / "config.toml"

DEFAULT_API_URL = "https://api.monday.com/v2"

# Environment variable -> ExtractConfig field
ENV_VARS = {
    "API_URL": "api_url",
    "API_KEY": "api_key",
    "BOARD_ID": "board_id",
    "OUTPUT_DIR": "output_dir",
    "PAGE_LIMIT": "page_limit",
}


class ConfigError(ValueError):
    """A required setting is missing or malformed."""


def atomic_write(path: Path, content: bytes) -> None:
    """Write content to a file atomically using temp file + rename.

    Args:
        path: Target file path
        content: Bytes to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file must live in the target directory for the rename to be atomic
    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".tmp_",
        suffix=path.suffix,
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


@dataclass
class ExtractConfig:
    """Settings for one board extraction."""

    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    board_id: str = ""
    output_dir: str = "data"
    page_limit: int = 25
    timeout: float = 30.0

    @property
    def output_path(self) -> Path:
        """Where the export for this board is written."""
        return Path(self.output_dir) / f"{self.board_id}.json"

    @property
    def masked_api_key(self) -> str:
        if not self.api_key:
            return ""
        if len(self.api_key) <= 8:
            return "****"
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"

    def validate(self) -> None:
        """Raise ConfigError if the config cannot drive an extraction."""
        missing = [name for name in ("api_url", "api_key", "board_id") if not getattr(self, name)]
        if missing:
            env_names = [env for env, attr in ENV_VARS.items() if attr in missing]
            raise ConfigError(f"Missing required settings: {', '.join(env_names)}")
        if self.page_limit < 1:
            raise ConfigError(f"page_limit must be positive, got {self.page_limit}")

    def with_overrides(self, **overrides) -> "ExtractConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _coerce(name: str, value) -> str | int | float:
    if name == "page_limit":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"page_limit must be an integer, got {value!r}") from e
    if name == "timeout":
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout must be a number, got {value!r}") from e
    return str(value)


def load_file_config(path: Path | None = None) -> dict:
    """Read the [monday] table of the config file, or {} if absent."""
    path = path or CONFIG_FILE
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)

    known = {f.name for f in fields(ExtractConfig)}
    return {k: v for k, v in data.get("monday", {}).items() if k in known}


def load_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> ExtractConfig:
    """Build the effective configuration from file and environment.

    Args:
        config_path: TOML file to read (default: ~/.board-extract/config.toml)
        environ: Environment mapping (default: os.environ)

    Returns:
        ExtractConfig; not yet validated.
    """
    environ = os.environ if environ is None else environ

    values = {name: _coerce(name, v) for name, v in load_file_config(config_path).items()}

    for env_name, attr in ENV_VARS.items():
        if environ.get(env_name):
            values[attr] = _coerce(attr, environ[env_name])

    return ExtractConfig(**values)
